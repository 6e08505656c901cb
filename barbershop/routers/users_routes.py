# barbershop/routers/users_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.db import get_session
from barbershop.models import User
from barbershop.schemas import UserCreate, UserPublic
from barbershop.auth import get_current_user, hash_password

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["users"],
)

@router.get("/user", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return current_user


def find_user(session: Session, username: str):
    return session.exec(
        select(User).where(User.username == username)
    ).first()


def count_users(session: Session) -> int:
    return session.exec(select(func.count()).select_from(User)).one()


def _insert_user(session: Session, username: str, password_hash: str, is_admin: bool) -> User:
    db_user = User(username=username, password_hash=password_hash, is_admin=is_admin)
    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id
    return db_user


@router.post("/register", status_code=201, response_model=UserPublic)
def register(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    # 1) Check if username already exists
    if find_user(session, user.username) is not None:
        raise HTTPException(status_code=409, detail="Username already registered")

    # 2) First registered user becomes the admin
    password_hash = hash_password(user.password)
    is_admin = count_users(session) == 0

    try:
        db_user = _insert_user(session, user.username, password_hash, is_admin)
    except IntegrityError:
        session.rollback()
        if not is_admin or find_user(session, user.username) is not None:
            raise HTTPException(status_code=409, detail="Username already registered")
        # another first registration won uq_single_admin
        try:
            db_user = _insert_user(session, user.username, password_hash, False)
        except IntegrityError:
            session.rollback()
            raise HTTPException(status_code=409, detail="Username already registered")

    if db_user.is_admin:
        logger.info("Registered first user %r as admin", db_user.username)
    return db_user
