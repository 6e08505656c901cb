# barbershop/routers/catalog_routes.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from barbershop.db import get_session
from barbershop.deps import get_admin_user
from barbershop.models import Category, Service, Barber, Product
from barbershop.schemas import (
    CategoryCreate, CategoryPublic, CategoryType,
    ServiceCreate, ServicePublic,
    BarberCreate, BarberPublic,
    ProductCreate, ProductPublic,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["catalog"],
)


def _check_category(session: Session, category_id: Optional[int], kind: CategoryType):
    if category_id is None:
        return
    category = session.get(Category, category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    if category.type != kind.value:
        raise HTTPException(status_code=422, detail=f"Category {category_id} is not a {kind.value} category")


def _create(session: Session, obj):
    session.add(obj)
    session.commit()
    session.refresh(obj)
    logger.info("Created %s %d (%s)", type(obj).__name__.lower(), obj.id, obj.name)
    return obj


# --- categories ---

@router.get("/categories", response_model=List[CategoryPublic])
def list_categories(session: Session = Depends(get_session)):
    return session.exec(select(Category).order_by(Category.id)).all()


@router.get("/categories/{category_type}", response_model=List[CategoryPublic])
def list_categories_by_type(category_type: CategoryType, session: Session = Depends(get_session)):
    return session.exec(
        select(Category)
        .where(Category.type == category_type.value)
        .order_by(Category.id)
    ).all()


@router.post("/categories", response_model=CategoryPublic, status_code=201)
def create_category(
    category: CategoryCreate,
    session: Session = Depends(get_session),
    admin: dict = Depends(get_admin_user),
):
    return _create(session, Category(name=category.name, type=category.type.value))


# --- services ---

@router.get("/services", response_model=List[ServicePublic])
def list_services(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    session: Session = Depends(get_session),
):
    stmt = select(Service)
    if category_id is not None:
        stmt = stmt.where(Service.category_id == category_id)
    return session.exec(stmt.order_by(Service.id)).all()


@router.get("/services/{service_id}", response_model=ServicePublic)
def get_service(service_id: int, session: Session = Depends(get_session)):
    service = session.get(Service, service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.post("/services", response_model=ServicePublic, status_code=201)
def create_service(
    service: ServiceCreate,
    session: Session = Depends(get_session),
    admin: dict = Depends(get_admin_user),
):
    _check_category(session, service.category_id, CategoryType.service)
    return _create(session, Service(**service.model_dump()))


# --- barbers ---

@router.get("/barbers", response_model=List[BarberPublic])
def list_barbers(session: Session = Depends(get_session)):
    return session.exec(select(Barber).order_by(Barber.id)).all()


@router.get("/barbers/{barber_id}", response_model=BarberPublic)
def get_barber(barber_id: int, session: Session = Depends(get_session)):
    barber = session.get(Barber, barber_id)
    if barber is None:
        raise HTTPException(status_code=404, detail="Barber not found")
    return barber


@router.post("/barbers", response_model=BarberPublic, status_code=201)
def create_barber(
    barber: BarberCreate,
    session: Session = Depends(get_session),
    admin: dict = Depends(get_admin_user),
):
    return _create(session, Barber(**barber.model_dump()))


# --- products ---

@router.get("/products", response_model=List[ProductPublic])
def list_products(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    session: Session = Depends(get_session),
):
    stmt = select(Product)
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    return session.exec(stmt.order_by(Product.id)).all()


@router.get("/products/{product_id}", response_model=ProductPublic)
def get_product(product_id: int, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("/products", response_model=ProductPublic, status_code=201)
def create_product(
    product: ProductCreate,
    session: Session = Depends(get_session),
    admin: dict = Depends(get_admin_user),
):
    _check_category(session, product.category_id, CategoryType.product)
    return _create(session, Product(**product.model_dump()))
