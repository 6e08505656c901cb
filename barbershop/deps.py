# barbershop/deps.py

from fastapi import Depends, HTTPException

from barbershop.auth import get_current_user

def require_admin(user: dict):
    if not user["is_admin"]:
        raise HTTPException(status_code=403, detail="Forbidden")

def get_admin_user(current_user: dict = Depends(get_current_user)) -> dict:
    require_admin(current_user)
    return current_user
