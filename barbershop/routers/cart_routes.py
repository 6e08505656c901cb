# barbershop/routers/cart_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session

from barbershop.cart import add_to_cart, cart_lines, cart_totals, clear_cart
from barbershop.db import get_session
from barbershop.models import CartItem
from barbershop.schemas import (
    CartItemCreate, CartItemUpdate, CartItemPublic, CartItemDetail, CartSummary,
)

router = APIRouter(
    prefix="/api/cart",
    tags=["cart"],
)


@router.get("/{cart_id}", response_model=List[CartItemDetail])
def get_cart(cart_id: str, session: Session = Depends(get_session)):
    return [
        {**item.model_dump(), "product": product.model_dump()}
        for item, product in cart_lines(session, cart_id)
    ]


@router.get("/{cart_id}/summary", response_model=CartSummary)
def get_cart_summary(cart_id: str, session: Session = Depends(get_session)):
    return {"cart_id": cart_id, **cart_totals(cart_lines(session, cart_id))}


@router.post("", response_model=CartItemPublic, status_code=201)
def add_cart_item(item: CartItemCreate, session: Session = Depends(get_session)):
    return add_to_cart(session, item.cart_id, item.product_id, item.quantity)


@router.put("/{item_id}", response_model=CartItemPublic)
def update_cart_item(
    item_id: int,
    update: CartItemUpdate,
    session: Session = Depends(get_session),
):
    # quantity >= 1 is enforced by CartItemUpdate before we get here
    line = session.get(CartItem, item_id)
    if line is None:
        raise HTTPException(status_code=404, detail="Cart item not found")

    line.quantity = update.quantity
    session.add(line)
    session.commit()
    session.refresh(line)
    return line


@router.delete("/clear/{cart_id}", status_code=204)
def clear_cart_items(cart_id: str, session: Session = Depends(get_session)):
    clear_cart(session, cart_id)
    return Response(status_code=204)


@router.delete("/{item_id}", status_code=204)
def remove_cart_item(item_id: int, session: Session = Depends(get_session)):
    line = session.get(CartItem, item_id)
    if line is None:
        raise HTTPException(status_code=404, detail="Cart item not found")

    session.delete(line)
    session.commit()
    return Response(status_code=204)
