# barbershop/cart.py

import logging
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.data import shop_settings
from barbershop.errors import ConflictError, NotFoundError
from barbershop.models import CartItem, Product

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def find_line(session: Session, cart_id: str, product_id: int):
    return session.exec(
        select(CartItem)
        .where(CartItem.cart_id == cart_id)
        .where(CartItem.product_id == product_id)
    ).first()


def add_to_cart(session: Session, cart_id: str, product_id: int, quantity: int = 1) -> CartItem:
    """Create the cart line, or bump its quantity when the product is already in the cart."""
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    if not product.in_stock:
        raise ConflictError("Product is out of stock")

    line = find_line(session, cart_id, product_id)
    if line is None:
        line = CartItem(cart_id=cart_id, product_id=product_id, quantity=quantity)
        session.add(line)
        try:
            session.commit()
        except IntegrityError:
            # Lost a race with a concurrent add of the same product
            session.rollback()
            line = find_line(session, cart_id, product_id)
            line.quantity += quantity
            session.add(line)
            session.commit()
    else:
        line.quantity += quantity
        session.add(line)
        session.commit()

    session.refresh(line)
    return line


def cart_lines(session: Session, cart_id: str) -> List[Tuple[CartItem, Product]]:
    return session.exec(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.id)
        .where(CartItem.cart_id == cart_id)
        .order_by(CartItem.id)
    ).all()


def cart_totals(lines) -> dict:
    """Subtotal, flat shipping (only for a non-empty cart) and total, in exact cents."""
    subtotal = sum((product.price * item.quantity for item, product in lines), Decimal("0"))
    shipping = shop_settings["shipping_fee"] if lines else Decimal("0")
    return {
        "item_count": sum(item.quantity for item, _ in lines),
        "subtotal": subtotal.quantize(CENTS),
        "shipping": shipping.quantize(CENTS),
        "total": (subtotal + shipping).quantize(CENTS),
    }


def clear_cart(session: Session, cart_id: str) -> int:
    lines = session.exec(select(CartItem).where(CartItem.cart_id == cart_id)).all()
    for line in lines:
        session.delete(line)
    session.commit()
    if lines:
        logger.info("Cleared %d line(s) from cart %s", len(lines), cart_id)
    return len(lines)
