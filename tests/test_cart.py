from decimal import Decimal

from barbershop import cart
from barbershop.cart import cart_lines, cart_totals
from barbershop.models import CartItem, Product

CART = "6f1c2a7e-1b1e-4d0f-9b3e-5d2f9a1c0e11"
POMADE = 1  # Premium Styling Pomade, $24.99
BEARD_OIL = 2  # Premium Beard Oil, $19.99


def add(client, product_id, quantity=1, cart_id=CART):
    return client.post("/api/cart", json={"cartId": cart_id, "productId": product_id, "quantity": quantity})


def test_add_same_product_twice_increments_quantity(client, session):
    first = add(client, POMADE)
    second = add(client, POMADE, quantity=2)
    assert first.status_code == 201
    assert second.status_code == 201
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["quantity"] == 3

    rows = [item for item, _ in cart_lines(session, CART)]
    assert len(rows) == 1


def test_quantity_defaults_to_one(client):
    resp = client.post("/api/cart", json={"cartId": CART, "productId": BEARD_OIL})
    assert resp.status_code == 201
    assert resp.json()["quantity"] == 1


def test_get_cart_includes_product_details(client):
    add(client, POMADE, 2)
    add(client, BEARD_OIL)

    items = client.get(f"/api/cart/{CART}").json()
    assert [i["productId"] for i in items] == [POMADE, BEARD_OIL]
    assert items[0]["product"]["name"] == "Premium Styling Pomade"
    assert items[0]["product"]["price"] == "24.99"
    assert items[0]["cartId"] == CART


def test_carts_are_isolated(client):
    add(client, POMADE)
    add(client, BEARD_OIL, cart_id="someone-else")
    items = client.get(f"/api/cart/{CART}").json()
    assert [i["productId"] for i in items] == [POMADE]
    assert client.get("/api/cart/unknown-cart").json() == []


def test_update_quantity(client):
    item_id = add(client, POMADE).json()["id"]
    resp = client.put(f"/api/cart/{item_id}", json={"quantity": 4})
    assert resp.status_code == 200
    assert resp.json()["quantity"] == 4


def test_update_quantity_below_one_is_rejected_and_unchanged(client, session):
    item_id = add(client, POMADE, 3).json()["id"]

    for bad in (0, -1):
        resp = client.put(f"/api/cart/{item_id}", json={"quantity": bad})
        assert resp.status_code == 400

    assert session.get(CartItem, item_id).quantity == 3


def test_add_with_non_positive_quantity_is_rejected(client):
    assert add(client, POMADE, 0).status_code == 400


def test_update_unknown_item(client):
    assert client.put("/api/cart/999", json={"quantity": 2}).status_code == 404


def test_add_unknown_product(client):
    resp = add(client, 999)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Product not found"


def test_add_out_of_stock_product(client, session):
    product = session.get(Product, BEARD_OIL)
    product.in_stock = False
    session.add(product)
    session.commit()

    assert add(client, BEARD_OIL).status_code == 409


def test_remove_item(client):
    item_id = add(client, POMADE).json()["id"]
    assert client.delete(f"/api/cart/{item_id}").status_code == 204
    assert client.get(f"/api/cart/{CART}").json() == []
    assert client.delete(f"/api/cart/{item_id}").status_code == 404


def test_clear_cart(client):
    add(client, POMADE)
    add(client, BEARD_OIL)
    add(client, POMADE, cart_id="keep-me")

    assert client.delete(f"/api/cart/clear/{CART}").status_code == 204
    assert client.get(f"/api/cart/{CART}").json() == []
    assert len(client.get("/api/cart/keep-me").json()) == 1


def test_summary_adds_flat_shipping(client):
    add(client, POMADE, 2)
    summary = client.get(f"/api/cart/{CART}/summary").json()
    assert summary["itemCount"] == 2
    assert Decimal(summary["subtotal"]) == Decimal("49.98")
    assert Decimal(summary["shipping"]) == Decimal("5.99")
    assert Decimal(summary["total"]) == Decimal("55.97")


def test_empty_cart_has_no_shipping(client):
    summary = client.get(f"/api/cart/{CART}/summary").json()
    assert summary["itemCount"] == 0
    assert Decimal(summary["total"]) == Decimal("0")


def test_cart_totals_are_exact():
    pomade = Product(name="Pomade", description="", price=Decimal("24.99"))
    line = CartItem(cart_id=CART, product_id=1, quantity=2)
    totals = cart_totals([(line, pomade)])
    assert totals["total"] == Decimal("55.97")
    assert totals["subtotal"] == Decimal("49.98")


def test_concurrent_add_of_same_product_merges_lines(client, session, monkeypatch):
    add(client, POMADE)

    # the second request looked for the line before the first one committed
    real_find_line = cart.find_line
    misses = []

    def find_line_once_missing(session, cart_id, product_id):
        if not misses:
            misses.append(product_id)
            return None
        return real_find_line(session, cart_id, product_id)

    monkeypatch.setattr(cart, "find_line", find_line_once_missing)
    resp = add(client, POMADE, 2)
    assert resp.status_code == 201, resp.text
    assert resp.json()["quantity"] == 3

    session.expire_all()
    rows = [item for item, _ in cart_lines(session, CART)]
    assert len(rows) == 1
    assert rows[0].quantity == 3
