import pytest

from apps.shop.models import Brand, Cart, CartItem, Favorite, Order, OrderItem, Product, ProductImage
from apps.shop.services.orders import calculate_shipping_fee

pytestmark = pytest.mark.django_db


@pytest.fixture
def brand(reference_data):
    return Brand.objects.create(name="Yonex")


@pytest.fixture
def products(brand):
    rows = []
    for name, price, stock, sport_id in [
        ("Racket Pro", 5200, 5, 2),
        ("Shuttle Tube", 600, 20, 2),
        ("Basketball", 900, 1, 1),
    ]:
        product = Product.objects.create(name=name, brand=brand, sport_id=sport_id, price=price, stock=stock)
        ProductImage.objects.create(product=product, url=f"https://img.example.com/{product.id}.jpg", order=0)
        rows.append(product)
    return rows


CHECKOUT = {
    "recipient": "Member One",
    "phone": "0912345678",
    "deliveryId": 3,
    "address": "No. 10 Long Road",
    "paymentId": 1,
}


# ------------------------------------------------------------------------------
# Productos
# ------------------------------------------------------------------------------
def test_product_list_public(api_client, products):
    body = api_client.get("/api/shop/products/").json()
    assert body["perPage"] == 16
    assert body["totalRows"] == 3
    assert body["rows"][0]["imageUrl"].startswith("https://img.example.com/")
    assert all(r["isFavorite"] is False for r in body["rows"])


def test_product_list_ignores_bad_token(api_client, products):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer broken")
    assert api_client.get("/api/shop/products/").status_code == 200


@pytest.mark.parametrize(
    "params,names",
    [
        ({"sportId": "2", "sort": "price-asc"}, ["Shuttle Tube", "Racket Pro"]),
        ({"sportId": "1,2", "sort": "price-desc"}, ["Racket Pro", "Basketball", "Shuttle Tube"]),
        ({"minPrice": 1000, "maxPrice": 500, "sort": "price-asc"}, ["Shuttle Tube", "Basketball"]),
        ({"keyword": "racket"}, ["Racket Pro"]),
    ],
)
def test_product_filters(api_client, products, params, names):
    rows = api_client.get("/api/shop/products/", params).json()["rows"]
    assert [r["name"] for r in rows] == names


def test_is_favorite_for_logged_member(member_client, member, products):
    Favorite.objects.create(member=member, product=products[0])
    rows = member_client.get("/api/shop/products/").json()["rows"]
    flags = {r["id"]: r["isFavorite"] for r in rows}
    assert flags[products[0].id] is True
    assert flags[products[1].id] is False


def test_create_product_requires_image(admin_client, brand):
    payload = {"name": "Grip", "brandId": brand.id, "sportId": 2, "price": 120, "stock": 50}
    assert admin_client.post("/api/shop/products/", payload, format="json").status_code == 400

    res = admin_client.post("/api/shop/products/", {**payload, "images": ["a.jpg", "b.jpg"]}, format="json")
    assert res.status_code == 201
    assert [i["order"] for i in res.json()["record"]["images"]] == [0, 1]


def test_update_product_images(admin_client, products):
    product = products[0]
    old = product.images.first()
    res = admin_client.patch(
        f"/api/shop/products/{product.id}/",
        {"deleteImageIds": [old.id], "images": ["new.jpg"]},
        format="json",
    )
    assert res.status_code == 200
    images = res.json()["record"]["images"]
    assert [i["url"] for i in images] == ["new.jpg"]
    assert images[0]["order"] == 0


def test_delete_product_keeps_order_snapshot(admin_client, member, products):
    product = products[0]
    order = Order.objects.create(
        member=member, recipient="x", phone="0912345678", delivery_id=3, payment_id=1, status_id=2, total=5200,
    )
    item = OrderItem.objects.create(order=order, product=product, product_name=product.name, quantity=1, price=5200)

    assert admin_client.delete(f"/api/shop/products/{product.id}/").status_code == 200
    item.refresh_from_db()
    assert item.product_id is None
    assert item.status == OrderItem.STATUS_PRODUCT_REMOVED
    assert item.product_name == "Racket Pro"


def test_delete_single_image(admin_client, member_client, products):
    image = products[0].images.first()
    assert member_client.delete(f"/api/shop/products/images/{image.id}/").status_code == 403
    assert admin_client.delete(f"/api/shop/products/images/{image.id}/").status_code == 200
    assert admin_client.delete(f"/api/shop/products/images/{image.id}/").status_code == 404


# ------------------------------------------------------------------------------
# Favoritos
# ------------------------------------------------------------------------------
def test_favorite_toggle(member_client, products):
    url = "/api/shop/favorites/"
    assert member_client.post(url, {"productId": products[0].id}, format="json").json()["favorited"] is True
    assert member_client.get(url).json()["totalRows"] == 1
    assert member_client.post(url, {"productId": products[0].id}, format="json").json()["favorited"] is False
    assert member_client.post(url, {"productId": 999999}, format="json").status_code == 404


# ------------------------------------------------------------------------------
# Carrito
# ------------------------------------------------------------------------------
def test_cart_created_on_demand(member_client, member):
    body = member_client.get("/api/shop/cart/").json()
    assert body == {"success": True, "items": [], "totalPrice": 0, "itemCount": 0}
    assert Cart.objects.filter(member=member).exists()


def test_cart_add_merges_and_checks_stock(member_client, products):
    racket = products[0]
    member_client.post("/api/shop/cart/add/", {"productId": racket.id, "quantity": 2}, format="json")
    body = member_client.post("/api/shop/cart/add/", {"productId": racket.id, "quantity": 3}, format="json").json()
    assert body["items"][0]["quantity"] == 5
    assert body["totalPrice"] == 5 * 5200

    res = member_client.post("/api/shop/cart/add/", {"productId": racket.id, "quantity": 1}, format="json")
    assert res.status_code == 400


def test_cart_update_and_remove(member_client, other_client, products):
    body = member_client.post("/api/shop/cart/add/", {"productId": products[1].id, "quantity": 2}, format="json").json()
    item_id = body["items"][0]["id"]

    assert member_client.put(f"/api/shop/cart/item/{item_id}/", {"quantity": 21}, format="json").status_code == 400
    body = member_client.put(f"/api/shop/cart/item/{item_id}/", {"quantity": 4}, format="json").json()
    assert body["itemCount"] == 4

    assert other_client.delete(f"/api/shop/cart/item/{item_id}/").status_code == 404
    body = member_client.put(f"/api/shop/cart/item/{item_id}/", {"quantity": 0}, format="json").json()
    assert body["items"] == []


def test_cart_clear(member_client, member, products):
    for p in products[:2]:
        member_client.post("/api/shop/cart/add/", {"productId": p.id, "quantity": 1}, format="json")
    assert member_client.delete("/api/shop/cart/clear/").json()["affectedRows"] == 2
    assert not CartItem.objects.filter(cart__member=member).exists()


# ------------------------------------------------------------------------------
# Checkout
# ------------------------------------------------------------------------------
@pytest.mark.parametrize("delivery_id,fee", [(1, 60), (2, 60), (3, 100), (9, 0)])
def test_shipping_fee(delivery_id, fee):
    assert calculate_shipping_fee(delivery_id) == fee


def test_checkout_summary(member_client, products):
    member_client.post("/api/shop/cart/add/", {"productId": products[2].id, "quantity": 1}, format="json")
    Product.objects.filter(pk=products[2].id).update(stock=0)

    body = member_client.get("/api/shop/cart/checkout/").json()
    assert body["stockErrors"][0]["productId"] == products[2].id
    assert {d["id"]: d["fee"] for d in body["deliveries"]} == {1: 60, 2: 60, 3: 100}
    assert len(body["payments"]) == 3
    assert len(body["invoices"]) == 3


def test_checkout_creates_order(member_client, member, products):
    racket, tube, _ = products
    member_client.post("/api/shop/cart/add/", {"productId": racket.id, "quantity": 1}, format="json")
    member_client.post("/api/shop/cart/add/", {"productId": tube.id, "quantity": 3}, format="json")

    res = member_client.post(
        "/api/shop/cart/checkout/",
        {**CHECKOUT, "storeName": "ignored", "invoiceData": {"invoiceId": 2, "carrier": "/ABC1234"}},
        format="json",
    )
    assert res.status_code == 201
    record = res.json()["record"]
    assert record["fee"] == 100
    assert record["total"] == 5200 + 3 * 600 + 100
    assert record["statusId"] == 2
    assert record["storeName"] is None
    assert record["carrier"] == "/ABC1234"

    order = Order.objects.get(pk=record["id"])
    assert order.order_number.endswith(f"{order.id:04d}")
    assert record["orderNumber"] == order.order_number
    racket.refresh_from_db()
    tube.refresh_from_db()
    assert (racket.stock, tube.stock) == (4, 17)
    assert not CartItem.objects.filter(cart__member=member).exists()


@pytest.mark.parametrize(
    "override,path",
    [
        ({"address": "abc"}, ["address"]),
        ({"deliveryId": 1, "storeName": ""}, ["storeName"]),
        ({"phone": "123"}, ["phone"]),
        ({"invoiceData": {"invoiceId": 3, "tax": "12"}}, ["invoiceData", "tax"]),
    ],
)
def test_checkout_validation(member_client, products, override, path):
    member_client.post("/api/shop/cart/add/", {"productId": products[1].id, "quantity": 1}, format="json")
    res = member_client.post("/api/shop/cart/checkout/", {**CHECKOUT, **override}, format="json")
    assert res.status_code == 400
    assert path in [issue["path"] for issue in res.json()["issues"]]


def test_checkout_empty_cart(member_client, reference_data):
    res = member_client.post("/api/shop/cart/checkout/", CHECKOUT, format="json")
    assert res.status_code == 400
    assert res.json()["message"] == "Your cart is empty."


def test_checkout_insufficient_stock(member_client, products):
    basketball = products[2]
    member_client.post("/api/shop/cart/add/", {"productId": basketball.id, "quantity": 1}, format="json")
    Product.objects.filter(pk=basketball.id).update(stock=0)

    res = member_client.post("/api/shop/cart/checkout/", CHECKOUT, format="json")
    assert res.status_code == 400
    assert res.json()["stockErrors"][0]["productId"] == basketball.id
    assert Order.objects.count() == 0


def test_checkout_failure_restores_stock(member_client, member, products, monkeypatch):
    racket, tube, _ = products
    member_client.post("/api/shop/cart/add/", {"productId": racket.id, "quantity": 2}, format="json")
    member_client.post("/api/shop/cart/add/", {"productId": tube.id, "quantity": 5}, format="json")

    def boom(*args, **kwargs):
        raise RuntimeError("db went away")

    monkeypatch.setattr("apps.shop.services.orders._persist_order", boom)
    res = member_client.post("/api/shop/cart/checkout/", CHECKOUT, format="json")
    assert res.status_code == 500
    assert res.json()["success"] is False

    racket.refresh_from_db()
    tube.refresh_from_db()
    assert (racket.stock, tube.stock) == (5, 20)
    assert CartItem.objects.filter(cart__member=member).count() == 2


# ------------------------------------------------------------------------------
# Órdenes
# ------------------------------------------------------------------------------
@pytest.fixture
def placed_order(member_client, products):
    member_client.post("/api/shop/cart/add/", {"productId": products[1].id, "quantity": 2}, format="json")
    return member_client.post("/api/shop/cart/checkout/", CHECKOUT, format="json").json()["record"]


def test_member_orders(member_client, other_client, placed_order):
    body = member_client.get("/api/shop/orders/").json()
    assert body["totalRows"] == 1
    assert body["rows"][0]["items"][0]["imageUrl"]

    detail = member_client.get(f"/api/shop/orders/{placed_order['id']}/").json()["record"]
    assert detail["items"][0]["product"]["name"] == "Shuttle Tube"
    assert other_client.get(f"/api/shop/orders/{placed_order['id']}/").status_code == 404


def _admin_order_payload(member, items, **extra):
    return {
        "memberId": member.id,
        "recipient": "Walk In",
        "phone": "0987654321",
        "deliveryId": 1,
        "storeName": "Store 12",
        "paymentId": 3,
        "items": items,
        **extra,
    }


def test_admin_create_order(admin_client, member, products):
    items = [
        {"productId": products[0].id, "quantity": 1, "price": 5000},
        {"productId": 999999, "quantity": 2, "price": 10},
    ]
    res = admin_client.post("/api/shop/admin/orders/", _admin_order_payload(member, items), format="json")
    assert res.status_code == 201
    record = res.json()["record"]
    assert record["fee"] == 60
    assert record["total"] == 5000 + 20 + 60
    assert record["orderNumber"].endswith(f"{record['id']:04d}")
    assert len(record["invoiceNumber"]) == 10
    statuses = sorted(i["status"] for i in record["items"])
    assert statuses == ["active", "product_removed"]


def test_admin_update_order_diffs_items(admin_client, member, products):
    items = [
        {"productId": products[0].id, "quantity": 1, "price": 5000},
        {"productId": products[1].id, "quantity": 1, "price": 600},
    ]
    record = admin_client.post(
        "/api/shop/admin/orders/", _admin_order_payload(member, items), format="json",
    ).json()["record"]
    first, second = sorted(record["items"], key=lambda i: i["id"])

    update_items = [
        {"id": first["id"], "productId": products[0].id, "quantity": 2, "price": 5000},
        {"productId": products[2].id, "quantity": 1, "price": 900},
    ]
    res = admin_client.put(
        f"/api/shop/admin/orders/{record['id']}/",
        _admin_order_payload(member, update_items, deliveryId=3, address="No. 5 New Street", storeName=""),
        format="json",
    )
    assert res.status_code == 200
    updated = res.json()["record"]
    assert updated["fee"] == 100
    assert updated["total"] == 2 * 5000 + 900 + 100
    assert updated["storeName"] is None
    ids = {i["id"] for i in updated["items"]}
    assert first["id"] in ids and second["id"] not in ids
    assert len(ids) == 2
    assert Order.objects.get(pk=record["id"]).total == 2 * 5000 + 900 + 100


def test_admin_update_order_persists_recomputed_total(admin_client, member, products):
    line = {"productId": products[1].id, "quantity": 1, "price": 100}
    record = admin_client.post(
        "/api/shop/admin/orders/", _admin_order_payload(member, [line]), format="json",
    ).json()["record"]
    item_id = record["items"][0]["id"]

    res = admin_client.put(
        f"/api/shop/admin/orders/{record['id']}/",
        _admin_order_payload(member, [{**line, "id": item_id, "quantity": 3}]),
        format="json",
    )
    assert res.status_code == 200
    expected = 3 * 100 + calculate_shipping_fee(1)
    assert res.json()["record"]["total"] == expected
    assert Order.objects.get(pk=record["id"]).total == expected


def test_admin_orders_default_ordering(admin_client, member, products):
    for _ in range(2):
        admin_client.post(
            "/api/shop/admin/orders/",
            _admin_order_payload(member, [{"productId": products[0].id, "quantity": 1, "price": 1}]),
            format="json",
        )
    body = admin_client.get("/api/shop/admin/orders/").json()
    assert body["perPage"] == 15
    ids = [r["id"] for r in body["rows"]]
    assert ids == sorted(ids)
    assert admin_client.get("/api/shop/admin/orders/", {"keyword": "7-11"}).json()["totalRows"] == 2


def test_member_with_orders_cannot_be_deleted(admin_client, member, placed_order):
    assert admin_client.delete(f"/api/admin/members/{member.id}/").status_code == 409
