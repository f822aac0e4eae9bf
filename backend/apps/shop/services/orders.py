# apps/shop/services/orders.py
# ------------------------------------------------------------------------------
# Órdenes de la tienda.
# - Checkout: descuenta stock con UPDATE condicional (stock >= cantidad) y luego
#   crea la orden en una transacción. Si la transacción falla, el stock
#   descontado se devuelve (compensación) y se responde 500.
# - Admin: alta con snapshots de ítems y edición con diff de líneas.
# ------------------------------------------------------------------------------
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from apps.common.exceptions import BadRequest, ServerError
from apps.common.models import Status
from apps.common.services.invoices import create_invoice_number
from apps.shop.models import CartItem, Order, OrderItem, Product
from apps.shop.serializers import DELIVERY_HOME, DELIVERY_STORE
from apps.shop.services.cart import cart_items, get_cart

logger = logging.getLogger(__name__)

REMOVED_PRODUCT_NAME = "(removed product)"


def calculate_shipping_fee(delivery_id):
    """Tarifa de envío según SHOP_SHIPPING_FEES; desconocido -> 0."""
    fees = getattr(settings, "SHOP_SHIPPING_FEES", {})
    return int(fees.get(int(delivery_id), 0)) if delivery_id is not None else 0


def build_order_number(order):
    return f"{timezone.localtime(order.created_at).year}{order.id:04d}"


def _default_status():
    status = Status.objects.filter(pk=settings.SHOP_DEFAULT_ORDER_STATUS_ID).first()
    if status is None:
        raise ValidationError({"statusId": ["Default order status is not configured."]})
    return status


def _shipping_fields(delivery, address, store_name):
    """Dirección solo para domicilio; tienda solo para retiro."""
    return {
        "address": ((address or "").strip() or None) if delivery.id == DELIVERY_HOME else None,
        "store_name": ((store_name or "").strip() or None) if delivery.id == DELIVERY_STORE else None,
    }


# ==========================
# Stock
# ==========================
def decrement_stock(lines):
    """
    Descuenta stock línea por línea con UPDATE condicional.

    Retorna:
      - (decremented, errors): líneas descontadas [(product_id, qty)] y
        errores de stock para las que no alcanzó.
    """
    decremented, errors = [], []
    for product, quantity in lines:
        updated = Product.objects.filter(pk=product.pk, stock__gte=quantity).update(stock=F("stock") - quantity)
        if updated:
            decremented.append((product.pk, quantity))
        else:
            errors.append({"productId": product.pk, "name": product.name, "requested": quantity})
    return decremented, errors


def restore_stock(decremented):
    for product_id, quantity in decremented:
        Product.objects.filter(pk=product_id).update(stock=F("stock") + quantity)
    if decremented:
        logger.warning("[orders.stock][rollback] restored=%s", decremented)


# ==========================
# Checkout
# ==========================
def _persist_order(member, lines, fee, data, invoice_data):
    """Orden + ítems + orderNumber + vaciado del carrito, en una transacción."""
    delivery = data["delivery"]
    items_total = sum(product.price * qty for product, qty in lines)
    invoice_data = invoice_data or {}

    with transaction.atomic():
        order = Order.objects.create(
            member=member,
            total=items_total + fee,
            fee=fee,
            recipient=data["recipient"],
            phone=data["phone"],
            delivery=delivery,
            payment=data["payment"],
            status=_default_status(),
            invoice=invoice_data.get("invoice"),
            invoice_number=create_invoice_number(),
            carrier=invoice_data.get("carrier") or None,
            tax=invoice_data.get("tax") or None,
            **_shipping_fields(delivery, data.get("address"), data.get("store_name")),
        )
        OrderItem.objects.bulk_create([
            OrderItem(order=order, product=product, product_name=product.name, quantity=qty, price=product.price)
            for product, qty in lines
        ])
        order.order_number = build_order_number(order)
        order.save(update_fields=["order_number"])
        CartItem.objects.filter(cart__member=member).delete()
    return order


def create_order_from_cart(member, data):
    """
    Crea la orden a partir del carrito del socio.

    Reglas:
      - Carrito vacío -> 400.
      - Producto inexistente o stock insuficiente -> 400 (stockErrors).
      - fee = calculate_shipping_fee(deliveryId); total = ítems + fee.
      - Falla de la transacción -> se devuelve el stock y 500.

    Retorna:
      - Order creada.
    """
    cart = get_cart(member)
    items = list(cart_items(cart))
    if not items:
        raise BadRequest("Your cart is empty.")

    lines = [(i.product, i.quantity) for i in items]
    pre_errors = [
        {"productId": p.pk, "name": p.name, "requested": q, "available": p.stock}
        for p, q in lines if q > p.stock
    ]
    if pre_errors:
        raise BadRequest("Some items are out of stock.", stockErrors=pre_errors)

    fee = calculate_shipping_fee(data["delivery"].id)

    decremented, errors = decrement_stock(lines)
    if errors:
        restore_stock(decremented)
        raise BadRequest("Some items are out of stock.", stockErrors=errors)

    try:
        order = _persist_order(member, lines, fee, data, data.get("invoiceData"))
    except Exception as e:
        logger.exception("[orders.checkout][failed] member_id=%s err=%s", member.id, e)
        restore_stock(decremented)
        raise ServerError("Order could not be created.") from e

    logger.info(
        "[orders.checkout] id=%s number=%s member_id=%s total=%s fee=%s items=%s",
        order.id, order.order_number, member.id, order.total, fee, len(lines),
    )
    return order


# ==========================
# Admin
# ==========================
def _snapshot(row):
    """Ítem admin -> campos de OrderItem; producto inexistente queda product_removed."""
    product = Product.objects.filter(pk=row.get("productId")).first() if row.get("productId") else None
    if product is None:
        return {
            "product": None,
            "product_name": REMOVED_PRODUCT_NAME,
            "status": OrderItem.STATUS_PRODUCT_REMOVED,
        }
    return {
        "product": product,
        "product_name": product.name,
        "status": row.get("status") or OrderItem.STATUS_ACTIVE,
    }


def _order_fields(data):
    delivery = data["delivery"]
    return {
        "member": data["member"],
        "recipient": data["recipient"],
        "phone": data["phone"],
        "delivery": delivery,
        "payment": data["payment"],
        "invoice": data.get("invoice"),
        "carrier": data.get("carrier") or None,
        "tax": data.get("tax") or None,
        **_shipping_fields(delivery, data.get("address"), data.get("store_name")),
    }


def admin_create_order(data):
    fee = calculate_shipping_fee(data["delivery"].id)
    rows = data["items"]
    with transaction.atomic():
        order = Order.objects.create(
            status=data.get("status") or _default_status(),
            fee=fee,
            total=sum(r["price"] * r["quantity"] for r in rows) + fee,
            invoice_number=create_invoice_number(),
            **_order_fields(data),
        )
        OrderItem.objects.bulk_create([
            OrderItem(order=order, quantity=r["quantity"], price=r["price"], **_snapshot(r))
            for r in rows
        ])
        order.order_number = build_order_number(order)
        order.save(update_fields=["order_number"])
    logger.info("[orders.admin_create] id=%s items=%s total=%s", order.id, len(rows), order.total)
    return order


def admin_update_order(order, data):
    """
    Reemplaza datos de la orden y hace diff de ítems.

    Reglas:
      - Línea sin id -> alta.
      - Línea con id -> update (404 si no pertenece a la orden).
      - Líneas existentes ausentes -> baja.
      - Línea product_removed conserva su snapshot; si el producto ya no
        existe se marca product_removed.
    """
    rows = data["items"]
    fee = calculate_shipping_fee(data["delivery"].id)
    with transaction.atomic():
        existing = {i.id: i for i in order.items.select_for_update()}
        keep_ids = set()
        for row in rows:
            item_id = row.get("id")
            if item_id is None:
                OrderItem.objects.create(order=order, quantity=row["quantity"], price=row["price"], **_snapshot(row))
                continue
            item = existing.get(item_id)
            if item is None:
                raise NotFound(f"Order item {item_id} not found.")
            keep_ids.add(item_id)
            item.quantity = row["quantity"]
            item.price = row["price"]
            if item.status == OrderItem.STATUS_PRODUCT_REMOVED or row.get("status") == OrderItem.STATUS_PRODUCT_REMOVED:
                item.status = OrderItem.STATUS_PRODUCT_REMOVED
            elif item.product_id is None or not Product.objects.filter(pk=item.product_id).exists():
                item.status = OrderItem.STATUS_PRODUCT_REMOVED
            item.save(update_fields=["quantity", "price", "status"])

        removed = [i for pk, i in existing.items() if pk not in keep_ids]
        OrderItem.objects.filter(id__in=[i.id for i in removed]).delete()

        for field, value in _order_fields(data).items():
            setattr(order, field, value)
        if data.get("status"):
            order.status = data["status"]
        order.fee = fee
        # los ítems pueden venir prefetcheados desde el viewset
        getattr(order, "_prefetched_objects_cache", {}).pop("items", None)
        order.total = sum(i.price * i.quantity for i in OrderItem.objects.filter(order=order)) + fee
        order.save()

    logger.info(
        "[orders.admin_update] id=%s items=%s removed=%s total=%s",
        order.id, len(rows), len(removed), order.total,
    )
    return order


def detach_product_from_orders(product):
    """Marca los ítems de órdenes del producto como product_removed (snapshot intacto)."""
    updated = OrderItem.objects.filter(product=product).update(status=OrderItem.STATUS_PRODUCT_REMOVED)
    logger.info("[orders.product_removed] product_id=%s items=%s", product.id, updated)
    return updated
