# apps/shop/services/cart.py
# ------------------------------------------------------------------------------
# Carrito del socio (uno por socio, creado bajo demanda).
# ------------------------------------------------------------------------------
import logging

from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from apps.shop.models import Cart, CartItem, Product

logger = logging.getLogger(__name__)

MAX_QUANTITY = 99


def get_cart(member):
    cart, created = Cart.objects.get_or_create(member=member)
    if created:
        logger.info("[cart.create] member_id=%s cart_id=%s", member.id, cart.id)
    return cart


def cart_items(cart):
    return (
        cart.items
        .select_related("product", "product__brand")
        .prefetch_related("product__images")
        .order_by("created_at", "id")
    )


def cart_summary(cart):
    """Retorna (items, totalPrice, itemCount)."""
    items = list(cart_items(cart))
    total = sum(i.product.price * i.quantity for i in items)
    count = sum(i.quantity for i in items)
    return items, total, count


def _check_stock(product, quantity):
    if quantity > product.stock:
        raise ValidationError({"quantity": [f"Only {product.stock} left in stock for {product.name}."]})


def add_item(member, product_id, quantity):
    """
    Agrega `quantity` del producto; si ya está en el carrito suma cantidades.

    Reglas:
      - Producto inexistente -> 404.
      - Cantidad resultante > stock o > 99 -> 400.
    """
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise NotFound("Product not found.")

    cart = get_cart(member)
    with transaction.atomic():
        item = CartItem.objects.select_for_update().filter(cart=cart, product=product).first()
        new_quantity = quantity + (item.quantity if item else 0)
        if new_quantity > MAX_QUANTITY:
            raise ValidationError({"quantity": [f"Quantity cannot exceed {MAX_QUANTITY}."]})
        _check_stock(product, new_quantity)

        if item:
            item.quantity = new_quantity
            item.save(update_fields=["quantity"])
        else:
            item = CartItem.objects.create(cart=cart, product=product, quantity=new_quantity)

    logger.info(
        "[cart.add] member_id=%s product_id=%s quantity=%s total_line=%s",
        member.id, product.id, quantity, new_quantity,
    )
    return item


def _owned_item(member, item_id):
    item = CartItem.objects.select_related("product").filter(pk=item_id, cart__member=member).first()
    if item is None:
        raise NotFound("Cart item not found.")
    return item


def update_item(member, item_id, quantity):
    """quantity 0 borra la línea. Retorna el item o None si se borró."""
    item = _owned_item(member, item_id)
    if quantity == 0:
        item.delete()
        logger.info("[cart.update][removed] member_id=%s item_id=%s", member.id, item_id)
        return None
    _check_stock(item.product, quantity)
    item.quantity = quantity
    item.save(update_fields=["quantity"])
    return item


def remove_item(member, item_id):
    item = _owned_item(member, item_id)
    item.delete()
    logger.info("[cart.remove] member_id=%s item_id=%s", member.id, item_id)


def clear_cart(member):
    deleted, _ = CartItem.objects.filter(cart__member=member).delete()
    logger.info("[cart.clear] member_id=%s deleted=%s", member.id, deleted)
    return deleted


def stock_errors(items):
    """Líneas cuya cantidad supera el stock actual."""
    return [
        {
            "itemId": i.id,
            "productId": i.product_id,
            "name": i.product.name,
            "requested": i.quantity,
            "available": i.product.stock,
        }
        for i in items
        if i.quantity > i.product.stock
    ]
