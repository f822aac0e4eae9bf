# apps/shop/models.py

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.common.models import Delivery, InvoiceType, Payment, Sport, Status


class Brand(models.Model):
    name = models.CharField(max_length=100, unique=True)

    def __str__(self):
        return self.name


class Product(models.Model):
    name = models.CharField(max_length=200)
    brand = models.ForeignKey(Brand, on_delete=models.PROTECT, related_name="products")
    sport = models.ForeignKey(Sport, on_delete=models.PROTECT, related_name="products")
    price = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    stock = models.PositiveIntegerField(default=0)
    material = models.CharField(max_length=100, blank=True, default="")
    size = models.CharField(max_length=100, blank=True, default="")
    weight = models.CharField(max_length=50, blank=True, default="")
    origin = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name


class ProductImage(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="images")
    url = models.CharField(max_length=500)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]


class Favorite(models.Model):
    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="favorites")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="favorites")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("member", "product")


class Cart(models.Model):
    member = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="cart")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)


class CartItem(models.Model):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="cart_items")
    quantity = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(99)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("cart", "product")
        ordering = ["created_at", "id"]


class Order(models.Model):
    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="orders")
    order_number = models.CharField(max_length=20, blank=True, default="", db_index=True)
    total = models.PositiveIntegerField(default=0)
    fee = models.PositiveIntegerField(default=0)
    recipient = models.CharField(max_length=100)
    phone = models.CharField(max_length=20)
    address = models.CharField(max_length=255, blank=True, null=True)
    store_name = models.CharField(max_length=100, blank=True, null=True)
    delivery = models.ForeignKey(Delivery, on_delete=models.PROTECT, related_name="orders")
    payment = models.ForeignKey(Payment, on_delete=models.PROTECT, related_name="orders")
    status = models.ForeignKey(Status, on_delete=models.PROTECT, related_name="orders")
    invoice = models.ForeignKey(InvoiceType, on_delete=models.PROTECT, related_name="orders", null=True, blank=True)
    invoice_number = models.CharField(max_length=10, blank=True, default="", db_index=True)
    carrier = models.CharField(max_length=8, blank=True, null=True)
    tax = models.CharField(max_length=8, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.order_number or f"Order #{self.pk}"


class OrderItem(models.Model):
    STATUS_ACTIVE = "active"
    STATUS_PRODUCT_REMOVED = "product_removed"
    STATUSES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_PRODUCT_REMOVED, "Product removed"),
    ]

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    # el snapshot (nombre/precio) sobrevive al borrado del producto
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name="order_items")
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_ACTIVE)

    class Meta:
        ordering = ["id"]

    @property
    def subtotal(self):
        return self.price * self.quantity
