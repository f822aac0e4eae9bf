# apps/shop/admin.py
from django.contrib import admin

from apps.shop.models import Brand, Cart, CartItem, Favorite, Order, OrderItem, Product, ProductImage

admin.site.register(Brand)


class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "brand", "sport", "price", "stock")
    list_filter = ("brand", "sport")
    search_fields = ("name",)
    inlines = [ProductImageInline]


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ("id", "member", "product", "created_at")


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "member", "updated_at")
    inlines = [CartItemInline]


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    raw_id_fields = ("product",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "order_number", "member", "total", "status", "created_at")
    list_filter = ("status", "delivery", "payment")
    search_fields = ("order_number", "invoice_number", "member__email")
    inlines = [OrderItemInline]
