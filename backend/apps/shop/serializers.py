# apps/shop/serializers.py

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Max
from rest_framework import serializers

from apps.common.logging import LoggedModelSerializer
from apps.common.models import Delivery, InvoiceType, Payment, Sport, Status
from apps.common.validators import InvoiceDataMixin, validate_phone
from apps.shop.models import Brand, CartItem, Favorite, Order, OrderItem, Product, ProductImage

Member = get_user_model()

LOCAL_DATETIME = "%Y-%m-%d %H:%M:%S"

DELIVERY_STORE = 1
DELIVERY_HOME = 3


def first_image_url(product):
    if product is None:
        return None
    images = list(product.images.all())
    return images[0].url if images else None


# ------------------------------------------------------------------------------
# Productos
# ------------------------------------------------------------------------------
class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ("id", "url", "order")


class ProductSerializer(LoggedModelSerializer):
    """
    Lectura: brand/sport, images, imageUrl (primera) e isFavorite.
    Escritura: images = URLs nuevas (obligatorias al crear), deleteImageIds al editar.
    """

    brandId = serializers.PrimaryKeyRelatedField(source="brand", queryset=Brand.objects.all())
    brandName = serializers.CharField(source="brand.name", read_only=True)
    sportId = serializers.PrimaryKeyRelatedField(source="sport", queryset=Sport.objects.all())
    sportName = serializers.CharField(source="sport.name", read_only=True)
    price = serializers.IntegerField(min_value=1)
    stock = serializers.IntegerField(min_value=0)
    imageUrl = serializers.SerializerMethodField()
    isFavorite = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    images = serializers.ListField(
        child=serializers.CharField(max_length=500), write_only=True, required=False,
    )
    deleteImageIds = serializers.ListField(
        child=serializers.IntegerField(min_value=1), write_only=True, required=False,
    )

    class Meta:
        model = Product
        fields = (
            "id", "name", "brandId", "brandName", "sportId", "sportName",
            "price", "stock", "material", "size", "weight", "origin", "description",
            "imageUrl", "isFavorite", "createdAt", "images", "deleteImageIds",
        )

    def get_imageUrl(self, obj):
        return first_image_url(obj)

    def get_isFavorite(self, obj):
        return obj.id in self.context.get("favorite_ids", ())

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["images"] = ProductImageSerializer(instance.images.all(), many=True).data
        return data

    def validate(self, attrs):
        if not self.instance and not attrs.get("images"):
            raise serializers.ValidationError({"images": "At least one image is required."})
        return attrs

    def _add_images(self, product, urls):
        last = product.images.aggregate(m=Max("order"))["m"]
        start = last + 1 if last is not None else 0
        ProductImage.objects.bulk_create([
            ProductImage(product=product, url=url, order=start + i) for i, url in enumerate(urls)
        ])

    @transaction.atomic
    def create(self, validated_data):
        urls = validated_data.pop("images", [])
        validated_data.pop("deleteImageIds", None)
        product = super().create(validated_data)
        self._add_images(product, urls)
        return product

    @transaction.atomic
    def update(self, instance, validated_data):
        urls = validated_data.pop("images", [])
        delete_ids = validated_data.pop("deleteImageIds", [])
        product = super().update(instance, validated_data)
        if delete_ids:
            product.images.filter(id__in=delete_ids).delete()
        if urls:
            self._add_images(product, urls)
        return product


class FavoriteSerializer(serializers.ModelSerializer):
    productId = serializers.IntegerField(source="product_id", read_only=True)
    name = serializers.CharField(source="product.name", read_only=True)
    price = serializers.IntegerField(source="product.price", read_only=True)
    brandName = serializers.CharField(source="product.brand.name", read_only=True)
    imageUrl = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = Favorite
        fields = ("id", "productId", "name", "price", "brandName", "imageUrl", "createdAt")

    def get_imageUrl(self, obj):
        return first_image_url(obj.product)


class ProductIdSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)


# ------------------------------------------------------------------------------
# Carrito
# ------------------------------------------------------------------------------
class CartItemSerializer(serializers.ModelSerializer):
    productId = serializers.IntegerField(source="product_id", read_only=True)
    name = serializers.CharField(source="product.name", read_only=True)
    price = serializers.IntegerField(source="product.price", read_only=True)
    stock = serializers.IntegerField(source="product.stock", read_only=True)
    subtotal = serializers.SerializerMethodField()
    imageUrl = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = ("id", "productId", "name", "price", "quantity", "stock", "subtotal", "imageUrl")

    def get_subtotal(self, obj):
        return obj.product.price * obj.quantity

    def get_imageUrl(self, obj):
        return first_image_url(obj.product)


class CartAddSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, max_value=99, default=1)


class CartQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0, max_value=99)


# ------------------------------------------------------------------------------
# Checkout / órdenes
# ------------------------------------------------------------------------------
class InvoiceDataSerializer(InvoiceDataMixin, serializers.Serializer):
    invoiceId = serializers.PrimaryKeyRelatedField(source="invoice", queryset=InvoiceType.objects.all())


class ShippingDataMixin(serializers.Serializer):
    """recipient/phone + reglas de envío (3 = domicilio, 1 = retiro en tienda)."""

    recipient = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20, validators=[validate_phone])
    deliveryId = serializers.PrimaryKeyRelatedField(source="delivery", queryset=Delivery.objects.all())
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    storeName = serializers.CharField(source="store_name", max_length=100, required=False, allow_blank=True, allow_null=True)
    paymentId = serializers.PrimaryKeyRelatedField(source="payment", queryset=Payment.objects.all())

    def validate(self, attrs):
        attrs = super().validate(attrs)
        delivery_id = attrs["delivery"].id if "delivery" in attrs else getattr(self.instance, "delivery_id", None)
        if delivery_id == DELIVERY_HOME:
            address = (attrs.get("address") or "").strip()
            if len(address) < 5:
                raise serializers.ValidationError({"address": "Address must be at least 5 characters."})
        elif delivery_id == DELIVERY_STORE:
            if not (attrs.get("store_name") or "").strip():
                raise serializers.ValidationError({"storeName": "Store name is required for store pickup."})
        return attrs


class CheckoutSerializer(ShippingDataMixin):
    invoiceData = InvoiceDataSerializer(required=False, allow_null=True)


class OrderItemSerializer(serializers.ModelSerializer):
    productId = serializers.IntegerField(source="product_id", read_only=True)
    productName = serializers.CharField(source="product_name", read_only=True)
    subtotal = serializers.IntegerField(read_only=True)
    imageUrl = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = ("id", "productId", "productName", "quantity", "price", "subtotal", "status", "imageUrl")

    def get_imageUrl(self, obj):
        return first_image_url(obj.product)


class OrderItemDetailSerializer(OrderItemSerializer):
    product = serializers.SerializerMethodField()

    class Meta(OrderItemSerializer.Meta):
        fields = OrderItemSerializer.Meta.fields + ("product",)

    def get_product(self, obj):
        p = obj.product
        if p is None:
            return None
        return {
            "id": p.id,
            "name": p.name,
            "brandName": p.brand.name,
            "sportName": p.sport.name,
            "price": p.price,
            "stock": p.stock,
            "images": ProductImageSerializer(p.images.all(), many=True).data,
        }


class OrderSerializer(serializers.ModelSerializer):
    memberId = serializers.IntegerField(source="member_id", read_only=True)
    memberName = serializers.CharField(source="member.name", read_only=True)
    orderNumber = serializers.CharField(source="order_number", read_only=True)
    storeName = serializers.CharField(source="store_name", read_only=True)
    deliveryId = serializers.IntegerField(source="delivery_id", read_only=True)
    deliveryName = serializers.CharField(source="delivery.name", read_only=True)
    paymentId = serializers.IntegerField(source="payment_id", read_only=True)
    paymentName = serializers.CharField(source="payment.name", read_only=True)
    statusId = serializers.IntegerField(source="status_id", read_only=True)
    statusName = serializers.CharField(source="status.name", read_only=True)
    invoiceId = serializers.IntegerField(source="invoice_id", read_only=True)
    invoiceName = serializers.CharField(source="invoice.name", read_only=True, default=None)
    invoiceNumber = serializers.CharField(source="invoice_number", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = Order
        fields = (
            "id", "memberId", "memberName", "orderNumber", "total", "fee",
            "recipient", "phone", "address", "storeName",
            "deliveryId", "deliveryName", "paymentId", "paymentName",
            "statusId", "statusName", "invoiceId", "invoiceName", "invoiceNumber",
            "carrier", "tax", "items", "createdAt",
        )


class OrderDetailSerializer(OrderSerializer):
    items = OrderItemDetailSerializer(many=True, read_only=True)


class AdminOrderItemSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1, required=False)
    productId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1)
    price = serializers.IntegerField(min_value=0)
    status = serializers.ChoiceField(choices=OrderItem.STATUSES, required=False)


class AdminOrderWriteSerializer(InvoiceDataMixin, ShippingDataMixin):
    memberId = serializers.PrimaryKeyRelatedField(source="member", queryset=Member.objects.all())
    statusId = serializers.PrimaryKeyRelatedField(source="status", queryset=Status.objects.all(), required=False)
    invoiceId = serializers.PrimaryKeyRelatedField(
        source="invoice", queryset=InvoiceType.objects.all(), required=False, allow_null=True,
    )
    items = AdminOrderItemSerializer(many=True, allow_empty=False)
