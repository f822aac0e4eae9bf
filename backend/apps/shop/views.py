# apps/shop/views.py
import logging

from django.db import transaction
from django.db.models import Prefetch
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.common.authentication import OptionalJWTAuthentication
from apps.common.models import Delivery, InvoiceType, Payment
from apps.common.pagination import pagination_class
from apps.common.permissions import IsAdminOrReadOnly, IsAdminRole
from apps.common.viewsets import ArenaModelViewSet
from apps.shop.filters import AdminOrderFilter, ProductFilter
from apps.shop.models import Favorite, Order, OrderItem, Product, ProductImage
from apps.shop.serializers import (
    AdminOrderWriteSerializer,
    CartAddSerializer,
    CartItemSerializer,
    CartQuantitySerializer,
    CheckoutSerializer,
    FavoriteSerializer,
    OrderDetailSerializer,
    OrderSerializer,
    ProductIdSerializer,
    ProductSerializer,
)
from apps.shop.services import cart as cart_service
from apps.shop.services.orders import (
    admin_create_order,
    admin_update_order,
    calculate_shipping_fee,
    create_order_from_cart,
    detach_product_from_orders,
)

logger = logging.getLogger(__name__)


def _orders_queryset():
    return (
        Order.objects
        .select_related("member", "delivery", "payment", "status", "invoice")
        .prefetch_related(Prefetch(
            "items",
            queryset=OrderItem.objects.select_related("product__brand", "product__sport").prefetch_related("product__images"),
        ))
    )


# ==========================
# Productos
# ==========================
class ProductViewSet(ArenaModelViewSet):
    """
    Catálogo de productos.
    - Lectura pública con JWT opcional (isFavorite para socios logueados).
    - Escritura admin. El borrado deja los ítems de órdenes como product_removed.
    """
    queryset = Product.objects.select_related("brand", "sport").prefetch_related("images")
    serializer_class = ProductSerializer
    authentication_classes = [OptionalJWTAuthentication]
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter
    pagination_class = pagination_class(16)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        user = self.request.user
        if user and user.is_authenticated:
            context["favorite_ids"] = set(
                Favorite.objects.filter(member=user).values_list("product_id", flat=True)
            )
        return context

    def perform_destroy(self, instance):
        detach_product_from_orders(instance)
        instance.delete()

    @action(detail=False, methods=["delete"], url_path=r"images/(?P<image_id>\d+)")
    def delete_image(self, request, image_id=None):
        image = ProductImage.objects.filter(pk=image_id).first()
        if image is None:
            raise NotFound("Image not found.")
        product_id = image.product_id
        image.delete()
        logger.info("[products.image_delete] product_id=%s image_id=%s", product_id, image_id)
        return Response({"success": True, "deletedId": int(image_id)})


# ==========================
# Favoritos
# ==========================
class FavoriteViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """GET: favoritos del socio. POST {productId}: toggle."""
    serializer_class = FavoriteSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return (
            Favorite.objects
            .filter(member=self.request.user)
            .select_related("product", "product__brand")
            .prefetch_related("product__images")
            .order_by("-created_at", "-id")
        )

    def create(self, request):
        ser = ProductIdSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        product = Product.objects.filter(pk=ser.validated_data["productId"]).first()
        if product is None:
            raise NotFound("Product not found.")

        with transaction.atomic():
            deleted, _ = Favorite.objects.filter(member=request.user, product=product).delete()
            if not deleted:
                Favorite.objects.create(member=request.user, product=product)

        favorited = not deleted
        logger.info(
            "[favorites.toggle] member_id=%s product_id=%s favorited=%s",
            request.user.id, product.id, favorited,
        )
        return Response({"success": True, "favorited": favorited})


# ==========================
# Carrito
# ==========================
class CartViewSet(viewsets.ViewSet):
    """
    /cart/             GET
    /cart/add/         POST {productId, quantity}
    /cart/item/{id}/   PUT {quantity} | DELETE
    /cart/clear/       DELETE
    /cart/checkout/    GET (resumen) | POST (crear orden)
    """
    permission_classes = [IsAuthenticated]

    def _cart_payload(self, request):
        cart = cart_service.get_cart(request.user)
        items, total, count = cart_service.cart_summary(cart)
        return items, {
            "success": True,
            "items": CartItemSerializer(items, many=True).data,
            "totalPrice": total,
            "itemCount": count,
        }

    def list(self, request):
        _, payload = self._cart_payload(request)
        return Response(payload)

    @action(detail=False, methods=["post"], url_path="add")
    def add(self, request):
        ser = CartAddSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        cart_service.add_item(request.user, ser.validated_data["productId"], ser.validated_data["quantity"])
        _, payload = self._cart_payload(request)
        return Response(payload, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["put", "delete"], url_path=r"item/(?P<item_id>\d+)")
    def item(self, request, item_id=None):
        if request.method == "DELETE":
            cart_service.remove_item(request.user, item_id)
        else:
            ser = CartQuantitySerializer(data=request.data)
            ser.is_valid(raise_exception=True)
            cart_service.update_item(request.user, item_id, ser.validated_data["quantity"])
        _, payload = self._cart_payload(request)
        return Response(payload)

    @action(detail=False, methods=["delete"], url_path="clear")
    def clear(self, request):
        deleted = cart_service.clear_cart(request.user)
        return Response({"success": True, "affectedRows": deleted})

    @action(detail=False, methods=["get", "post"], url_path="checkout")
    def checkout(self, request):
        if request.method == "POST":
            ser = CheckoutSerializer(data=request.data)
            ser.is_valid(raise_exception=True)
            order = create_order_from_cart(request.user, ser.validated_data)
            order = _orders_queryset().get(pk=order.pk)
            return Response(
                {"success": True, "record": OrderSerializer(order).data},
                status=status.HTTP_201_CREATED,
            )

        items, payload = self._cart_payload(request)
        payload.update({
            "stockErrors": cart_service.stock_errors(items),
            "payments": list(Payment.objects.order_by("id").values("id", "name")),
            "deliveries": [
                {"id": d.id, "name": d.name, "fee": calculate_shipping_fee(d.id)}
                for d in Delivery.objects.order_by("id")
            ],
            "invoices": list(InvoiceType.objects.order_by("id").values("id", "name")),
        })
        return Response(payload)


# ==========================
# Órdenes
# ==========================
class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    """Órdenes del socio; las ajenas responden 404."""
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return _orders_queryset().filter(member=self.request.user).order_by("-created_at", "-id")

    def get_serializer_class(self):
        return OrderDetailSerializer if self.action == "retrieve" else OrderSerializer

    def retrieve(self, request, *args, **kwargs):
        return Response({"success": True, "record": self.get_serializer(self.get_object()).data})


class AdminOrderViewSet(ArenaModelViewSet):
    """
    CRUD admin de órdenes (perPage 15, id ascendente por defecto).
    Alta/edición pasan por services.orders (snapshots + diff de ítems).
    """
    serializer_class = OrderSerializer
    permission_classes = [IsAdminRole]
    filter_backends = [DjangoFilterBackend]
    filterset_class = AdminOrderFilter
    pagination_class = pagination_class(15)
    delete_name_field = "order_number"

    def get_queryset(self):
        return _orders_queryset()

    def _detail(self, order, code=status.HTTP_200_OK):
        order = _orders_queryset().get(pk=order.pk)
        return self.record_response(OrderDetailSerializer(order).data, code)

    def retrieve(self, request, *args, **kwargs):
        return self._detail(self.get_object())

    def create(self, request, *args, **kwargs):
        ser = AdminOrderWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return self._detail(admin_create_order(ser.validated_data), status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        order = self.get_object()
        ser = AdminOrderWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return self._detail(admin_update_order(order, ser.validated_data))

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)
