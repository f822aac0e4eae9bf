# apps/shop/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import AdminOrderViewSet, CartViewSet, FavoriteViewSet, OrderViewSet, ProductViewSet

router = DefaultRouter()
router.register(r'products', ProductViewSet, basename='products')
router.register(r'favorites', FavoriteViewSet, basename='favorites')
router.register(r'cart', CartViewSet, basename='cart')
router.register(r'orders', OrderViewSet, basename='orders')
router.register(r'admin/orders', AdminOrderViewSet, basename='admin-orders')

urlpatterns = [
    path("", include(router.urls)),
]
