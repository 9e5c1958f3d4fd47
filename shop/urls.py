from django.urls import path

from . import views

app_name = "shop"

urlpatterns = [
    path("produit/", views.product_lookup, name="product"),
    path("produit/add/", views.product_bulk_add, name="product_add"),

    path("cart/", views.cart_view, name="cart"),
    path("cart/add/", views.cart_add, name="cart_add"),
    path("cart/set/", views.cart_set, name="cart_set"),
    path("cart/clear/", views.cart_clear, name="cart_clear"),
]
