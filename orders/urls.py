from django.urls import path

from . import views

app_name = "orders"

urlpatterns = [
    path("user/achat/", views.purchase, name="purchase"),
    path("user/orders/", views.orders, name="list"),
    path("cart/checkout/", views.checkout, name="checkout"),
]
