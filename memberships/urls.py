from django.urls import path

from . import views

app_name = "memberships"

urlpatterns = [
    path("type_abonnement/", views.subscription_types, name="types"),
    path("user/abonnement/check/", views.check, name="check"),
    path("user/abonnement/subscribe/", views.subscribe, name="subscribe"),
    path("user/abonnement/cancel/", views.cancel, name="cancel"),
]
