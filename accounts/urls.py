from django.urls import path

from . import views

app_name = "accounts"
urlpatterns = [
    path("auth/signup/", views.signup, name="signup"),
    path("auth/login/", views.login, name="login"),
    path("user/profil/", views.profile, name="profile"),
]
