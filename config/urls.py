from django.contrib import admin
from django.urls import include, path

admin.site.site_header = "FitnessDev — Administration"
admin.site.site_title = "FitnessDev"
admin.site.index_title = "Gestion"

urlpatterns = [
    path("admin/", admin.site.urls),

    path("", include("core.urls")),
    path("", include("accounts.urls")),
    path("", include("schedule.urls")),
    path("", include("shop.urls")),
    path("", include("orders.urls")),
    path("", include("memberships.urls")),
]
