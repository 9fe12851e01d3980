from django.contrib import admin
from django.urls import include, path

from . import views

urlpatterns = [
    path("", views.health_view, name="health"),
    path("admin/", admin.site.urls),
    path("", include("payments.urls")),
    path("", include("orders.urls")),
]
