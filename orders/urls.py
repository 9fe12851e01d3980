from django.urls import path
from . import views
app_name = "orders"
urlpatterns = [
    path("save-order", views.save_order_view, name="save_order"),
    path("save-order/", views.save_order_view),
]
