from django.urls import path
from . import views
app_name = "payments"
urlpatterns = [
    path("create-order", views.create_order_view, name="create_order"),
    path("create-order/", views.create_order_view),
    path("get-razorpay-key", views.razorpay_key_view, name="razorpay_key"),
    path("get-razorpay-key/", views.razorpay_key_view),
]
