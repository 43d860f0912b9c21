from django.urls import path
from . import views

urlpatterns = [
    path('orders', views.orders, name='orders'),
    path('orders/<str:order_number>', views.order_detail, name='order_detail'),
    path('orders/<str:order_number>/status', views.update_order_status, name='update_order_status'),
]
