from django.urls import path
from . import views

urlpatterns = [
    path('vouchers', views.vouchers, name='vouchers'),
    path('vouchers/available', views.available_vouchers, name='available_vouchers'),
    path('vouchers/validate', views.validate_voucher, name='validate_voucher'),
    path('vouchers/apply', views.apply_voucher, name='apply_voucher'),
    path('vouchers/<str:voucher_id>', views.voucher_detail, name='voucher_detail'),
]
