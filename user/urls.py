from django.urls import path
from . import views

urlpatterns = [
    path('login', views.admin_login),
    path('signup', views.user_signup),
    path('verify', views.verify_token),

    path('user/signup', views.user_signup),
    path('user/login', views.user_login),
    path('user/update', views.update_user_info),
]
