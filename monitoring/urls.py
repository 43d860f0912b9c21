from django.urls import path
from . import views

urlpatterns = [
    path('health', views.health, name='health'),
    path('metrics', views.metrics, name='metrics'),
    path('status', views.status, name='status'),
    path('error', views.frontend_error, name='frontend_error'),
]
