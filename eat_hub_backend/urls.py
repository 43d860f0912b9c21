from django.urls import path, include
from django.views.generic import RedirectView

from monitoring import views as monitoring_views

urlpatterns = [
    path('', monitoring_views.welcome, name='welcome'),
    path('api/health', RedirectView.as_view(url='/api/monitoring/health', permanent=False)),
    path('api/monitoring/', include('monitoring.urls')),
    path('api/auth/', include('user.urls')),
    path('api/', include('menu.urls')),
    path('api/', include('order.urls')),
    path('api/', include('voucher.urls')),
    path('api/', include('rewards.urls')),
    path('api/', include('feedback.urls')),
]
