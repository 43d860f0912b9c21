from django.urls import path
from . import views

urlpatterns = [
    path('rewards', views.rewards, name='rewards'),
    path('rewards/status', views.rewards_status, name='rewards_status'),
    path('rewards/redeem', views.redeem_reward, name='redeem_reward'),
    path('rewards/earn', views.earn_points, name='earn_points'),
    path('rewards/<str:reward_id>', views.reward_detail, name='reward_detail'),
]
