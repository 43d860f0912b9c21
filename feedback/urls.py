from django.urls import path
from . import views

urlpatterns = [
    path('feedback', views.feedback, name='feedback'),
    path('feedback/<str:feedback_id>', views.delete_feedback, name='delete_feedback'),
]
