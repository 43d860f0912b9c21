from django.urls import path
from . import views

urlpatterns = [
    path('menu', views.menu_items, name='menu_items'),
    path('menu/featured', views.featured_items, name='featured_items'),
    path('menu/announcement', views.announcement, name='announcement'),
    path('menu/<str:item_id>', views.menu_item_detail, name='menu_item_detail'),

    path('categories', views.categories, name='categories'),
    path('categories/<str:category_id>', views.category_detail, name='category_detail'),
]
