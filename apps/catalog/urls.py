# apps/catalog/urls.py

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'items', views.ManagedItemViewSet, basename='managed-item')

urlpatterns = [
    path('', include(router.urls)),
]
