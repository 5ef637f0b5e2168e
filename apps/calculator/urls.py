# apps/calculator/urls.py

from django.urls import path

from . import views

app_name = 'calculator'

urlpatterns = [
    path('sync/', views.CalculatorSyncView.as_view(), name='sync'),
    path('snapshot/', views.MarketSnapshotView.as_view(), name='snapshot'),
]
