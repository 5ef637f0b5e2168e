# apps/market_data/urls.py

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'market_data'

router = DefaultRouter()
router.register(r'digital-currencies', views.DigitalCurrencyViewSet, basename='digital-currency')

urlpatterns = [
    path('', include(router.urls)),
    path('ohlc/today/<str:item_code>/', views.TodayOhlcView.as_view(), name='ohlc-today'),
    path('ohlc/all/', views.AllTodayOhlcView.as_view(), name='ohlc-all'),
]
