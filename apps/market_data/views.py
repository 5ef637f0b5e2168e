# apps/market_data/views.py

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.permissions import IsAdminUserOrReadOnly

from .models import DigitalCurrency
from .queries import OhlcDataQuery
from .serializers import DigitalCurrencySerializer, PriceUpdateSerializer, TodayOhlcSerializer
from .services import DigitalCurrencyService, OhlcService


class DigitalCurrencyViewSet(viewsets.ModelViewSet):
    """
    Digital currencies keyed by symbol. Reads are public, writes need an admin.
    """
    queryset = DigitalCurrency.objects.all()
    serializer_class = DigitalCurrencySerializer
    permission_classes = [IsAdminUserOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['is_active']
    search_fields = ['symbol', 'name']
    ordering_fields = ['symbol', 'price_in_toman', 'market_cap_in_toman', 'last_updated']
    lookup_field = 'symbol'
    lookup_value_regex = r'[A-Za-z0-9_-]+'

    def get_object(self):
        currency = DigitalCurrencyService.get_by_symbol(self.kwargs[self.lookup_field])
        self.check_object_permissions(self.request, currency)
        return currency

    @action(detail=False, methods=['get'])
    def top(self, request):
        """
        Active currencies by market cap, largest first (``?limit=``, default 10).
        """
        try:
            limit = max(1, min(int(request.query_params.get('limit', 10)), 100))
        except ValueError:
            limit = 10
        currencies = DigitalCurrencyService.get_top_by_market_cap(limit)
        return Response(self.get_serializer(currencies, many=True).data)

    @action(detail=True, methods=['post'])
    def price(self, request, symbol=None):
        serializer = PriceUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        currency = DigitalCurrencyService.update_price(symbol, data.pop('price'), **data)
        return Response(self.get_serializer(currency).data, status=status.HTTP_200_OK)


class TodayOhlcView(APIView):
    """
    Today's OHLC for one item. Served through OhlcDataQuery, so repeated
    requests inside the freshness window hit the cache; ``?refresh=true`` forces a fetch.
    A failed fetch falls back to the last cached summary, flagged ``is_stale``.
    """

    def get(self, request, item_code):
        OhlcService.validate_item_code(item_code)
        query = OhlcDataQuery()
        refresh = request.query_params.get('refresh', '').lower() in ('1', 'true', 'yes')
        result = query.refetch(item_code) if refresh else query.read(item_code)

        if result.is_error and not result.has_data:
            raise result.error

        payload = dict(TodayOhlcSerializer(result.ohlc).data)
        payload['is_stale'] = result.is_stale
        return Response(payload)


class AllTodayOhlcView(APIView):

    def get(self, request):
        summaries = OhlcService.get_all_today_ohlc()
        return Response(TodayOhlcSerializer(summaries, many=True).data)
