# apps/calculator/views.py

import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.market_data.helpers import market_day_bounds
from apps.market_data.services import MarketSnapshotService

from .serializers import (
    CalculatorStateSerializer,
    SnapshotQuerySerializer,
    SyncRequestSerializer,
    serialize_effect,
    state_from_data,
)
from .state import MarketSnapshot
from .sync import CalculatorSyncSession

logger = logging.getLogger(__name__)


class MarketSnapshotView(APIView):
    """
    Prices the calculator reads for a date (``?date=YYYY-MM-DD``, default today).
    """

    def get(self, request):
        query = SnapshotQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(MarketSnapshotService.build_snapshot(query.validated_data.get('date')))


class CalculatorSyncView(APIView):
    """
    Runs one sync step: loads the market snapshot for the requested date
    (default: today in the market timezone) and returns the updated calculator
    state plus the effects that were applied.
    """

    def post(self, request):
        serializer = SyncRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = CalculatorSyncSession(state_from_data(serializer.validated_data['state']))
        target_date = serializer.validated_data.get('date') or market_day_bounds()[2]

        generation = session.select_date(target_date.isoformat())
        snapshot = MarketSnapshot.from_payload(MarketSnapshotService.build_snapshot(target_date))
        effects = session.deliver(generation, snapshot)

        logger.debug(f"Calculator sync for {target_date} produced {len(effects)} effects.")
        return Response({
            'state': CalculatorStateSerializer(session.state).data,
            'effects': [serialize_effect(effect) for effect in effects],
        })
