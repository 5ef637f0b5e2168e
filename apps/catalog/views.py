# apps/catalog/views.py

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.permissions import IsAdminUserOrReadOnly

from .filters import ManagedItemFilter
from .serializers import ManagedItemSerializer
from .services import ManagedItemService


class ManagedItemViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Managed items keyed by ``code``.
    Anyone can read; create, update, delete and price overrides need an admin user.
    """
    serializer_class = ManagedItemSerializer
    permission_classes = [IsAdminUserOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ManagedItemFilter
    lookup_field = 'code'
    lookup_value_regex = r'[A-Za-z0-9_]+'

    def get_queryset(self):
        return ManagedItemService.list_items().select_related('override_by')

    def get_object(self):
        item = ManagedItemService.get_item(self.kwargs[self.lookup_field])
        self.check_object_permissions(self.request, item)
        return item

    def retrieve(self, request, code=None):
        return Response(self.get_serializer(self.get_object()).data)

    def create(self, request):
        item = ManagedItemService.create_item(request.data, user=request.user)
        return Response(self.get_serializer(item).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, code=None):
        item = ManagedItemService.update_item(code, request.data, user=request.user)
        return Response(self.get_serializer(item).data)

    def update(self, request, code=None):
        return self.partial_update(request, code=code)

    def destroy(self, request, code=None):
        ManagedItemService.delete_item(code, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post', 'delete'], url_path='override')
    def override(self, request, code=None):
        """
        POST pins the price for ``duration_minutes``; DELETE clears the pin.
        """
        if request.method == 'DELETE':
            item = ManagedItemService.clear_override(code, user=request.user)
        else:
            item = ManagedItemService.override_price(code, request.data, user=request.user)
        return Response(self.get_serializer(item).data)

    @action(detail=False, methods=['get'], url_path=r'group/(?P<parent_code>[A-Za-z0-9_]+)')
    def group(self, request, parent_code=None):
        items = ManagedItemService.get_items_by_group(parent_code)
        return Response(self.get_serializer(items, many=True).data)
