# apps/core/pagination.py

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class CorePageNumberPagination(PageNumberPagination):
    """
    Page number pagination used by all list endpoints.
    The page size defaults to 50 and can be changed with ``?limit=``.
    """
    page_size = 50
    page_size_query_param = 'limit'
    max_page_size = 200

    def get_paginated_response(self, data):
        return Response({
            'count': self.page.paginator.count,
            'total_pages': self.page.paginator.num_pages,
            'current_page': self.page.number,
            'page_size': self.get_page_size(self.request),
            'results': data,
        })
