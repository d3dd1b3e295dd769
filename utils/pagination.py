from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class EnvelopePagination(PageNumberPagination):
    """Page-number pagination that answers with the API envelope.

    The view decides the key the results are nested under (``results_key``)
    and the message (``list_message``).
    """
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

    def paginate_queryset(self, queryset, request, view=None):
        self.view = view
        return super().paginate_queryset(queryset, request, view)

    def get_pagination_data(self):
        paginator = self.page.paginator
        return {
            'current_page': self.page.number,
            'total_pages': paginator.num_pages,
            'total_count': paginator.count,
            'has_next_page': self.page.has_next(),
            'has_prev_page': self.page.has_previous(),
            'limit': paginator.per_page,
        }

    def get_links(self):
        links = [{'rel': 'self', 'href': self.request.build_absolute_uri()}]
        if self.page.has_next():
            links.append({'rel': 'next', 'href': self.get_next_link()})
        if self.page.has_previous():
            links.append({'rel': 'prev', 'href': self.get_previous_link()})
        return links

    def get_paginated_response(self, data):
        results_key = getattr(self.view, 'results_key', 'results')
        message = getattr(self.view, 'list_message', 'Results retrieved successfully')
        return Response({
            'success': True,
            'message': message,
            'data': {
                results_key: data,
                'pagination': self.get_pagination_data(),
            },
            'links': self.get_links(),
        })
