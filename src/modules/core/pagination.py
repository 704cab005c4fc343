from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """Page-number pagination with a client-tunable ``limit``."""

    page_size = 20
    page_size_query_param = "limit"
    max_page_size = 100
