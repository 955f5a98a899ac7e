from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 200


def wants_page(request) -> bool:
    params = request.query_params
    return "page" in params or "page_size" in params


def paginate(request, queryset, serializer_class, *, paginator: PageNumberPagination | None = None) -> Response:
    """
    Opt-in pagination. Without ?page / ?page_size the full set is returned as a plain list;
    with them the contract is { count, next, previous, results }.
    """
    if not wants_page(request):
        ser = serializer_class(queryset, many=True)
        return Response(ser.data)

    p = paginator or DefaultPagination()
    page = p.paginate_queryset(queryset, request)
    if page is not None:
        ser = serializer_class(page, many=True)
        return p.get_paginated_response(ser.data)

    ser = serializer_class(queryset, many=True)
    return Response(ser.data)
