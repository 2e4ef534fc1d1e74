from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from eventhub.events.services import EventRegistry
from eventhub.events.stores import DjangoEventStore
from eventhub.realtime.hub import get_notification_hub
from eventhub.utils.exceptions import InvalidQueryError

from .serializers import EventListItemSerializer
from .serializers import EventListQuerySerializer
from .serializers import EventListResponseSerializer
from .serializers import EventSerializer
from .serializers import EventWriteSerializer
from .serializers import MessageSerializer


def get_registry() -> EventRegistry:
    return EventRegistry(DjangoEventStore(), get_notification_hub())


@extend_schema_view(
    list=extend_schema(
        tags=["Events"],
        parameters=[EventListQuerySerializer],
        responses=EventListResponseSerializer,
    ),
    retrieve=extend_schema(tags=["Events"], responses=EventSerializer),
    create=extend_schema(
        tags=["Events"],
        request=EventWriteSerializer,
        responses={201: EventSerializer},
    ),
    update=extend_schema(
        tags=["Events"],
        request=EventWriteSerializer,
        responses=EventSerializer,
    ),
    destroy=extend_schema(tags=["Events"], responses=MessageSerializer),
)
class EventViewSet(viewsets.ViewSet):
    """Events: public reads, authenticated writes.

    - list / retrieve: anyone
    - create: any authenticated user, who becomes the creator
    - update / destroy: the creator only
    - join / leave: any authenticated user
    """

    permission_classes = [IsAuthenticatedOrReadOnly]

    def list(self, request):
        params = EventListQuerySerializer(data=request.query_params)
        if not params.is_valid():
            raise InvalidQueryError(params.errors)
        page = get_registry().list_events(params.to_query())
        events = EventListItemSerializer(
            page.events,
            many=True,
            context={"request": request},
        ).data
        return Response(
            {
                "events": events,
                "pagination": {
                    "currentPage": page.page,
                    "totalPages": page.total_pages,
                    "totalEvents": page.total,
                    "hasNextPage": page.has_next_page,
                    "hasPrevPage": page.has_prev_page,
                    "limit": page.limit,
                },
            },
        )

    def retrieve(self, request, pk=None):
        event = get_registry().get_event(pk)
        return Response(EventSerializer(event, context={"request": request}).data)

    def create(self, request):
        serializer = EventWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = get_registry().create_event(request.user, serializer.validated_data)
        return Response(
            EventSerializer(event, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        # PUT carries only the fields being changed.
        serializer = EventWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        event = get_registry().update_event(request.user, pk, serializer.validated_data)
        return Response(EventSerializer(event, context={"request": request}).data)

    def destroy(self, request, pk=None):
        get_registry().delete_event(request.user, pk)
        return Response({"message": "Event removed"})

    @extend_schema(
        tags=["Events"],
        request=None,
        responses={
            200: EventSerializer,
            409: OpenApiResponse(MessageSerializer, description="Already joined"),
        },
    )
    @action(detail=True, methods=["post"])
    def join(self, request, pk=None):
        event = get_registry().join_event(request.user, pk)
        return Response(EventSerializer(event, context={"request": request}).data)

    @extend_schema(tags=["Events"], request=None, responses=EventSerializer)
    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        event = get_registry().leave_event(request.user, pk)
        return Response(EventSerializer(event, context={"request": request}).data)
