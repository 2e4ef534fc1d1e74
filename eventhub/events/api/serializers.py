from __future__ import annotations

from rest_framework import serializers

from eventhub.events.domain import DEFAULT_PAGE_SIZE
from eventhub.events.domain import MAX_PAGE_SIZE
from eventhub.events.domain import EventQuery
from eventhub.events.domain import SortField
from eventhub.events.domain import SortOrder
from eventhub.events.models import URL_MAX_LENGTH
from eventhub.events.models import Event
from eventhub.users.models import User


class CreatorSerializer(serializers.ModelSerializer[User]):
    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class AttendeeSerializer(serializers.ModelSerializer[User]):
    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class AttendeeSummarySerializer(serializers.ModelSerializer[User]):
    class Meta:
        model = User
        fields = ["id", "name"]
        read_only_fields = fields


class EventSerializer(serializers.ModelSerializer[Event]):
    """Read serializer for a single event with creator and attendees."""

    coverUrl = serializers.CharField(source="cover_url", read_only=True)  # noqa: N815
    imagesUrl = serializers.ListField(  # noqa: N815
        source="images_url",
        child=serializers.CharField(),
        read_only=True,
    )
    creatorId = serializers.IntegerField(source="creator_id", read_only=True)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    creator = CreatorSerializer(read_only=True)
    attendees = AttendeeSerializer(many=True, read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "description",
            "date",
            "location",
            "category",
            "coverUrl",
            "imagesUrl",
            "creatorId",
            "createdAt",
            "creator",
            "attendees",
        ]
        read_only_fields = fields


class EventListItemSerializer(EventSerializer):
    """Listing shape: attendee summaries plus the attendee count."""

    attendees = AttendeeSummarySerializer(many=True, read_only=True)
    attendeeCount = serializers.IntegerField(source="attendee_count", read_only=True)  # noqa: N815

    class Meta(EventSerializer.Meta):
        fields = [*EventSerializer.Meta.fields, "attendeeCount"]
        read_only_fields = fields


class EventWriteSerializer(serializers.Serializer):
    """Validates create payloads; with ``partial=True`` every field is optional.

    Strings are trimmed before their length is checked.
    """

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=2000)
    date = serializers.DateTimeField()
    location = serializers.CharField(max_length=200)
    category = serializers.CharField(max_length=50)
    coverUrl = serializers.URLField(source="cover_url", max_length=URL_MAX_LENGTH)  # noqa: N815
    imagesUrl = serializers.ListField(  # noqa: N815
        source="images_url",
        child=serializers.URLField(max_length=URL_MAX_LENGTH),
        required=False,
        default=list,
    )


class EventListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=MAX_PAGE_SIZE,
        default=DEFAULT_PAGE_SIZE,
    )
    category = serializers.CharField(required=False)
    startDate = serializers.DateTimeField(source="start_date", required=False)  # noqa: N815
    endDate = serializers.DateTimeField(source="end_date", required=False)  # noqa: N815
    search = serializers.CharField(required=False)
    sortBy = serializers.ChoiceField(  # noqa: N815
        source="sort_by",
        choices=[choice.value for choice in SortField],
        default=SortField.DATE.value,
    )
    sortOrder = serializers.ChoiceField(  # noqa: N815
        source="sort_order",
        choices=[choice.value for choice in SortOrder],
        default=SortOrder.ASC.value,
    )

    def validate_category(self, value: str) -> str:
        return value.lower()

    def to_query(self) -> EventQuery:
        return EventQuery(**self.validated_data)


class PaginationSerializer(serializers.Serializer):
    currentPage = serializers.IntegerField()  # noqa: N815
    totalPages = serializers.IntegerField()  # noqa: N815
    totalEvents = serializers.IntegerField()  # noqa: N815
    hasNextPage = serializers.BooleanField()  # noqa: N815
    hasPrevPage = serializers.BooleanField()  # noqa: N815
    limit = serializers.IntegerField()


class EventListResponseSerializer(serializers.Serializer):
    events = EventListItemSerializer(many=True)
    pagination = PaginationSerializer()


class MessageSerializer(serializers.Serializer):
    message = serializers.CharField()
