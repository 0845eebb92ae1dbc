"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses (see handlers/errors.py)
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drives.domain.errors import ValidationError
from drives.handlers.serializers import (
    CategorySerializer,
    CitySerializer,
    CompletionSummarySerializer,
    EventCreateSerializer,
    EventPatchSerializer,
    EventSerializer,
    FeedbackSerializer,
    LeaveSerializer,
    ParticipantSerializer,
    StatusUpdateSerializer,
    TestimonialSerializer,
)
from drives.services import build_event_service, build_feedback_service
from drives.services.commands import EventDraft, EventPatch, EventQuery, FeedbackInput


def _parse_top(value: str | None) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError("top must be an integer", field="top") from None


class DriveView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]

    def events(self):
        return build_event_service()


class EventListView(DriveView):
    """Handler for GET/POST /api/drives"""

    def get(self, request: Request) -> Response:
        query = EventQuery(
            city=request.query_params.get("city") or None,
            category=request.query_params.get("category") or None,
            sort=request.query_params.get("sort") or "date",
            top=_parse_top(request.query_params.get("top")),
        )
        events = self.events().list_events(query)
        return Response(EventSerializer(events, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        draft = EventDraft(
            name=data.get("name"),
            description=data.get("description"),
            starts_at=data.get("starts_at"),
            location=data.get("location"),
            city_id=data.get("city_id"),
            category_ids=data.get("category_ids", []),
            expected_participants=data.get("expected_participants"),
            ends_at=data.get("ends_at"),
            full_address=data.get("full_address", ""),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        event = self.events().create_event(draft, request.user.id)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(DriveView):
    """Handler for GET/PATCH /api/drives/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.events().get_event(event_id)
        return Response(EventSerializer(event).data)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = self.events().update_event(
            event_id, EventPatch(**serializer.validated_data), request.user.id
        )
        return Response(EventSerializer(event).data)


class EventStatusView(DriveView):
    """Handler for POST /api/drives/{event_id}/status"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        event = self.events().set_status(
            event_id,
            data.get("status"),
            data.get("status_reason"),
            data.get("postponed_until"),
            request.user.id,
        )
        return Response(EventSerializer(event).data)


class EventJoinView(DriveView):
    """Handler for POST /api/drives/{event_id}/join"""

    def post(self, request: Request, event_id: str) -> Response:
        record = self.events().join(event_id, request.user.id)
        return Response(ParticipantSerializer(record).data, status=status.HTTP_201_CREATED)


class EventLeaveView(DriveView):
    """Handler for POST /api/drives/{event_id}/leave"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = LeaveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.events().leave(event_id, request.user.id, serializer.validated_data.get("reason"))
        return Response({"message": "Successfully left the drive"})


class EventParticipationView(DriveView):
    """Handler for GET /api/drives/{event_id}/participation"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        joined = self.events().is_participant(event_id, request.user.id)
        return Response({"event_id": event_id, "joined": joined})


class EventParticipantsView(DriveView):
    """Handler for GET /api/drives/{event_id}/participants"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        records = self.events().list_participants(event_id, request.user.id)
        return Response(ParticipantSerializer(records, many=True).data)


class EventFeedbackView(DriveView):
    """Handler for POST /api/drives/{event_id}/feedback"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = FeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        testimonial = build_feedback_service().submit_feedback(
            event_id, request.user.id, FeedbackInput(**serializer.validated_data)
        )
        return Response(TestimonialSerializer(testimonial).data, status=status.HTTP_201_CREATED)


class EventCompletionView(DriveView):
    """Handler for GET /api/drives/{event_id}/completion"""

    def get(self, request: Request, event_id: str) -> Response:
        summary = build_feedback_service().get_completion_summary(event_id)
        return Response(CompletionSummarySerializer(summary).data)


class MyDrivesView(DriveView):
    """Handler for GET /api/me/drives"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        drives = self.events().list_user_drives(request.user.id)
        return Response(
            {
                "participated": EventSerializer(drives.participated, many=True).data,
                "created": EventSerializer(drives.created, many=True).data,
            }
        )


class CityListView(DriveView):
    """Handler for GET /api/cities"""

    def get(self, request: Request) -> Response:
        return Response(CitySerializer(self.events().list_cities(), many=True).data)


class CategoryListView(DriveView):
    """Handler for GET /api/categories"""

    def get(self, request: Request) -> Response:
        return Response(CategorySerializer(self.events().list_categories(), many=True).data)
