"""Serializers for parsing request bodies and rendering domain models.

Input serializers only check formats; required fields and business rules
are enforced by the services so every rule lives in one place.
"""

from rest_framework import serializers

from drives.domain.status import postponed_until


class EventCreateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    starts_at = serializers.DateTimeField(required=False)
    ends_at = serializers.DateTimeField(required=False, allow_null=True)
    location = serializers.CharField(required=False, allow_blank=True)
    full_address = serializers.CharField(required=False, allow_blank=True)
    city_id = serializers.CharField(required=False)
    category_ids = serializers.ListField(child=serializers.CharField(), required=False)
    expected_participants = serializers.IntegerField(required=False)
    latitude = serializers.FloatField(required=False, allow_null=True)
    longitude = serializers.FloatField(required=False, allow_null=True)


class EventPatchSerializer(EventCreateSerializer):
    status = serializers.CharField(required=False)
    status_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    postponed_until = serializers.DateTimeField(required=False, allow_null=True)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_null=True)
    status_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    postponed_until = serializers.DateTimeField(required=False, allow_null=True)


class LeaveSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class FeedbackSerializer(serializers.Serializer):
    testimonial = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    rating = serializers.IntegerField(required=False, allow_null=True)
    location_clear = serializers.BooleanField(required=False, allow_null=True)
    org_rating = serializers.IntegerField(required=False, allow_null=True)
    volunteer_impact_felt = serializers.IntegerField(required=False, allow_null=True)
    would_attend_again = serializers.BooleanField(required=False, allow_null=True)
    suggestions = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EventSerializer(serializers.Serializer):
    """Serializer for the Event domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField()
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField()
    location = serializers.CharField()
    full_address = serializers.CharField()
    latitude = serializers.SerializerMethodField()
    longitude = serializers.SerializerMethodField()
    expected_participants = serializers.IntegerField()
    current_participants = serializers.IntegerField()
    min_participants = serializers.IntegerField()
    status = serializers.SerializerMethodField()
    status_reason = serializers.CharField()
    status_updated_by = serializers.CharField()
    status_updated_at = serializers.DateTimeField()
    postponed_until = serializers.SerializerMethodField()
    creator_id = serializers.CharField()
    city_id = serializers.CharField()
    category_ids = serializers.SerializerMethodField()

    def get_latitude(self, event) -> float | None:
        return event.coordinates.latitude if event.coordinates else None

    def get_longitude(self, event) -> float | None:
        return event.coordinates.longitude if event.coordinates else None

    def get_status(self, event) -> str:
        return event.status_kind.value

    def get_postponed_until(self, event) -> str | None:
        until = postponed_until(event.status)
        return serializers.DateTimeField().to_representation(until) if until else None

    def get_category_ids(self, event) -> list[str]:
        return sorted(str(category_id) for category_id in event.category_ids)


class ParticipantSerializer(serializers.Serializer):
    event_id = serializers.CharField()
    user_id = serializers.CharField()
    joined_at = serializers.DateTimeField()


class TestimonialSerializer(serializers.Serializer):
    event_id = serializers.CharField()
    user_id = serializers.CharField()
    testimonial = serializers.CharField()
    rating = serializers.IntegerField()
    location_clear = serializers.BooleanField(allow_null=True)
    org_rating = serializers.IntegerField(allow_null=True)
    volunteer_impact_felt = serializers.IntegerField(allow_null=True)
    would_attend_again = serializers.BooleanField(allow_null=True)
    suggestions = serializers.CharField(allow_null=True)
    submitted_at = serializers.DateTimeField()


class CompletionSummarySerializer(serializers.Serializer):
    event_id = serializers.CharField()
    status = serializers.SerializerMethodField()
    is_completed = serializers.BooleanField()
    participant_count = serializers.IntegerField()
    testimonial_count = serializers.IntegerField()
    average_rating = serializers.FloatField(allow_null=True)
    would_attend_again_ratio = serializers.FloatField(allow_null=True)

    def get_status(self, summary) -> str:
        return summary.status.value


class CitySerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    state = serializers.CharField()
    country = serializers.CharField()


class CategorySerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
