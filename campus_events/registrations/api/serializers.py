from rest_framework import serializers

from campus_events.events.models import Event
from campus_events.registrations.models import Registration
from campus_events.users.api.serializers import UserSummarySerializer


class EventSummarySerializer(serializers.ModelSerializer[Event]):
    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "slug",
            "category",
            "status",
            "start_at",
            "end_at",
            "venue_name",
            "fee",
            "feedback_enabled",
        ]
        read_only_fields = fields


class RegistrationSerializer(serializers.ModelSerializer[Registration]):
    event = EventSummarySerializer(read_only=True)
    user = UserSummarySerializer(read_only=True, allow_null=True)

    class Meta:
        model = Registration
        exclude = ["ip_address", "user_agent", "referrer"]


class RegistrationCreateSerializer(serializers.Serializer):
    event_id = serializers.IntegerField(min_value=1)
    answers = serializers.DictField(required=False, default=dict)
    source = serializers.ChoiceField(
        choices=[Registration.Source.WEB, Registration.Source.MOBILE],
        required=False,
        default=Registration.Source.WEB,
    )


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        max_length=1000,
    )


class FeedbackSerializer(serializers.Serializer):
    rating = serializers.IntegerField(required=False, allow_null=True, default=None)
    comments = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        max_length=2000,
    )
    responses = serializers.DictField(required=False, default=dict)


class AttendanceSerializer(serializers.Serializer):
    check_in = serializers.BooleanField(required=False, default=True)
    notes = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        max_length=1000,
    )


class BulkStatusSerializer(serializers.Serializer):
    ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
        max_length=500,
    )
    status = serializers.ChoiceField(choices=Registration.Status.choices)


class AnalyticsQuerySerializer(serializers.Serializer):
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    event_id = serializers.IntegerField(required=False, min_value=1)
