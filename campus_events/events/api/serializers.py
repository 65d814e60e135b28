from rest_framework import serializers

from campus_events.events.models import Event
from campus_events.registrations.validation import FIELD_TYPES
from campus_events.registrations.validation import QUESTION_TYPES

TARGET_AUDIENCES = (
    "all",
    "first-year",
    "second-year",
    "third-year",
    "fourth-year",
    "faculty",
    "staff",
)


class OrganizerSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    department = serializers.CharField(read_only=True)


class RegistrationFieldSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    type = serializers.ChoiceField(choices=FIELD_TYPES)
    required = serializers.BooleanField(default=False)
    options = serializers.ListField(
        child=serializers.CharField(max_length=200),
        required=False,
        default=list,
    )

    def validate(self, attrs):
        if attrs["type"] == "select" and not attrs.get("options"):
            msg = f"Select field '{attrs['name']}' needs at least one option"
            raise serializers.ValidationError(msg)
        return attrs


class FeedbackQuestionSerializer(serializers.Serializer):
    question = serializers.CharField(max_length=300)
    type = serializers.ChoiceField(choices=QUESTION_TYPES, default="text")
    required = serializers.BooleanField(default=False)


class EventSerializer(serializers.ModelSerializer[Event]):
    """Read representation including the derived registration state."""

    organizer = OrganizerSerializer(read_only=True, allow_null=True)
    registration_status = serializers.CharField(read_only=True)
    is_available = serializers.BooleanField(read_only=True)
    duration = serializers.DurationField(read_only=True)

    class Meta:
        model = Event
        exclude = ["organizer_contact"]


class EventWriteSerializer(serializers.ModelSerializer[Event]):
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50, trim_whitespace=True),
        required=False,
    )
    registration_fields = RegistrationFieldSerializer(many=True, required=False)
    feedback_questions = FeedbackQuestionSerializer(many=True, required=False)
    target_audience = serializers.ListField(
        child=serializers.ChoiceField(choices=TARGET_AUDIENCES),
        required=False,
    )
    requirements = serializers.ListField(
        child=serializers.CharField(max_length=300),
        required=False,
    )
    images = serializers.ListField(child=serializers.DictField(), required=False)
    attachments = serializers.ListField(child=serializers.DictField(), required=False)
    prizes = serializers.ListField(child=serializers.DictField(), required=False)
    social_media = serializers.DictField(
        child=serializers.CharField(allow_blank=True),
        required=False,
    )

    class Meta:
        model = Event
        fields = [
            "title",
            "description",
            "short_description",
            "category",
            "tags",
            "venue_name",
            "venue_address",
            "venue_capacity",
            "venue_latitude",
            "venue_longitude",
            "start_at",
            "end_at",
            "registration_deadline",
            "registration_required",
            "max_participants",
            "fee",
            "registration_fields",
            "status",
            "visibility",
            "target_audience",
            "images",
            "attachments",
            "requirements",
            "prizes",
            "social_media",
            "feedback_enabled",
            "feedback_questions",
            "reminder_24h",
            "reminder_1h",
            "update_notifications",
            "is_recurring",
            "recurrence_frequency",
            "recurrence_interval",
            "recurrence_end_date",
        ]

    def _merged(self, attrs, name):
        if name in attrs:
            return attrs[name]
        return getattr(self.instance, name, None)

    def validate(self, attrs):
        start = self._merged(attrs, "start_at")
        end = self._merged(attrs, "end_at")
        deadline = self._merged(attrs, "registration_deadline")
        if start and end and end <= start:
            raise serializers.ValidationError(
                {"end_at": "End date must be after start date"},
            )
        if start and deadline and deadline > start:
            raise serializers.ValidationError(
                {"registration_deadline": "Registration deadline must be before event start"},
            )
        return attrs

    def to_internal_value(self, data):
        attrs = super().to_internal_value(data)
        # Nested serializers return OrderedDicts; store plain JSON.
        for key in ("registration_fields", "feedback_questions"):
            if key in attrs:
                attrs[key] = [dict(item) for item in attrs[key]]
        return attrs
