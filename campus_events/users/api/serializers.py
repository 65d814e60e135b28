from rest_framework import serializers

from campus_events.users.models import User
from campus_events.users.models import phone_validator


class UserSerializer(serializers.ModelSerializer[User]):
    """Public profile. The password hash is never part of it."""

    id = serializers.IntegerField(read_only=True)
    registered_events = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    is_admin = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "is_admin",
            "student_id",
            "department",
            "year",
            "phone",
            "avatar",
            "is_verified",
            "registered_events",
            "preferences",
            "last_login",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer[User]):
    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "student_id", "department", "year"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    role = serializers.ChoiceField(
        choices=User.Role.choices,
        required=False,
        default=User.Role.STUDENT,
    )
    student_id = serializers.CharField(
        max_length=50,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    department = serializers.CharField(max_length=100, required=False, allow_blank=True)
    year = serializers.IntegerField(
        min_value=1,
        max_value=4,
        required=False,
        allow_null=True,
    )
    phone = serializers.CharField(
        max_length=30,
        required=False,
        allow_blank=True,
        validators=[phone_validator],
    )


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class PreferencesSerializer(serializers.Serializer):
    email_notifications = serializers.BooleanField(required=False)
    sms_notifications = serializers.BooleanField(required=False)
    event_categories = serializers.ListField(
        child=serializers.CharField(max_length=50),
        required=False,
    )


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    phone = serializers.CharField(
        max_length=30,
        required=False,
        allow_blank=True,
        validators=[phone_validator],
    )
    department = serializers.CharField(max_length=100, required=False, allow_blank=True)
    year = serializers.IntegerField(
        min_value=1,
        max_value=4,
        required=False,
        allow_null=True,
    )
    avatar = serializers.URLField(max_length=500, required=False, allow_blank=True)
    preferences = PreferencesSerializer(required=False)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(trim_whitespace=False)
    new_password = serializers.CharField(trim_whitespace=False)


class AdminUserUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    email = serializers.EmailField(required=False)
    role = serializers.ChoiceField(choices=User.Role.choices, required=False)
    is_verified = serializers.BooleanField(required=False)
    department = serializers.CharField(max_length=100, required=False, allow_blank=True)
    year = serializers.IntegerField(
        min_value=1,
        max_value=4,
        required=False,
        allow_null=True,
    )
    phone = serializers.CharField(
        max_length=30,
        required=False,
        allow_blank=True,
        validators=[phone_validator],
    )
