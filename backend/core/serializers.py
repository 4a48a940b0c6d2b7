"""Serializers used by the core API views."""
from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    """
    Credentials posted by the login page.

    The dashboard sends `mobileNumber`; scripts tend to send `username`.
    Either is fine, they both map onto the Django username.
    """

    mobileNumber = serializers.CharField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(trim_whitespace=False)

    def validate(self, attrs):
        username = (attrs.get("mobileNumber") or attrs.get("username") or "").strip()
        if not username:
            raise serializers.ValidationError({"mobileNumber": "Mobile number is required."})
        attrs["username"] = username
        return attrs


class UserSerializer(serializers.Serializer):
    """The user object the dashboard keeps after logging in."""

    id = serializers.IntegerField()
    username = serializers.CharField()
    name = serializers.SerializerMethodField()
    email = serializers.EmailField()
    isStaff = serializers.BooleanField(source="is_staff")

    def get_name(self, user) -> str:
        return user.get_full_name() or user.username
