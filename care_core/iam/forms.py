# care_core/iam/forms.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from care_core.common.permissions import Role, user_roles
from care_core.common.validation import ConstrainedForm, matches, max_length, required

USERNAME_PATTERN = r"[A-Za-z0-9_.@+-]+"
PASSWORD_MIN = 6
PASSWORD_MAX = 20


class UserForm(ConstrainedForm):
    username = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    password = serializers.CharField(required=False, allow_blank=True, allow_null=True, write_only=True)
    roles = serializers.ListField(child=serializers.ChoiceField(choices=Role.choices), required=False)
    enabled = serializers.BooleanField(required=False, default=True)

    constraints = (
        required("username"),
        max_length("username", 20),
        matches("username", USERNAME_PATTERN, "Usernames may contain letters, digits and _ . @ + - only."),
        max_length("password", PASSWORD_MAX),
    )

    def validate_form(self, attrs):
        errors = {}
        instance = self.context.get("instance")
        password = attrs.get("password") or ""

        if instance is None and not password:
            errors["password"] = ["This field is required."]
        elif password and len(password) < PASSWORD_MIN:
            errors["password"] = [f"Ensure this field has at least {PASSWORD_MIN} characters."]

        if not attrs.get("roles"):
            errors["roles"] = ["At least one role is required."]

        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class UserSerializer(serializers.ModelSerializer):
    roles = serializers.SerializerMethodField()
    enabled = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = get_user_model()
        fields = ["username", "roles", "enabled"]
        read_only_fields = fields

    def get_roles(self, obj) -> list[str]:
        return sorted(str(r) for r in user_roles(obj))
