# care_core/hospitals/forms.py
from __future__ import annotations

from rest_framework import serializers

from care_core.common.validation import ConstrainedForm, matches, max_length, one_of, required
from care_core.hospitals.models import Hospital, State

ZIP_PATTERN = r"\d{5}(-\d{4})?"


class HospitalForm(ConstrainedForm):
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    zip = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    constraints = (
        required("name"),
        max_length("name", 100),
        required("address"),
        max_length("address", 100),
        required("state"),
        one_of("state", State.values),
        required("zip"),
        matches("zip", ZIP_PATTERN, "Zip code must be 5 digits, optionally followed by -4 digits."),
    )

    def validate_form(self, attrs):
        if "/" in (attrs.get("name") or ""):
            raise serializers.ValidationError({"name": ["Hospital names cannot contain '/'."]})
        return attrs


class HospitalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Hospital
        fields = ["name", "address", "state", "zip"]
        read_only_fields = fields
