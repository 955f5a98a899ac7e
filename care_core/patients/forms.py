# care_core/patients/forms.py
from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from care_core.common.validation import ConstrainedForm, matches, max_length, one_of, required
from care_core.hospitals.forms import ZIP_PATTERN
from care_core.hospitals.models import State
from care_core.patients.models import Gender, Patient
from care_core.patients.selectors import patient_user

PHONE_PATTERN = r"\d{3}-\d{3}-\d{4}"
EMAIL_PATTERN = r"[^@\s]+@[^@\s]+\.[^@\s]+"


class PatientForm(ConstrainedForm):
    username = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    first_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    last_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    address_line1 = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    address_line2 = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    zip = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    gender = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    constraints = (
        required("username"),
        required("first_name"),
        max_length("first_name", 20),
        required("last_name"),
        max_length("last_name", 30),
        max_length("email", 30),
        matches("email", EMAIL_PATTERN, "Enter a valid email address."),
        matches("phone", PHONE_PATTERN, "Phone numbers must look like 919-555-0100."),
        max_length("address_line1", 50),
        max_length("address_line2", 50),
        max_length("city", 15),
        one_of("state", State.values),
        matches("zip", ZIP_PATTERN, "Zip code must be 5 digits, optionally followed by -4 digits."),
        one_of("gender", Gender.values),
    )

    def validate_form(self, attrs):
        errors = {}

        dob = attrs.get("date_of_birth")
        if dob and dob > timezone.localdate():
            errors["date_of_birth"] = ["Date of birth cannot be in the future."]

        # on update the username is compared against the path instead
        if self.context.get("instance") is None and patient_user(attrs["username"].strip()) is None:
            errors["username"] = ["No user with the PATIENT role has this username."]

        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class PatientSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = Patient
        fields = [
            "username",
            "first_name",
            "last_name",
            "date_of_birth",
            "email",
            "phone",
            "address_line1",
            "address_line2",
            "city",
            "state",
            "zip",
            "gender",
        ]
        read_only_fields = fields
