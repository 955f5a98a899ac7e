# care_core/visits/forms.py
from __future__ import annotations

from rest_framework import serializers

from care_core.common.validation import ConstrainedForm, in_range, is_empty, max_length, one_of, required
from care_core.hospitals.selectors import hospital_by_name
from care_core.patients.selectors import patient_by_username, patient_user
from care_core.visits.models import (
    HouseholdSmokingStatus,
    OfficeVisit,
    OphthalmologySurgery,
    PatientSmokingStatus,
    SurgeryType,
    VisitType,
)
from care_core.visits.selectors import age_on, doctor_user

# metrics that must be filled in, by the patient's age at the visit
INFANT_METRICS = ("weight", "height", "head_circumference", "house_smoking_status")
CHILD_METRICS = ("weight", "height", "systolic", "diastolic", "house_smoking_status")
ADULT_METRICS = CHILD_METRICS + ("patient_smoking_status", "hdl", "ldl", "tri")


def required_metrics(age: int) -> tuple:
    if age < 3:
        return INFANT_METRICS
    if age < 12:
        return CHILD_METRICS
    return ADULT_METRICS


def _optional(field_class, **kwargs):
    return field_class(required=False, allow_null=True, **kwargs)


class OfficeVisitForm(ConstrainedForm):
    """
    Wire shape of an office visit. `patient`, `hcp` and `hospital` arrive as usernames / the
    hospital name and leave validation resolved to the referenced rows.
    """
    id = _optional(serializers.IntegerField)
    patient = _optional(serializers.CharField, allow_blank=True)
    hcp = _optional(serializers.CharField, allow_blank=True)
    date = _optional(serializers.DateTimeField)
    type = _optional(serializers.CharField, allow_blank=True)
    hospital = _optional(serializers.CharField, allow_blank=True)
    notes = _optional(serializers.CharField, allow_blank=True)
    prescheduled = serializers.BooleanField(required=False, default=False)

    height = _optional(serializers.FloatField)
    weight = _optional(serializers.FloatField)
    head_circumference = _optional(serializers.FloatField)
    systolic = _optional(serializers.IntegerField)
    diastolic = _optional(serializers.IntegerField)
    hdl = _optional(serializers.IntegerField)
    ldl = _optional(serializers.IntegerField)
    tri = _optional(serializers.IntegerField)
    house_smoking_status = _optional(serializers.CharField, allow_blank=True)
    patient_smoking_status = _optional(serializers.CharField, allow_blank=True)

    constraints = (
        required("patient"),
        required("hcp"),
        required("date"),
        required("type"),
        one_of("type", VisitType.values),
        required("hospital"),
        max_length("notes", 255),
        in_range("height", 0, 1000, low_inclusive=False, high_inclusive=False),
        in_range("weight", 0, 1000, low_inclusive=False, high_inclusive=False),
        in_range("head_circumference", 0, 1000, low_inclusive=False, high_inclusive=False),
        in_range("systolic", 0, 999, low_inclusive=False),
        in_range("diastolic", 0, 999, low_inclusive=False),
        in_range("hdl", 0, 90),
        in_range("ldl", 0, 600),
        in_range("tri", 100, 600),
        one_of("house_smoking_status", HouseholdSmokingStatus.values),
        one_of("patient_smoking_status", PatientSmokingStatus.values),
    )

    def validate_form(self, attrs):
        errors = {}

        patient = patient_user(attrs["patient"].strip())
        if patient is None:
            errors["patient"] = ["No user with the PATIENT role has this username."]

        hcp = doctor_user(attrs["hcp"].strip())
        if hcp is None:
            errors["hcp"] = ["No user with a doctor role has this username."]

        hospital = hospital_by_name(attrs["hospital"].strip())
        if hospital is None:
            errors["hospital"] = ["No hospital has this name."]

        if patient is not None:
            errors.update(self.metric_errors(attrs, patient))
        errors.update(self.record_errors(attrs))

        if errors:
            raise serializers.ValidationError(errors)

        attrs.update(patient=patient, hcp=hcp, hospital=hospital)
        return attrs

    def metric_errors(self, attrs, patient_user_obj) -> dict:
        demographics = patient_by_username(patient_user_obj.get_username())
        if demographics is None or demographics.date_of_birth is None:
            return {}

        age = age_on(demographics.date_of_birth, attrs["date"].date())
        return {
            name: [f"Required for a patient aged {age}."]
            for name in required_metrics(age)
            if is_empty(attrs.get(name))
        }

    def record_errors(self, attrs) -> dict:
        return {}


class OphthalmologySurgeryForm(OfficeVisitForm):
    visual_acuity_od = _optional(serializers.IntegerField)
    visual_acuity_os = _optional(serializers.IntegerField)
    sphere_od = _optional(serializers.FloatField)
    sphere_os = _optional(serializers.FloatField)
    cylinder_od = _optional(serializers.FloatField)
    cylinder_os = _optional(serializers.FloatField)
    axis_od = _optional(serializers.IntegerField)
    axis_os = _optional(serializers.IntegerField)
    surgery_type = _optional(serializers.CharField, allow_blank=True)

    constraints = OfficeVisitForm.constraints + (
        required("visual_acuity_od"),
        in_range("visual_acuity_od", 10, 200),
        required("visual_acuity_os"),
        in_range("visual_acuity_os", 10, 200),
        required("sphere_od"),
        in_range("sphere_od", -20.0, 20.0),
        required("sphere_os"),
        in_range("sphere_os", -20.0, 20.0),
        in_range("cylinder_od", -20.0, 20.0),
        in_range("cylinder_os", -20.0, 20.0),
        in_range("axis_od", 1, 180),
        in_range("axis_os", 1, 180),
        required("surgery_type"),
        one_of("surgery_type", SurgeryType.values),
    )

    def record_errors(self, attrs) -> dict:
        errors = {}
        for eye in ("od", "os"):
            has_cylinder = not is_empty(attrs.get(f"cylinder_{eye}"))
            has_axis = not is_empty(attrs.get(f"axis_{eye}"))
            if has_cylinder and not has_axis:
                errors[f"axis_{eye}"] = ["Axis is required when a cylinder is given."]
            elif has_axis and not has_cylinder:
                errors[f"axis_{eye}"] = ["Axis must be empty when there is no cylinder."]
        return errors


class OfficeVisitSerializer(serializers.ModelSerializer):
    patient = serializers.SlugRelatedField(slug_field="username", read_only=True)
    hcp = serializers.SlugRelatedField(slug_field="username", read_only=True)
    hospital = serializers.CharField(source="hospital_id", read_only=True)

    class Meta:
        model = OfficeVisit
        fields = [
            "id",
            "patient",
            "hcp",
            "date",
            "type",
            "hospital",
            "notes",
            "prescheduled",
            "height",
            "weight",
            "head_circumference",
            "systolic",
            "diastolic",
            "hdl",
            "ldl",
            "tri",
            "house_smoking_status",
            "patient_smoking_status",
        ]
        read_only_fields = fields


class OphthalmologySurgerySerializer(OfficeVisitSerializer):
    class Meta(OfficeVisitSerializer.Meta):
        model = OphthalmologySurgery
        fields = OfficeVisitSerializer.Meta.fields + [
            "visual_acuity_od",
            "visual_acuity_os",
            "sphere_od",
            "sphere_os",
            "cylinder_od",
            "cylinder_os",
            "axis_od",
            "axis_os",
            "surgery_type",
        ]
        read_only_fields = fields
