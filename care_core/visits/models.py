# care_core/visits/models.py
from django.conf import settings
from django.db import models

from care_core.common.models import TimeStampedModel
from care_core.hospitals.models import Hospital


class VisitType(models.TextChoices):
    GENERAL_CHECKUP = "GENERAL_CHECKUP", "General checkup"
    GENERAL_OPHTHALMOLOGY = "GENERAL_OPHTHALMOLOGY", "General ophthalmology"
    OPHTHALMOLOGY_SURGERY = "OPHTHALMOLOGY_SURGERY", "Ophthalmology surgery"


class SurgeryType(models.TextChoices):
    CATARACT = "CATARACT", "Cataract surgery"
    REFRACTIVE = "REFRACTIVE", "Refractive surgery"
    LASER = "LASER", "Laser surgery"


class HouseholdSmokingStatus(models.TextChoices):
    NONAPPLICABLE = "NONAPPLICABLE", "Not applicable"
    NONSMOKING = "NONSMOKING", "Non-smoking household"
    OUTDOOR = "OUTDOOR", "Outdoor smokers"
    INDOOR = "INDOOR", "Indoor smokers"


class PatientSmokingStatus(models.TextChoices):
    NONAPPLICABLE = "NONAPPLICABLE", "Not applicable"
    DAILY = "DAILY", "Every day"
    SOMEDAYS = "SOMEDAYS", "Some days"
    FORMER = "FORMER", "Former smoker"
    NEVER = "NEVER", "Never smoked"
    SMOKER = "SMOKER", "Smoker, current status unknown"
    UNKNOWN = "UNKNOWN", "Unknown if ever smoked"


METRIC_FIELDS = (
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
)


class BasicHealthMetrics(models.Model):
    """
    Vital signs and cholesterol panel recorded at a visit.
    """
    height = models.FloatField(null=True, blank=True)
    weight = models.FloatField(null=True, blank=True)
    head_circumference = models.FloatField(null=True, blank=True)
    systolic = models.PositiveSmallIntegerField(null=True, blank=True)
    diastolic = models.PositiveSmallIntegerField(null=True, blank=True)
    hdl = models.PositiveSmallIntegerField(null=True, blank=True)
    ldl = models.PositiveSmallIntegerField(null=True, blank=True)
    tri = models.PositiveSmallIntegerField(null=True, blank=True)
    house_smoking_status = models.CharField(
        max_length=16, choices=HouseholdSmokingStatus.choices, blank=True, default=""
    )
    patient_smoking_status = models.CharField(
        max_length=16, choices=PatientSmokingStatus.choices, blank=True, default=""
    )

    class Meta:
        abstract = True

    def metrics(self) -> dict:
        return {name: getattr(self, name) for name in METRIC_FIELDS}


class VisitRecord(BasicHealthMetrics, TimeStampedModel):
    patient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="%(class)s_as_patient",
    )
    hcp = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="%(class)s_as_hcp",
    )
    hospital = models.ForeignKey(Hospital, on_delete=models.PROTECT, related_name="%(class)s_set")
    date = models.DateTimeField()
    type = models.CharField(max_length=32, choices=VisitType.choices)
    notes = models.CharField(max_length=255, blank=True, default="")
    prescheduled = models.BooleanField(default=False)

    class Meta:
        abstract = True
        ordering = ("-date", "-id")

    def __str__(self) -> str:
        return f"{self.type} for {self.patient_id} on {self.date:%Y-%m-%d}"


class OfficeVisit(VisitRecord):
    class Meta(VisitRecord.Meta):
        db_table = "visits_office_visit"
        indexes = [
            models.Index(fields=["patient", "date"]),
            models.Index(fields=["hcp", "date"]),
        ]


class OphthalmologySurgery(VisitRecord):
    """
    An office visit at which eye surgery was performed, with per-eye refraction (OD right, OS left).
    """
    visual_acuity_od = models.PositiveSmallIntegerField()
    visual_acuity_os = models.PositiveSmallIntegerField()
    sphere_od = models.FloatField()
    sphere_os = models.FloatField()
    cylinder_od = models.FloatField(null=True, blank=True)
    cylinder_os = models.FloatField(null=True, blank=True)
    axis_od = models.PositiveSmallIntegerField(null=True, blank=True)
    axis_os = models.PositiveSmallIntegerField(null=True, blank=True)
    surgery_type = models.CharField(max_length=16, choices=SurgeryType.choices)

    class Meta(VisitRecord.Meta):
        db_table = "visits_ophthalmology_surgery"
        indexes = [
            models.Index(fields=["patient", "date"]),
            models.Index(fields=["hcp", "date"]),
        ]
