# care_core/patients/models.py
from django.conf import settings
from django.db import models

from care_core.common.models import TimeStampedModel
from care_core.hospitals.models import State


class Gender(models.TextChoices):
    MALE = "MALE", "Male"
    FEMALE = "FEMALE", "Female"
    OTHER = "OTHER", "Other"
    NOT_SPECIFIED = "NOT_SPECIFIED", "Not specified"


class Patient(TimeStampedModel):
    """
    Demographics for a user holding the PATIENT role.
    Addressed by the user's username; the user row owns the identity.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="patient",
    )
    first_name = models.CharField(max_length=20)
    last_name = models.CharField(max_length=30)
    date_of_birth = models.DateField(null=True, blank=True)
    email = models.CharField(max_length=30, blank=True, default="")
    phone = models.CharField(max_length=12, blank=True, default="")

    address_line1 = models.CharField(max_length=50, blank=True, default="")
    address_line2 = models.CharField(max_length=50, blank=True, default="")
    city = models.CharField(max_length=15, blank=True, default="")
    state = models.CharField(max_length=2, choices=State.choices, blank=True, default="")
    zip = models.CharField(max_length=10, blank=True, default="")

    gender = models.CharField(max_length=16, choices=Gender.choices, default=Gender.NOT_SPECIFIED)

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["last_name", "first_name"]),
        ]

    @property
    def username(self) -> str:
        return self.user.get_username()

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.username})"
