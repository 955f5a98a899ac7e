# care_core/audit/models.py
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class TransactionType(models.TextChoices):
    HOSPITAL_CREATE = "HOSPITAL_CREATE", "Hospital created"
    HOSPITAL_EDIT = "HOSPITAL_EDIT", "Hospital edited"
    HOSPITAL_DELETE = "HOSPITAL_DELETE", "Hospital deleted"

    USER_CREATE = "USER_CREATE", "User created"
    USER_EDIT = "USER_EDIT", "User edited"
    USER_DELETE = "USER_DELETE", "User deleted"

    PATIENT_DEMOGRAPHICS_CREATE = "PATIENT_DEMOGRAPHICS_CREATE", "Demographics created"
    PATIENT_DEMOGRAPHICS_VIEW = "PATIENT_DEMOGRAPHICS_VIEW", "Demographics viewed"
    PATIENT_DEMOGRAPHICS_EDIT = "PATIENT_DEMOGRAPHICS_EDIT", "Demographics edited"
    PATIENT_DEMOGRAPHICS_DELETE = "PATIENT_DEMOGRAPHICS_DELETE", "Demographics deleted"

    OFFICE_VISIT_CREATE = "OFFICE_VISIT_CREATE", "Office visit created"
    OFFICE_VISIT_HCP_VIEW = "OFFICE_VISIT_HCP_VIEW", "Office visit viewed by clinician"
    OFFICE_VISIT_PATIENT_VIEW = "OFFICE_VISIT_PATIENT_VIEW", "Office visit viewed by patient"
    OFFICE_VISIT_EDIT = "OFFICE_VISIT_EDIT", "Office visit edited"
    OFFICE_VISIT_DELETE = "OFFICE_VISIT_DELETE", "Office visit deleted"

    OPHTHALMOLOGY_SURGERY_CREATE = "OPHTHALMOLOGY_SURGERY_CREATE", "Ophthalmology surgery created"
    OPHTHALMOLOGY_SURGERY_HCP_VIEW = "OPHTHALMOLOGY_SURGERY_HCP_VIEW", "Ophthalmology surgery viewed by clinician"
    OPHTHALMOLOGY_SURGERY_PATIENT_VIEW = "OPHTHALMOLOGY_SURGERY_PATIENT_VIEW", "Ophthalmology surgery viewed by patient"
    OPHTHALMOLOGY_SURGERY_EDIT = "OPHTHALMOLOGY_SURGERY_EDIT", "Ophthalmology surgery edited"
    OPHTHALMOLOGY_SURGERY_DELETE = "OPHTHALMOLOGY_SURGERY_DELETE", "Ophthalmology surgery deleted"

    LOGIN_SUCCESS = "LOGIN_SUCCESS", "Login succeeded"
    LOGIN_FAILURE = "LOGIN_FAILURE", "Login failed"
    LOGOUT = "LOGOUT", "Logout"
    AUDIT_VIEW = "AUDIT_VIEW", "Audit log viewed"


class AuditEntryQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise ValidationError("AuditEntry is append-only and cannot be modified.")

    def delete(self):
        raise ValidationError("AuditEntry is append-only and cannot be deleted.")


class AuditEntry(models.Model):
    """
    Immutable compliance record of one action.
    Actor and target are usernames, not foreign keys: entries must outlive the users they name.
    """
    transaction_type = models.CharField(max_length=64, choices=TransactionType.choices, db_index=True)
    actor = models.CharField(max_length=150, db_index=True)
    target = models.CharField(max_length=150, blank=True, default="", db_index=True)
    occurred_at = models.DateTimeField(default=timezone.now, db_index=True)
    detail = models.TextField(blank=True, default="")
    request_id = models.CharField(max_length=64, blank=True, default="")

    objects = AuditEntryQuerySet.as_manager()

    class Meta:
        db_table = "audit_audit_entry"
        ordering = ("-occurred_at", "-id")
        indexes = [
            models.Index(fields=["actor", "occurred_at"]),
            models.Index(fields=["target", "occurred_at"]),
            models.Index(fields=["transaction_type", "occurred_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.transaction_type} by {self.actor} @ {self.occurred_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("AuditEntry is append-only and cannot be modified.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("AuditEntry is append-only and cannot be deleted.")
