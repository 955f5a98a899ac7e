# care_core/audit/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from care_core.audit.models import AuditEntry


class AuditEntrySerializer(serializers.ModelSerializer):
    # API field name "timestamp" maps to the model's occurred_at
    timestamp = serializers.DateTimeField(source="occurred_at", read_only=True)

    class Meta:
        model = AuditEntry
        fields = [
            "id",
            "transaction_type",
            "actor",
            "target",
            "timestamp",
            "detail",
        ]
        read_only_fields = fields
