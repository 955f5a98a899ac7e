# care_core/audit/api/filters.py
from __future__ import annotations

import django_filters

from care_core.audit.models import AuditEntry, TransactionType


class AuditEntryFilter(django_filters.FilterSet):
    """
    Query-parameter parsing for the audit log. The form's cleaned_data feeds the selector.
    """
    actor = django_filters.CharFilter()
    target = django_filters.CharFilter()
    transaction_type = django_filters.ChoiceFilter(choices=TransactionType.choices)
    start = django_filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="gte")
    end = django_filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="lte")

    class Meta:
        model = AuditEntry
        fields = ["actor", "target", "transaction_type", "start", "end"]
