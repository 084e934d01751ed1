# payments/filters.py

import django_filters

from payments.models import Payment


class PaymentHistoryFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Payment.STATUS_CHOICES)
    payment_type = django_filters.ChoiceFilter(choices=Payment.TYPE_CHOICES)
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Payment
        fields = ["status", "payment_type"]
