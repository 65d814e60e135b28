import django_filters
from django.db.models import Q

from campus_events.users.models import User


class UserFilter(django_filters.FilterSet):
    role = django_filters.ChoiceFilter(choices=User.Role.choices)
    verified = django_filters.BooleanFilter(field_name="is_verified")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = User
        fields = ["role", "verified", "search"]

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value)
            | Q(email__icontains=value)
            | Q(student_id__icontains=value),
        )
