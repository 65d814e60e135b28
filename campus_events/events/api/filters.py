import django_filters

from campus_events.events.models import Event

STATUS_ALL = "all"


class EventFilter(django_filters.FilterSet):
    """Listing filters. ``status`` defaults to published; ``all`` disables it."""

    status = django_filters.ChoiceFilter(
        choices=[*Event.Status.choices, (STATUS_ALL, "All")],
        method="filter_status",
    )
    category = django_filters.ChoiceFilter(choices=Event.Category.choices)
    upcoming = django_filters.BooleanFilter(method="filter_upcoming")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Event
        fields = ["status", "category", "upcoming", "search"]

    def __init__(self, data=None, *args, **kwargs):
        if data is not None:
            data = data.copy()
            if not data.get("status"):
                data["status"] = Event.Status.PUBLISHED
        super().__init__(data, *args, **kwargs)

    def filter_status(self, queryset, name, value):
        if value == STATUS_ALL:
            return queryset
        return queryset.filter(status=value)

    def filter_upcoming(self, queryset, name, value):
        return queryset.upcoming() if value else queryset

    def filter_search(self, queryset, name, value):
        value = value.strip()
        return queryset.search(value) if value else queryset
