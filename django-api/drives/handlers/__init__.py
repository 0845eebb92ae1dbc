from drives.handlers.views import (
    CategoryListView,
    CityListView,
    EventCompletionView,
    EventDetailView,
    EventFeedbackView,
    EventJoinView,
    EventLeaveView,
    EventListView,
    EventParticipantsView,
    EventParticipationView,
    EventStatusView,
    MyDrivesView,
)

__all__ = [
    "EventListView",
    "EventDetailView",
    "EventStatusView",
    "EventJoinView",
    "EventLeaveView",
    "EventParticipationView",
    "EventParticipantsView",
    "EventFeedbackView",
    "EventCompletionView",
    "MyDrivesView",
    "CityListView",
    "CategoryListView",
]
