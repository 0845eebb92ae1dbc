from django.urls import path

from drives.handlers import (
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

urlpatterns = [
    path("drives", EventListView.as_view(), name="drive-list"),
    path("drives/<str:event_id>", EventDetailView.as_view(), name="drive-detail"),
    path("drives/<str:event_id>/status", EventStatusView.as_view(), name="drive-status"),
    path("drives/<str:event_id>/join", EventJoinView.as_view(), name="drive-join"),
    path("drives/<str:event_id>/leave", EventLeaveView.as_view(), name="drive-leave"),
    path(
        "drives/<str:event_id>/participation",
        EventParticipationView.as_view(),
        name="drive-participation",
    ),
    path(
        "drives/<str:event_id>/participants",
        EventParticipantsView.as_view(),
        name="drive-participants",
    ),
    path("drives/<str:event_id>/feedback", EventFeedbackView.as_view(), name="drive-feedback"),
    path(
        "drives/<str:event_id>/completion",
        EventCompletionView.as_view(),
        name="drive-completion",
    ),
    path("me/drives", MyDrivesView.as_view(), name="my-drives"),
    path("cities", CityListView.as_view(), name="city-list"),
    path("categories", CategoryListView.as_view(), name="category-list"),
]
