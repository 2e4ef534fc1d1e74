from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from eventhub.events.api.views import EventViewSet

# Event routes carry no trailing slash: /events, /events/<id>/join.
router = SimpleRouter(trailing_slash=False)

router.register("events", EventViewSet, basename="events")


app_name = "api"
urlpatterns = [
    path("auth/", include("eventhub.users.api.urls")),
    path("images/", include("eventhub.images.api.urls")),
    *router.urls,
]
