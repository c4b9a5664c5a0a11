"""
ViewSets for the events app.

Anyone can list and read published events (a bearer token is optional on
reads).  Creating requires an account; updating, deleting and changing
status are reserved to the event's creator.  RSVP and bookmark toggles
are available to any signed-in user.
"""
import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import Prefetch
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.authentication import OptionalJWTAuthentication
from common.uploads import ImageUploadSerializer, store_image
from .filters import EventFilter
from .models import Event
from .permissions import IsCreatorOrReadOnly
from .serializers import EventSerializer, EventStatusSerializer, EventWriteSerializer
from .services import toggle_attend, toggle_save

logger = logging.getLogger(__name__)


class EventViewSet(viewsets.ModelViewSet):
    authentication_classes = [OptionalJWTAuthentication]
    permission_classes = [IsCreatorOrReadOnly]
    filterset_class = EventFilter
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return Event.objects.select_related("created_by__profile").prefetch_related(
            Prefetch("attendees", queryset=User.objects.select_related("profile").order_by("id")),
        )

    def get_serializer_class(self):
        if self.action in ("create", "update", "partial_update"):
            return EventWriteSerializer
        return EventSerializer

    def filter_queryset(self, queryset):
        # Listing filters and default ordering apply to the collection only.
        if self.action != "list":
            return queryset
        return super().filter_queryset(queryset)

    def _render(self, event):
        event = self.get_queryset().get(pk=event.pk)
        return EventSerializer(event, context=self.get_serializer_context()).data

    def list(self, request, *args, **kwargs):
        events = self.filter_queryset(self.get_queryset())
        data = EventSerializer(events, many=True, context=self.get_serializer_context()).data
        return Response({"success": True, "count": len(data), "events": data})

    def retrieve(self, request, *args, **kwargs):
        event = self.get_object()
        return Response({"success": True, "event": self._render(event)})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = serializer.save(created_by=request.user)
        logger.info("Event %s created by user %s", event.pk, request.user.pk)
        return Response(
            {"success": True, "message": "Event created successfully", "event": self._render(event)},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        # PUT behaves like PATCH: only the supplied keys change.
        event = self.get_object()
        with transaction.atomic():
            # same row lock as RSVP toggles
            event = Event.objects.select_for_update().get(pk=event.pk)
            serializer = EventWriteSerializer(event, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            event = serializer.save()
        return Response({"success": True, "message": "Event updated successfully", "event": self._render(event)})

    def destroy(self, request, *args, **kwargs):
        event = self.get_object()
        data = self._render(event)
        # Registrations and bookmarks cascade, which removes the event from
        # every user's attending and saved lists.
        event.delete()
        logger.info("Event %s deleted by user %s", data["id"], request.user.pk)
        return Response({"success": True, "message": "Event deleted successfully", "event": data})

    @action(detail=True, methods=["patch"], url_path="attend", permission_classes=[IsAuthenticated])
    def attend(self, request, pk=None):
        result = toggle_attend(pk, request.user)
        return Response({
            "success": True,
            "message": "Added to event attendees" if result.attending else "Removed from event attendees",
            "event": self._render(result.event),
            "attending": result.attending,
            "spots_remaining": result.spots_remaining,
        })

    @action(detail=True, methods=["post"], url_path="save", permission_classes=[IsAuthenticated])
    def save_event(self, request, pk=None):
        event, saved = toggle_save(pk, request.user)
        return Response({
            "success": True,
            "message": "Event saved" if saved else "Event removed from saved",
            "saved": saved,
            "is_saved": saved,
        })

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        event = self.get_object()
        serializer = EventStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event.status = serializer.validated_data["status"]
        event.save(update_fields=["status", "updated_at"])
        return Response({
            "success": True,
            "message": f"Event status updated to {event.status}",
            "event": self._render(event),
        })

    @action(
        detail=False,
        methods=["post"],
        url_path="upload-image",
        permission_classes=[IsAuthenticated],
        parser_classes=[MultiPartParser, FormParser],
    )
    def upload_image(self, request):
        if "image" not in request.FILES:
            raise ValidationError("No image file provided")
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        name, url = store_image(serializer.validated_data["image"], "events", request=request)
        return Response({
            "success": True,
            "message": "Image uploaded successfully",
            "image_url": url,
            "filename": name,
        })
