"""
RSVP and bookmark state changes for events.

Both toggles lock the event row for the duration of the transaction, so
concurrent joins on the last free slot are serialized and only one of
them can succeed.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction
from rest_framework.exceptions import NotFound

from common.exceptions import CapacityExceeded
from .models import Event, EventBookmark, EventRegistration

logger = logging.getLogger(__name__)


@dataclass
class AttendResult:
    event: Event
    attending: bool

    @property
    def spots_remaining(self) -> Optional[int]:
        return self.event.spots_remaining


def _locked_event(event_id) -> Event:
    event = Event.objects.select_for_update().filter(pk=event_id).first()
    if event is None:
        raise NotFound("Event not found")
    return event


def toggle_attend(event_id, user) -> AttendResult:
    """Join the event if the user is not attending, leave it otherwise.

    Raises ``CapacityExceeded`` without mutating anything when the event
    has a capacity and the attendee set already holds that many users.
    """
    with transaction.atomic():
        event = _locked_event(event_id)
        registration = EventRegistration.objects.filter(event=event, user=user).first()

        if registration is not None:
            registration.delete()
            attending = False
        else:
            current = EventRegistration.objects.filter(event=event).count()
            if event.capacity is not None and current >= event.capacity:
                logger.info("Event %s full (%s/%s); rejected user %s", event.pk, current, event.capacity, user.pk)
                raise CapacityExceeded(event.capacity, spots_remaining=0)
            EventRegistration.objects.create(event=event, user=user)
            attending = True

        event.attendees_count = EventRegistration.objects.filter(event=event).count()
        event.save(update_fields=["attendees_count", "updated_at"])

    logger.info(
        "User %s %s event %s (%s attending)",
        user.pk, "joined" if attending else "left", event.pk, event.attendees_count,
    )
    return AttendResult(event=event, attending=attending)


def toggle_save(event_id, user):
    """Flip the bookmark for (event, user); returns (event, saved)."""
    with transaction.atomic():
        event = _locked_event(event_id)
        deleted, _ = EventBookmark.objects.filter(event=event, user=user).delete()
        if deleted:
            return event, False
        EventBookmark.objects.create(event=event, user=user)
        return event, True
