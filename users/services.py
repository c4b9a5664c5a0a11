"""
People recommendations.

Candidates are scored by overlap with the requesting user:

* sharing a saved or attended event: +1, counted once per candidate
  (at most 20 such candidates are considered);
* sharing a group: +2 for every shared group.

When neither source yields anyone, up to 10 other active users are
offered with a score of 1.  Ties keep discovery order (event sharers in
id order, then group members by group and join order).  Nothing is
persisted.
"""
from typing import List, Tuple

from django.contrib.auth.models import User
from django.db.models import Q

from events.models import EventBookmark, EventRegistration
from groups.models import GroupMembership

EVENT_WEIGHT = 1
GROUP_WEIGHT = 2
EVENT_CANDIDATE_LIMIT = 20
FALLBACK_LIMIT = 10
RECOMMENDATION_LIMIT = 10


def _event_ids(user) -> set:
    saved = EventBookmark.objects.filter(user=user).values_list("event_id", flat=True)
    attending = EventRegistration.objects.filter(user=user).values_list("event_id", flat=True)
    return set(saved) | set(attending)


def recommend_users(user, limit=RECOMMENDATION_LIMIT) -> List[Tuple[User, int]]:
    """Returns ``(candidate, score)`` pairs, best first."""
    scores = {}

    event_ids = _event_ids(user)
    if event_ids:
        sharers = (
            User.objects.filter(is_active=True)
            .filter(Q(saved_events__in=event_ids) | Q(events_attending__in=event_ids))
            .exclude(pk=user.pk)
            .distinct()
            .order_by("id")
            .values_list("id", flat=True)[:EVENT_CANDIDATE_LIMIT]
        )
        for candidate_id in sharers:
            scores[candidate_id] = scores.get(candidate_id, 0) + EVENT_WEIGHT

    group_ids = list(GroupMembership.objects.filter(user=user).values_list("group_id", flat=True))
    if group_ids:
        co_members = (
            GroupMembership.objects.filter(group_id__in=group_ids, user__is_active=True)
            .exclude(user=user)
            .order_by("group_id", "id")
            .values_list("user_id", flat=True)
        )
        for candidate_id in co_members:
            scores[candidate_id] = scores.get(candidate_id, 0) + GROUP_WEIGHT

    if not scores and not group_ids:
        fallback = (
            User.objects.filter(is_active=True)
            .exclude(pk=user.pk)
            .order_by("id")
            .values_list("id", flat=True)[:FALLBACK_LIMIT]
        )
        for candidate_id in fallback:
            scores[candidate_id] = EVENT_WEIGHT

    # sorted() is stable, so equal scores stay in discovery order
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)[:limit]
    users = User.objects.select_related("profile").in_bulk([candidate_id for candidate_id, _ in ranked])
    return [(users[candidate_id], score) for candidate_id, score in ranked if candidate_id in users]
