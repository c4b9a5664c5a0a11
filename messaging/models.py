# messaging/models.py
from django.conf import settings
from django.db import models


class Message(models.Model):
    """A direct message between two users.

    Lifecycle is one-way: created unread, then read (with ``read_at``).
    Only the sender may hard-delete a message.
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_messages"
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_messages"
    )
    message = models.TextField(max_length=1000)
    read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["sender", "receiver", "-created_at"], name="messaging_pair_recent_idx"),
            models.Index(fields=["receiver", "read"], name="messaging_unread_idx"),
        ]

    def __str__(self):
        return f"{self.sender_id} → {self.receiver_id}: {self.message[:30]}"

    @staticmethod
    def pair_key(user_a_id, user_b_id) -> str:
        lo, hi = sorted((int(user_a_id), int(user_b_id)))
        return f"{lo}-{hi}"

    @property
    def conversation_key(self) -> str:
        return self.pair_key(self.sender_id, self.receiver_id)

    def partner_id_for(self, user_id) -> int:
        return self.receiver_id if self.sender_id == user_id else self.sender_id
