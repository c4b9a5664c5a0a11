from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "sender", "receiver", "short_message", "read", "created_at")
    list_filter = ("read",)
    search_fields = ("message", "sender__email", "receiver__email")
    raw_id_fields = ("sender", "receiver")

    @admin.display(description="Message")
    def short_message(self, obj):
        return obj.message[:50]
