from django.conf import settings
from django.db import models
from core.constants import NOTIFICATION_TYPE_CHOICES


class Notification(models.Model):
    """In-app record of a notification dispatched to a user."""
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=30, choices=NOTIFICATION_TYPE_CHOICES)
    title = models.CharField(max_length=200)
    body = models.TextField(blank=True, default='')
    entity_type = models.CharField(max_length=30, blank=True, default='')  # e.g. 'shift', 'invoice'
    entity_id = models.PositiveIntegerField(null=True, blank=True)
    meta = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Notification to {self.recipient.username} - {self.type}"

    def mark_as_read(self):
        if not self.is_read:
            self.is_read = True
            self.save(update_fields=['is_read'])
