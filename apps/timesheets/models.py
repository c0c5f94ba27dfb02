from django.conf import settings
from django.db import models
from django.db.models import Q
from core.constants import (
    SHIFT_STATUS_CHOICES, SHIFT_TRANSITIONS, SHIFT_OPEN, CLOCK_METHOD_CHOICES,
)
from apps.users.models import Venue, Worker
from apps.jobs.models import Job


class Shift(models.Model):
    """
    A continuous session of a worker at a venue.

    Created open on clock-in, submitted on clock-out, then approved, disputed
    or voided by the venue. Shifts are never deleted.
    """
    worker = models.ForeignKey(Worker, on_delete=models.PROTECT, related_name='shifts')
    venue = models.ForeignKey(Venue, on_delete=models.PROTECT, related_name='shifts')
    job = models.ForeignKey(Job, on_delete=models.PROTECT, null=True, blank=True, related_name='shifts')
    clock_in_at = models.DateTimeField()
    clock_out_at = models.DateTimeField(null=True, blank=True)
    break_minutes = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=SHIFT_STATUS_CHOICES, default=SHIFT_OPEN)
    clock_in_method = models.CharField(max_length=10, choices=CLOCK_METHOD_CHOICES, default='manual')
    clock_out_method = models.CharField(max_length=10, choices=CLOCK_METHOD_CHOICES, blank=True, default='')
    worker_note = models.TextField(blank=True, default='')
    venue_note = models.TextField(blank=True, default='')
    adjudicated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    adjudicated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-clock_in_at']
        constraints = [
            models.UniqueConstraint(
                fields=['worker'],
                condition=Q(status=SHIFT_OPEN),
                name='one_open_shift_per_worker',
            ),
            models.CheckConstraint(
                condition=(
                    Q(status=SHIFT_OPEN, clock_out_at__isnull=True)
                    | (~Q(status=SHIFT_OPEN) & Q(clock_out_at__isnull=False))
                ),
                name='clock_out_iff_closed',
            ),
        ]
        indexes = [
            models.Index(fields=['venue', 'status'], name='shift_venue_status_idx'),
        ]

    def __str__(self):
        return f"Shift {self.id}: {self.worker.user.username} at {self.venue.business_name} ({self.status})"

    @property
    def is_open(self):
        return self.status == SHIFT_OPEN

    def can_transition_to(self, new_status):
        return new_status in SHIFT_TRANSITIONS.get(self.status, ())
