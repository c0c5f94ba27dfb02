from django.conf import settings
from django.db import models
from django.utils import timezone
from core.constants import INVOICE_STATUS_CHOICES, INVOICE_TRANSITIONS, INVOICE_PENDING, INVOICE_PAID, PAYMENT_TYPE_CHOICES
from apps.users.models import Worker
from apps.jobs.models import Job
from apps.timesheets.models import Shift


class Invoice(models.Model):
    """
    Amount owed by a payer (the venue owner) to a worker.

    Hourly invoices are generated from an approved shift; fixed invoices are
    entered manually. Status only moves forward: pending, processing, paid.
    """
    worker = models.ForeignKey(Worker, on_delete=models.PROTECT, related_name='invoices')
    payer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='invoices_payable')
    job = models.ForeignKey(Job, on_delete=models.PROTECT, null=True, blank=True, related_name='invoices')
    shift = models.OneToOneField(Shift, on_delete=models.PROTECT, null=True, blank=True, related_name='invoice')
    payment_type = models.CharField(max_length=10, choices=PAYMENT_TYPE_CHOICES, default='hourly')
    hours_worked = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)
    rate_per_hour = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=INVOICE_STATUS_CHOICES, default=INVOICE_PENDING)
    description = models.CharField(max_length=255, blank=True, default='')
    notes = models.TextField(blank=True, default='')
    submitted_at = models.DateTimeField(default=timezone.now)
    processing_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-submitted_at']
        indexes = [
            models.Index(fields=['job', 'status'], name='invoice_job_status_idx'),
        ]

    def __str__(self):
        return f"Invoice {self.id}: {self.worker.user.username} -> {self.payer.username} ({self.status})"

    @property
    def is_paid(self):
        return self.status == INVOICE_PAID

    def can_transition_to(self, new_status):
        return new_status in INVOICE_TRANSITIONS.get(self.status, ())

    def involves(self, user):
        return self.payer_id == user.id or self.worker.user_id == user.id
