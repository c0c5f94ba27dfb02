from django.db import models
from core.constants import JOB_STATUS_CHOICES, JOB_APPLICATION_STATUS_CHOICES
from apps.users.models import Venue, Worker


class Job(models.Model):
    """A gig posted by a venue. Accepted workers may clock in against it."""
    venue = models.ForeignKey(Venue, on_delete=models.CASCADE, related_name='jobs')
    title = models.CharField(max_length=200)
    location = models.CharField(max_length=200, blank=True, default='')
    description = models.TextField(blank=True, default='')
    pay_rate = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    status = models.CharField(max_length=20, choices=JOB_STATUS_CHOICES, default='open')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.title} - {self.venue.business_name}"

    @property
    def payer(self):
        return self.venue.user

    def has_accepted_worker(self, worker):
        return self.applications.filter(worker=worker, status='accepted').exists()


class JobApplication(models.Model):
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='applications')
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='applications')
    status = models.CharField(max_length=20, choices=JOB_APPLICATION_STATUS_CHOICES, default='pending')
    applied_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('job', 'worker')

    def __str__(self):
        return f"{self.worker.user.username} applied to {self.job.title}"
