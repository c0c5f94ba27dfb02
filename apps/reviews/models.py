from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Q
from core.constants import REVIEW_RECIPIENT_TYPE_CHOICES
from apps.jobs.models import Job


class Review(models.Model):
    """A rating left by one party of a paid engagement for the other. Immutable."""
    job = models.ForeignKey(Job, on_delete=models.PROTECT, related_name='reviews')
    reviewer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='given_reviews')
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='received_reviews')
    recipient_type = models.CharField(max_length=10, choices=REVIEW_RECIPIENT_TYPE_CHOICES)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    text = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['job', 'reviewer'], name='one_review_per_job_reviewer'),
            models.CheckConstraint(condition=Q(rating__gte=1, rating__lte=5), name='review_rating_range'),
        ]

    def __str__(self):
        return f"Review by {self.reviewer.username} for {self.recipient.username} ({self.rating} stars)"
