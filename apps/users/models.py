from django.conf import settings
from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    email = models.EmailField(blank=True, null=True, unique=True)
    phone_number = models.CharField(max_length=15, blank=True, null=True, unique=True)

    @property
    def is_venue_owner(self):
        return hasattr(self, 'venue')

    @property
    def is_worker(self):
        return hasattr(self, 'worker')

    @property
    def display_name(self):
        if self.is_venue_owner:
            return self.venue.business_name
        full_name = self.get_full_name()
        return full_name or self.username

    def get_rating_stats(self):
        """Get rating statistics from the reviews this user has received."""
        stats = {
            'average_rating': 0.0,
            'total_ratings': 0,
            'rating_breakdown': {
                '5_star': 0,
                '4_star': 0,
                '3_star': 0,
                '2_star': 0,
                '1_star': 0
            }
        }

        all_ratings = list(self.received_reviews.values_list('rating', flat=True))
        if all_ratings:
            stats['total_ratings'] = len(all_ratings)
            stats['average_rating'] = round(sum(all_ratings) / len(all_ratings), 1)

            for rating in all_ratings:
                stats['rating_breakdown'][f'{rating}_star'] += 1

            # Convert to percentages
            for key in stats['rating_breakdown']:
                stats['rating_breakdown'][key] = round(
                    (stats['rating_breakdown'][key] / stats['total_ratings']) * 100, 1
                )

        return stats


class Venue(models.Model):
    """Business profile of a venue owner. The owner is the payer on invoices."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='venue')
    business_name = models.CharField(max_length=200)
    location = models.CharField(max_length=200, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Venue: {self.business_name}"

    def is_owned_by(self, user):
        return self.user_id == getattr(user, 'id', None)

    def has_active_staff(self, worker):
        return self.staff.filter(worker=worker, is_active=True).exists()


class Worker(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='worker')
    location = models.CharField(max_length=100, blank=True, null=True)
    hourly_rate = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)

    def __str__(self):
        return f"Worker: {self.user.username}"


class VenueStaff(models.Model):
    """Standing membership letting a worker clock in at a venue without a job."""
    venue = models.ForeignKey(Venue, on_delete=models.CASCADE, related_name='staff')
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='staff_memberships')
    role = models.CharField(max_length=100, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('venue', 'worker')
        verbose_name_plural = 'Venue staff'

    def __str__(self):
        state = 'active' if self.is_active else 'inactive'
        return f"{self.worker.user.username} at {self.venue.business_name} ({state})"
