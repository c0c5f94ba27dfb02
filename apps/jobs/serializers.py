from rest_framework import serializers
from apps.users.serializers import VenueSerializer
from .models import Job, JobApplication


class JobSummarySerializer(serializers.ModelSerializer):
    venue = VenueSerializer(read_only=True)

    class Meta:
        model = Job
        fields = ['id', 'title', 'location', 'pay_rate', 'status', 'venue']


class AcceptedJobSerializer(serializers.ModelSerializer):
    """An accepted application, shown as a clock-in option for the worker."""
    application_id = serializers.ReadOnlyField(source='id')
    job = JobSummarySerializer(read_only=True)

    class Meta:
        model = JobApplication
        fields = ['application_id', 'job', 'status', 'applied_at']
