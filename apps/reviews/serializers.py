from rest_framework import serializers
from apps.users.serializers import PublicUserSerializer
from apps.jobs.serializers import JobSummarySerializer
from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    reviewer = PublicUserSerializer(read_only=True)
    recipient = PublicUserSerializer(read_only=True)
    job_title = serializers.ReadOnlyField(source='job.title')

    class Meta:
        model = Review
        fields = ['id', 'job', 'job_title', 'reviewer', 'recipient', 'recipient_type', 'rating', 'text', 'created_at']
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    job_id = serializers.IntegerField()
    recipient_id = serializers.IntegerField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    text = serializers.CharField(required=False, allow_blank=True, default='')


class PendingReviewSerializer(serializers.Serializer):
    job = JobSummarySerializer()
    recipient = PublicUserSerializer()
    recipient_type = serializers.CharField()
    invoice_id = serializers.IntegerField()
    paid_at = serializers.DateTimeField()
