from rest_framework import serializers
from apps.users.serializers import VenueSerializer, WorkerSerializer
from apps.jobs.serializers import AcceptedJobSerializer
from apps.users.models import VenueStaff
from core.constants import CLOCK_METHOD_CHOICES, SHIFT_ADJUDICATION_STATUSES
from .models import Shift
from .earnings import round_money, worked_hours


class ShiftSerializer(serializers.ModelSerializer):
    venue = VenueSerializer(read_only=True)
    job = serializers.SerializerMethodField()
    worked_hours = serializers.SerializerMethodField()

    class Meta:
        model = Shift
        fields = [
            'id', 'worker', 'venue', 'job', 'clock_in_at', 'clock_out_at', 'break_minutes',
            'worked_hours', 'status', 'clock_in_method', 'clock_out_method',
            'worker_note', 'venue_note', 'adjudicated_at',
        ]
        read_only_fields = fields

    def get_job(self, obj):
        if obj.job_id is None:
            return None
        return {'id': obj.job.id, 'title': obj.job.title}

    def get_worked_hours(self, obj):
        if obj.clock_out_at is None:
            return None
        return str(round_money(worked_hours(obj)))


class VenueShiftSerializer(ShiftSerializer):
    worker = WorkerSerializer(read_only=True)


class ClockInSerializer(serializers.Serializer):
    job_id = serializers.IntegerField(required=False)
    venue_id = serializers.IntegerField(required=False)
    method = serializers.ChoiceField(choices=CLOCK_METHOD_CHOICES, default='manual')

    def validate(self, data):
        # Exactly one target: an accepted job or a staff venue
        if bool(data.get('job_id')) == bool(data.get('venue_id')):
            raise serializers.ValidationError("Provide either job_id or venue_id.")
        return data


class ClockOutSerializer(serializers.Serializer):
    shift_id = serializers.IntegerField()
    break_minutes = serializers.IntegerField(min_value=0, default=0)
    worker_note = serializers.CharField(required=False, allow_blank=True, default='')
    method = serializers.ChoiceField(choices=CLOCK_METHOD_CHOICES, default='manual')


class ShiftStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SHIFT_ADJUDICATION_STATUSES)
    venue_note = serializers.CharField(required=False, allow_blank=True, default='')


class StaffVenueSerializer(serializers.ModelSerializer):
    venue = VenueSerializer(read_only=True)

    class Meta:
        model = VenueStaff
        fields = ['id', 'venue', 'role', 'is_active']


class ClockInTargetsSerializer(serializers.Serializer):
    jobs = AcceptedJobSerializer(many=True)
    venues = StaffVenueSerializer(many=True)


class QrGenerateSerializer(serializers.Serializer):
    venue_id = serializers.IntegerField()
    ttl = serializers.IntegerField(required=False, min_value=30, max_value=86400)


class QrValidateSerializer(serializers.Serializer):
    token = serializers.CharField()
