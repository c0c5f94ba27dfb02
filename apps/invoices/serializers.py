from rest_framework import serializers
from apps.users.serializers import PublicUserSerializer, WorkerSerializer
from .models import Invoice


class InvoiceSerializer(serializers.ModelSerializer):
    worker = WorkerSerializer(read_only=True)
    payer = PublicUserSerializer(read_only=True)
    job = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = [
            'id', 'worker', 'payer', 'job', 'shift', 'payment_type', 'hours_worked', 'rate_per_hour',
            'total_amount', 'status', 'description', 'notes', 'submitted_at', 'processing_at', 'paid_at',
        ]
        read_only_fields = fields

    def get_job(self, obj):
        if obj.job_id is None:
            return None
        return {'id': obj.job.id, 'title': obj.job.title}


class InvoiceCreateSerializer(serializers.Serializer):
    """Either ``shift_id`` + ``hourly_rate`` or ``payer_id`` + ``description`` + ``amount``."""
    shift_id = serializers.IntegerField(required=False)
    hourly_rate = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, allow_null=True)
    payer_id = serializers.IntegerField(required=False)
    job_id = serializers.IntegerField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, max_length=255)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, data):
        if data.get('shift_id'):
            if data.get('payer_id'):
                raise serializers.ValidationError("Provide either shift_id or payer_id, not both.")
            return data
        missing = [name for name in ('payer_id', 'description', 'amount') if not data.get(name)]
        if missing:
            raise serializers.ValidationError(
                f"Manual invoices require: {', '.join(missing)}."
            )
        return data
