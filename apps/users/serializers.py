from rest_framework import serializers
from django.contrib.auth import get_user_model
from .models import Venue, Worker, VenueStaff

import logging

User = get_user_model()
logger = logging.getLogger(__name__)


class UserSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()
    display_name = serializers.ReadOnlyField()
    rating_stats = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'first_name', 'last_name', 'display_name',
            'role', 'email', 'phone_number', 'rating_stats'
        ]

    def get_role(self, obj):
        if obj.is_venue_owner:
            return 'venue'
        if obj.is_worker:
            return 'worker'
        return None

    def get_rating_stats(self, obj):
        return obj.get_rating_stats()


class PublicUserSerializer(serializers.ModelSerializer):
    display_name = serializers.ReadOnlyField()

    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name', 'display_name']


class VenueSerializer(serializers.ModelSerializer):
    owner_id = serializers.ReadOnlyField(source='user.id')

    class Meta:
        model = Venue
        fields = ['id', 'owner_id', 'business_name', 'location']


class WorkerSerializer(serializers.ModelSerializer):
    user = PublicUserSerializer(read_only=True)

    class Meta:
        model = Worker
        fields = ['id', 'user', 'location', 'hourly_rate']


class VenueStaffSerializer(serializers.ModelSerializer):
    worker = WorkerSerializer(read_only=True)
    worker_id = serializers.PrimaryKeyRelatedField(
        queryset=Worker.objects.all(), write_only=True, source='worker'
    )

    class Meta:
        model = VenueStaff
        fields = ['id', 'venue', 'worker', 'worker_id', 'role', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['venue', 'is_active', 'created_at', 'updated_at']

    def validate(self, data):
        venue = self.context['venue']
        worker = data['worker']
        if VenueStaff.objects.filter(venue=venue, worker=worker, is_active=True).exists():
            raise serializers.ValidationError("Worker is already staff at this venue.")
        return data

    def create(self, validated_data):
        venue = self.context['venue']
        membership, created = VenueStaff.objects.get_or_create(
            venue=venue,
            worker=validated_data['worker'],
            defaults={
                'role': validated_data.get('role'),
                'created_by': self.context['request'].user,
            }
        )
        if not created:
            # Reactivate a previously removed member
            membership.is_active = True
            membership.role = validated_data.get('role', membership.role)
            membership.save(update_fields=['is_active', 'role', 'updated_at'])
            logger.info(f"Reactivated staff membership {membership.id} at venue {venue.id}")
        return membership


class VenueStaffUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = VenueStaff
        fields = ['role', 'is_active']
