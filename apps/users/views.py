from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, permissions
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from core.utils import IsVenueOwner
from .models import Venue, VenueStaff
from .serializers import UserSerializer, VenueStaffSerializer, VenueStaffUpdateSerializer
import logging

logger = logging.getLogger(__name__)


def _get_owned_venue(request, venue_id):
    try:
        venue = Venue.objects.get(pk=venue_id)
    except Venue.DoesNotExist:
        return None, Response({"error": "Venue not found"}, status=status.HTTP_404_NOT_FOUND)
    if not venue.is_owned_by(request.user):
        return None, Response({"error": "Not authorized to manage this venue's staff"}, status=status.HTTP_403_FORBIDDEN)
    return venue, None


class UserProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Profile of the authenticated user, including rating statistics.",
        responses={200: UserSerializer, 401: 'Unauthorized'}
    )
    def get(self, request):
        serializer = UserSerializer(request.user)
        return Response(serializer.data, status=status.HTTP_200_OK)


class VenueStaffListView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsVenueOwner]

    @swagger_auto_schema(
        operation_description="List staff members of a venue (venue owner only).",
        responses={200: VenueStaffSerializer(many=True), 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, venue_id):
        venue, error = _get_owned_venue(request, venue_id)
        if error:
            return error
        staff = venue.staff.select_related('worker__user').order_by('-is_active', 'worker__user__username')
        serializer = VenueStaffSerializer(staff, many=True)
        return Response(serializer.data)

    @swagger_auto_schema(
        operation_description="Add a worker as staff at a venue. Re-adding a removed member reactivates them.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['worker_id'],
            properties={
                'worker_id': openapi.Schema(type=openapi.TYPE_INTEGER),
                'role': openapi.Schema(type=openapi.TYPE_STRING, nullable=True),
            },
        ),
        responses={201: VenueStaffSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, venue_id):
        venue, error = _get_owned_venue(request, venue_id)
        if error:
            return error
        serializer = VenueStaffSerializer(data=request.data, context={'request': request, 'venue': venue})
        if serializer.is_valid():
            membership = serializer.save()
            logger.info(f"Venue {venue.id} added worker {membership.worker_id} as staff")
            return Response(VenueStaffSerializer(membership).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class VenueStaffDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsVenueOwner]

    def _get_membership(self, request, venue_id, staff_id):
        venue, error = _get_owned_venue(request, venue_id)
        if error:
            return None, error
        try:
            return venue.staff.get(pk=staff_id), None
        except VenueStaff.DoesNotExist:
            return None, Response({"error": "Staff member not found"}, status=status.HTTP_404_NOT_FOUND)

    @swagger_auto_schema(
        operation_description="Update a staff member's role or active flag.",
        request_body=VenueStaffUpdateSerializer,
        responses={200: VenueStaffSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, venue_id, staff_id):
        membership, error = self._get_membership(request, venue_id, staff_id)
        if error:
            return error
        serializer = VenueStaffUpdateSerializer(membership, data=request.data, partial=True)
        if serializer.is_valid():
            membership = serializer.save()
            return Response(VenueStaffSerializer(membership).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    @swagger_auto_schema(
        operation_description="Remove a staff member. Memberships are deactivated, not deleted.",
        responses={204: 'No Content', 403: 'Forbidden', 404: 'Not Found'}
    )
    def delete(self, request, venue_id, staff_id):
        membership, error = self._get_membership(request, venue_id, staff_id)
        if error:
            return error
        membership.is_active = False
        membership.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Venue {venue_id} deactivated staff membership {membership.id}")
        return Response(status=status.HTTP_204_NO_CONTENT)
