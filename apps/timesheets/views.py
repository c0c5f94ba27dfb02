from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from datetime import datetime, time
from core.utils import IsVenueOwner, IsWorker, int_query_param
from core.exceptions import AuthorizationError, ValidationError
from apps.users.models import Venue
from .serializers import (
    ShiftSerializer, VenueShiftSerializer, ClockInSerializer, ClockOutSerializer, ShiftStatusSerializer,
    ClockInTargetsSerializer, QrGenerateSerializer, QrValidateSerializer,
)
from .targets import EngagementTarget, StaffTarget
from . import qr, services
import logging

logger = logging.getLogger(__name__)

date_params = [
    openapi.Parameter('from_date', openapi.IN_QUERY, type=openapi.TYPE_STRING, description="ISO date or datetime"),
    openapi.Parameter('to_date', openapi.IN_QUERY, type=openapi.TYPE_STRING, description="ISO date or datetime"),
]


def _date_param(request, name, end_of_day=False):
    value = request.query_params.get(name)
    if not value:
        return None
    try:
        day = parse_date(value)
        parsed = parse_datetime(value) if day is None else datetime.combine(day, time.max if end_of_day else time.min)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"Invalid {name}: {value}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _venue_payload(venue):
    return {'id': venue.id, 'name': venue.business_name, 'location': venue.location}


class ClockInView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Clock in against an accepted job (job_id) or as venue staff (venue_id).",
        request_body=ClockInSerializer,
        responses={201: ShiftSerializer, 400: 'Bad Request', 403: 'Forbidden', 409: 'Already clocked in'}
    )
    def post(self, request):
        serializer = ClockInSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        if data.get('job_id'):
            target = EngagementTarget(job_id=data['job_id'])
        else:
            target = StaffTarget(venue_id=data['venue_id'])
        shift = services.clock_in(request.user.worker, target, method=data['method'])
        return Response({
            'shift': ShiftSerializer(shift).data,
            'venue': _venue_payload(shift.venue),
        }, status=status.HTTP_201_CREATED)


class ClockOutView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        request_body=ClockOutSerializer,
        responses={200: ShiftSerializer, 400: 'Bad Request', 403: 'Not your shift', 404: 'Shift not found', 409: 'Shift is not open'}
    )
    def post(self, request):
        serializer = ClockOutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        shift = services.clock_out(
            data['shift_id'],
            request.user.worker,
            break_minutes=data['break_minutes'],
            worker_note=data['worker_note'],
            method=data['method'],
        )
        return Response({'shift': ShiftSerializer(shift).data})


class OpenShiftView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(responses={200: ShiftSerializer})
    def get(self, request):
        shift = services.get_open_shift(request.user.worker)
        if shift is None:
            return Response({'shift': None})
        return Response({
            'shift': ShiftSerializer(shift).data,
            'venue': _venue_payload(shift.venue),
        })


class MyShiftsView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        manual_parameters=date_params + [
            openapi.Parameter('venue_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('job_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ],
        responses={200: ShiftSerializer(many=True)}
    )
    def get(self, request):
        shifts = services.worker_shifts(
            request.user.worker,
            date_from=_date_param(request, 'from_date'),
            date_to=_date_param(request, 'to_date', end_of_day=True),
            venue_id=int_query_param(request, 'venue_id'),
            job_id=int_query_param(request, 'job_id'),
        )
        return Response(ShiftSerializer(shifts, many=True).data)


class VenueShiftsView(APIView):
    permission_classes = [IsAuthenticated, IsVenueOwner]

    @swagger_auto_schema(
        manual_parameters=date_params + [
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
        ],
        responses={200: VenueShiftSerializer(many=True), 403: 'Forbidden', 404: 'Venue not found'}
    )
    def get(self, request, venue_id):
        shifts = services.venue_shifts(
            venue_id,
            request.user,
            status=request.query_params.get('status'),
            date_from=_date_param(request, 'from_date'),
            date_to=_date_param(request, 'to_date', end_of_day=True),
        )
        return Response(VenueShiftSerializer(shifts, many=True).data)


class ShiftStatusView(APIView):
    permission_classes = [IsAuthenticated, IsVenueOwner]

    @swagger_auto_schema(
        operation_description="Approve, dispute or void a submitted shift (venue owner only).",
        request_body=ShiftStatusSerializer,
        responses={200: ShiftSerializer, 403: 'Forbidden', 404: 'Shift not found', 409: 'Shift not submitted'}
    )
    def patch(self, request, shift_id):
        serializer = ShiftStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        shift = services.adjudicate_shift(
            shift_id,
            request.user,
            serializer.validated_data['status'],
            venue_note=serializer.validated_data['venue_note'],
        )
        return Response({'shift': ShiftSerializer(shift).data})


class ClockInTargetsView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Accepted jobs and staff venues the worker can clock in at.",
        responses={200: ClockInTargetsSerializer}
    )
    def get(self, request):
        targets = services.clock_in_targets(request.user.worker)
        return Response(ClockInTargetsSerializer(targets).data)


class QrGenerateView(APIView):
    permission_classes = [IsAuthenticated, IsVenueOwner]

    @swagger_auto_schema(
        operation_description="Issue a short-lived QR token for a venue (venue owner only).",
        request_body=QrGenerateSerializer,
        responses={201: 'Token issued', 403: 'Forbidden', 404: 'Venue not found'}
    )
    def post(self, request):
        serializer = QrGenerateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        venue = get_object_or_404(Venue, pk=serializer.validated_data['venue_id'])
        if not venue.is_owned_by(request.user):
            raise AuthorizationError('Not authorized to generate QR codes for this venue.')

        issued = qr.issue_token(venue, ttl=serializer.validated_data.get('ttl'))
        return Response({
            'token': issued.token,
            'venue_id': issued.venue_id,
            'venue_name': venue.business_name,
            'issued_at': issued.issued_at,
            'expires_at': issued.expires_at,
        }, status=status.HTTP_201_CREATED)


class QrValidateView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Scan a venue QR code: clocks in, or out if already clocked in at that venue.",
        request_body=QrValidateSerializer,
        responses={200: 'Clocked out', 201: 'Clocked in', 400: 'Invalid QR code', 409: 'Open shift elsewhere', 410: 'QR code expired'}
    )
    def post(self, request):
        serializer = QrValidateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = qr.validate(serializer.validated_data['token'], request.user.worker)
        verb = 'Clocked in at' if result.action == qr.CLOCK_IN else 'Clocked out at'
        return Response({
            'action': result.action,
            'message': f"{verb} {result.venue.business_name}",
            'shift': ShiftSerializer(result.shift).data,
            'venue': _venue_payload(result.venue),
        }, status=status.HTTP_201_CREATED if result.action == qr.CLOCK_IN else status.HTTP_200_OK)
