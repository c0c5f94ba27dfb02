from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.contrib.auth import get_user_model
from core.utils import IsVenueOwner, IsWorker, int_query_param
from core.exceptions import NotFoundError, ValidationError
from apps.jobs.models import Job
from .serializers import InvoiceSerializer, InvoiceCreateSerializer
from . import services
import logging

User = get_user_model()
logger = logging.getLogger(__name__)


class InvoiceCreateView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description=(
            "Create an invoice. With shift_id the approved shift is billed at hourly_rate; "
            "otherwise a fixed manual invoice is addressed to payer_id."
        ),
        request_body=InvoiceCreateSerializer,
        responses={201: InvoiceSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found', 409: 'Conflict'}
    )
    def post(self, request):
        serializer = InvoiceCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        worker = request.user.worker
        if data.get('shift_id'):
            invoice = services.create_from_shift(
                data['shift_id'], worker, data.get('hourly_rate'), notes=data['notes']
            )
        else:
            try:
                payer = User.objects.get(pk=data['payer_id'])
            except User.DoesNotExist:
                raise NotFoundError('Payer not found.')
            job = None
            if data.get('job_id'):
                try:
                    job = Job.objects.get(pk=data['job_id'])
                except Job.DoesNotExist:
                    raise NotFoundError('Job not found.')
            invoice = services.create_manual(
                worker, payer, data['description'], data['amount'], job=job, notes=data['notes']
            )

        return Response({
            'message': 'Invoice submitted successfully',
            'data': InvoiceSerializer(invoice).data,
        }, status=status.HTTP_201_CREATED)


class MyInvoicesView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(responses={200: InvoiceSerializer(many=True)})
    def get(self, request):
        invoices = services.worker_invoices(request.user.worker)
        return Response(InvoiceSerializer(invoices, many=True).data)


class PayerInvoicesView(APIView):
    permission_classes = [IsAuthenticated, IsVenueOwner]

    @swagger_auto_schema(responses={200: InvoiceSerializer(many=True)})
    def get(self, request):
        invoices = services.payer_invoices(request.user)
        return Response(InvoiceSerializer(invoices, many=True).data)


class InvoiceCheckView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Whether a worker has already invoiced a job.",
        manual_parameters=[
            openapi.Parameter('job_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=True),
            openapi.Parameter('worker_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER,
                              description="Defaults to the authenticated worker"),
        ],
        responses={200: 'exists flag and invoice', 400: 'Bad Request'}
    )
    def get(self, request):
        job_id = int_query_param(request, 'job_id')
        worker_id = int_query_param(request, 'worker_id')
        if not worker_id and request.user.is_worker:
            worker_id = request.user.worker.id
        if not job_id or not worker_id:
            raise ValidationError('job_id and worker_id are required.')

        result = services.check_invoice(job_id, worker_id)
        invoice = result['invoice']
        if invoice is not None and not invoice.involves(request.user):
            invoice = None
        return Response({
            'exists': result['exists'],
            'invoice': InvoiceSerializer(invoice).data if invoice else None,
        })


class InvoiceDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(responses={200: InvoiceSerializer, 403: 'Forbidden', 404: 'Invoice not found'})
    def get(self, request, invoice_id):
        invoice = services.get_invoice(invoice_id, request.user)
        return Response(InvoiceSerializer(invoice).data)


class InvoiceProcessingView(APIView):
    permission_classes = [IsAuthenticated, IsVenueOwner]

    @swagger_auto_schema(
        operation_description="Record that payment of the invoice has been initiated.",
        responses={200: InvoiceSerializer, 403: 'Forbidden', 404: 'Invoice not found', 409: 'Invoice already paid'}
    )
    def post(self, request, invoice_id):
        invoice = services.transition_processing(invoice_id, actor=request.user)
        return Response(InvoiceSerializer(invoice).data)


class InvoiceMarkPaidView(APIView):
    permission_classes = [IsAuthenticated, IsVenueOwner]

    @swagger_auto_schema(
        operation_description="Mark the invoice as paid. Repeating the call on a paid invoice is a no-op.",
        responses={200: InvoiceSerializer, 403: 'Forbidden', 404: 'Invoice not found'}
    )
    def put(self, request, invoice_id):
        invoice = services.mark_paid(invoice_id, request.user)
        return Response(InvoiceSerializer(invoice).data)
