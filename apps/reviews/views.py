from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.contrib.auth import get_user_model
from core.exceptions import NotFoundError
from core.utils import int_query_param
from .models import Review
from .serializers import ReviewSerializer, ReviewCreateSerializer, PendingReviewSerializer
from . import services
import logging

User = get_user_model()
logger = logging.getLogger(__name__)

job_param = openapi.Parameter('job_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=True)


class ReviewCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Review the other party of a paid engagement. One review per job per reviewer.",
        request_body=ReviewCreateSerializer,
        responses={201: ReviewSerializer, 400: 'Bad Request', 403: 'No paid invoice', 409: 'Already reviewed'}
    )
    def post(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            recipient = User.objects.get(pk=data['recipient_id'])
        except User.DoesNotExist:
            raise NotFoundError('Recipient not found.')
        review = services.submit_review(data['job_id'], request.user, recipient, data['rating'], data['text'])
        return Response({
            'message': 'Review submitted successfully',
            'review': ReviewSerializer(review).data,
        }, status=status.HTTP_201_CREATED)


class ReviewCheckView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(manual_parameters=[job_param], responses={200: 'exists flag and review'})
    def get(self, request):
        job_id = int_query_param(request, 'job_id', required=True)
        result = services.check_eligibility(job_id, request.user)
        review = None
        if result['exists']:
            review = ReviewSerializer(Review.objects.get(job_id=job_id, reviewer=request.user)).data
        return Response({'exists': result['exists'], 'review': review})


class CanReviewView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        manual_parameters=[
            job_param,
            openapi.Parameter('recipient_id', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=True),
        ],
        responses={200: 'can_review flag'}
    )
    def get(self, request):
        job_id = int_query_param(request, 'job_id', required=True)
        recipient_id = int_query_param(request, 'recipient_id', required=True)
        try:
            recipient = User.objects.get(pk=recipient_id)
        except User.DoesNotExist:
            raise NotFoundError('Recipient not found.')
        return Response({'can_review': services.can_review(job_id, request.user, recipient)})


class RecipientReviewsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(responses={200: ReviewSerializer(many=True)})
    def get(self, request, user_id):
        reviews = services.reviews_for_recipient(user_id)
        return Response(ReviewSerializer(reviews, many=True).data)


class GivenReviewsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(responses={200: ReviewSerializer(many=True)})
    def get(self, request):
        reviews = services.reviews_given(request.user)
        return Response(ReviewSerializer(reviews, many=True).data)


class PendingReviewsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Paid engagements the authenticated user has not reviewed yet.",
        responses={200: PendingReviewSerializer(many=True)}
    )
    def get(self, request):
        pending = services.pending_reviews(request.user)
        return Response(PendingReviewSerializer(pending, many=True).data)


class ReviewSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(responses={200: 'average rating, count and star breakdown', 404: 'User not found'})
    def get(self, request, user_id):
        return Response(services.rating_summary(user_id))
