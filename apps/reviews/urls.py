from django.urls import path
from .views import (
    ReviewCreateView, ReviewCheckView, CanReviewView, RecipientReviewsView, GivenReviewsView,
    PendingReviewsView, ReviewSummaryView,
)

urlpatterns = [
    path('', ReviewCreateView.as_view(), name='review_create'),
    path('check/', ReviewCheckView.as_view(), name='review_check'),
    path('can-review/', CanReviewView.as_view(), name='review_can_review'),
    path('recipient/<int:user_id>/', RecipientReviewsView.as_view(), name='reviews_for_recipient'),
    path('given/', GivenReviewsView.as_view(), name='reviews_given'),
    path('pending/', PendingReviewsView.as_view(), name='reviews_pending'),
    path('summary/<int:user_id>/', ReviewSummaryView.as_view(), name='review_summary'),
]
