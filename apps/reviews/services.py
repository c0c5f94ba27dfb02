import logging
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q
from apps.invoices.models import Invoice
from apps.jobs.models import Job
from core.constants import INVOICE_PAID
from core.exceptions import AuthorizationError, NotFoundError, ReviewConflict, ValidationError
from .models import Review

User = get_user_model()
logger = logging.getLogger(__name__)


def _paid_invoices(job_id, reviewer, recipient):
    """Paid invoices on the job between the two parties, in either direction."""
    return Invoice.objects.select_related('worker').filter(job_id=job_id, status=INVOICE_PAID).filter(
        Q(worker__user=reviewer, payer=recipient) | Q(worker__user=recipient, payer=reviewer)
    )


def check_eligibility(job_id, reviewer):
    return {'exists': Review.objects.filter(job_id=job_id, reviewer=reviewer).exists()}


def can_review(job_id, reviewer, recipient):
    if Review.objects.filter(job_id=job_id, reviewer=reviewer).exists():
        return False
    return _paid_invoices(job_id, reviewer, recipient).exists()


def submit_review(job_id, reviewer, recipient, rating, text=''):
    """
    Record a review once a paid invoice on the job links reviewer and recipient.

    The (job, reviewer) unique constraint settles racing submissions.
    """
    if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
        raise ValidationError('Rating must be a whole number from 1 to 5.')
    if reviewer.pk == recipient.pk:
        raise ValidationError('You cannot review yourself.')
    if not Job.objects.filter(pk=job_id).exists():
        raise NotFoundError('Job not found.')
    if Review.objects.filter(job_id=job_id, reviewer=reviewer).exists():
        raise ReviewConflict()

    invoice = _paid_invoices(job_id, reviewer, recipient).first()
    if invoice is None:
        logger.warning(f"User {reviewer.id} tried to review user {recipient.id} on job {job_id} without a paid invoice")
        raise AuthorizationError('Reviews require a paid invoice for this job.')
    recipient_type = 'worker' if invoice.worker.user_id == recipient.pk else 'venue'

    try:
        with transaction.atomic():
            review = Review.objects.create(
                job_id=job_id,
                reviewer=reviewer,
                recipient=recipient,
                recipient_type=recipient_type,
                rating=rating,
                text=text or '',
            )
    except IntegrityError:
        raise ReviewConflict()

    logger.info(f"User {reviewer.id} reviewed user {recipient.id} on job {job_id} ({rating} stars)")
    return review


def reviews_for_recipient(user_id):
    return Review.objects.select_related('reviewer', 'job').filter(recipient_id=user_id)


def reviews_given(user):
    return Review.objects.select_related('recipient', 'job').filter(reviewer=user)


def pending_reviews(user):
    """Paid engagements where the user has not yet reviewed the other party."""
    reviewed_jobs = set(Review.objects.filter(reviewer=user).values_list('job_id', flat=True))
    invoices = (
        Invoice.objects.select_related('job', 'payer', 'worker__user')
        .filter(status=INVOICE_PAID, job__isnull=False)
        .filter(Q(worker__user=user) | Q(payer=user))
        .order_by('-paid_at')
    )

    pending = []
    for invoice in invoices:
        if invoice.job_id in reviewed_jobs:
            continue
        reviewed_jobs.add(invoice.job_id)
        if invoice.payer_id == user.id:
            recipient, recipient_type = invoice.worker.user, 'worker'
        else:
            recipient, recipient_type = invoice.payer, 'venue'
        pending.append({
            'job': invoice.job,
            'recipient': recipient,
            'recipient_type': recipient_type,
            'invoice_id': invoice.id,
            'paid_at': invoice.paid_at,
        })
    return pending


def rating_summary(user_id):
    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFoundError('User not found.')
    return user.get_rating_stats()
