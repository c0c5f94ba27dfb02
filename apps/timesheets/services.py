import logging
from datetime import timedelta
from django.db import IntegrityError, transaction
from django.utils import timezone
from apps.users.models import Venue, VenueStaff, Worker
from apps.jobs.models import JobApplication
from apps.notifications.services import notify
from core.constants import SHIFT_OPEN, SHIFT_SUBMITTED, SHIFT_ADJUDICATION_STATUSES, SHIFT_STATUS_CHOICES
from core.exceptions import (
    AlreadyClockedIn, AlreadyClosed, AuthorizationError, InvalidState, NotFoundError, ValidationError,
)
from .models import Shift
from .targets import resolve_target

logger = logging.getLogger(__name__)

ADJUDICATION_MESSAGES = {
    'approved': 'Your shift at {venue} was approved.',
    'disputed': 'Your shift at {venue} was disputed.',
    'void': 'Your shift at {venue} was voided.',
}


def get_open_shift(worker):
    return (
        Shift.objects.select_related('venue', 'job')
        .filter(worker=worker, status=SHIFT_OPEN)
        .first()
    )


def _has_open_shift(worker):
    return Shift.objects.filter(worker=worker, status=SHIFT_OPEN).exists()


def clock_in(worker, target, method='manual', now=None):
    """
    Open a shift for the worker at the venue the target resolves to.

    The worker row is locked for the duration of the check-and-create and the
    ``one_open_shift_per_worker`` constraint rejects any write that slips past
    it, so concurrent attempts yield exactly one open shift.
    """
    context = resolve_target(worker, target)
    try:
        with transaction.atomic():
            Worker.objects.select_for_update().get(pk=worker.pk)
            if _has_open_shift(worker):
                raise AlreadyClockedIn()
            shift = Shift.objects.create(
                worker=worker,
                venue=context.venue,
                job=context.job,
                clock_in_at=now or timezone.now(),
                clock_in_method=method,
                status=SHIFT_OPEN,
                break_minutes=0,
            )
    except IntegrityError:
        logger.warning(f"Concurrent clock-in rejected for worker {worker.id}")
        raise AlreadyClockedIn()
    except AlreadyClockedIn:
        logger.warning(f"Worker {worker.id} tried to clock in with a shift already open")
        raise

    logger.info(f"Worker {worker.id} clocked in at venue {context.venue.id} (shift {shift.id}, {method})")
    return shift


def clock_out(shift_id, worker, break_minutes=0, worker_note='', method='manual', now=None):
    break_minutes = break_minutes or 0
    if break_minutes < 0:
        raise ValidationError('Break minutes cannot be negative.')

    with transaction.atomic():
        try:
            shift = Shift.objects.select_for_update().get(pk=shift_id)
        except Shift.DoesNotExist:
            raise NotFoundError('Shift not found.')
        if shift.worker_id != worker.pk:
            raise AuthorizationError('Not your shift.')
        if not shift.is_open:
            raise AlreadyClosed()

        clock_out_at = now or timezone.now()
        if timedelta(minutes=break_minutes) > clock_out_at - shift.clock_in_at:
            raise ValidationError('Break cannot be longer than the shift.')

        shift.clock_out_at = clock_out_at
        shift.break_minutes = break_minutes
        shift.clock_out_method = method
        if worker_note:
            shift.worker_note = worker_note
        shift.status = SHIFT_SUBMITTED
        shift.save()

    logger.info(f"Worker {worker.id} clocked out of shift {shift.id} ({method})")
    return shift


def adjudicate_shift(shift_id, actor, status, venue_note=''):
    """Record the venue's decision on a submitted shift and tell the worker."""
    if status not in SHIFT_ADJUDICATION_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(SHIFT_ADJUDICATION_STATUSES)}.")

    with transaction.atomic():
        try:
            shift = Shift.objects.select_for_update().select_related('venue', 'worker__user').get(pk=shift_id)
        except Shift.DoesNotExist:
            raise NotFoundError('Shift not found.')
        if not shift.venue.is_owned_by(actor):
            raise AuthorizationError('Not authorized to update this shift.')
        if not shift.can_transition_to(status):
            logger.warning(f"Rejected shift {shift.id} transition {shift.status} -> {status}")
            raise InvalidState('Can only approve, dispute or void submitted shifts.')

        shift.status = status
        if venue_note:
            shift.venue_note = venue_note
        shift.adjudicated_by = actor
        shift.adjudicated_at = timezone.now()
        shift.save()

        notify(
            shift.worker.user,
            f'shift_{status}',
            f'Shift {status}',
            ADJUDICATION_MESSAGES[status].format(venue=shift.venue.business_name),
            entity=shift,
            meta={'venue_id': shift.venue_id, 'venue_note': shift.venue_note},
        )

    logger.info(f"Shift {shift.id} marked {status} by user {actor.id}")
    return shift


def worker_shifts(worker, date_from=None, date_to=None, venue_id=None, job_id=None):
    shifts = Shift.objects.select_related('venue', 'job').filter(worker=worker)
    if date_from:
        shifts = shifts.filter(clock_in_at__gte=date_from)
    if date_to:
        shifts = shifts.filter(clock_in_at__lte=date_to)
    if venue_id:
        shifts = shifts.filter(venue_id=venue_id)
    if job_id:
        shifts = shifts.filter(job_id=job_id)
    return shifts


def venue_shifts(venue_id, actor, status=None, date_from=None, date_to=None):
    try:
        venue = Venue.objects.get(pk=venue_id)
    except Venue.DoesNotExist:
        raise NotFoundError('Venue not found.')
    if not venue.is_owned_by(actor):
        raise AuthorizationError("Not authorized to view this venue's shifts.")

    shifts = Shift.objects.select_related('worker__user', 'job').filter(venue=venue)
    if status:
        if status not in dict(SHIFT_STATUS_CHOICES):
            raise ValidationError(f"Unknown shift status: {status}.")
        shifts = shifts.filter(status=status)
    if date_from:
        shifts = shifts.filter(clock_in_at__gte=date_from)
    if date_to:
        shifts = shifts.filter(clock_in_at__lte=date_to)
    return shifts


def clock_in_targets(worker):
    """Accepted engagements and active staff memberships the worker may clock in against."""
    return {
        'jobs': JobApplication.objects.select_related('job__venue__user')
        .filter(worker=worker, status='accepted'),
        'venues': VenueStaff.objects.select_related('venue__user')
        .filter(worker=worker, is_active=True),
    }
