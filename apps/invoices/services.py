import logging
from decimal import Decimal, InvalidOperation
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import IntegrityError, transaction
from django.utils import timezone
from apps.notifications.services import notify
from apps.timesheets.earnings import earnings, round_money, worked_hours
from apps.timesheets.models import Shift
from apps.users.models import VenueStaff
from core.constants import (
    INVOICE_PENDING, INVOICE_PROCESSING, INVOICE_PAID, MANUAL_INVOICE_POLICIES, SHIFT_APPROVED,
)
from core.exceptions import (
    AuthorizationError, InvalidState, InvoiceConflict, MissingRate, NotFoundError, ValidationError,
)
from .models import Invoice

logger = logging.getLogger(__name__)


def _positive_amount(value, name):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{name} must be a number.")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{name} must be greater than zero.")
    return amount


def _submitted(invoice):
    worker_name = invoice.worker.user.display_name
    notify(
        invoice.payer,
        'invoice_submitted',
        'New invoice received',
        f"{worker_name} submitted an invoice for {invoice.total_amount:.2f}.",
        entity=invoice,
        meta={'amount': str(invoice.total_amount), 'worker_id': invoice.worker_id},
    )


def create_from_shift(shift_id, worker, hourly_rate, notes=''):
    """Bill an approved shift at the given hourly rate. A shift is billed once."""
    with transaction.atomic():
        try:
            shift = Shift.objects.select_for_update().select_related('venue__user').get(pk=shift_id)
        except Shift.DoesNotExist:
            raise NotFoundError('Shift not found.')
        if shift.worker_id != worker.pk:
            raise AuthorizationError('Not your shift.')
        if hourly_rate is None or hourly_rate == '':
            raise MissingRate()
        rate = round_money(_positive_amount(hourly_rate, "Hourly rate"))
        if shift.status != SHIFT_APPROVED:
            logger.warning(f"Refused to invoice shift {shift.id} in status {shift.status}")
            raise InvalidState('Only approved shifts can be invoiced.')
        if Invoice.objects.filter(shift=shift).exists():
            raise InvoiceConflict()

        # Hours are stored rounded for display; the total is billed on exact hours
        hours = round_money(worked_hours(shift))
        try:
            with transaction.atomic():
                invoice = Invoice.objects.create(
                    worker=worker,
                    payer=shift.venue.user,
                    job=shift.job,
                    shift=shift,
                    payment_type='hourly',
                    hours_worked=hours,
                    rate_per_hour=rate,
                    total_amount=earnings(shift, rate),
                    status=INVOICE_PENDING,
                    notes=notes or '',
                )
        except IntegrityError:
            raise InvoiceConflict()
        _submitted(invoice)

    logger.info(f"Invoice {invoice.id} created from shift {shift.id}: {hours}h x {rate} = {invoice.total_amount}")
    return invoice


def _is_engaged(worker, venue):
    if VenueStaff.objects.filter(venue=venue, worker=worker, is_active=True).exists():
        return True
    return worker.applications.filter(job__venue=venue, status='accepted').exists()


def create_manual(worker, payer, description, amount, job=None, notes=''):
    """
    Create a fixed-amount invoice outside the shift workflow.

    Who may be billed is governed by ``MANUAL_INVOICE_POLICY``: ``open`` lets a
    worker bill any venue owner, ``engaged`` only venues they are staff at or
    have an accepted job with, ``disabled`` turns manual invoices off.
    """
    policy = settings.MANUAL_INVOICE_POLICY
    if policy not in MANUAL_INVOICE_POLICIES:
        raise ImproperlyConfigured(f"MANUAL_INVOICE_POLICY must be one of {MANUAL_INVOICE_POLICIES}, got {policy!r}")
    if policy == 'disabled':
        raise AuthorizationError('Manual invoices are disabled.')
    if not payer.is_venue_owner:
        raise ValidationError('Invoices can only be addressed to a venue.')
    if not (description or '').strip():
        raise ValidationError('A description is required for manual invoices.')
    total = round_money(_positive_amount(amount, 'Amount'))

    venue = payer.venue
    if job is not None:
        if job.venue_id != venue.pk:
            raise ValidationError('Job does not belong to this venue.')
        if not job.has_accepted_worker(worker):
            raise AuthorizationError('You are not accepted for this job.')
    elif policy == 'engaged' and not _is_engaged(worker, venue):
        logger.warning(f"Worker {worker.id} tried to bill venue {venue.id} without an engagement")
        raise AuthorizationError('You have not worked with this venue.')

    with transaction.atomic():
        invoice = Invoice.objects.create(
            worker=worker,
            payer=payer,
            job=job,
            payment_type='fixed',
            total_amount=total,
            status=INVOICE_PENDING,
            description=description.strip(),
            notes=notes or '',
        )
        _submitted(invoice)

    logger.info(f"Manual invoice {invoice.id} created by worker {worker.id} for {total}")
    return invoice


def _locked_invoice(invoice_id):
    try:
        return Invoice.objects.select_for_update().select_related('worker__user', 'payer').get(pk=invoice_id)
    except Invoice.DoesNotExist:
        raise NotFoundError('Invoice not found.')


def transition_processing(invoice_id, actor=None):
    """Record that an external payment has been started for the invoice."""
    with transaction.atomic():
        invoice = _locked_invoice(invoice_id)
        if actor is not None and invoice.payer_id != actor.id:
            raise AuthorizationError('Only the payer can start a payment.')
        if invoice.status == INVOICE_PROCESSING:
            return invoice
        if not invoice.can_transition_to(INVOICE_PROCESSING):
            raise InvalidState('Invoice is already paid.')
        invoice.status = INVOICE_PROCESSING
        invoice.processing_at = timezone.now()
        invoice.save(update_fields=['status', 'processing_at', 'updated_at'])

    logger.info(f"Invoice {invoice.id} is processing")
    return invoice


def mark_paid(invoice_id, actor):
    """
    Mark the invoice paid. Only the payer may do this.

    Calling it again on a paid invoice returns the invoice unchanged, so
    retried requests never fail.
    """
    with transaction.atomic():
        invoice = _locked_invoice(invoice_id)
        if invoice.payer_id != actor.id:
            raise AuthorizationError('Only the payer can mark this invoice as paid.')
        if invoice.is_paid:
            logger.info(f"Invoice {invoice.id} already paid; nothing to do")
            return invoice

        invoice.status = INVOICE_PAID
        invoice.paid_at = timezone.now()
        invoice.save(update_fields=['status', 'paid_at', 'updated_at'])

        payer_name = actor.display_name
        notify(
            invoice.worker.user,
            'invoice_paid',
            'Invoice paid',
            f"{payer_name} marked your invoice as paid for {invoice.total_amount:.2f}.",
            entity=invoice,
            meta={'amount': str(invoice.total_amount), 'payer_name': payer_name},
        )

    logger.info(f"Invoice {invoice.id} marked paid by user {actor.id}")
    return invoice


def worker_invoices(worker):
    return Invoice.objects.select_related('payer', 'job', 'shift').filter(worker=worker)


def payer_invoices(payer):
    return Invoice.objects.select_related('worker__user', 'job', 'shift').filter(payer=payer)


def get_invoice(invoice_id, actor):
    try:
        invoice = Invoice.objects.select_related('worker__user', 'payer', 'job', 'shift').get(pk=invoice_id)
    except Invoice.DoesNotExist:
        raise NotFoundError('Invoice not found.')
    if not invoice.involves(actor):
        raise AuthorizationError('Not authorized to view this invoice.')
    return invoice


def check_invoice(job_id, worker_id):
    """Whether the worker has already invoiced the job."""
    invoice = Invoice.objects.filter(job_id=job_id, worker_id=worker_id).first()
    return {'exists': invoice is not None, 'invoice': invoice}
