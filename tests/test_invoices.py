"""Tests for invoice generation and the payment lifecycle."""

from decimal import Decimal

import pytest

from apps.invoices import services
from apps.invoices.models import Invoice
from apps.notifications.models import Notification
from apps.timesheets.earnings import earnings
from core.exceptions import (
    AuthorizationError,
    InvalidState,
    InvoiceConflict,
    MissingRate,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
def approved_shift(worker, venue, job, make_shift):
    # 09:00 to 17:00 with a 30 minute break
    return make_shift(worker, venue, job=job, status='approved', hours=8, break_minutes=30)


class TestCreateFromShift:
    def test_bills_worked_hours(self, worker, owner, job, approved_shift):
        invoice = services.create_from_shift(approved_shift.id, worker, Decimal('12.00'), notes='Thanks')

        assert invoice.status == 'pending'
        assert invoice.payment_type == 'hourly'
        assert invoice.payer == owner
        assert invoice.job == job
        assert invoice.shift == approved_shift
        assert invoice.hours_worked == Decimal('7.50')
        assert invoice.rate_per_hour == Decimal('12.00')
        assert invoice.total_amount == Decimal('90.00')
        assert invoice.notes == 'Thanks'

    def test_total_matches_shift_earnings(self, worker, venue, make_shift):
        """2h40m at 13.37 bills 35.65 on the exact hours, not 2.67h x 13.37."""
        shift = make_shift(worker, venue, status='approved', hours=3, break_minutes=20)
        invoice = services.create_from_shift(shift.id, worker, '13.37')
        assert invoice.hours_worked == Decimal('2.67')
        assert invoice.total_amount == earnings(shift, Decimal('13.37'))
        assert invoice.total_amount == Decimal('35.65')

    def test_payer_is_notified(self, worker, owner, approved_shift):
        services.create_from_shift(approved_shift.id, worker, Decimal('12.00'))
        notification = Notification.objects.get(recipient=owner)
        assert notification.type == 'invoice_submitted'
        assert '90.00' in notification.body

    @pytest.mark.parametrize('status', ['submitted', 'disputed', 'void'])
    def test_only_approved_shifts(self, worker, venue, make_shift, status):
        shift = make_shift(worker, venue, status=status)
        with pytest.raises(InvalidState):
            services.create_from_shift(shift.id, worker, Decimal('12.00'))
        assert not Invoice.objects.exists()

    @pytest.mark.parametrize('rate', [None, ''])
    def test_missing_rate(self, worker, approved_shift, rate):
        with pytest.raises(MissingRate):
            services.create_from_shift(approved_shift.id, worker, rate)

    @pytest.mark.parametrize('rate', ['0', '-4', 'abc'])
    def test_bad_rate(self, worker, approved_shift, rate):
        with pytest.raises(ValidationError):
            services.create_from_shift(approved_shift.id, worker, rate)

    def test_shift_billed_once(self, worker, approved_shift):
        services.create_from_shift(approved_shift.id, worker, Decimal('12.00'))
        with pytest.raises(InvoiceConflict):
            services.create_from_shift(approved_shift.id, worker, Decimal('15.00'))
        assert Invoice.objects.count() == 1

    def test_someone_elses_shift(self, other_worker, approved_shift):
        with pytest.raises(AuthorizationError):
            services.create_from_shift(approved_shift.id, other_worker, Decimal('12.00'))

    def test_unknown_shift(self, worker):
        with pytest.raises(NotFoundError):
            services.create_from_shift(9999, worker, Decimal('12.00'))


class TestCreateManual:
    def test_engaged_worker_can_bill_venue(self, worker, owner, staff):
        invoice = services.create_manual(worker, owner, 'Menu consultation', '150')

        assert invoice.payment_type == 'fixed'
        assert invoice.shift is None
        assert invoice.total_amount == Decimal('150.00')
        assert invoice.hours_worked is None
        assert invoice.status == 'pending'

    def test_accepted_job_counts_as_engagement(self, worker, owner, accepted):
        invoice = services.create_manual(worker, owner, 'Extra prep', '40.5')
        assert invoice.total_amount == Decimal('40.50')

    def test_linked_to_job(self, worker, owner, job, accepted):
        invoice = services.create_manual(worker, owner, 'Extra prep', '40', job=job)
        assert invoice.job == job

    def test_unengaged_worker_rejected(self, worker, owner):
        with pytest.raises(AuthorizationError):
            services.create_manual(worker, owner, 'Cold call', '100')

    def test_open_policy_allows_any_venue(self, worker, owner, settings):
        settings.MANUAL_INVOICE_POLICY = 'open'
        invoice = services.create_manual(worker, owner, 'Cold call', '100')
        assert invoice.payer == owner

    def test_disabled_policy(self, worker, owner, staff, settings):
        settings.MANUAL_INVOICE_POLICY = 'disabled'
        with pytest.raises(AuthorizationError):
            services.create_manual(worker, owner, 'Menu consultation', '150')

    def test_payer_must_be_a_venue(self, worker, other_worker, settings):
        settings.MANUAL_INVOICE_POLICY = 'open'
        with pytest.raises(ValidationError):
            services.create_manual(worker, other_worker.user, 'Swap', '10')

    def test_job_from_another_venue(self, worker, owner, staff, other_venue):
        foreign_job = other_venue.jobs.create(title='Brunch')
        with pytest.raises(ValidationError):
            services.create_manual(worker, owner, 'Brunch', '10', job=foreign_job)

    def test_job_without_acceptance(self, worker, owner, staff, job):
        with pytest.raises(AuthorizationError):
            services.create_manual(worker, owner, 'Brunch', '10', job=job)

    @pytest.mark.parametrize('description,amount', [('', '10'), ('Prep', '0'), ('Prep', '-1')])
    def test_bad_input(self, worker, owner, staff, description, amount):
        with pytest.raises(ValidationError):
            services.create_manual(worker, owner, description, amount)


class TestPaymentLifecycle:
    def test_mark_paid_is_idempotent(self, worker, owner, make_invoice):
        """First call pays the invoice, the second returns it unchanged."""
        invoice = make_invoice(worker, owner)

        first = services.mark_paid(invoice.id, owner)
        second = services.mark_paid(invoice.id, owner)

        assert first.status == 'paid'
        assert second.status == 'paid'
        assert second.id == first.id
        assert second.paid_at == first.paid_at

    def test_worker_notified_once(self, worker, owner, make_invoice):
        invoice = make_invoice(worker, owner)
        services.mark_paid(invoice.id, owner)
        services.mark_paid(invoice.id, owner)
        assert Notification.objects.filter(recipient=worker.user, type='invoice_paid').count() == 1

    def test_only_payer_can_mark_paid(self, worker, owner, other_venue, make_invoice):
        invoice = make_invoice(worker, owner)
        with pytest.raises(AuthorizationError):
            services.mark_paid(invoice.id, other_venue.user)
        with pytest.raises(AuthorizationError):
            services.mark_paid(invoice.id, worker.user)
        invoice.refresh_from_db()
        assert invoice.status == 'pending'

    def test_processing_then_paid(self, worker, owner, make_invoice):
        invoice = make_invoice(worker, owner)

        processing = services.transition_processing(invoice.id)
        assert processing.status == 'processing'
        assert processing.processing_at is not None

        paid = services.mark_paid(invoice.id, owner)
        assert paid.status == 'paid'

    def test_processing_is_repeatable(self, worker, owner, make_invoice):
        invoice = make_invoice(worker, owner)
        first = services.transition_processing(invoice.id)
        second = services.transition_processing(invoice.id)
        assert second.processing_at == first.processing_at

    def test_paid_never_regresses(self, worker, owner, make_invoice):
        invoice = make_invoice(worker, owner, status='paid')
        with pytest.raises(InvalidState):
            services.transition_processing(invoice.id)
        invoice.refresh_from_db()
        assert invoice.status == 'paid'

    def test_processing_by_payer_only(self, worker, owner, other_venue, make_invoice):
        invoice = make_invoice(worker, owner)
        with pytest.raises(AuthorizationError):
            services.transition_processing(invoice.id, actor=other_venue.user)

    def test_unknown_invoice(self, owner):
        with pytest.raises(NotFoundError):
            services.mark_paid(9999, owner)


class TestInvoiceReads:
    def test_lists_by_party(self, worker, other_worker, owner, make_invoice):
        mine = make_invoice(worker, owner)
        make_invoice(other_worker, owner)

        assert list(services.worker_invoices(worker)) == [mine]
        assert services.payer_invoices(owner).count() == 2

    def test_detail_limited_to_parties(self, worker, other_worker, owner, make_invoice):
        invoice = make_invoice(worker, owner)
        assert services.get_invoice(invoice.id, worker.user) == invoice
        assert services.get_invoice(invoice.id, owner) == invoice
        with pytest.raises(AuthorizationError):
            services.get_invoice(invoice.id, other_worker.user)

    def test_check_invoice(self, worker, owner, job, make_invoice):
        assert services.check_invoice(job.id, worker.id) == {'exists': False, 'invoice': None}
        invoice = make_invoice(worker, owner, job=job)
        assert services.check_invoice(job.id, worker.id) == {'exists': True, 'invoice': invoice}
