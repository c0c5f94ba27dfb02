"""Tests for the shift session manager: clock-in, clock-out and adjudication."""

import importlib
import threading
import warnings
from datetime import timedelta
from unittest import mock

import pytest
from django.db import IntegrityError, connection, transaction
from django.utils.deprecation import RemovedInDjango60Warning

from apps.notifications.models import Notification
from apps.timesheets import services
from apps.timesheets.models import Shift
from apps.timesheets.targets import ClockInContext, EngagementTarget, StaffTarget, resolve_target
from core.exceptions import (
    AlreadyClockedIn,
    AlreadyClosed,
    AuthorizationError,
    InvalidState,
    InvalidTarget,
    NotFoundError,
    Unauthorized,
    ValidationError,
)

from tests.conftest import NINE_AM


# ---------------------------------------------------------------------------
# Target resolution
# ---------------------------------------------------------------------------


class TestResolveTarget:
    def test_engagement_resolves_to_job_venue(self, worker, job, accepted):
        context = resolve_target(worker, EngagementTarget(job.id))
        assert context == ClockInContext(worker=worker, venue=job.venue, job=job)

    def test_staff_resolves_to_venue_without_job(self, worker, venue, staff):
        context = resolve_target(worker, StaffTarget(venue.id))
        assert context.venue == venue
        assert context.job is None

    def test_unknown_job_is_invalid(self, worker, db):
        with pytest.raises(InvalidTarget):
            resolve_target(worker, EngagementTarget(9999))

    def test_unknown_venue_is_invalid(self, worker, db):
        with pytest.raises(InvalidTarget):
            resolve_target(worker, StaffTarget(9999))

    def test_pending_application_is_unauthorized(self, worker, job):
        job.applications.create(worker=worker, status='pending')
        with pytest.raises(Unauthorized):
            resolve_target(worker, EngagementTarget(job.id))

    def test_inactive_staff_is_unauthorized(self, worker, venue, staff):
        staff.is_active = False
        staff.save()
        with pytest.raises(Unauthorized):
            resolve_target(worker, StaffTarget(venue.id))

    def test_untagged_target_is_invalid(self, worker):
        with pytest.raises(InvalidTarget):
            resolve_target(worker, {'venue_id': 1})


# ---------------------------------------------------------------------------
# Clock-in
# ---------------------------------------------------------------------------


class TestClockIn:
    def test_clock_in_against_engagement(self, worker, job, accepted):
        shift = services.clock_in(worker, EngagementTarget(job.id), now=NINE_AM)

        assert shift.status == 'open'
        assert shift.venue == job.venue
        assert shift.job == job
        assert shift.clock_in_at == NINE_AM
        assert shift.clock_out_at is None
        assert shift.break_minutes == 0
        assert shift.clock_in_method == 'manual'

    def test_clock_in_as_staff(self, worker, venue, staff):
        shift = services.clock_in(worker, StaffTarget(venue.id), method='qr')
        assert shift.job is None
        assert shift.clock_in_method == 'qr'

    def test_second_clock_in_fails_and_keeps_original(self, worker, venue, staff, job, accepted):
        """A worker already on the clock cannot open another shift."""
        original = services.clock_in(worker, StaffTarget(venue.id), now=NINE_AM)

        with pytest.raises(AlreadyClockedIn):
            services.clock_in(worker, EngagementTarget(job.id))

        original.refresh_from_db()
        assert original.status == 'open'
        assert original.clock_in_at == NINE_AM
        assert Shift.objects.filter(worker=worker, status='open').count() == 1

    def test_constraint_rejects_write_that_skips_the_check(self, worker, venue, staff):
        """The database constraint still holds if the existence check is raced."""
        services.clock_in(worker, StaffTarget(venue.id))

        with mock.patch.object(services, '_has_open_shift', return_value=False):
            with pytest.raises(AlreadyClockedIn):
                services.clock_in(worker, StaffTarget(venue.id))

        assert Shift.objects.filter(worker=worker, status='open').count() == 1

    def test_other_workers_are_independent(self, worker, other_worker, venue, staff, owner):
        venue.staff.create(worker=other_worker, created_by=owner)
        services.clock_in(worker, StaffTarget(venue.id))
        services.clock_in(other_worker, StaffTarget(venue.id))
        assert Shift.objects.filter(status='open').count() == 2

    def test_can_clock_in_again_after_clock_out(self, worker, venue, staff):
        first = services.clock_in(worker, StaffTarget(venue.id), now=NINE_AM)
        services.clock_out(first.id, worker, now=NINE_AM + timedelta(hours=2))
        second = services.clock_in(worker, StaffTarget(venue.id), now=NINE_AM + timedelta(hours=3))
        assert second.id != first.id
        assert second.status == 'open'


class TestShiftConstraints:
    def test_database_allows_one_open_shift_per_worker(self, worker, venue, make_shift):
        make_shift(worker, venue, status='open')
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                make_shift(worker, venue, status='open')

    def test_closed_shifts_do_not_count(self, worker, venue, make_shift):
        make_shift(worker, venue, status='submitted')
        make_shift(worker, venue, status='approved')
        make_shift(worker, venue, status='open')
        assert Shift.objects.filter(worker=worker).count() == 3

    def test_open_shift_cannot_have_clock_out(self, worker, venue):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Shift.objects.create(
                    worker=worker, venue=venue, clock_in_at=NINE_AM,
                    clock_out_at=NINE_AM + timedelta(hours=1), status='open',
                )

    def test_closed_shift_needs_clock_out(self, worker, venue):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Shift.objects.create(worker=worker, venue=venue, clock_in_at=NINE_AM, status='submitted')

    @pytest.mark.parametrize('module', [
        'apps.timesheets.migrations.0001_initial',
        'apps.reviews.migrations.0001_initial',
    ])
    def test_check_constraints_declared_with_condition(self, module):
        with warnings.catch_warnings():
            warnings.simplefilter('error', RemovedInDjango60Warning)
            importlib.reload(importlib.import_module(module))


@pytest.mark.django_db(transaction=True)
@pytest.mark.concurrency
@pytest.mark.skipif(
    connection.vendor == 'sqlite',
    reason="SQLite has no row locks; run with a MySQL or PostgreSQL DATABASE_URL",
)
class TestConcurrentClockIn:
    def test_parallel_clock_ins_yield_one_shift(self, worker, venue, staff):
        """Simultaneous attempts for one worker: exactly one succeeds."""
        attempts = 5
        barrier = threading.Barrier(attempts)
        results = []

        def attempt():
            try:
                barrier.wait()
                services.clock_in(worker, StaffTarget(venue.id))
                results.append('ok')
            except AlreadyClockedIn:
                results.append('conflict')
            finally:
                connection.close()

        threads = [threading.Thread(target=attempt) for _ in range(attempts)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count('ok') == 1
        assert results.count('conflict') == attempts - 1
        assert Shift.objects.filter(worker=worker, status='open').count() == 1


# ---------------------------------------------------------------------------
# Clock-out
# ---------------------------------------------------------------------------


class TestClockOut:
    def test_clock_out_submits_shift(self, worker, venue, staff):
        shift = services.clock_in(worker, StaffTarget(venue.id), now=NINE_AM)
        closed = services.clock_out(
            shift.id, worker, break_minutes=30, worker_note='Covered the bar', now=NINE_AM + timedelta(hours=8)
        )

        assert closed.status == 'submitted'
        assert closed.clock_out_at == NINE_AM + timedelta(hours=8)
        assert closed.break_minutes == 30
        assert closed.worker_note == 'Covered the bar'
        assert closed.clock_out_method == 'manual'
        assert services.get_open_shift(worker) is None

    def test_unknown_shift(self, worker, db):
        with pytest.raises(NotFoundError):
            services.clock_out(9999, worker)

    def test_someone_elses_shift(self, worker, other_worker, venue, make_shift):
        shift = make_shift(worker, venue, status='open')
        with pytest.raises(AuthorizationError):
            services.clock_out(shift.id, other_worker)

    def test_already_closed(self, worker, venue, make_shift):
        shift = make_shift(worker, venue, status='submitted')
        with pytest.raises(AlreadyClosed):
            services.clock_out(shift.id, worker)

    def test_break_longer_than_shift(self, worker, venue, make_shift):
        shift = make_shift(worker, venue, status='open', clock_in_at=NINE_AM)
        with pytest.raises(ValidationError):
            services.clock_out(shift.id, worker, break_minutes=61, now=NINE_AM + timedelta(hours=1))
        shift.refresh_from_db()
        assert shift.status == 'open'

    def test_negative_break(self, worker, venue, make_shift):
        shift = make_shift(worker, venue, status='open')
        with pytest.raises(ValidationError):
            services.clock_out(shift.id, worker, break_minutes=-5)


class TestGetOpenShift:
    def test_none_when_not_clocked_in(self, worker, venue, make_shift):
        make_shift(worker, venue, status='submitted')
        assert services.get_open_shift(worker) is None

    def test_returns_open_shift(self, worker, venue, make_shift):
        shift = make_shift(worker, venue, status='open')
        assert services.get_open_shift(worker) == shift


# ---------------------------------------------------------------------------
# Adjudication
# ---------------------------------------------------------------------------


class TestAdjudicateShift:
    @pytest.mark.parametrize('outcome', ['approved', 'disputed', 'void'])
    def test_owner_decides_submitted_shift(self, worker, venue, owner, make_shift, outcome):
        shift = make_shift(worker, venue, status='submitted')
        updated = services.adjudicate_shift(shift.id, owner, outcome, venue_note='Checked the rota')

        assert updated.status == outcome
        assert updated.venue_note == 'Checked the rota'
        assert updated.adjudicated_by == owner
        assert updated.adjudicated_at is not None

    def test_worker_is_notified(self, worker, venue, owner, make_shift, django_capture_on_commit_callbacks, mailoutbox):
        shift = make_shift(worker, venue, status='submitted')
        with django_capture_on_commit_callbacks(execute=True):
            services.adjudicate_shift(shift.id, owner, 'approved')

        notification = Notification.objects.get(recipient=worker.user)
        assert notification.type == 'shift_approved'
        assert notification.entity_type == 'shift'
        assert notification.entity_id == shift.id
        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == [worker.user.email]

    def test_only_venue_owner(self, worker, venue, other_venue, make_shift):
        shift = make_shift(worker, venue, status='submitted')
        with pytest.raises(AuthorizationError):
            services.adjudicate_shift(shift.id, other_venue.user, 'approved')

    def test_open_shift_cannot_be_adjudicated(self, worker, venue, owner, make_shift):
        shift = make_shift(worker, venue, status='open')
        with pytest.raises(InvalidState):
            services.adjudicate_shift(shift.id, owner, 'approved')

    def test_decisions_are_final(self, worker, venue, owner, make_shift):
        shift = make_shift(worker, venue, status='approved')
        with pytest.raises(InvalidState):
            services.adjudicate_shift(shift.id, owner, 'void')

    def test_unknown_outcome(self, worker, venue, owner, make_shift):
        shift = make_shift(worker, venue, status='submitted')
        with pytest.raises(ValidationError):
            services.adjudicate_shift(shift.id, owner, 'open')

    def test_unknown_shift(self, owner):
        with pytest.raises(NotFoundError):
            services.adjudicate_shift(9999, owner, 'approved')


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TestShiftLists:
    def test_worker_history_filters(self, worker, venue, other_venue, job, make_shift):
        monday = make_shift(worker, venue, job=job, clock_in_at=NINE_AM)
        make_shift(worker, other_venue, clock_in_at=NINE_AM + timedelta(days=1))

        assert list(services.worker_shifts(worker, venue_id=venue.id)) == [monday]
        assert list(services.worker_shifts(worker, job_id=job.id)) == [monday]
        assert services.worker_shifts(worker, date_from=NINE_AM + timedelta(hours=12)).count() == 1
        assert services.worker_shifts(worker).count() == 2

    def test_venue_list_for_owner(self, worker, other_worker, venue, owner, make_shift):
        make_shift(worker, venue, status='submitted')
        make_shift(other_worker, venue, status='approved')

        assert services.venue_shifts(venue.id, owner).count() == 2
        assert services.venue_shifts(venue.id, owner, status='approved').count() == 1

    def test_venue_list_other_owner(self, venue, other_venue):
        with pytest.raises(AuthorizationError):
            services.venue_shifts(venue.id, other_venue.user)

    def test_venue_list_bad_status(self, venue, owner):
        with pytest.raises(ValidationError):
            services.venue_shifts(venue.id, owner, status='lost')

    def test_clock_in_targets(self, worker, venue, staff, job, accepted, other_venue, owner):
        other_venue.staff.create(worker=worker, is_active=False, created_by=owner)
        targets = services.clock_in_targets(worker)
        assert [application.job for application in targets['jobs']] == [job]
        assert [membership.venue for membership in targets['venues']] == [venue]
