"""
Pytest fixtures for ShiftPay tests.

Everything is built through the ORM: a venue with its owner, a worker with
an accepted job there and a second worker/venue pair for negative cases.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.invoices.models import Invoice
from apps.jobs.models import Job, JobApplication
from apps.timesheets.models import Shift
from apps.users.models import Venue, VenueStaff, Worker

User = get_user_model()

NINE_AM = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _make_owner(username, business_name):
    user = User.objects.create_user(username=username, password='pass1234', email=f'{username}@example.com')
    venue = Venue.objects.create(user=user, business_name=business_name, location='London')
    return venue


def _make_worker(username, rate='12.00'):
    user = User.objects.create_user(
        username=username, password='pass1234', email=f'{username}@example.com', first_name=username.title()
    )
    return Worker.objects.create(user=user, location='London', hourly_rate=Decimal(rate))


@pytest.fixture
def venue(db):
    return _make_owner('owner', 'The Anchor')


@pytest.fixture
def owner(venue):
    return venue.user


@pytest.fixture
def other_venue(db):
    return _make_owner('other_owner', 'The Crown')


@pytest.fixture
def worker(db):
    return _make_worker('chef')


@pytest.fixture
def other_worker(db):
    return _make_worker('sous')


@pytest.fixture
def job(venue):
    return Job.objects.create(venue=venue, title='Saturday service', pay_rate=Decimal('12.00'), status='in_progress')


@pytest.fixture
def accepted(job, worker):
    return JobApplication.objects.create(job=job, worker=worker, status='accepted')


@pytest.fixture
def staff(venue, worker, owner):
    return VenueStaff.objects.create(venue=venue, worker=worker, role='Line cook', created_by=owner)


@pytest.fixture
def make_shift(db):
    """Create a shift directly in any state, bypassing the clock-in flow."""

    def _make(worker, venue, job=None, status='submitted', hours=8, break_minutes=0, clock_in_at=NINE_AM):
        clock_out_at = None if status == 'open' else clock_in_at + timedelta(hours=hours)
        return Shift.objects.create(
            worker=worker,
            venue=venue,
            job=job,
            clock_in_at=clock_in_at,
            clock_out_at=clock_out_at,
            break_minutes=break_minutes,
            status=status,
        )

    return _make


@pytest.fixture
def make_invoice(db):
    def _make(worker, payer, job=None, status='pending', amount='96.00'):
        return Invoice.objects.create(
            worker=worker,
            payer=payer,
            job=job,
            payment_type='fixed',
            total_amount=Decimal(amount),
            status=status,
            description='Catering',
        )

    return _make


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for(api_client):
    """APIClient authenticated as the given user."""

    def _client(user):
        api_client.force_authenticate(user=user)
        return api_client

    return _client
