"""Signed, time-limited venue QR codes.

A token is ``django.core.signing`` output over ``{"v": venue_id, "iat": ...,
"exp": ...}`` (epoch seconds). Scanning one clocks the worker in at that
venue, or out again if their open shift is already there.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Optional

from django.conf import settings
from django.core import signing
from django.utils import timezone

from apps.users.models import Venue
from core.exceptions import ExpiredToken, InvalidToken, ShiftConflict
from .models import Shift
from .services import clock_in, clock_out, get_open_shift
from .targets import StaffTarget

logger = logging.getLogger(__name__)

CLOCK_IN = 'clock_in'
CLOCK_OUT = 'clock_out'


@dataclass(frozen=True)
class QrToken:
    token: str
    venue_id: int
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class QrScanResult:
    action: str
    venue: Venue
    shift: Optional[Shift]


def _from_epoch(value):
    return datetime.fromtimestamp(value, tz=dt_timezone.utc)


def issue_token(venue, ttl=None, now=None):
    ttl = settings.QR_TOKEN_TTL_SECONDS if ttl is None else ttl
    issued_at = int((now or timezone.now()).timestamp())
    expires_at = issued_at + int(ttl)
    token = signing.dumps(
        {'v': venue.pk, 'iat': issued_at, 'exp': expires_at},
        salt=settings.QR_TOKEN_SALT,
    )
    logger.info(f"Issued QR token for venue {venue.pk} valid for {ttl}s")
    return QrToken(token=token, venue_id=venue.pk, issued_at=_from_epoch(issued_at), expires_at=_from_epoch(expires_at))


def decode_token(token, now=None):
    try:
        payload = signing.loads(token, salt=settings.QR_TOKEN_SALT)
    except signing.BadSignature:
        logger.warning("Rejected QR token with a bad signature")
        raise InvalidToken()

    if not isinstance(payload, dict) or not all(isinstance(payload.get(key), int) for key in ('v', 'iat', 'exp')):
        raise InvalidToken()

    if (now or timezone.now()).timestamp() >= payload['exp']:
        raise ExpiredToken()
    return payload


def validate(token, worker, now=None):
    """
    Decide what a scan means for the worker and perform it.

    Expired or forged tokens are rejected before the worker's shifts are
    looked at. A scan at a venue other than the one the worker is clocked in
    at is refused; the worker has to clock out there first.
    """
    payload = decode_token(token, now=now)
    try:
        venue = Venue.objects.get(pk=payload['v'])
    except Venue.DoesNotExist:
        raise InvalidToken('QR code refers to an unknown venue.')

    open_shift = get_open_shift(worker)
    if open_shift is None:
        shift = clock_in(worker, StaffTarget(venue.pk), method='qr', now=now)
        return QrScanResult(action=CLOCK_IN, venue=venue, shift=shift)

    if open_shift.venue_id == venue.pk:
        shift = clock_out(open_shift.pk, worker, method='qr', now=now)
        return QrScanResult(action=CLOCK_OUT, venue=venue, shift=shift)

    logger.warning(f"Worker {worker.id} scanned venue {venue.pk} while clocked in at venue {open_shift.venue_id}")
    raise ShiftConflict(
        f"You have an open shift at {open_shift.venue.business_name}. Please clock out there first."
    )
