"""Clock-in targets.

A worker clocks in either against an engagement (a job they were accepted
on) or as standing staff of a venue. Both are resolved to one
``ClockInContext`` before a shift is opened.
"""
from dataclasses import dataclass
from typing import Optional

from apps.users.models import Venue, Worker
from apps.jobs.models import Job
from core.exceptions import InvalidTarget, Unauthorized


@dataclass(frozen=True)
class EngagementTarget:
    job_id: int


@dataclass(frozen=True)
class StaffTarget:
    venue_id: int


@dataclass(frozen=True)
class ClockInContext:
    worker: Worker
    venue: Venue
    job: Optional[Job] = None


def resolve_target(worker, target):
    if isinstance(target, EngagementTarget):
        try:
            job = Job.objects.select_related('venue').get(pk=target.job_id)
        except Job.DoesNotExist:
            raise InvalidTarget('Job not found.')
        if not job.has_accepted_worker(worker):
            raise Unauthorized('You are not accepted for this job.')
        return ClockInContext(worker=worker, venue=job.venue, job=job)

    if isinstance(target, StaffTarget):
        try:
            venue = Venue.objects.get(pk=target.venue_id)
        except Venue.DoesNotExist:
            raise InvalidTarget('Venue not found.')
        if not venue.has_active_staff(worker):
            raise Unauthorized('You are not staff at this venue. Please clock in via a job.')
        return ClockInContext(worker=worker, venue=venue)

    raise InvalidTarget()
