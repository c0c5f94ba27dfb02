"""Error taxonomy for the shift, invoice and review workflows.

Every error is a DRF ``APIException`` so services can raise them directly and
views let the framework render them (see ``core.utils.api_exception_handler``).
"""
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError  # noqa: F401


class InvalidTarget(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Clock-in target could not be resolved.'
    default_code = 'invalid_target'


class MissingRate(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'An hourly rate is required to bill a shift.'
    default_code = 'missing_rate'


class InvalidToken(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid QR code.'
    default_code = 'invalid_token'


class AuthorizationError(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not allowed to perform this action.'
    default_code = 'forbidden'


class Unauthorized(AuthorizationError):
    default_detail = 'You are not authorized to clock in at this venue.'
    default_code = 'unauthorized'


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class StateConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with the current state.'
    default_code = 'state_conflict'


class AlreadyClockedIn(StateConflict):
    default_detail = 'You already have an open shift. Please clock out first.'
    default_code = 'already_clocked_in'


class AlreadyClosed(StateConflict):
    default_detail = 'Shift is not open.'
    default_code = 'already_closed'


class InvalidState(StateConflict):
    default_detail = 'Operation not allowed in the current state.'
    default_code = 'invalid_state'


class ShiftConflict(StateConflict):
    default_detail = 'You have an open shift at another venue. Please clock out there first.'
    default_code = 'conflict'


class InvoiceConflict(StateConflict):
    default_detail = 'An invoice already exists for this shift.'
    default_code = 'conflict'


class ReviewConflict(StateConflict):
    default_detail = 'Review already submitted for this engagement.'
    default_code = 'conflict'


class ExpiredToken(APIException):
    status_code = status.HTTP_410_GONE
    default_detail = 'QR code has expired.'
    default_code = 'expired'
