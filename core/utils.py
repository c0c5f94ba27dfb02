import logging

from rest_framework import permissions
from rest_framework.views import exception_handler

from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class IsVenueOwner(permissions.BasePermission):
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return hasattr(request.user, 'venue')


class IsWorker(permissions.BasePermission):
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return hasattr(request.user, 'worker')


def int_query_param(request, name, required=False):
    """Read an integer query parameter, raising ``ValidationError`` if it is malformed."""
    value = request.query_params.get(name)
    if not value:
        if required:
            raise ValidationError(f"{name} is required.")
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer.")


def api_exception_handler(exc, context):
    """Render API errors as ``{"error": ..., "code": ...}``.

    Serializer field errors (dicts keyed by field) are passed through
    unchanged so clients still see per-field messages.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = getattr(exc, 'detail', None)
    if isinstance(detail, dict):
        return response
    if isinstance(detail, list):
        detail = detail[0] if detail else ''

    code = getattr(detail, 'code', None) or getattr(exc, 'default_code', 'error')
    response.data = {'error': str(detail), 'code': code}
    if response.status_code >= 500:
        logger.error(f"Unhandled API error in {context.get('view').__class__.__name__}: {detail}")
    return response
