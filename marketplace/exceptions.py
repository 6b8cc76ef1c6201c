"""
Coded API failures and the REST framework exception handler.

Every error response has the shape:

    {"success": false, "error": {"code": "...", "message": "...", "details": {...}}}

Anything the handler does not recognise is logged and reported as INTERNAL
without leaking the underlying error text.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: 'VALIDATION',
    status.HTTP_401_UNAUTHORIZED: 'UNAUTHORIZED',
    status.HTTP_403_FORBIDDEN: 'FORBIDDEN',
    status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
    status.HTTP_409_CONFLICT: 'CONFLICT',
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: 'VALIDATION',
    status.HTTP_429_TOO_MANY_REQUESTS: 'TOO_MANY_REQUESTS',
}


class Conflict(APIException):
    """Duplicate unique key, illegal state transition or a lost update race."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with the current state of the resource.'
    default_code = 'conflict'


class Unauthorized(APIException):
    """Bad credentials. The message never says which credential was wrong."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid email or password'
    default_code = 'unauthorized'


def _split_payload(data):
    """Turn DRF's error payload into a (message, details) pair."""
    if isinstance(data, dict):
        if 'detail' in data:
            # simplejwt adds 'code' and 'messages' next to 'detail'
            extra = {key: value for key, value in data.items() if key != 'detail'}
            return str(data['detail']), (extra or None)
        return 'Invalid input.', data
    if isinstance(data, list):
        return (str(data[0]) if data else 'Invalid input.'), data
    return str(data), None


def marketplace_exception_handler(exc, context):
    """
    Render every failure as a coded error envelope.

    Django model ValidationErrors are treated like serializer errors.
    Unrecognised exceptions are logged with their traceback and surfaced as
    INTERNAL with a generic message.
    """
    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(detail=as_serializer_error(exc))

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        view_name = view.__class__.__name__ if view else 'unknown view'
        logger.error(
            f"Unhandled error in {view_name}: {exc.__class__.__name__}",
            exc_info=(type(exc), exc, exc.__traceback__)
        )
        set_rollback()
        return Response(
            {
                'success': False,
                'error': {
                    'code': 'INTERNAL',
                    'message': 'An unexpected error occurred.',
                },
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    message, details = _split_payload(response.data)
    error = {
        'code': ERROR_CODES.get(response.status_code, 'INTERNAL'),
        'message': message,
    }
    if details is not None:
        error['details'] = details

    response.data = {'success': False, 'error': error}
    return response
