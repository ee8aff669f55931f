"""
Error kinds raised by the discharge pipeline and the unified API
exception handler that renders them.

Services raise these directly; views never translate errors by hand.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class AuthenticationMissing(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Staff identification required'
    default_code = 'authentication_missing'


class AuthorizationDenied(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Insufficient role for this operation'
    default_code = 'authorization_denied'


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'
    default_code = 'not_found'


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict'
    default_code = 'conflict'


class InvalidInput(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input'
    default_code = 'invalid_input'


# DRF's own exceptions mapped onto the pipeline's error kinds.
_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: InvalidInput.default_code,
    status.HTTP_401_UNAUTHORIZED: AuthenticationMissing.default_code,
    status.HTTP_403_FORBIDDEN: AuthorizationDenied.default_code,
    status.HTTP_404_NOT_FOUND: NotFound.default_code,
    status.HTTP_409_CONFLICT: Conflict.default_code,
}


_FORWARDED_HEADERS = ('WWW-Authenticate', 'Retry-After')


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view').__class__.__name__, exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': 'Internal server error'}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = _STATUS_CODES.get(resp.status_code, 'api_error')
    return Response(
        {'ok': False, 'error': {'code': code, 'message': detail}},
        status=resp.status_code,
        headers={k: v for k, v in resp.items() if k in _FORWARDED_HEADERS},
    )
