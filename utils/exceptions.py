# ==================== UTILS/EXCEPTIONS.PY ====================
import logging

from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework import status

logger = logging.getLogger(__name__)


class BookingConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Parking spot is already booked for the selected time period.'
    default_code = 'booking_conflict'


class SpotUnavailable(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Parking spot is not available.'
    default_code = 'spot_unavailable'


class InvalidBookingState(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Booking cannot be changed in its current status.'
    default_code = 'invalid_booking_state'


class SpotStatusConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Parking spot status conflicts with its active bookings.'
    default_code = 'spot_status_conflict'


class PaymentVerificationFailed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Payment verification failed.'
    default_code = 'payment_verification_failed'

    def __init__(self, detail=None, code=None, provider_response=None):
        super().__init__(detail, code)
        self.provider_response = provider_response


def flatten_errors(detail, field=None):
    """Turn DRF's nested error detail into a flat list of {field, message, code}."""
    errors = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            name = key if field is None else f'{field}.{key}'
            if key == 'non_field_errors':
                name = field
            errors.extend(flatten_errors(value, name))
    elif isinstance(detail, list):
        for item in detail:
            errors.extend(flatten_errors(item, field))
    else:
        errors.append({
            'field': field,
            'message': str(detail),
            'code': getattr(detail, 'code', None),
        })
    return errors


def envelope_exception_handler(exc, context):
    """Render every error as {success: false, message, data: null, errors?}."""
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=exc
        )
        return Response(
            {'success': False, 'message': 'Something went wrong on the server', 'data': None},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, ValidationError):
        errors = flatten_errors(exc.detail)
        if any(error['code'] == 'unique' for error in errors):
            response.status_code = status.HTTP_409_CONFLICT
        message = errors[0]['message'] if len(errors) == 1 else 'Validation failed'
        response.data = {
            'success': False,
            'message': message,
            'data': None,
            'errors': [{'field': e['field'], 'message': e['message']} for e in errors],
        }
        return response

    data = response.data
    if isinstance(data, dict) and 'detail' in data:
        message = str(data['detail'])
    else:
        message = str(exc)

    body = {'success': False, 'message': message, 'data': None}
    provider_response = getattr(exc, 'provider_response', None)
    if provider_response is not None:
        body['data'] = {'provider_response': provider_response}
    response.data = body
    return response
