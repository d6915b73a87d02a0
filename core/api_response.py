"""
core/api_response.py   /api/v3 Response Envelope
==================================================
Every v3 response body has the same shape:

    {"status": {"code": "bad-request", "message": "..."}, "response": {}}

Errors get their status code slug from STATUS_CODES; in debug mode the
stack of the failed request is attached as `stack`.
"""

import logging

from flask import current_app

from core.validators import ApiEnvelopeSchema

logger = logging.getLogger(__name__)

STATUS_CODES = {
    200: ('ok', 'OK'),
    400: ('bad-request', 'Something was wrong with the request payload you passed in.'),
    401: ('not-authorised', 'A valid login session was not found. Please log in and try again.'),
    403: ('forbidden', 'You are not authorised to make this call'),
    404: ('not-found', 'Invalid API call'),
    426: ('upgrade-required', 'HTTPS is required for requests to the write api, please re-send your request via HTTPS'),
    429: ('too-many-requests', 'You have made too many requests, please try again later'),
    500: ('internal-server-error', 'Something went wrong while processing this request'),
    501: ('not-implemented', 'This route is not implemented yet'),
    503: ('service-unavailable', 'This service is currently unavailable'),
}

_envelope = ApiEnvelopeSchema()


def generate_error(status_code: int, message: str | None = None) -> dict:
    code, default_message = STATUS_CODES.get(status_code, STATUS_CODES[500])
    return {'status': {'code': code, 'message': message or default_message}, 'response': {}}


def format_api_response(status_code: int, writer, payload=None):
    """Write a v3 envelope for `payload` (an ErrorContext, a dict, or None)."""
    if payload is None or isinstance(payload, dict):
        code, message = STATUS_CODES.get(status_code, STATUS_CODES[200])
        body = {'status': {'code': code, 'message': message}, 'response': payload or {}}
        return writer.status(status_code).json(_envelope.dump(body))

    body = generate_error(status_code, payload.message)
    if current_app.debug and payload.stack:
        body['stack'] = payload.stack
        logger.debug(payload.stack)
    return writer.status(status_code).json(_envelope.dump(body))
