"""
AWS Lambda handler exposing the RSVP API through API Gateway.

One endpoint, two operations:
- status (GET, or POST {"operationName": "status"})
- addGuestRSVP (POST {"operationName": "addGuestRSVP", "variables": {...}})

Responses use a {"data": ...} / {"errors": [...]} envelope. Thin adapter:
all submission logic lives in SubmissionHandler.
"""

import base64
import json
import logging
import os
from typing import Any, Dict

from domain.models import AttendanceStatus, RSVPInput
from domain.submission import ConfigurationError, DeliveryError, SubmissionHandler
from integrations import mail_sender
import settings

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter('%(levelname)s - %(name)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

ENVIRONMENT = os.environ.get('ENVIRONMENT', 'dev')

STATUS_MESSAGE = 'RSVP API is running.'

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'GET,POST,OPTIONS',
}

RSVP_VARIABLES = ('name', 'email', 'phoneNumber', 'attendanceStatus')


class InvalidRequestError(Exception):
    """Raised when the request body does not match an operation's contract."""
    pass


# Initialize once at module level (reused across invocations)
server_config = settings.load_server_config()
mail_settings = settings.load_mail_settings()
submission_handler = SubmissionHandler(
    config=server_config,
    mail_sender=mail_sender.create_mail_sender(server_config, mail_settings)
)


def status() -> str:
    """Health probe: fixed message, no side effects."""
    return STATUS_MESSAGE


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    headers = {'Content-Type': 'application/json'}
    headers.update(CORS_HEADERS)
    return {
        'statusCode': status_code,
        'headers': headers,
        'body': json.dumps(body)
    }


def _error_response(status_code: int, message: str, code: str) -> Dict[str, Any]:
    return _response(status_code, {
        'errors': [{'message': message, 'extensions': {'code': code}}]
    })


def _http_method(event: Dict[str, Any]) -> str:
    # REST API (v1) or HTTP API (v2) payload
    method = event.get('httpMethod') or (
        event.get('requestContext', {}).get('http', {}).get('method')
    )
    return (method or 'POST').upper()


def _parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Decode the JSON request body.

    Raises:
        InvalidRequestError: If the body is missing, undecodable or not an object
    """
    raw_body = event.get('body')
    if not raw_body:
        raise InvalidRequestError("Request body is required")

    try:
        if event.get('isBase64Encoded'):
            raw_body = base64.b64decode(raw_body).decode('utf-8')
        body = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidRequestError(f"Request body is not valid JSON: {e}")

    if not isinstance(body, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return body


def _parse_rsvp(variables: Any) -> RSVPInput:
    """
    Build an RSVPInput from addGuestRSVP variables.

    Checks presence and types only; email and phone formats pass through.

    Raises:
        InvalidRequestError: If a variable is missing, not a string, or invalid
    """
    if not isinstance(variables, dict):
        raise InvalidRequestError("addGuestRSVP requires a 'variables' object")

    for name in RSVP_VARIABLES:
        if not isinstance(variables.get(name), str):
            raise InvalidRequestError(
                f"Variable '{name}' of required type String! was not provided."
            )

    if not variables['name']:
        raise InvalidRequestError("Variable 'name' must not be empty.")

    try:
        attendance_status = AttendanceStatus(variables['attendanceStatus'])
    except ValueError:
        allowed = ', '.join(s.value for s in AttendanceStatus)
        raise InvalidRequestError(
            f"Variable 'attendanceStatus' got invalid value "
            f"'{variables['attendanceStatus']}'; expected one of {allowed}."
        )

    return RSVPInput(
        name=variables['name'],
        email=variables['email'],
        phone_number=variables['phoneNumber'],
        attendance_status=attendance_status
    )


def add_guest_rsvp(variables: Any) -> Dict[str, Any]:
    """
    Run the addGuestRSVP mutation.

    Returns:
        GuestConfirmation as a dict

    Raises:
        InvalidRequestError, ConfigurationError, DeliveryError
    """
    rsvp = _parse_rsvp(variables)
    logger.info(f"Received RSVP: name={rsvp.name}, status={rsvp.attendance_status.value}")
    return submission_handler.submit_rsvp(rsvp).to_dict()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Route an API Gateway proxy event to status or addGuestRSVP.

    Args:
        event: API Gateway proxy event
        context: Lambda context

    Returns:
        API Gateway proxy response
    """
    method = _http_method(event)
    logger.info(f"Environment: {ENVIRONMENT}, method: {method}")

    if method == 'OPTIONS':
        return {'statusCode': 204, 'headers': dict(CORS_HEADERS), 'body': ''}

    if method == 'GET':
        return _response(200, {'data': {'status': status()}})

    try:
        body = _parse_body(event)
        operation = body.get('operationName')

        if operation == 'status':
            return _response(200, {'data': {'status': status()}})

        if operation == 'addGuestRSVP':
            confirmation = add_guest_rsvp(body.get('variables'))
            return _response(200, {'data': {'addGuestRSVP': confirmation}})

        raise InvalidRequestError(f"Unknown operation: {operation!r}")

    except InvalidRequestError as e:
        logger.warning(f"Invalid request: {e}")
        return _error_response(400, str(e), 'BAD_REQUEST')

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return _error_response(500, str(e), 'CONFIGURATION_ERROR')

    except DeliveryError as e:
        logger.error(f"Delivery error: {e}")
        return _error_response(502, str(e), 'DELIVERY_ERROR')

    except Exception as e:
        logger.error(f"Error handling request: {str(e)}", exc_info=True)
        return _error_response(500, 'Internal server error', 'INTERNAL_SERVER_ERROR')


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    return {
        'statusCode': 200,
        'body': json.dumps({
            'status': 'healthy',
            'message': status(),
            'environment': ENVIRONMENT,
            'mailConfigured': server_config.is_complete
        })
    }
