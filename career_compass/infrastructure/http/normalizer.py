"""
Response normalizer - turns raw responses into ResponseEnvelopes or typed errors.
"""

from __future__ import annotations
import json
from typing import Any, Dict, Optional

from ...domain.interfaces.transport import RawResponse
from ...domain.models.envelope import ResponseEnvelope, coerce_errors
from ...domain.models.errors import api_error_for_status


def decode_body(response: RawResponse) -> Optional[Dict[str, Any]]:
    """Decode the body as a JSON object; None when it is not one."""
    try:
        payload = json.loads(response.content)
    except (ValueError, TypeError):
        return None
    return payload if isinstance(payload, dict) else None


def normalize_response(response: RawResponse) -> ResponseEnvelope:
    """Return the envelope for a 2xx response, raise ApiError otherwise."""
    payload = decode_body(response)
    status = response.status_code

    if not 200 <= status < 300:
        if payload is None:
            payload = ResponseEnvelope.invalid_format().to_dict()
        message = payload.get('message') or f"HTTP {status}: {response.reason_phrase}"
        errors = payload.get('errors')
        raise api_error_for_status(
            status,
            str(message),
            coerce_errors(errors) if isinstance(errors, dict) else None,
        )

    if payload is None:
        return ResponseEnvelope.invalid_format()
    return ResponseEnvelope.from_payload(payload)
