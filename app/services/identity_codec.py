# app/services/identity_codec.py
"""
Identity payload codec — the JSON text embedded in each person's QR code.

Wire format: {"id", "name", "enrollmentNo"?, "timestamp"} as UTF-8 JSON.
Decoding never raises anything but DecodeError: scanners feed arbitrary
text through here, including codes that were never ours.
"""

import json
from pydantic import ValidationError as PydanticValidationError
from app.errors import DecodeError
from app.schemas.identity import IdentityPayload
from app.utils.clock import utcnow
from app.utils.json_parser import safe_parse_json, looks_like_json_object
from app.utils.logger import get_logger

logger = get_logger(__name__)


def build_payload(person) -> IdentityPayload:
    """Person record (ORM row or schema) → payload model."""
    return IdentityPayload(
        id=person.id,
        name=person.name,
        enrollmentNo=person.enrollment_no or None,
        timestamp=utcnow().isoformat() + "Z",
    )


def encode_payload(person) -> str:
    payload = build_payload(person)
    return json.dumps(payload.model_dump(exclude_none=True), ensure_ascii=False)


def decode_payload(raw_text) -> IdentityPayload:
    if not isinstance(raw_text, (str, bytes)) or (
        isinstance(raw_text, str) and not looks_like_json_object(raw_text)
    ):
        raise DecodeError(DecodeError.MALFORMED_JSON, "Scanned code is not a JSON object")

    data = safe_parse_json(raw_text)
    if not isinstance(data, dict):
        raise DecodeError(DecodeError.MALFORMED_JSON, "Scanned code is not a JSON object")

    try:
        return IdentityPayload.model_validate(data)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        logger.debug(f"Rejected identity payload, bad fields: {fields}")
        raise DecodeError(
            DecodeError.SCHEMA_INVALID,
            f"Not a valid person code (missing or invalid: {', '.join(fields) or 'payload'})",
        ) from None
