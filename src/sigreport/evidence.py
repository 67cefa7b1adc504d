"""Доказательства времени подписи: OCSP-ответы и штампы времени.

Отсутствующие или повреждённые доказательства дают пустую строку или None,
а не исключение.
"""

import base64
import binascii
import logging
from datetime import datetime, timezone
from typing import Optional

from cryptography import x509
from cryptography.x509 import ocsp

from sigreport.raw import RawRevocation, RawSignature, RawTimestamp

logger = logging.getLogger(__name__)


def format_time(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _load_ocsp(response_b64: Optional[str]) -> Optional[ocsp.OCSPResponse]:
    if not response_b64:
        return None
    try:
        response = ocsp.load_der_ocsp_response(base64.b64decode("".join(response_b64.split()), validate=True))
    except (ValueError, binascii.Error) as e:
        logger.debug("Cannot parse OCSP response: %s", e)
        return None
    if response.response_status != ocsp.OCSPResponseStatus.SUCCESSFUL:
        logger.debug("OCSP response status is %s", response.response_status.name)
        return None
    return response


def ocsp_nonce_imprint(revocation: Optional[RawRevocation]) -> str:
    """Nonce OCSP-ответа в base64: отпечаток для подписей с отметкой времени (TM)."""
    if revocation is None:
        return ""
    response = _load_ocsp(revocation.response)
    if response is None:
        return ""
    try:
        nonce = response.extensions.get_extension_for_class(x509.OCSPNonce).value.nonce
    except x509.ExtensionNotFound:
        return ""
    except ValueError as e:
        logger.debug("Cannot read OCSP nonce: %s", e)
        return ""
    return base64.b64encode(nonce).decode("ascii")


def ocsp_creation_time(revocation: Optional[RawRevocation]) -> Optional[datetime]:
    if revocation is None:
        return None
    if revocation.creation_time is not None:
        return revocation.creation_time
    response = _load_ocsp(revocation.response)
    if response is None:
        return None
    produced_at = getattr(response, "produced_at_utc", None)
    if produced_at is None:
        produced_at = response.produced_at.replace(tzinfo=timezone.utc)
    return produced_at


def timestamp_imprint(timestamp: Optional[RawTimestamp]) -> str:
    if timestamp is None:
        return ""
    return timestamp.message_imprint or ""


def first_revocation(signature: RawSignature) -> Optional[RawRevocation]:
    return signature.revocations[0] if signature.revocations else None


def first_timestamp(signature: RawSignature) -> Optional[RawTimestamp]:
    return signature.timestamps[0] if signature.timestamps else None
