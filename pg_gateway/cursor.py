"""Opaque pagination cursor.

A cursor is ``base64url_nopad(utf8("<epoch-millis>:<payment_id>"))`` for the
last item of a page. This module is the only place that knows the layout.
"""

import base64
import binascii
from datetime import datetime, timedelta, timezone

_DELIMITER = ":"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


def _is_digits(value: str) -> bool:
    return value.isascii() and value.isdigit()


def encode_cursor(created_at: datetime | None, payment_id: int | None) -> str | None:
    """Encode the resume point of a page; ``None`` if either part is missing.

    Naive datetimes are taken to be UTC.
    """
    if created_at is None or payment_id is None:
        return None
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    millis = (created_at - _EPOCH) // _MILLISECOND
    raw = f"{millis}{_DELIMITER}{payment_id}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str | None) -> tuple[datetime | None, int | None]:
    """Decode a cursor into ``(created_at, payment_id)``.

    Empty or malformed tokens decode to ``(None, None)`` so the query falls
    back to the first page.
    """
    if token is None or not token.strip():
        return None, None
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True).decode("utf-8")
        parts = raw.split(_DELIMITER)
        if len(parts) != 2 or not all(_is_digits(part) for part in parts):
            return None, None
        millis = int(parts[0])
        payment_id = int(parts[1])
        created_at = _EPOCH + millis * _MILLISECOND
    except (ValueError, UnicodeError, binascii.Error, OverflowError):
        return None, None
    return created_at, payment_id
