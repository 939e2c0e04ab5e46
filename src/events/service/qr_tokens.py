"""Check-in token issuance and QR rendering."""

import base64
import secrets
import string
import time
from io import BytesIO

import qrcode

QR_TOKEN_PREFIX = "EVT"
QR_TOKEN_RANDOM_BYTES = 10  # 80 bits of entropy

_BASE36_ALPHABET = string.digits + string.ascii_uppercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def issue() -> str:
    """Issue a new opaque check-in token.

    The token is ``EVT-<base36 milliseconds>-<base32 random>``. It carries no
    attendee data, only a time component and 80 random bits from the OS CSPRNG,
    and is made of uppercase letters, digits and dashes so it is safe in URLs and
    QR payloads.

    If the randomness source is unavailable the error propagates so the calling
    registration fails instead of issuing a weak token.
    """
    timestamp = _to_base36(time.time_ns() // 1_000_000)
    random_part = base64.b32encode(secrets.token_bytes(QR_TOKEN_RANDOM_BYTES)).decode("ascii").rstrip("=")
    return f"{QR_TOKEN_PREFIX}-{timestamp}-{random_part}"


def render_qr_png(token: str) -> bytes:
    """Render a check-in token as a PNG QR code."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(token)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, "PNG")
    return buffer.getvalue()
