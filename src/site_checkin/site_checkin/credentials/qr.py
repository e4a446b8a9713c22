from __future__ import annotations

import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from .model import Credential


def render_png(credential: Credential, *, box_size: int = 10, border: int = 4) -> bytes:
    """Render the credential as a PNG QR code (what the worker shows at the gate)."""

    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=box_size, border=border)
    qr.add_data(credential.value)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
