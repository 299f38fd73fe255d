# app/services/qr_renderer.py
"""
Renders identity payload text into a scannable QR image (PNG).
Images are never stored — they are re-rendered from Person.qr_code_data on demand.
"""

import base64
import io
import re
import qrcode
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


def render_png(payload_text: str) -> bytes:
    qr = qrcode.QRCode(
        version=None,                                   # fit to payload size
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=settings.QR_BOX_SIZE,
        border=settings.QR_BORDER,
    )
    qr.add_data(payload_text)
    qr.make(fit=True)
    img = qr.make_image(fill_color=settings.QR_FILL_COLOR, back_color=settings.QR_BACK_COLOR)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def render_data_url(payload_text: str) -> str:
    """PNG as a data: URL, ready for an <img src=...> on the registration screen."""
    png = render_png(payload_text)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def download_filename(name: str) -> str:
    return re.sub(r"\s+", "_", name.strip()) + "_qr_code.png"
