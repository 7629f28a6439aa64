"""QR encoder — structured payload in, PNG bytes out."""
import io
import json
from typing import Any

import qrcode

from ticketing.config import settings


def encode_qr_png(payload: dict[str, Any]) -> bytes:
    """Render the JSON-serialized payload as a black-on-white PNG."""
    qr = qrcode.QRCode(box_size=settings.QR_BOX_SIZE, border=settings.QR_BORDER)
    qr.add_data(json.dumps(payload, separators=(",", ":")))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
