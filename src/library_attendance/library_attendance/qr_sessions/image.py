from __future__ import annotations

import io

import qrcode


def render_qr_png(data: str) -> io.BytesIO:
    """Render `data` as a PNG QR code (the image an admin puts on screen)."""

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
