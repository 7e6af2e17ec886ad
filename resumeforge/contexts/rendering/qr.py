"""QR code drawings shared by the PDF writer and the HTML preview."""

from reportlab.graphics import renderSVG
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing


def qr_drawing(data: str, size: float) -> Drawing:
    """
    Square reportlab Drawing of a QR code encoding `data`.

    Args:
        data: Payload (typically a profile URL)
        size: Edge length in points

    Returns:
        Drawing usable as a platypus flowable
    """
    widget = QrCodeWidget(data)
    x1, y1, x2, y2 = widget.getBounds()
    width, height = x2 - x1, y2 - y1
    drawing = Drawing(size, size, transform=[size / width, 0, 0, size / height, 0, 0])
    drawing.add(widget)
    return drawing


def qr_svg(data: str, size: float) -> str:
    """QR code as an inline SVG document string."""
    svg = renderSVG.drawToString(qr_drawing(data, size))
    # drawToString emits an XML prolog and doctype; inline SVG starts at <svg
    start = svg.find("<svg")
    return svg[start:] if start >= 0 else svg
