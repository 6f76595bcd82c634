import logging

from barcode import Code128
from barcode.writer import ImageWriter
from PIL import Image

from errors import SymbolRenderError

logger = logging.getLogger(__name__)

# Sizes in mm at DPI; tall enough for a handheld scanner at arm's length.
WRITER_OPTIONS = {
    "module_width": 0.33,
    "module_height": 15.0,
    "quiet_zone": 2.0,
    "dpi": 300,
    "write_text": False,
    "background": "white",
    "foreground": "black",
}


def render_code128(code: str) -> Image.Image:
    """Render `code` as a Code 128 bitmap with no human-readable text."""
    if not code:
        raise SymbolRenderError(code, "código vazio")
    bad = sorted({ch for ch in code if ord(ch) > 127})
    if bad:
        raise SymbolRenderError(code, f"caracteres não suportados: {''.join(bad)}")

    try:
        img = Code128(code, writer=ImageWriter()).render(writer_options=WRITER_OPTIONS)
    except Exception as exc:
        raise SymbolRenderError(code, str(exc)) from exc
    logger.debug("barcode %s rendered at %sx%s px", code, *img.size)
    return img
