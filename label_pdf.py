import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from barcode_render import render_code128
from errors import NoDataToExport, SymbolRenderError
from label_csv import InputRow

logger = logging.getLogger(__name__)

LABEL_W, LABEL_H = 100*mm, 70*mm
MARGIN = 2*mm

TITLE = "IDENTIFICAÇÃO DE INVENTÁRIO"
TITLE_Y = 10*mm
BARCODE_X, BARCODE_TOP = 10*mm, 15*mm
BARCODE_W, BARCODE_H = 80*mm, 20*mm
CODE_Y = 42*mm
FONT = "Helvetica-Bold"
FONT_SIZE = 14

OUTPUT_FILENAME = "etiquetas_localizacao.pdf"

Renderer = Callable[[str], Image.Image]


@dataclass
class RowResult:
    code: str
    copies: int
    barcode: Optional[Image.Image] = None
    error: Optional[SymbolRenderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class LabelReport:
    pages: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def parse_quantity(raw: Optional[str]) -> int:
    """Copies to print for a row: a positive integer, anything else means 1."""
    raw = (raw or "").strip()
    if not (raw.isascii() and raw.isdigit()):
        return 1
    n = int(raw)
    return n if n >= 1 else 1


def render_row(row: InputRow, render: Renderer = render_code128) -> Optional[RowResult]:
    code = row.location_code
    if not code:
        return None
    copies = parse_quantity(row.quantity)
    try:
        return RowResult(code, copies, barcode=render(code))
    except SymbolRenderError as e:
        return RowResult(code, copies, error=e)


def _draw_label(c: canvas.Canvas, code: str, barcode: ImageReader):
    # Cut guide
    c.setLineWidth(0.5*mm)
    c.rect(MARGIN, MARGIN, LABEL_W - 2*MARGIN, LABEL_H - 2*MARGIN)

    c.setFont(FONT, FONT_SIZE)
    c.drawCentredString(LABEL_W/2, LABEL_H - TITLE_Y, TITLE)

    c.drawImage(barcode, BARCODE_X, LABEL_H - BARCODE_TOP - BARCODE_H,
                width=BARCODE_W, height=BARCODE_H)

    c.setFont(FONT, FONT_SIZE)
    c.drawCentredString(LABEL_W/2, LABEL_H - CODE_Y, code)


def generate_labels_pdf(rows: Iterable[InputRow], output_pdf, render: Renderer = render_code128) -> LabelReport:
    """Write one page per label copy to `output_pdf` (path or binary file).

    Rows are handled in order; each row's barcode is rendered once and reused
    for all its copies. A row whose barcode cannot be rendered is logged and
    left out. Raises NoDataToExport, without writing anything, when no page
    was produced.
    """
    c = canvas.Canvas(output_pdf, pagesize=(LABEL_W, LABEL_H))
    c.setTitle("Etiquetas de localização")
    report = LabelReport()

    for row in rows:
        result = render_row(row, render)
        if result is None:
            continue
        if not result.ok:
            logger.error("Erro ao gerar barcode para %s: %s", result.code, result.error.detail)
            report.failed.append(result.code)
            continue

        image = ImageReader(result.barcode)
        for _ in range(result.copies):
            _draw_label(c, result.code, image)
            c.showPage()
            report.pages.append(result.code)

    if not report.pages:
        raise NoDataToExport("Nenhuma etiqueta pôde ser gerada.")

    c.save()
    logger.info("%d etiquetas geradas, %d códigos com erro", len(report.pages), len(report.failed))
    return report
