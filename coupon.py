from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape
import logging
import re

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

# Largest coupon cell the generator accepts, in points
MAX_WIDTH = 400
MAX_HEIGHT = 700
MAX_SCALING = 5

# Distance between the heading and the first row of coupons
SPACING_BEFORE_COUPONS = 50
PAGE_MARGIN = 36

CELL_PADDING = 6
# Narrowest column the table is laid out with; tiny coupons are packed this wide
MIN_CELL_WIDTH = 60

HEADING = {"font_name": "Courier", "font_size": 18, "text": "Coupons - by {creator}"}

# Unscaled cell fonts; scaling multiplies both by 1 + 0.1 * scaling
CELL_FONTS = {
    "title": {"font_name": "Helvetica-Bold", "font_size": 14},
    "text": {"font_name": "Helvetica", "font_size": 9},
}
LEADING_RATIO = 1.2

TEXT_FIELDS = ["recipient", "reason", "creator"]
NUMBER_FIELDS = ["width", "height", "amount"]

FILL_IN_MESSAGE = "Please fill in all fields correctly!"
MAX_SIZE_MESSAGE = f"Maximum allowed size: {MAX_WIDTH} x {MAX_HEIGHT}"

_DIGITS = re.compile(r"[0-9]+")


class CouponValidationError(ValueError):
    """Raised when the form input cannot be turned into a coupon request"""


@dataclass
class CouponRequest:
    recipient: str
    reason: str
    creator: str
    width: int
    height: int
    amount: int
    scaling: int = 0

    @property
    def font_factor(self):
        return 1 + 0.1 * self.scaling


def build_request(values, scaling=0):
    """
    Validate raw form input and build a coupon request.

    Args:
        values: mapping of field name to the text typed into the form
        scaling: selected index of the scaling drop-down (0..5)

    Raises:
        CouponValidationError: with the message to show to the user
    """
    cleaned = {name: (values.get(name) or "").strip() for name in TEXT_FIELDS + NUMBER_FIELDS}

    blank = [name for name, text in cleaned.items() if not text]
    if blank:
        logger.warning(f"Blank fields: {blank}")
        raise CouponValidationError(FILL_IN_MESSAGE)

    not_numeric = [name for name in NUMBER_FIELDS if not _DIGITS.fullmatch(cleaned[name])]
    if not_numeric:
        logger.warning(f"Non-numeric fields: {not_numeric}")
        raise CouponValidationError(FILL_IN_MESSAGE)

    width = int(cleaned["width"])
    height = int(cleaned["height"])
    amount = int(cleaned["amount"])

    if width > MAX_WIDTH or height > MAX_HEIGHT:
        logger.warning(f"Coupon size {width} x {height} exceeds {MAX_WIDTH} x {MAX_HEIGHT}")
        raise CouponValidationError(MAX_SIZE_MESSAGE)

    if width == 0 or height == 0 or amount == 0:
        raise CouponValidationError(FILL_IN_MESSAGE)

    if not 0 <= scaling <= MAX_SCALING:
        raise CouponValidationError(f"Scaling must be between 0 and {MAX_SCALING}")

    return CouponRequest(
        recipient=cleaned["recipient"],
        reason=cleaned["reason"],
        creator=cleaned["creator"],
        width=width,
        height=height,
        amount=amount,
        scaling=scaling,
    )


def column_count(page_width, cell_width, frame_width=None):
    """
    Number of coupons that fit next to each other on a page.

    When frame_width is given, the count is capped so no column of the frame
    gets narrower than MIN_CELL_WIDTH.
    """
    columns = max(1, int(page_width // cell_width))
    if frame_width is not None:
        columns = min(columns, max(1, int(frame_width // MIN_CELL_WIDTH)))
    return columns


def coupon_styles(font_factor=1.0):
    """Paragraph styles for the coupon cells, font sizes multiplied by font_factor"""
    styles = {}
    for name, font in CELL_FONTS.items():
        style = ParagraphStyle(
            name=f"Coupon{name.title()}",
            fontName=font["font_name"],
            fontSize=font["font_size"],
            alignment=TA_CENTER,
        )
        style.fontSize *= font_factor
        style.leading = style.fontSize * LEADING_RATIO
        styles[name] = style
    return styles


def coupon_cell(request, styles):
    """Flowables making up one coupon"""
    text = styles["text"]
    cell = [
        Paragraph("Coupon", styles["title"]),
        Paragraph(f"for {escape(request.recipient)}", text),
    ]
    # Larger coupons get air between the header and the reason
    cell.extend(Spacer(1, text.leading) for _ in range(request.scaling))
    cell.append(Paragraph(escape(request.reason), text))
    cell.append(Paragraph(f"from {escape(request.creator)}", text))
    return cell


def coupon_rows(request, columns, styles):
    """
    Lay out request.amount coupons in rows of `columns` cells.

    The last row is padded with empty cells so every row has the same length.
    """
    cells = [coupon_cell(request, styles) for _ in range(request.amount)]
    rows = [cells[i:i + columns] for i in range(0, len(cells), columns)]
    if rows and len(rows[-1]) < columns:
        rows[-1].extend("" for _ in range(columns - len(rows[-1])))
    return rows


def build_coupon_table(request, frame_width, page_width=A4[0]):
    columns = column_count(page_width, request.width, frame_width)
    styles = coupon_styles(request.font_factor)
    rows = coupon_rows(request, columns, styles)

    table = Table(
        rows,
        colWidths=[frame_width / columns] * columns,
        minRowHeights=[request.height] * len(rows),
        spaceBefore=SPACING_BEFORE_COUPONS,
    )
    table.setStyle(TableStyle([
        ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('LEFTPADDING', (0, 0), (-1, -1), CELL_PADDING),
        ('RIGHTPADDING', (0, 0), (-1, -1), CELL_PADDING),
    ]))
    return table


def heading(request):
    style = ParagraphStyle(
        name="CouponHeading",
        fontName=HEADING["font_name"],
        fontSize=HEADING["font_size"],
        leading=HEADING["font_size"] * LEADING_RATIO,
        alignment=TA_CENTER,
    )
    text = HEADING["text"].format(creator=escape(request.creator))
    return Paragraph(f"<u>{text}</u>", style)


def default_filename():
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"coupons_{timestamp}.pdf"


def resolve_output_path(chosen, home=None):
    """
    Turn the save dialog's answer into the path the PDF is written to.

    A cancelled dialog or a non-PDF extension falls back to a generated file
    in the home directory; a bare name gets the .pdf extension appended.
    """
    home = Path(home) if home else Path.home()
    fallback = home / default_filename()

    if not chosen:
        logger.info(f"No file chosen, saving to {fallback}")
        return fallback

    path = Path(chosen)
    if not path.suffix:
        path = path.with_name(path.name + ".pdf")
    if path.suffix.lower() != ".pdf":
        logger.warning(f"Refusing to write PDF to {path}, saving to {fallback}")
        return fallback
    return path


def generate_pdf(request, output_path):
    """Write the coupon sheet for a request to output_path"""
    try:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        doc = SimpleDocTemplate(
            str(output_path),
            pagesize=A4,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title="Coupons",
            author=request.creator,
        )
        table = build_coupon_table(request, doc.width, page_width=A4[0])
        doc.build([heading(request), table])

        logger.info(f"Wrote {request.amount} coupons ({request.width} x {request.height}) to {output_path}")
        return output_path

    except Exception as e:
        logger.error(f"Error generating PDF: {str(e)}")
        raise
