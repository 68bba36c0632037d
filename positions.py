"""
Coordinate positions for placing widgets and labels on the generator window.

The window uses a pixel coordinate system where:
- x grows from the left edge (0 to WINDOW["width"])
- y grows from the top edge (0 to WINDOW["height"])

Labels are drawn on a baseline at attribute_y(line); the input field that
belongs to a label is placed at object_y(line), one font size higher, so the
field box lines up with the label text.
"""
import logging

from PIL import ImageFont

logger = logging.getLogger(__name__)

# Window and backdrop
WINDOW = {
    "title": "Coupon Generator",
    "width": 600,
    "height": 450,
    "inner_rect_margin": 100,   # Distance of the dark inner rectangle to the window edges
    "heading_y": 40,            # Baseline of the heading
    "heading_offset_x": 15,     # Heading is nudged left of the exact centre
}

# Fonts (family, size, weight)
FONTS = {
    "default": ("Arial", 20, "normal"),
    "heading": ("Arial", 30, "bold"),
}
DEFAULT_FONT_SIZE = FONTS["default"][1]

# Label column
ATTRIBUTES_BEGIN_X = 110
ATTRIBUTES_BEGIN_Y = 120
LINE_SPACING_MULTIPLIER = 1.5
OBJECT_GAP = 50  # Space between the longest label and the input column

# One label per line; line 3 is an empty spacer row
ATTRIBUTES = [
    "Recipient:",
    "Reason:",
    "Creator:",
    "",
    "Size:",
    "Amount:",
]

# Input fields: name -> line the field sits on
FIELD_LINES = {
    "recipient": 0,
    "reason": 1,
    "creator": 2,
    "width": 4,
    "height": 4,    # Same row as width, shifted right
    "amount": 5,
}

# Widget sizes
WIDGETS = {
    "text_field_width": 100,
    "size_field_offset": 100,   # x offset of the height field from the width field
    "size_separator_offset": 70,  # x offset of the "x" between width and height
    "scale_box_width": 70,
    "scale_box_height": 35,
    "scale_box_line": 6,
    "scale_box_nudge": 7,
    "button_width": 200,
    "button_height": 40,
    "button_nudge_x": 7,
}

# Choices offered in the scaling drop-down; the selected index is the scaling factor
COUPON_SCALES = [1, 2, 3, 4, 5, 6]

# Fallback font files for measuring label widths
FONT_PATHS = [
    "arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",  # macOS
    "/usr/share/fonts/truetype/msttcorefonts/Arial.ttf",  # Linux with core fonts
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",  # Linux
    "C:\\Windows\\Fonts\\arial.ttf",  # Windows
]


def load_font(font_size=DEFAULT_FONT_SIZE):
    """Load a TrueType font for measuring, falling back to Pillow's default"""
    for font_path in FONT_PATHS:
        try:
            return ImageFont.truetype(font_path, font_size)
        except (OSError, IOError):
            continue

    logger.warning("No TrueType font found, measuring with the Pillow default font")
    try:
        return ImageFont.load_default(font_size)
    except TypeError:
        # Pillow < 10.1 has no sized default font
        return ImageFont.load_default()


def text_width(text, font):
    """Width in pixels of text rendered with a Pillow font"""
    if not text:
        return 0
    bbox = font.getbbox(text)
    return bbox[2] - bbox[0]


def attribute_y(line):
    """Baseline y coordinate of the label on the given line"""
    return int(ATTRIBUTES_BEGIN_Y + (line * (DEFAULT_FONT_SIZE * LINE_SPACING_MULTIPLIER)))


def object_y(line):
    """Top y coordinate of the widget that belongs to the label on the given line"""
    return attribute_y(line) - DEFAULT_FONT_SIZE


def object_x(font=None):
    """
    X coordinate of the input column.

    The column starts right of the widest label. The widest label is the one
    with the most characters, measured in the default font.
    """
    if font is None:
        font = load_font(DEFAULT_FONT_SIZE)
    longest = max(ATTRIBUTES, key=len)
    return int(text_width(longest, font)) + ATTRIBUTES_BEGIN_X + OBJECT_GAP


def field_bounds(x):
    """
    Bounds (x, y, width, height) of every input field, keyed by field name.

    Args:
        x: the input column as returned by object_x()
    """
    full = WIDGETS["text_field_width"]
    bounds = {}
    for name, line in FIELD_LINES.items():
        if name == "width":
            bounds[name] = (x, object_y(line), full // 2, DEFAULT_FONT_SIZE)
        elif name == "height":
            bounds[name] = (x + WIDGETS["size_field_offset"], object_y(line), full // 2, DEFAULT_FONT_SIZE)
        else:
            bounds[name] = (x, object_y(line), full, DEFAULT_FONT_SIZE)
    return bounds


def size_separator_position(x):
    """Where the "x" between the width and height fields is drawn"""
    return x + WIDGETS["size_separator_offset"], attribute_y(FIELD_LINES["width"]) - 5


def scale_box_bounds(x):
    return (
        x,
        object_y(WIDGETS["scale_box_line"]) + WIDGETS["scale_box_nudge"],
        WIDGETS["scale_box_width"],
        WIDGETS["scale_box_height"],
    )


def button_bounds():
    width, height = WINDOW["width"], WINDOW["height"]
    return (
        (width // 2) - (WIDGETS["button_width"] // 2) - WIDGETS["button_nudge_x"],
        int(height - WINDOW["inner_rect_margin"] + (0.1 * WIDGETS["button_height"])),
        WIDGETS["button_width"],
        WIDGETS["button_height"],
    )


def inner_rect(width=WINDOW["width"], height=WINDOW["height"]):
    """Corners (x0, y0, x1, y1) of the dark rectangle behind the form"""
    margin = WINDOW["inner_rect_margin"]
    x0 = margin - 10
    y0 = margin - 10
    return x0, y0, x0 + width - (2 * margin), y0 + height - (2 * margin)
