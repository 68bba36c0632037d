import logging
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from tkinter import font as tkfont

import positions
from coupon import CouponValidationError, build_request, generate_pdf, resolve_output_path
from positions import FONTS, WINDOW

logger = logging.getLogger(__name__)

COLORS = {
    "background": "light gray",
    "inner_rect": "dim gray",
    "heading": "black",
    "label": "white",
}


class Backdrop(tk.Canvas):
    """Paints the static parts of the window: background, heading, labels"""

    def __init__(self, master, title, x, **kwargs):
        super().__init__(
            master,
            width=WINDOW["width"],
            height=WINDOW["height"],
            highlightthickness=0,
            background=COLORS["background"],
            **kwargs
        )
        self.title = title
        self.object_x = x
        self.paint()

    def descent(self, font):
        """Pixels below the baseline for font; text is anchored by its bottom edge"""
        return tkfont.Font(root=self, font=font).metrics("descent")

    def paint(self):
        self.delete("all")
        width, height = WINDOW["width"], WINDOW["height"]
        label_descent = self.descent(FONTS["default"])

        # Heading, centred and nudged left, sitting on its baseline
        heading_x = (width // 2) - WINDOW["heading_offset_x"]
        self.create_text(
            heading_x, WINDOW["heading_y"] + self.descent(FONTS["heading"]),
            text=self.title, font=FONTS["heading"], fill=COLORS["heading"], anchor="s", tags="heading",
        )

        self.create_rectangle(
            *positions.inner_rect(width, height),
            fill=COLORS["inner_rect"], outline=COLORS["inner_rect"],
        )

        for line, label in enumerate(positions.ATTRIBUTES):
            if label:
                self.create_text(
                    positions.ATTRIBUTES_BEGIN_X, positions.attribute_y(line) + label_descent,
                    text=label, font=FONTS["default"], fill=COLORS["label"], anchor="sw", tags="label",
                )

        # "x" between width and height
        sep_x, sep_y = positions.size_separator_position(self.object_x)
        self.create_text(
            sep_x, sep_y + label_descent,
            text="x", font=FONTS["default"], fill=COLORS["label"], anchor="sw", tags="separator",
        )


class CouponGeneratorApp:
    """Window collecting the coupon attributes and generating the PDF on demand"""

    def __init__(self, master=None):
        self.root = master or tk.Tk()
        self.root.title(WINDOW["title"])
        self.root.resizable(False, False)
        self.root.report_callback_exception = self.report_callback_exception
        self._center(WINDOW["width"], WINDOW["height"])

        x = positions.object_x()
        self.backdrop = Backdrop(self.root, WINDOW["title"], x)
        self.backdrop.place(x=0, y=0)

        self.fields = {}
        for name, (fx, fy, fw, fh) in positions.field_bounds(x).items():
            entry = tk.Entry(self.root)
            entry.place(x=fx, y=fy, width=fw, height=fh)
            self.fields[name] = entry

        bx, by, bw, bh = positions.scale_box_bounds(x)
        self.scale_box = ttk.Combobox(
            self.root,
            values=positions.COUPON_SCALES,
            state="readonly",
            font=FONTS["default"],
            takefocus=False,
        )
        self.scale_box.current(0)
        self.scale_box.place(x=bx, y=by, width=bw, height=bh)

        gx, gy, gw, gh = positions.button_bounds()
        self.generate_button = tk.Button(
            self.root,
            text="Generate PDF",
            command=self.generate,
            font=FONTS["default"],
            background="black",
            foreground="white",
            activebackground="black",
            activeforeground="white",
            takefocus=False,
        )
        self.generate_button.place(x=gx, y=gy, width=gw, height=gh)

    def _center(self, width, height):
        left = (self.root.winfo_screenwidth() - width) // 2
        top = (self.root.winfo_screenheight() - height) // 2
        self.root.geometry(f"{width}x{height}+{left}+{top}")

    def form_values(self):
        return {name: entry.get() for name, entry in self.fields.items()}

    def generate(self):
        """Validate the form, then ask for a location and write the coupons"""
        try:
            request = build_request(self.form_values(), self.scale_box.current())
        except CouponValidationError as e:
            self.show_error(str(e))
            return None

        output_path = choose_output_path(self.root)
        logger.info(f"Generating {request.amount} coupons for {request.recipient}")
        pdf_filename = generate_pdf(request, output_path)
        messagebox.showinfo("Success", f"PDF saved to:\n{pdf_filename}", parent=self.root)
        return pdf_filename

    def show_error(self, error):
        messagebox.showerror("Error", error, parent=self.root)

    def report_callback_exception(self, exc, val, tb):
        logger.error("Unhandled error in window callback", exc_info=(exc, val, tb))
        self.show_error(f"An unexpected error occurred:\n{val}")

    def open(self):
        self.root.mainloop()


def choose_output_path(parent=None):
    """Ask the user where to save the PDF, starting in the home directory"""
    chosen = filedialog.asksaveasfilename(
        parent=parent,
        title="Save as...",
        initialdir=str(Path.home()),
        defaultextension=".pdf",
        filetypes=[("Portable Document Format (PDF)", "*.pdf")],
    )
    return resolve_output_path(chosen)


def main():
    logging.basicConfig(level=logging.INFO)
    CouponGeneratorApp().open()


if __name__ == '__main__':
    main()
