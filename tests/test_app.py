import unittest
from pathlib import Path
from unittest.mock import patch

try:
    import tkinter as tk
    from tkinter import font as tkfont
except ImportError:
    raise unittest.SkipTest("tkinter is not installed")

import app
import positions
from coupon import FILL_IN_MESSAGE, MAX_SIZE_MESSAGE, CouponRequest


class TestCouponGeneratorApp(unittest.TestCase):
    def setUp(self):
        try:
            self.root = tk.Tk()
        except tk.TclError:
            self.skipTest("No display available for the generator window")
        self.root.withdraw()
        self.window = app.CouponGeneratorApp(self.root)

        # Sample valid form data
        self.valid_data = {
            'recipient': 'Jane Doe',
            'reason': 'Birthday',
            'creator': 'John Doe',
            'width': '200',
            'height': '150',
            'amount': '4',
        }

        patcher = patch.object(app, 'messagebox')
        self.messagebox = patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self.root.destroy()

    def fill(self, data):
        for name, value in data.items():
            entry = self.window.fields[name]
            entry.delete(0, tk.END)
            entry.insert(0, value)

    def test_window_layout(self):
        """Test the window has one field per attribute and the scale drop-down"""
        self.assertEqual(set(self.window.fields), set(self.valid_data))
        self.assertEqual(self.root.title(), "Coupon Generator")
        self.assertEqual(self.window.scale_box.current(), 0)
        values = self.root.tk.splitlist(self.window.scale_box.cget('values'))
        self.assertEqual([str(v) for v in values], ['1', '2', '3', '4', '5', '6'])

    def test_labels_sit_on_their_baseline(self):
        """Test label text has its baseline at the attribute line, not its bottom edge"""
        backdrop = self.window.backdrop
        descent = tkfont.Font(root=self.root, font=positions.FONTS["default"]).metrics("descent")
        labels = backdrop.find_withtag("label")
        self.assertEqual(len(labels), 5)
        for line, item in zip((0, 1, 2, 4, 5), labels):
            x, y = backdrop.coords(item)
            self.assertEqual((x, y), (positions.ATTRIBUTES_BEGIN_X, positions.attribute_y(line) + descent))
            self.assertEqual(backdrop.itemcget(item, "anchor"), "sw")

    def test_form_values(self):
        self.fill(self.valid_data)
        self.assertEqual(self.window.form_values(), self.valid_data)

    @patch.object(app, 'generate_pdf')
    @patch.object(app, 'choose_output_path')
    def test_blank_field_blocks_submit(self, choose_output_path, generate_pdf):
        """Test submission with a blank field shows an error and writes nothing"""
        for field in self.valid_data:
            self.fill({**self.valid_data, field: ''})
            self.assertIsNone(self.window.generate())
            self.messagebox.showerror.assert_called_with("Error", FILL_IN_MESSAGE, parent=self.root)
        choose_output_path.assert_not_called()
        generate_pdf.assert_not_called()

    @patch.object(app, 'generate_pdf')
    @patch.object(app, 'choose_output_path')
    def test_non_numeric_blocks_submit(self, choose_output_path, generate_pdf):
        self.fill({**self.valid_data, 'amount': 'four'})
        self.window.generate()
        self.messagebox.showerror.assert_called_once_with("Error", FILL_IN_MESSAGE, parent=self.root)
        generate_pdf.assert_not_called()

    @patch.object(app, 'generate_pdf')
    @patch.object(app, 'choose_output_path')
    def test_oversized_blocks_submit(self, choose_output_path, generate_pdf):
        self.fill({**self.valid_data, 'width': '500'})
        self.window.generate()
        self.messagebox.showerror.assert_called_once_with("Error", MAX_SIZE_MESSAGE, parent=self.root)
        generate_pdf.assert_not_called()

    @patch.object(app, 'generate_pdf')
    @patch.object(app, 'choose_output_path')
    def test_valid_submission(self, choose_output_path, generate_pdf):
        """Test a valid form asks for a location and generates the coupons"""
        target = Path('/tmp/coupons.pdf')
        choose_output_path.return_value = target
        generate_pdf.return_value = target

        self.fill(self.valid_data)
        self.window.scale_box.current(2)
        self.assertEqual(self.window.generate(), target)

        generate_pdf.assert_called_once_with(
            CouponRequest('Jane Doe', 'Birthday', 'John Doe', 200, 150, 4, 2),
            target,
        )
        self.messagebox.showerror.assert_not_called()
        self.messagebox.showinfo.assert_called_once()

    def test_callback_errors_are_reported(self):
        try:
            raise OSError("disk full")
        except OSError as e:
            with self.assertLogs('app', level='ERROR'):
                self.window.report_callback_exception(type(e), e, e.__traceback__)
        self.messagebox.showerror.assert_called_once()


class TestChooseOutputPath(unittest.TestCase):
    @patch.object(app.filedialog, 'asksaveasfilename', return_value='/tmp/my_coupons')
    def test_dialog_choice(self, asksaveasfilename):
        self.assertEqual(app.choose_output_path(), Path('/tmp/my_coupons.pdf'))
        kwargs = asksaveasfilename.call_args.kwargs
        self.assertEqual(kwargs['title'], "Save as...")
        self.assertEqual(kwargs['initialdir'], str(Path.home()))

    @patch.object(app.filedialog, 'asksaveasfilename', return_value='')
    def test_cancelled_dialog(self, asksaveasfilename):
        path = app.choose_output_path()
        self.assertEqual(path.parent, Path.home())
        self.assertEqual(path.suffix, '.pdf')


if __name__ == '__main__':
    unittest.main()
