import io
import os
import tempfile
import unittest
import numpy as np
from ImLite import Image


class TestImageWrite(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def path(self, name):
        return os.path.join(self.tmpdir.name, name)

    def read_text(self, path):
        with open(path) as f:
            return f.read()

    def test_exact_format(self):
        pix = np.array([[[255.0, 0.0, 0.0], [12.7, 200.99, 7.5]],
                        [[0.0, 0.0, 255.0], [1.0, 2.0, 3.0]]])
        Image(pixels=pix).writeToFile(self.path("out.ppm"))
        self.assertEqual(
            self.read_text(self.path("out.ppm")),
            "P3\n2 2\n 255\n255 0 0\n12 200 7\n0 0 255\n1 2 3\n")

    def test_non_square_is_row_major(self):
        # 3 wide, 1 high
        pix = np.array([[[1.0, 1.0, 1.0], [2.0, 2.0, 2.0], [3.0, 3.0, 3.0]]])
        Image(pixels=pix).writeToFile(self.path("row.ppm"))
        self.assertEqual(self.read_text(self.path("row.ppm")),
                         "P3\n3 1\n 255\n1 1 1\n2 2 2\n3 3 3\n")

    def test_truncates_and_clips(self):
        pix = np.array([[[255.9, 300.0, -4.2], [0.999, 254.5, 128.0]]])
        im = Image(pixels=pix)
        np.testing.assert_array_equal(im.ipixels, np.array([[[255, 255, 0], [0, 254, 128]]], np.uint8))

    def test_non_finite_rejected(self):
        im = Image(pixels=np.array([[[np.nan, 0.0, 0.0]]]))
        with self.assertRaises(ValueError):
            im.writeToFile(self.path("bad.ppm"))
        self.assertFalse(os.path.exists(self.path("bad.ppm")))

    def test_unwritable_destination(self):
        im = Image(pixels=np.zeros((1, 1, 3)))
        with self.assertRaises(OSError):
            im.writeToFile(self.path(os.path.join("missing", "out.ppm")))

    def test_no_destination(self):
        im = Image(pixels=np.zeros((1, 1, 3)))
        with self.assertRaises(ValueError):
            im.writeToFile()

    def test_open_file_destination(self):
        pix = np.array([[[9.5, 8.0, 7.0]]])
        out = io.StringIO()
        Image(pixels=pix).writeToFile(out)
        self.assertEqual(out.getvalue(), "P3\n1 1\n 255\n9 8 7\n")
        # a named file object records its path
        path = self.path("named.ppm")
        with open(path, 'w') as f:
            im = Image(pixels=pix)
            im.writeToFile(f)
        self.assertEqual(im.file_path, path)
        self.assertEqual(self.read_text(path), "P3\n1 1\n 255\n9 8 7\n")

    def test_read_back(self):
        pix = np.array([[[10.0, 20.0, 30.0], [40.0, 50.0, 60.0]],
                        [[70.0, 80.0, 90.0], [255.0, 0.0, 128.0]]])
        Image(pixels=pix).writeToFile(self.path("back.ppm"))
        loaded = Image(self.path("back.ppm"))
        self.assertEqual((loaded.height, loaded.width), (2, 2))
        np.testing.assert_array_equal(loaded.pixels, pix.astype(np.uint8))
        np.testing.assert_array_equal(loaded.ipixels, loaded.pixels)

    def test_pixels_constructor(self):
        pix = np.zeros((3, 5, 3))
        im = Image(pix)
        self.assertIs(im.pixels, pix)
        self.assertIsNone(im.file_path)
        self.assertEqual(im.PIL().size, (5, 3))


if __name__ == '__main__':
    unittest.main()
