import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock
import cli


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def test_renders_reference_scene(self):
        out = os.path.join(self.tmpdir.name, "image.ppm")
        self.assertEqual(cli.main(["-o", out, "--width", "4", "--height", "3"]), 0)
        with open(out) as f:
            lines = f.read().splitlines()
        self.assertEqual(lines[:3], ["P3", "4 3", " 255"])
        self.assertEqual(len(lines), 3 + 4 * 3)
        for line in lines[3:]:
            channels = [int(c) for c in line.split()]
            self.assertEqual(len(channels), 3)
            self.assertTrue(all(0 <= c <= 255 for c in channels))
        # the top row sees only sky
        self.assertEqual(lines[3], "255 255 255")

    def test_other_scene(self):
        out = os.path.join(self.tmpdir.name, "three.ppm")
        self.assertEqual(cli.main(["-o", out, "--width", "2", "--height", "2", "--scene", "three_spheres"]), 0)
        self.assertTrue(os.path.exists(out))

    def test_unwritable_output(self):
        out = os.path.join(self.tmpdir.name, "missing", "image.ppm")
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            status = cli.main(["-o", out, "--width", "2", "--height", "2"])
        self.assertEqual(status, 1)
        self.assertIn("Failed to open file for writing.", stderr.getvalue())

    def test_unwritable_output_skips_render(self):
        out = os.path.join(self.tmpdir.name, "missing", "image.ppm")
        with mock.patch("ray.render_image") as render_image:
            with contextlib.redirect_stderr(io.StringIO()):
                status = cli.main(["-o", out, "--width", "2", "--height", "2"])
        self.assertEqual(status, 1)
        render_image.assert_not_called()

    def test_bad_size(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main(["--width", "0"])

    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        self.assertEqual((args.width, args.height), (256, 256))
        self.assertEqual(args.output, "image.ppm")
        self.assertEqual(args.scene, "reference")


if __name__ == '__main__':
    unittest.main()
