from PIL import Image as PIM
import numpy as np
import logging

logger = logging.getLogger(__name__)

MAX_CHANNEL_VALUE = 255;


class Image(object):
    """Image

    Pixels are an (height, width, 3) array of RGB channels on the 0-255 scale,
    either floats straight out of the renderer or integers read from disk.
    """

    def __init__(self, path=None, pixels=None, **kwargs):
        # You can do Image(pixels) or Image(path)
        self._samples = None;
        self.file_path = None;
        if (isinstance(path, np.ndarray) and (pixels is None)):
            # if the path looks like pixels and pixels are undefined, treat the path as pixels
            pixels = path;
            path = None;
        self.pixels = pixels;
        self.file_path = path;
        if (self.file_path is not None and pixels is None):
            self.loadImageData(self.file_path);

    @property
    def pixels(self):
        return self.samples;

    @pixels.setter
    def pixels(self, data):
        self.samples = data;

    @property
    def samples(self):
        return self._samples;

    @samples.setter
    def samples(self, value):
        self._samples = value;

    @property
    def dtype(self):
        return self.pixels.dtype;

    @property
    def _is_int(self):
        return (self.dtype.kind in 'iu');

    @property
    def ipixels(self):
        """
        integer channels: truncated toward zero (not rounded), then clipped to 0-255
        :return:
        """
        if (self._is_int):
            return np.clip(self.pixels, 0, MAX_CHANNEL_VALUE).astype(np.uint8);
        if (not np.all(np.isfinite(self.pixels))):
            raise ValueError("image has non-finite channel values");
        return np.clip(np.trunc(self.pixels), 0, MAX_CHANNEL_VALUE).astype(np.uint8);

    @property
    def shape(self):
        return np.asarray(self.pixels.shape)[:];

    @property
    def width(self):
        return self.shape[1];

    @property
    def height(self):
        return self.shape[0];

    def loadImageData(self, path=None):
        if (path):
            self.file_path = path;
        if (self.file_path):
            pim = PIM.open(fp=self.file_path);
            self._samples = np.array(pim.convert('RGB'));

    def PIL(self):
        return PIM.fromarray(self.ipixels);

    def show(self, title=None):
        self.PIL().show(title=title);

    def writeToFile(self, output_path=None, **kwargs):
        """
        write the image as plain-text PPM (P3), one "r g b" line per pixel in row-major order
        output_path may be a path or a file object already open for text writing
        :return:
        """
        if (output_path is None):
            output_path = self.file_path;
        if (output_path is None):
            raise ValueError("no output path given and the image has no file_path");
        ipix = self.ipixels;
        lines = ["P3", "{} {}".format(self.width, self.height), " {}".format(MAX_CHANNEL_VALUE)];
        lines.extend("{} {} {}".format(r, g, b) for (r, g, b) in ipix.reshape(-1, 3).tolist());
        if (hasattr(output_path, 'write')):
            output_path.write("\n".join(lines) + "\n");
            output_path = getattr(output_path, 'name', None);
        else:
            with open(output_path, 'w') as f:
                f.write("\n".join(lines) + "\n");
        if (output_path is not None):
            self.file_path = output_path;
        logger.info("wrote %dx%d image to %s", self.width, self.height, output_path);
