"""Command line entry point: render an example scene to a PPM file."""

import argparse
import logging
import sys

from ExampleSceneDef import EXAMPLES

logger = logging.getLogger(__name__)

IMAGE_WIDTH = 256
IMAGE_HEIGHT = 256
OUTPUT_PATH = "image.ppm"


def positive_int(text):
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {text}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(description="Ray cast a scene of spheres to a plain PPM (P3) image.")
    parser.add_argument("--output", "-o", default=OUTPUT_PATH, help="Output PPM file path")
    parser.add_argument("--width", type=positive_int, default=IMAGE_WIDTH)
    parser.add_argument("--height", type=positive_int, default=IMAGE_HEIGHT)
    parser.add_argument("--scene", choices=sorted(EXAMPLES), default="reference")
    parser.add_argument("--show", action="store_true", help="Open the rendered image in a viewer")
    parser.add_argument("--verbose", "-v", action="count", default=0)
    return parser


def render(example, output_path=OUTPUT_PATH, width=IMAGE_WIDTH, height=IMAGE_HEIGHT):
    """Render an ExampleSceneDef and write it to output_path; returns the Image.

    The output file is opened before rendering, so an unwritable path fails
    with OSError without doing any work.
    """
    with open(output_path, 'w') as f:
        im = example.render(output_shape=[height, width])
        im.writeToFile(f)
    return im


def main(argv=None):
    args = build_parser().parse_args(argv)
    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)]
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    example = EXAMPLES[args.scene]()
    try:
        im = render(example, args.output, args.width, args.height)
    except OSError as e:
        logger.debug("cannot write %s: %s", args.output, e)
        print("Failed to open file for writing.", file=sys.stderr)
        return 1

    if args.show:
        im.show(title=args.scene)
    return 0


if __name__ == "__main__":
    sys.exit(main())
