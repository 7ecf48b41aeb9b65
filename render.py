import logging
import os
import sys
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

from adaptive_mandelbrot import (
    ColorMapper,
    ConfigurationError,
    ImageGeometry,
    RenderParameters,
    compute_geometry,
    parse_complex,
    render_frame,
    write_image,
)

logger = logging.getLogger("render")

# Options whose values may start with a minus sign that argparse does not
# recognise as a negative number, such as "-2,1" or "-7e-1".
SIGNED_OPTIONS = ("--x-center", "--y-center", "--upper-left", "--lower-right")


@dataclass
class OutputConfig:
    image_path: Path
    image_format: str


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set with adaptive partitioning.")

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of iterations before a point is considered inside the set',
                        metavar='MAX_ITERATIONS', default=1024)

    parser.add_argument('--x-res', type=int,
                        dest='x_res', help='horizontal resolution of the image in pixels',
                        metavar='X_RES', default=1680)

    parser.add_argument('--y-res', type=int,
                        dest='y_res', help='vertical resolution of the image in pixels',
                        metavar='Y_RES', default=1120)

    parser.add_argument('--x-center', type=str,
                        dest='x_center', help='real part of the centre of the image',
                        metavar='X_CENTER', default='-0.7')

    parser.add_argument('--y-center', type=str,
                        dest='y_center', help='imaginary part of the centre of the image',
                        metavar='Y_CENTER', default='0.0')

    parser.add_argument('--scale', type=str,
                        dest='scale', help='half of the width of the view in the complex plane',
                        metavar='SCALE', default='1.53845')

    parser.add_argument('--upper-left', type=str, dest='upper_left', metavar='RE,IM',
                        help='upper-left corner in the complex plane; overrides centre and scale, requires --lower-right')

    parser.add_argument('--lower-right', type=str, dest='lower_right', metavar='RE,IM',
                        help='lower-right corner in the complex plane; requires --upper-left')

    parser.add_argument('--precision', type=int, dest='precision', metavar='BITS', default=None,
                        help='bits of floating point precision; derived from the zoom depth when omitted')

    parser.add_argument('--workers', type=int, dest='workers', metavar='WORKERS', default=None,
                        help='number of worker threads (default: one per CPU, 0 renders on the main thread)')

    parser.add_argument('--exhaustive', action='store_true',
                        help='evaluate every pixel instead of skipping regions enclosed by the set')

    parser.add_argument('--palette-scale', type=float, dest='palette_scale', default=1.0,
                        help='factor applied to the smooth palette index; larger values cycle colors faster')

    parser.add_argument('--inside-color', type=str, default='#000000',
                        help='hex color for points inside the Mandelbrot set')

    parser.add_argument('--output', dest='output', type=str, default='out.png',
                        help='name of the file in which to save the image')

    parser.add_argument('--format', type=str,
                        dest='format', help='image file format, any extension supported by Pillow (default: from --output)',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='print detailed program execution information')

    return parser


def attach_signed_values(argv):
    """Rewrite ``--upper-left -2,1`` as ``--upper-left=-2,1`` for every signed option."""

    args = list(argv)
    attached = []
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--":
            attached.extend(args[i:])
            break
        if arg in SIGNED_OPTIONS and i + 1 < len(args):
            attached.append(f"{arg}={args[i + 1]}")
            i += 2
        else:
            attached.append(arg)
            i += 1
    return attached


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    output_path = Path(opt.output).expanduser()
    if str(opt.output).endswith(tuple(filter(None, {os.sep, os.altsep}))):
        parser.error("--output must be a file path.")
    if output_path.exists() and output_path.is_dir():
        parser.error("--output must point to a file, not a directory.")

    image_format = (opt.format or output_path.suffix or "png").lower().lstrip(".")
    if not image_format:
        image_format = "png"

    suffix = output_path.suffix
    if suffix:
        if opt.format and suffix.lower().lstrip(".") != image_format:
            parser.error(f"--output extension {suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(f".{image_format}")

    return OutputConfig(image_path=output_path.resolve(), image_format=image_format)


def resolve_geometry(opt, parser: ArgumentParser) -> ImageGeometry:
    if opt.max_iterations < 1:
        parser.error("--max-iterations must be at least 1.")
    if opt.workers is not None and opt.workers < 0:
        parser.error("--workers must not be negative.")
    if (opt.upper_left is None) != (opt.lower_right is None):
        parser.error("--upper-left and --lower-right must be given together.")

    try:
        if opt.upper_left is not None:
            upper_left = parse_complex(opt.upper_left)
            if upper_left is None:
                parser.error(f"Error parsing upper left corner point '{opt.upper_left}'.")
            lower_right = parse_complex(opt.lower_right)
            if lower_right is None:
                parser.error(f"Error parsing lower right corner point '{opt.lower_right}'.")
            precision = opt.precision if opt.precision is not None else 64
            return ImageGeometry(
                width=opt.x_res,
                height=opt.y_res,
                upper_left=upper_left,
                lower_right=lower_right,
                precision=precision,
                max_iterations=opt.max_iterations,
            )

        params = RenderParameters(
            x_res=opt.x_res,
            y_res=opt.y_res,
            x_center=opt.x_center,
            y_center=opt.y_center,
            scale=opt.scale,
            max_iterations=opt.max_iterations,
            precision=opt.precision,
        )
        return compute_geometry(params)
    except ConfigurationError as exc:
        parser.error(str(exc))


def _hex_rgb(hex_color):
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError('inside_color must be in the form #RRGGBB.')
    try:
        return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError('inside_color must contain only hexadecimal digits.') from exc


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(attach_signed_values(sys.argv[1:] if argv is None else argv))

    logging.basicConfig(
        level=logging.DEBUG if opt.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    output_config = resolve_output_config(opt, parser)
    geometry = resolve_geometry(opt, parser)

    try:
        inside_rgb = _hex_rgb(opt.inside_color)
    except ValueError:
        logger.warning("Invalid inside_color '%s', defaulting to black.", opt.inside_color)
        inside_rgb = (0, 0, 0)

    logger.info(
        "Rendering %dx%d, %d iterations, %d bits, upper left %s, lower right %s",
        geometry.width,
        geometry.height,
        geometry.max_iterations,
        geometry.precision,
        geometry.upper_left,
        geometry.lower_right,
    )

    result = render_frame(geometry, workers=opt.workers, exhaustive=opt.exhaustive)

    mapper = ColorMapper(result.palette, inside_color=inside_rgb, scale=opt.palette_scale)
    write_image(mapper.colorize(result.buffer), output_config.image_path, output_config.image_format)
    logger.info("Wrote %s", output_config.image_path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
