"""
Command-line interface for csq_reader.
"""

import argparse
import logging
import sys

from .export import FrameExporter, SUPPORTED_FORMATS
from .reader import read_csq
from .utilities import TEMPERATURE_UNITS, convert_temperature

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="FLIR .csq thermal sequence reader"
    )

    parser.add_argument(
        "file_path",
        help="Path to the .csq file to read"
    )

    parser.add_argument(
        "--info",
        action="store_true",
        help="Show calibration information of the first frame"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show temperature statistics per frame"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        help="Write every frame to this directory"
    )

    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default="png",
        help="Frame format for --output-dir (colorized png or raw °C npy)"
    )

    parser.add_argument(
        "--cmap",
        default="rainbow",
        help="Matplotlib colormap used for png frames"
    )

    parser.add_argument(
        "--max-frames",
        type=int,
        help="Stop after this many frames"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort on the first bad frame instead of skipping it"
    )

    parser.add_argument(
        "--unit",
        choices=TEMPERATURE_UNITS,
        default="C",
        help="Temperature unit for --stats"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s %(levelname)s: %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    exporter = None
    count = 0
    try:
        with read_csq(args.file_path) as reader:
            if args.output_dir:
                exporter = FrameExporter(args.output_dir, fmt=args.format, cmap=args.cmap)

            for frame in reader.frames(skip_errors=not args.strict):
                if count == 0 and args.info:
                    print_info(frame)
                if args.stats:
                    print_stats(frame, args.unit)
                if exporter is not None:
                    exporter.submit(frame)
                count += 1
                if args.max_frames is not None and count >= args.max_frames:
                    break

        if exporter is not None:
            finished, exporter = exporter, None
            finished.close()
            print(f"{len(finished.written)} frames written to: {args.output_dir}")

        print(f"Frames read: {count}")

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if exporter is not None:
            try:
                exporter.close()
            except Exception as close_error:
                logger.error("Cannot finish export: %s", close_error)
        sys.exit(1)


def print_info(frame):
    """Print calibration information."""
    cal = frame.calibration

    print("\n=== THERMOGRAPHIC INFORMATION ===")
    print(f"Camera model: {cal.camera_model or 'Unknown'}")
    print(f"Image size: {frame.get_image_shape()}")
    print(f"Emissivity: {cal.emissivity}")
    print(f"Object distance: {cal.object_distance}m")
    print(f"Reflected temperature: {cal.reflected_temperature}°C")
    print(f"Atmospheric temperature: {cal.atmospheric_temperature}°C")
    print(f"Relative humidity: {cal.relative_humidity}%")
    print(f"IR window: {cal.window_temperature}°C, transmission {cal.window_transmission}")


def print_stats(frame, unit="C"):
    """Print temperature statistics in the given unit."""
    min_c, max_c = frame.get_temperature_range()
    temp_min = convert_temperature(min_c, unit)
    temp_max = convert_temperature(max_c, unit)
    temp_avg = convert_temperature(frame.get_average_temperature(), unit)
    spread = convert_temperature(max_c - min_c, unit, diff=True)
    symbol = "K" if unit == "K" else f"°{unit}"

    print(f"\n=== FRAME {frame.index} ===")
    print(f"Minimum temperature: {temp_min:.2f}{symbol}")
    print(f"Maximum temperature: {temp_max:.2f}{symbol}")
    print(f"Average temperature: {temp_avg:.2f}{symbol}")
    print(f"Temperature range: {spread:.2f}{symbol}")


if __name__ == "__main__":
    main()
