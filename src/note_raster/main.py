import argparse
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO

from note_raster.configuration import get_default_config, load_config_file, save_config_file

logger = logging.getLogger("note_raster")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@contextmanager
def _open_input(input_path: str) -> Iterator[BinaryIO]:
    if input_path == "-":
        yield sys.stdin.buffer
        return
    with Path(input_path).open("rb") as stream:
        yield stream


def render_event_image(
    input_path: str,
    output_path: str,
    width: int,
    height: int,
    output_size: tuple[int, int] | None,
) -> int:
    from note_raster.event_io import ingest_events_with_report, read_event_lines
    from note_raster.image_output import finalize_image
    from note_raster.rasterizer import EventRasterizer, RasterRangeError
    from note_raster.time_range import compute_time_range

    with _open_input(input_path) as stream:
        report = ingest_events_with_report(read_event_lines(stream))

    time_range = compute_time_range(report.events)
    if time_range is None:
        logger.warning("no data provided; aborting")
        return 0

    rasterizer = EventRasterizer(width=width, height=height)
    try:
        img = rasterizer.rasterize(report.events, time_range)
    except RasterRangeError as exc:
        logger.error("%s", exc)
        return 1

    try:
        written = finalize_image(img, path=output_path, output_size=output_size)
    except OSError as exc:
        logger.error("failed to write %s: %s", output_path, exc)
        return 1

    print(
        f"Rendered {len(report.events)} events "
        f"({report.bad_lines} bad, {report.unreadable_lines} unreadable lines skipped)"
    )
    print(f"Wrote image to {written}")
    return 0


def check_events(input_path: str) -> int:
    from note_raster.event_io import read_event_lines
    from note_raster.event_parser import BadEvent, parse_event_line

    print("line,status,channel,timestamp,note,detail")
    code = 0
    with _open_input(input_path) as stream:
        for line in read_event_lines(stream):
            if line.text is None:
                code = 2
                print(f"{line.line_number},unreadable,,,,\"{line.error}\"")
                continue
            result = parse_event_line(line.text)
            if isinstance(result, BadEvent):
                code = 2
                detail = str(result).replace('"', '""')
                print(f"{line.line_number},{result.kind.value},,,,\"{detail}\"")
                continue
            print(f"{line.line_number},ok,{result.channel},{result.timestamp},{result.note},")
    return code


def _add_common_args(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "--input",
        type=str,
        default="-",
        help="Event text file, one '(channel, timestamp, note)' per line (default: stdin).",
    )
    sub.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Diagnostic verbosity on stderr (default: WARNING).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render note event streams into raster images")
    subparsers = parser.add_subparsers(dest="command")

    render = subparsers.add_parser("render", help="Render events to a PNG image")
    _add_common_args(render)
    render.add_argument("--output", type=str, default=None, help="Output PNG path (default: output.png).")
    render.add_argument("--width", type=int, default=None, help="Raster width in pixels (default: 512).")
    render.add_argument("--height", type=int, default=None, help="Raster height in pixels (default: 128).")
    render.add_argument(
        "--output-width",
        type=int,
        default=None,
        help="Width of the saved image after nearest-neighbour resize (default: 512).",
    )
    render.add_argument(
        "--output-height",
        type=int,
        default=None,
        help="Height of the saved image after nearest-neighbour resize (default: 2048).",
    )
    render.add_argument(
        "--no-resize",
        action="store_true",
        help="Save the raster at its native size.",
    )
    render.add_argument("--config", type=str, default=None, help="JSON config file with a 'render' section.")
    render.add_argument(
        "--save-config",
        dest="save_config_path",
        type=str,
        default=None,
        help="Write the effective config to this path before rendering.",
    )

    check = subparsers.add_parser("check", help="Validate event lines and print them as CSV")
    _add_common_args(check)
    return parser


def _resolve_render_settings(args: argparse.Namespace) -> dict[str, Any]:
    config = load_config_file(args.config) if args.config else get_default_config()
    settings = dict(config["render"])
    for key in ("width", "height", "output_width", "output_height", "output"):
        value = getattr(args, key)
        if value is not None:
            settings[key] = value
    if args.no_resize:
        settings["resize"] = False
    if args.log_level is not None:
        config["logging"]["level"] = args.log_level
    config["render"] = settings
    return config


def _validate_render_settings(parser: argparse.ArgumentParser, settings: dict[str, Any]) -> None:
    for key in ("width", "height", "output_width", "output_height"):
        value = settings[key]
        if not isinstance(value, int) or value <= 0:
            parser.error(f"--{key.replace('_', '-')} must be > 0.")
    if not settings["output"]:
        parser.error("--output must not be empty.")


def _validate_log_level(parser: argparse.ArgumentParser, level: Any) -> str:
    level = str(level).upper()
    if level not in LOG_LEVELS:
        parser.error(f"log level must be one of {', '.join(LOG_LEVELS)}.")
    return level


def _init_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(level)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in ("render", "check", "-h", "--help"):
        argv = ["render", *argv]
    args = parser.parse_args(argv)

    if args.command == "check":
        _init_logging(args.log_level or "WARNING")
        raise SystemExit(check_events(input_path=args.input))

    if args.command == "render":
        try:
            config = _resolve_render_settings(args)
        except (OSError, ValueError) as exc:
            parser.error(f"--config could not be loaded: {exc}")
        settings = config["render"]
        _validate_render_settings(parser, settings)
        _init_logging(_validate_log_level(parser, config["logging"]["level"]))
        if args.save_config_path:
            save_config_file(args.save_config_path, config)
        output_size = (settings["output_width"], settings["output_height"]) if settings["resize"] else None
        raise SystemExit(
            render_event_image(
                input_path=args.input,
                output_path=settings["output"],
                width=settings["width"],
                height=settings["height"],
                output_size=output_size,
            )
        )

    parser.error(f"Unsupported command: {args.command}")


if __name__ == "__main__":
    main()
