import argparse
import logging
from pathlib import Path

from .errors import SavefileError
from .logging_config import configure_logging
from .savefile import Savefile
from .settings import Settings
from .sniffer import SavefileType

logger = logging.getLogger(__name__)

WRITABLE_FORMATS = [SavefileType.LEGACY.value, SavefileType.OFFICIAL.value, SavefileType.BINARY_V1.value]

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNRECOGNIZED = 2


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="craftsave",
        description="Inspect and convert element-combination save files.",
    )
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a user settings YAML file (defaults to the platform config dir).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="Show the detected format and statistics of a save file.")
    info.add_argument("path", type=Path)

    convert = sub.add_parser("convert", help="Re-encode a save file into another format.")
    convert.add_argument("source", type=Path)
    convert.add_argument("destination", type=Path)
    convert.add_argument("--to", dest="target", choices=WRITABLE_FORMATS, required=True)
    convert.add_argument(
        "--no-header",
        dest="append_header",
        action="store_false",
        default=None,
        help="Omit the 4-byte Binary-V1 header.",
    )
    return parser.parse_args(argv)


def _load(path: Path, settings: Settings):
    savefile = Savefile.decode(path.read_bytes(), settings.savefile.to_options())
    if savefile is None:
        print(f"{path}: unrecognized save file format")
    return savefile


def _info(args, settings: Settings) -> int:
    savefile = _load(args.path, settings)
    if savefile is None:
        return EXIT_UNRECOGNIZED
    stats = savefile.stats
    print(f"format:      {savefile.type.value}")
    print(f"name:        {savefile.name}")
    print(f"elements:    {stats.elements}")
    print(f"discoveries: {stats.discoveries}")
    print(f"recipes:     {stats.recipes}")
    return EXIT_OK


def _convert(args, settings: Settings) -> int:
    savefile = _load(args.source, settings)
    if savefile is None:
        return EXIT_UNRECOGNIZED
    append_header = settings.binary.append_header if args.append_header is None else args.append_header
    data = savefile.encode(args.target, append_header=append_header)
    args.destination.write_bytes(data)
    logger.info("Converted %s (%s) to %s (%s)", args.source, savefile.type.value, args.destination, args.target)
    return EXIT_OK


def main(argv=None) -> int:
    args = parse_args(argv)
    settings_path = args.settings_path
    if settings_path is None and Settings.default_path().exists():
        settings_path = Settings.default_path()
    settings = Settings.load(user_path=settings_path)

    configure_logging(settings.logging.level, debug=args.debug)

    handlers = {"info": _info, "convert": _convert}
    try:
        return handlers[args.command](args, settings)
    except (SavefileError, OSError) as exc:
        logger.error("%s", exc)
        return EXIT_ERROR
