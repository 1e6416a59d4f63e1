"""Command-line interface: ``nanoscope [start|emulator|flash|open]``."""

import argparse
import sys
import webbrowser
from pathlib import Path

from dotenv import load_dotenv

from .app import Application, IApplication, IncompatibleVersionError
from .config import ROM_VERSION
from .device import DeviceError, NoDevicesFoundError
from .device.session import EXT_OPTIONS
from .importer import TraceFormatError
from .logging_config import get_logger, setup_logging
from .packages import FlashError
from .report import ReportError
from .timeline import TimelineError

logger = get_logger(__name__)

FLASH_WARNING_MESSAGE = """
###################################################
# WARNING: This will wipe all of your phone data! #
###################################################"""


class CommandError(Exception):
    """User-facing failure; printed and turned into exit status 1."""


def incompatibility_message(error: IncompatibleVersionError) -> str:
    if error.rom_version is None:
        return (
            "The OS running on your device is not supported. "
            "In order to install the Nanoscope ROM, run the following:\n"
            f"{FLASH_WARNING_MESSAGE}\n\n"
            "    $ nanoscope flash"
        )
    versions = (
        f"    ROM Version: {error.rom_version}\n"
        f"    Supported Version: {error.supported_version}\n"
    )
    if error.rom_version < error.supported_version:
        return (
            "Your Nanoscope ROM is out of date and incompatible with your client:\n"
            f"{versions}\n"
            "To update your ROM, run the following:\n"
            "    $ pip install --upgrade nanoscope\n"
            "    $ nanoscope flash"
        )
    return (
        "Your Nanoscope client is out of date and incompatible with your ROM:\n"
        f"{versions}\n"
        "To update your client, run the following:\n"
        "    $ pip install --upgrade nanoscope"
    )


def ensure_compatibility(app: IApplication) -> None:
    try:
        app.check_version()
    except NoDevicesFoundError as e:
        raise CommandError("No adb-connected devices found.") from e
    except IncompatibleVersionError as e:
        raise CommandError(incompatibility_message(e)) from e


def confirm(warning: str) -> bool:
    print(f"{warning}\n")
    response = input("Are you sure you want to continue? [y/N]: ").strip().lower()
    return response in ("y", "yes")


def show(report: Path, args: argparse.Namespace) -> None:
    print(f"Report written to {report}")
    if not args.no_browser:
        webbrowser.open(report.resolve().as_uri())


def existing_file(value: str) -> Path:
    path = Path(value)
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"File does not exist: {value}")
    return path


def open_report(
    app: IApplication,
    trace: Path,
    sample: Path | None,
    state: Path | None,
    args: argparse.Namespace,
) -> None:
    try:
        report = app.open_trace(trace, sample, state, dest=args.output)
    except (TraceFormatError, TimelineError, ReportError) as e:
        raise CommandError(f"Could not open {trace}: {e}") from e
    show(report, args)


def cmd_open(app: IApplication, args: argparse.Namespace) -> int:
    trace: Path = args.tracefile
    sample = args.sample_data or Path(f"{trace}.timer")
    state = args.state_data or Path(f"{trace}.state")
    open_report(app, trace, sample, state, args)
    return 0


def cmd_start(app: IApplication, args: argparse.Namespace) -> int:
    ensure_compatibility(app)
    try:
        session = app.start_tracing(args.package, args.ext)
    except DeviceError as e:
        raise CommandError(f"Could not start tracing: {e}") from e
    suffix = f" with {args.ext}" if args.ext else ""
    input(f"Tracing{suffix}... (Press ENTER to stop)")
    print("Flushing trace data... (Do not close app)")
    pulled = session.stop()
    open_report(app, pulled.trace, pulled.sample, pulled.state, args)
    return 0


def cmd_flash(app: IApplication, args: argparse.Namespace) -> int:
    if not args.yes and not confirm(FLASH_WARNING_MESSAGE):
        return 0
    try:
        app.flash_device(args.url)
    except FlashError as e:
        raise CommandError(str(e)) from e
    print("Flash complete.")
    return 0


def cmd_emulator(app: IApplication, args: argparse.Namespace) -> int:
    try:
        return app.launch_emulator(args.url)
    except FlashError as e:
        raise CommandError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nanoscope",
        description=f"Nanoscope client (ROM {ROM_VERSION})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="Starts tracing on adb-connected device.")
    start.add_argument("--package", default=None, help="Package to trace (default: foreground app)")
    start.add_argument(
        "--ext",
        nargs="?",
        const="perf_timer",
        choices=EXT_OPTIONS,
        default=None,
        help="Also collect timer and state data (default: perf_timer)",
    )
    start.set_defaults(handler=cmd_start)

    emulator = sub.add_parser("emulator", help="Launches a Nanoscope emulator.")
    emulator.add_argument("--url", default=None, help="Emulator package URL")
    emulator.set_defaults(handler=cmd_emulator)

    flash = sub.add_parser("flash", help="Flashes adb-connected device with Nanoscope image.")
    flash.add_argument("--url", default=None, help="ROM package URL")
    flash.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")
    flash.set_defaults(handler=cmd_flash)

    open_ = sub.add_parser(
        "open",
        help="Opens a Nanoscope or Chrome trace file with the Nanoscope Visualizer.",
    )
    open_.add_argument("tracefile", type=existing_file)
    open_.add_argument("--sample-data", type=existing_file, default=None)
    open_.add_argument("--state-data", type=existing_file, default=None)
    open_.set_defaults(handler=cmd_open)

    for command in (start, open_):
        command.add_argument("-o", "--output", type=Path, default=None, help="Report path")
        command.add_argument("--no-browser", action="store_true", help="Do not open the report")

    return parser


def main(argv: list[str] | None = None, app: IApplication | None = None) -> int:
    args = build_parser().parse_args(argv)
    app = app or Application()
    try:
        return args.handler(app, args)
    except CommandError as e:
        logger.info("Command %s failed: %s", args.command, e)
        print(e, file=sys.stderr)
        return 1


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    setup_logging()
    sys.exit(main())
