"""Main entry point for the Nanoscope client."""

import sys
from pathlib import Path

from dotenv import load_dotenv

from nanoscope.cli import main as cli_main
from nanoscope.logging_config import setup_logging


def main() -> int:
    """Run the command line."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
