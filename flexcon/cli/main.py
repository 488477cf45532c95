"""Entry point for the flexcon console.

Usage:
    flexcon                          # wait for a discovery broadcast
    flexcon --radio 192.168.1.50     # connect directly
    flexcon --radio 10.0.0.5:4992

FLEXCON_RADIO (environment or .env) supplies the default for --radio; the
config file's connection.radio is used when neither is given.
"""

import argparse
import asyncio
import logging
import os

from dotenv import load_dotenv
from prompt_toolkit.patch_stdout import patch_stdout

from flexcon.cli.output import print_error, print_status
from flexcon.config.loader import load_config
from flexcon.config.schema import Config
from flexcon.console.app import start
from flexcon.console.command_loop import PromptInput
from flexcon.core.constants import DISCOVER
from flexcon.core.encoding import configure_stdio
from flexcon.core.errors import ConfigError, RadioConnectionError
from flexcon.core.logging import configure_logging
from flexcon.display.console import get_console
from flexcon.display.theme import load_theme

# Configure UTF-8 at module load
configure_stdio()

# Load .env file if present
load_dotenv()

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="flexcon",
        description="Interactive console for SmartSDR radios",
    )
    parser.add_argument(
        "--radio",
        default=os.environ.get("FLEXCON_RADIO"),
        metavar="ADDRESS",
        help=f"Radio to connect to: host, host:port or {DISCOVER} (default: {DISCOVER})",
    )
    return parser.parse_args(argv)


async def run_console(radio: str, config: Config) -> None:
    """Run the interactive session with output kept above the prompt."""
    theme = load_theme(config.theme)
    input_source = PromptInput(label=config.console.prompt, style=theme.prompt)

    with patch_stdout(raw=True):
        # Re-bind logging to the patched stderr
        configure_logging(config.log_level)
        if radio == DISCOVER:
            print_status("Looking for a radio...")
        await start(radio, get_console(), input_source, config=config)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the flexcon CLI."""
    args = parse_args(argv)

    try:
        config = load_config()
        load_theme(config.theme)
    except ConfigError as e:
        print_error(e.message)
        raise SystemExit(1)

    configure_logging(config.log_level)
    radio = args.radio or config.connection.radio

    try:
        asyncio.run(run_console(radio, config))
    except RadioConnectionError as e:
        logger.debug("Connection failed", exc_info=True)
        print_error(e.message)
        raise SystemExit(1)
    except KeyboardInterrupt:
        # Ctrl+C during startup
        pass


if __name__ == "__main__":
    main()
