"""Command line entry point: run a curved screen workflow from a YAML config."""

import argparse
import sys

from curved_screen.core.logging_setup import setup_logging
from curved_screen.config.errors import ConfigError
from curved_screen.driver import Driver


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="curved-screen",
        description="Build curved screen layouts from a YAML workflow")
    parser.add_argument("config", help="path to the YAML configuration file")
    parser.add_argument("--levels", nargs="+", default=None,
                        help="log levels to display, e.g. ERROR WARNING INFO COORD DEBUG")
    args = parser.parse_args(argv)

    log_path = setup_logging(display_levels=args.levels)
    print(f"Logging to: {log_path}")

    driver = Driver()
    try:
        driver.load_configuration(args.config)
        driver.workflow()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
