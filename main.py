#!/usr/bin/env python3
"""Apigee hybrid auth.

Signs in to Apigee with a Google account in a real browser and saves the
session headers (cookie, CSRF token) for use with curl or other API tools.

Usage:
    apigee-hybrid-auth -u username@google.com -p SuperSecret
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

from apigee_auth import __version__
from apigee_auth.utils.config import get_config, OUTPUT_FORMATS
from apigee_auth.utils.logger import setup_logging


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Sign in to Apigee and save the API auth headers",
        usage="%(prog)s -u username@google.com -p SuperSecret",
    )

    parser.add_argument(
        "-u", "--username",
        type=str,
        help="Google account username (overrides APIGEE_USERNAME env var)"
    )
    parser.add_argument(
        "-p", "--password",
        type=str,
        help="Google account password (overrides APIGEE_PASSWORD env var)"
    )
    parser.add_argument(
        "-b", "--browser",
        action="store_true",
        default=None,
        help="Show the browser window instead of running headless"
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        default=None,
        help="Enable debug output and save debug.html/debug.png on failure"
    )
    parser.add_argument(
        "-f", "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: curl)"
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Output directory (overrides OUTPUT_DIRECTORY env var)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides LOG_LEVEL env var)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=__version__
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    try:
        config = get_config()
        config.validate()
        options = config.to_options(
            username=args.username,
            password=args.password,
            headless=False if args.browser else None,
            debug=args.debug,
            output_format=args.format,
            output_directory=Path(args.output) if args.output else None,
        )
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    # Setup logging
    log_level = args.log_level or ("DEBUG" if options.debug else config.log_level)
    setup_logging(log_level=log_level, log_to_console=True, log_dir=config.log_dir)

    from apigee_auth.auth.authenticator import ApigeeAuthenticator

    print(f"Signing in to {options.app_url} as {options.username}...", file=sys.stderr)
    outcome = ApigeeAuthenticator(options).run()

    if outcome.success:
        print(
            f'✓ Authentication succeeded, org is "{outcome.org_id}", '
            f'headers saved to "{outcome.output_path}"',
            file=sys.stderr,
        )
    else:
        print("✗ Authentication failed", file=sys.stderr)
        print(f"error: {outcome.message}", file=sys.stderr)
        if outcome.unexpected and outcome.trace:
            print(outcome.trace, file=sys.stderr)

    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
