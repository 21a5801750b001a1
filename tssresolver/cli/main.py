"""
TSS Credential Resolver CLI - Main entry point.

Manual testing and diagnostics for the resolver on a MID server host.

Usage:
    tssresolver resolve <id> <type>     # Resolve like the platform would
    tssresolver init [--force]          # Register the tss client
    tssresolver status                  # Show installation state
"""

import argparse
import logging
import sys
from pathlib import Path

from tssresolver import __version__
from tssresolver.core.config import Config
from tssresolver.sdk.client import configure_logging


def main(argv=None):
    """Main CLI entry point."""

    parser = argparse.ArgumentParser(
        prog="tssresolver",
        description="Resolve Secret Server credentials through the tss SDK client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  resolve     Resolve a secret into platform credential fields
  init        Register the tss client with Secret Server
  status      Show SDK folder, marker and mapping table state

Examples:
  # Check the installation
  tssresolver status

  # First-time registration (reads qualifier.properties, then deletes it)
  tssresolver init

  # Resolve secret 42 as an SSH credential
  tssresolver resolve 42 ssh
  tssresolver resolve 42 ssh --show-values

  # Use a different SDK folder (or set TSS_LOCATION)
  tssresolver --install-dir /opt/tss status

Use 'tssresolver <command> --help' for more information on a command.
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--install-dir", "-d",
        help="SDK folder (default: $TSS_LOCATION or platform default)"
    )
    parser.add_argument(
        "--config", "-c",
        help="resolver.yaml path (default: <install-dir>/resolver.yaml)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    # Resolve subcommand
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a secret into credential fields",
        description="Resolve a secret exactly as the orchestration platform would",
    )
    _setup_resolve_parser(resolve_parser)

    # Init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Register the tss client with Secret Server",
        description="Run tss init and cache setup from qualifier.properties",
    )
    init_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Initialize even if credentials.config exists"
    )

    # Status subcommand
    subparsers.add_parser(
        "status",
        help="Show installation state",
        description="Show SDK folder, executable, marker and mapping table state",
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    install_dir = Path(args.install_dir) if args.install_dir else None
    config_path = Path(args.config) if args.config else None

    try:
        config = Config.load(install_dir, config_path)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    _setup_logging(config, args.debug)

    # Dispatch to subcommand handler
    from tssresolver.cli import commands

    if args.command == "resolve":
        return commands.handle_resolve(args, config)
    elif args.command == "init":
        return commands.handle_init(args, config)
    elif args.command == "status":
        return commands.handle_status(args, config)
    else:
        parser.print_help()
        return 1


def _setup_resolve_parser(parser: argparse.ArgumentParser):
    """Set up resolve subcommand parser."""
    parser.add_argument(
        "id",
        help="Secret Server secret id"
    )
    parser.add_argument(
        "type",
        help="Credential type (mapping table prefix, e.g. ssh, snmp, windows)"
    )
    parser.add_argument(
        "--show-values",
        action="store_true",
        help="Print resolved values instead of masking them"
    )


def _setup_logging(config: Config, debug: bool):
    """Attach console (and optional file) handlers per resolver.yaml."""
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, config.logging.level, logging.INFO)

    configure_logging(level=level, handler=logging.StreamHandler(sys.stderr))

    if config.logging.file:
        config.logging.file.parent.mkdir(parents=True, exist_ok=True)
        configure_logging(level=level, handler=logging.FileHandler(config.logging.file))


if __name__ == "__main__":
    sys.exit(main())
