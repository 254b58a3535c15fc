"""Command line interface for viewbind.

Usage:
    viewbind generate <tree.yaml>... [--output-dir <dir>] [--dry-run]
    viewbind fields <tree.yaml> [--json]
    viewbind settings init [--force]
    viewbind settings show

Global options:
    --settings <path>   settings YAML (default: $VIEWBIND_SETTINGS or ./viewbind.yaml)
    -v, --verbose       debug logging
"""

import argparse
import logging
import sys

from viewbind.cli.fields import cmd_fields
from viewbind.cli.generate import cmd_generate
from viewbind.cli.settings import cmd_settings_init, cmd_settings_show


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="viewbind",
        description="Generate typed view bindings for object trees",
    )
    parser.add_argument(
        "--settings", default=None,
        help="Path to the settings YAML file",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command")

    # generate
    gen = sub.add_parser("generate", help="Generate or update view files")
    gen.add_argument("trees", nargs="+", help="Tree YAML files")
    gen.add_argument(
        "--output-dir", default=None,
        help="Folder for view files (default: $VIEWBIND_OUTPUT_DIR or Assets/Scripts/GeneratedUI)",
    )
    gen.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    # fields
    fld = sub.add_parser("fields", help="List the fields a view would declare")
    fld.add_argument("tree", help="Tree YAML file")
    fld.add_argument(
        "--json", action="store_true",
        help="Emit JSON instead of a table",
    )

    # settings
    st = sub.add_parser("settings", help="Settings file management")
    st_sub = st.add_subparsers(dest="subcommand")
    st_init = st_sub.add_parser("init", help="Write a settings file with defaults")
    st_init.add_argument(
        "--force", action="store_true",
        help="Overwrite an existing settings file",
    )
    st_sub.add_parser("show", help="Print the effective settings")

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    dispatch = {
        ("settings", "init"): cmd_settings_init,
        ("settings", "show"): cmd_settings_show,
    }

    # Handle top-level commands (no subcommand)
    if args.command == "generate":
        return cmd_generate(args)
    if args.command == "fields":
        return cmd_fields(args)

    subcommand: str | None = getattr(args, "subcommand", None)
    handler = dispatch.get((args.command, subcommand or ""))
    if handler:
        return handler(args)

    parser.parse_args([args.command, "--help"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
