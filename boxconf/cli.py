# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for boxconf.

Commands:

    validate: Check box file syntax and shape
    resolve: Load box files and print the applied machine configuration

Example:
    Validate box files:
        ```bash
        $ boxconf validate Boxfile.yaml app/Boxfile.yaml
        ```

    Resolve as if running on macOS:
        ```bash
        $ boxconf resolve Boxfile.yaml --platform darwin
        ```

    Emit JSON instead of YAML:
        ```bash
        $ boxconf resolve Boxfile.yaml --format json
        ```

Exit Codes:

- 0: Success
- 1: Error (invalid box file, bad cookbook path, unsupported directive)

Note:
    Verbose mode shows full tracebacks on errors for debugging.
    Debug mode implies verbose mode and shows every directive.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
import json
from pathlib import Path
import sys

import yaml

from boxconf.core import resolve_machine
from boxconf.exceptions import BoxconfError
from boxconf.logging import get_logger, set_global_logger
from boxconf.validation import validate_declaration


def _package_version() -> str:
    try:
        return version("boxconf")
    except PackageNotFoundError:
        from boxconf import __version__

        return __version__


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'boxconf validate' command.

    Args:
        args: Parsed command-line arguments containing box file paths and
            the verbose flag.

    Returns:
        Exit code (0 if every file is valid, 1 otherwise).

    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    failed = 0
    for raw in args.files:
        result = validate_declaration(Path(raw).resolve(), verbose=args.verbose)

        print("=" * 70)
        print(f"Box file:    {result.path}")
        print(f"Status:      {result.status.upper()}")
        print(f"Directives:  {result.directive_count}")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        for error in result.errors:
            print(f"  [X] {error}")
        if result.status != "valid":
            failed += 1

    print("=" * 70)
    print()
    if failed:
        print(f"[FAILED] {failed} box file(s) failed validation.")
        return 1
    print("[SUCCESS] All box files are valid!")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handler for 'boxconf resolve' command.

    Loads every box file into one store, runs the commit pass and prints
    the resulting machine configuration.

    Args:
        args: Parsed command-line arguments containing box file paths,
            platform override, output format and flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    paths = [Path(raw).resolve() for raw in args.files]
    for path in paths:
        if not path.exists():
            print(f"Error: Box file not found: {path}")
            return 1

    try:
        result = resolve_machine(
            paths,
            platform=args.platform,
            use_defaults=not args.no_defaults,
            verbose=args.verbose,
            debug=args.debug,
        )
    except BoxconfError as err:
        print(f"Error: {err}")
        if args.verbose or args.debug:
            import traceback

            traceback.print_exc()
        return 1

    if args.format == "json":
        print(json.dumps(result.machine, indent=2))
    else:
        print(yaml.safe_dump(result.machine, default_flow_style=False, sort_keys=False), end="")

    if args.verbose:
        print()
        print(f"Sources:     {', '.join(str(p) for p in result.sources)}")
        print(f"NFS:         {result.nfs_enabled}")
        print(f"Provisioned: {result.provisioned}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the boxconf CLI.

    This function is registered as the 'boxconf' console script in pyproject.toml.
    """
    parser = argparse.ArgumentParser(
        prog="boxconf",
        description="boxconf - deferred machine configuration from shared box files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"boxconf {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate box file syntax and shape",
        description="Check box files for YAML errors and malformed directives without applying them.",
    )
    parser_validate.add_argument(
        "files",
        nargs="+",
        help="Paths to box YAML files",
    )
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # 'resolve' command
    parser_resolve = subparsers.add_parser(
        "resolve",
        help="Apply box files and print the machine configuration",
        description="Load box files in order, run the single commit pass and print the result.",
    )
    parser_resolve.add_argument(
        "files",
        nargs="+",
        help="Paths to box YAML files, applied in order",
    )
    parser_resolve.add_argument(
        "--platform",
        default=None,
        help="Platform identifier for the NFS decision (default: BOXCONF_PLATFORM or sys.platform)",
    )
    parser_resolve.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml)",
    )
    parser_resolve.add_argument(
        "--no-defaults",
        action="store_true",
        help="Do not look for defaults/base.yaml",
    )
    parser_resolve.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser_resolve.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_resolve.set_defaults(func=cmd_resolve)

    args = parser.parse_args(argv)
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
