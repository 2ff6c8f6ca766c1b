# Copyright 2026 Google LLC
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
#
# SPDX-License-Identifier: Apache-2.0

"""CLI entry point for nsv.

Constructs the git backend and the run options, then hands both to
:func:`~nsv.resolver.next_version`.

Subcommands::

    nsv                 Print the next semantic version tag
    nsv version         Show nsv build information
    nsv explain         Explain an error code

Usage::

    # Next tag for the whole repository:
    nsv

    # Next tag for one component of a monorepo, with the reasoning:
    nsv --path src/search --show

    # Custom output:
    nsv --format 'v{{ .Version }}'

    # Explain an error:
    nsv explain NSV-FORMAT-INVALID
"""

from __future__ import annotations

import argparse
import json
import platform
import sys
from pathlib import Path

from rich_argparse import RichHelpFormatter

from nsv import __version__
from nsv.backends.vcs import GitCLIBackend
from nsv.config import load_options
from nsv.errors import NsvError, explain, render_error
from nsv.logging import configure_logging, get_logger
from nsv.report import print_report
from nsv.resolver import next_version

logger = get_logger(__name__)


def _cmd_next(args: argparse.Namespace) -> int:
    """Handle the default command: compute and print the next tag."""
    cwd = Path.cwd()
    provider = GitCLIBackend.discover(cwd)
    options = load_options(
        provider.repo_root(),
        overrides={
            'show': True if args.show else None,
            'format': args.format,
            'path': args.path,
        },
    )
    result = next_version(provider, options, cwd=cwd)
    if options.show:
        print_report(result)
    if result.released:
        print(result.output)  # noqa: T201 - CLI output
    return 0


def _cmd_version(args: argparse.Namespace) -> int:
    """Handle the ``version`` subcommand."""
    if args.short:
        print(__version__)  # noqa: T201 - CLI output
        return 0
    info = {
        'version': __version__,
        'python': platform.python_version(),
        'platform': f'{sys.platform}/{platform.machine()}',
    }
    print(json.dumps(info, indent=2))  # noqa: T201 - CLI output
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    parser = argparse.ArgumentParser(
        prog='nsv',
        description='Next semantic version from conventional commits.',
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    parser.add_argument(
        '--show',
        action='store_true',
        help='Explain how the version was chosen (printed to stderr).',
    )
    parser.add_argument(
        '--format',
        '-f',
        metavar='TEMPLATE',
        default=None,
        help="Output template, e.g. 'v{{ .Version }}'. Defaults to the tag as is.",
    )
    parser.add_argument(
        '--path',
        '-p',
        metavar='PATH',
        default=None,
        help='Scope the run to a directory, relative to the repository root.',
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Log every classified commit.',
    )
    verbosity.add_argument(
        '--quiet',
        '-q',
        action='store_true',
        help='Only log errors.',
    )
    parser.add_argument(
        '--json-log',
        action='store_true',
        help='Emit logs as JSON lines.',
    )

    subparsers = parser.add_subparsers(dest='command')

    version_parser = subparsers.add_parser(
        'version',
        help='Show nsv build information.',
    )
    version_parser.add_argument(
        '--short',
        action='store_true',
        help='Print only the version number.',
    )

    explain_parser = subparsers.add_parser(
        'explain',
        help='Explain an error code.',
    )
    explain_parser.add_argument(
        'code',
        help='Error code to explain (e.g., NSV-FORMAT-INVALID).',
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments to parse.  Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)

    try:
        command = args.command
        if command == 'version':
            return _cmd_version(args)
        if command == 'explain':
            return _cmd_explain(args)
        return _cmd_next(args)

    except NsvError as exc:
        render_error(exc)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130


def _main() -> None:
    """Wrapper for pyproject.toml [project.scripts] entry point."""
    sys.exit(main())


__all__ = [
    'build_parser',
    'main',
]
