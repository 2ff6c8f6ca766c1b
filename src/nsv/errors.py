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

"""Structured error system for nsv.

Every error has a unique ``NSV-NAMED-KEY`` code, a human-readable
message, and an optional hint with a suggested fix.

Code categories::

    NSV-TAG-*       Tag grammar errors
    NSV-FORMAT-*    Output template errors
    NSV-CONFIG-*    Configuration errors (nsv.toml, NSV_* env vars)
    NSV-SCOPE-*     Monorepo path scoping errors
    NSV-VCS-*       Source-control provider errors

Only conditions that abort a run are errors.  Malformed ``nsv:``
directives and non-conventional commit headers are tolerated and
logged at debug level instead.

Usage::

    from nsv.errors import E, NsvError

    raise NsvError(
        code=E.TAG_INVALID_FORMAT,
        message="'release-1' is not a semantic version tag",
        hint='Tags must look like [prefix/][v]MAJOR.MINOR.PATCH.',
    )
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.markup import escape as rich_escape


class ErrorCode(str, Enum):
    """Enumeration of all nsv diagnostic codes."""

    # Tags and templates
    TAG_INVALID_FORMAT = 'NSV-TAG-INVALID-FORMAT'
    FORMAT_INVALID = 'NSV-FORMAT-INVALID'

    # Configuration
    CONFIG_INVALID_KEY = 'NSV-CONFIG-INVALID-KEY'
    CONFIG_INVALID_VALUE = 'NSV-CONFIG-INVALID-VALUE'
    CONFIG_PARSE_ERROR = 'NSV-CONFIG-PARSE-ERROR'

    # Scoping
    SCOPE_OUTSIDE_REPO = 'NSV-SCOPE-OUTSIDE-REPO'

    # Source control
    VCS_NOT_A_REPOSITORY = 'NSV-VCS-NOT-A-REPOSITORY'
    VCS_COMMAND_FAILED = 'NSV-VCS-COMMAND-FAILED'


# Convenience alias for shorter imports.
E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``NSV-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class NsvError(Exception):
    """Base exception for all nsv errors.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.TAG_INVALID_FORMAT: ErrorInfo(
        code=E.TAG_INVALID_FORMAT,
        message='A tag does not follow the [prefix/][v]MAJOR.MINOR.PATCH[-pre][+meta] grammar.',
        hint='Retag the release with a semantic version, e.g. v1.2.3 or api/1.2.3-rc.1.',
    ),
    E.FORMAT_INVALID: ErrorInfo(
        code=E.FORMAT_INVALID,
        message='The --format template must reference exactly the {{ .Version }} field.',
        hint='Use a template such as "v{{ .Version }}" or "api/{{ .Version }}".',
    ),
    E.CONFIG_INVALID_KEY: ErrorInfo(
        code=E.CONFIG_INVALID_KEY,
        message='nsv.toml contains a key nsv does not recognise.',
        hint='Valid keys are: format, path, pre_label, show.',
    ),
    E.CONFIG_INVALID_VALUE: ErrorInfo(
        code=E.CONFIG_INVALID_VALUE,
        message='A configuration value has the wrong type or an unsupported value.',
        hint='Booleans accept 1/0, true/false, yes/no and on/off.',
    ),
    E.CONFIG_PARSE_ERROR: ErrorInfo(
        code=E.CONFIG_PARSE_ERROR,
        message='nsv.toml is not valid TOML.',
        hint='Fix the syntax error at the reported line and column, or remove the file.',
    ),
    E.SCOPE_OUTSIDE_REPO: ErrorInfo(
        code=E.SCOPE_OUTSIDE_REPO,
        message='The requested --path is not inside the repository.',
        hint='Pass a path relative to the repository root, e.g. --path src/search.',
    ),
    E.VCS_NOT_A_REPOSITORY: ErrorInfo(
        code=E.VCS_NOT_A_REPOSITORY,
        message='The working directory is not inside a git repository.',
        hint='Run nsv from within a git checkout.',
    ),
    E.VCS_COMMAND_FAILED: ErrorInfo(
        code=E.VCS_COMMAND_FAILED,
        message='A git command exited with a non-zero status.',
        hint="Run 'nsv -v' to see the failing git invocation.",
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"NSV-FORMAT-INVALID"``.

    Returns:
        A formatted explanation string, or ``None`` if the code is unknown.
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return None

    info = ERRORS.get(error_code)
    if info is None:
        return f'{code}: No detailed explanation available.'

    lines = [f'{code}: {info.message}']
    if info.hint:
        lines.append(f'  Hint: {info.hint}')
    return '\n'.join(lines)


def render_error(exc: NsvError, *, file: TextIO | None = None) -> None:
    """Render an error in Rust-compiler style.

    Output format::

        error[NSV-FORMAT-INVALID]: unknown template field '.Tag'
          |
          = hint: Use a template such as "v{{ .Version }}".

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr

    if out.isatty():
        console = Console(file=out, highlight=False)
        msg = rich_escape(exc.info.message)
        console.print(
            f'[bold red]error[/bold red][bold red]\\[{exc.code.value}][/bold red][bold]: {msg}[/bold]',
        )
        if exc.hint:
            hint = rich_escape(exc.hint)
            console.print('  [dim]|[/dim]')
            console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {hint}')
    else:
        print(f'error[{exc.code.value}]: {exc.info.message}', file=out)  # noqa: T201 - CLI output
        if exc.hint:
            print('  |', file=out)  # noqa: T201 - CLI output
            print(f'  = hint: {exc.hint}', file=out)  # noqa: T201 - CLI output


__all__ = [
    'E',
    'ERRORS',
    'ErrorCode',
    'ErrorInfo',
    'NsvError',
    'explain',
    'render_error',
]
