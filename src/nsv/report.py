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

"""The ``--show`` report: why nsv picked the tag it printed.

Example (colors omitted)::

     #  Commit   Type   Bump   Header
     0  4f1c2a9  other  none   docs: describe the search flags
  →  1  9b03e11  fix    patch  fix(search): handle empty queries
     2  c7d8e42  feat   minor  feat(search): add fuzzy matching

    previous  0.1.0
    log dir   (repository root)
    level     patch (natural patch)
    next      0.1.1
"""

from __future__ import annotations

import sys
from io import StringIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from nsv._types import BumpLevel
from nsv.resolver import NextVersion

_BUMP_STYLE: dict[BumpLevel, str] = {
    BumpLevel.NONE: 'dim',
    BumpLevel.PATCH: 'green',
    BumpLevel.MINOR: 'yellow',
    BumpLevel.MAJOR: 'bold red',
}


def print_report(result: NextVersion, console: Console | None = None) -> None:
    """Print the decision behind ``result``.

    Args:
        result: Outcome of :func:`~nsv.resolver.next_version`.
        console: Rich :class:`Console` to print to.  When ``None``, a
            console on ``sys.stderr`` is created so stdout only ever
            carries the tag.
    """
    if console is None:
        console = Console(file=sys.stderr)

    if result.log:
        table = Table(show_header=True, header_style='bold', show_edge=False, pad_edge=False)
        table.add_column('', width=1)
        table.add_column('#', justify='right')
        table.add_column('Commit', style='cyan')
        table.add_column('Type')
        table.add_column('Bump')
        table.add_column('Header', overflow='fold')
        for i, commit in enumerate(result.log):
            matched = i == result.match.index
            table.add_row(
                '→' if matched else '',
                str(i),
                commit.short_ref,
                commit.type.value if commit.conventional else '-',
                Text(commit.bump.label, style=_BUMP_STYLE[commit.bump]),
                commit.header,
                style='bold' if matched else None,
            )
        console.print(table)
        console.print()
    else:
        console.print('[dim]No commits in scope since the previous tag.[/]')

    resolution = result.resolution
    rows: list[tuple[str, str]] = [
        ('previous', result.previous.raw if result.previous else '(none)'),
        ('log dir', result.log_dir or '(repository root)'),
        ('level', f'{resolution.level.label} (natural {resolution.natural.label})'),
    ]
    directives = resolution.directives.as_tuple()
    if directives:
        rows.append(('directives', ', '.join(str(d) for d in directives)))
    rows.append(('next', result.tag.raw if result.tag else '(no release)'))

    summary = Table.grid(padding=(0, 2))
    summary.add_column(style='bold')
    summary.add_column()
    for key, value in rows:
        summary.add_row(key, value)
    console.print(summary)


def format_report(result: NextVersion, *, color: bool = False) -> str:
    """Capture :func:`print_report` output as a string."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=color, width=120)
    print_report(result, console=console)
    return buf.getvalue().rstrip('\n')


__all__ = [
    'format_report',
    'print_report',
]
