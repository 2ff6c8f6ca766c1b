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

r"""``nsv:`` directives embedded in commit message bodies.

A directive is a line of its own, anywhere after the header::

    feat: everything is now stable and ready for v1

    nsv:force~major

Recognised forms (marker and level are case-insensitive)::

    nsv:force~major | nsv:force~minor | nsv:force~patch
    nsv:pre                      continue the current prerelease
    nsv:pre~<label>              label is [0-9A-Za-z-]+

Any other line starting with ``nsv:`` is malformed: it is logged at
debug level and otherwise ignored.

When walking history newest to oldest, the first directive of each kind
wins, i.e. the most recent one.  A force and a prerelease directive
combine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from nsv._types import BumpLevel, Directive, ForceBump, Prerelease
from nsv.logging import get_logger

logger = get_logger(__name__)

DIRECTIVE_PATTERN: re.Pattern[str] = re.compile(
    r'^nsv:(?P<kind>[a-z]+)(?:~(?P<arg>.*))?$',
    re.IGNORECASE,
)

_LABEL_PATTERN: re.Pattern[str] = re.compile(r'^[0-9A-Za-z-]+$')

_FORCE_LEVELS: dict[str, BumpLevel] = {
    'major': BumpLevel.MAJOR,
    'minor': BumpLevel.MINOR,
    'patch': BumpLevel.PATCH,
}


def parse_directive(line: str) -> Directive | None:
    """Parse one line into a directive.

    Returns:
        The directive, or ``None`` if the line is not a well-formed
        directive.
    """
    m = DIRECTIVE_PATTERN.match(line.strip())
    if m is None:
        return None
    kind = m.group('kind').lower()
    arg = m.group('arg')
    if kind == 'force' and arg is not None:
        level = _FORCE_LEVELS.get(arg.strip().lower())
        return ForceBump(level) if level is not None else None
    if kind == 'pre':
        if arg is None:
            return Prerelease()
        if _LABEL_PATTERN.match(arg):
            return Prerelease(arg)
    return None


def extract_directives(message: str) -> tuple[Directive, ...]:
    """Scan the lines after the header for directives.

    Args:
        message: The full commit message.

    Returns:
        Well-formed directives in the order they appear.
    """
    found: list[Directive] = []
    for line in message.split('\n')[1:]:
        stripped = line.strip()
        if not stripped.lower().startswith('nsv:'):
            continue
        directive = parse_directive(stripped)
        if directive is None:
            logger.debug('directive_ignored', line=stripped)
            continue
        found.append(directive)
    return tuple(found)


@dataclass(frozen=True)
class DirectiveSet:
    """The winning directive of each kind while walking history.

    Attributes:
        force: Most recent :class:`ForceBump`, if any.
        prerelease: Most recent :class:`Prerelease`, if any.
        force_index: Log index of the commit that supplied ``force``.
        prerelease_index: Log index of the commit that supplied
            ``prerelease``.
    """

    force: ForceBump | None = None
    prerelease: Prerelease | None = None
    force_index: int = -1
    prerelease_index: int = -1

    def add(self, directives: tuple[Directive, ...], index: int) -> DirectiveSet:
        """Return a new set including ``directives`` from the commit at ``index``.

        Directives already held win, since the walk visits newer commits
        first.  Within one commit the first directive of a kind wins.
        """
        force, force_index = self.force, self.force_index
        pre, pre_index = self.prerelease, self.prerelease_index
        for directive in directives:
            if isinstance(directive, ForceBump) and force is None:
                force, force_index = directive, index
            elif isinstance(directive, Prerelease) and pre is None:
                pre, pre_index = directive, index
        return DirectiveSet(
            force=force,
            prerelease=pre,
            force_index=force_index,
            prerelease_index=pre_index,
        )

    def as_tuple(self) -> tuple[Directive, ...]:
        """The winning directives, force first."""
        return tuple(d for d in (self.force, self.prerelease) if d is not None)

    def __bool__(self) -> bool:
        return self.force is not None or self.prerelease is not None


__all__ = [
    'DIRECTIVE_PATTERN',
    'DirectiveSet',
    'extract_directives',
    'parse_directive',
]
