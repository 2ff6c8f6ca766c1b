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

"""Shared leaf-level types used across nsv.

This module must have **zero** imports from other ``nsv`` modules to
avoid circular-import chains.  It is safe to import from anywhere in
the project.

Everything here is a frozen dataclass or enum: no I/O, no logging,
no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    'BumpLevel',
    'Directive',
    'ForceBump',
    'LogEntry',
    'Prerelease',
]


class BumpLevel(IntEnum):
    """Semver bump levels, ordered by strength.

    Comparison operators follow the natural order, so the strongest
    level of a set of commits is simply ``max(levels)``::

        >>> BumpLevel.MINOR > BumpLevel.PATCH
        True
        >>> max(BumpLevel.NONE, BumpLevel.MAJOR)
        <BumpLevel.MAJOR: 3>
    """

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @property
    def label(self) -> str:
        """Lower-case name used in logs, reports and directives."""
        return self.name.lower()


@dataclass(frozen=True)
class ForceBump:
    """Explicit override of the bump level (``nsv:force~<level>``).

    Attributes:
        level: The level that replaces the natural one.
    """

    level: BumpLevel

    def __str__(self) -> str:
        return f'nsv:force~{self.level.label}'


@dataclass(frozen=True)
class Prerelease:
    """Request to cut or advance a prerelease (``nsv:pre[~<label>]``).

    Attributes:
        label: Prerelease identifier such as ``"beta"``.  Empty means
            "continue the current progression, or use the default label".
    """

    label: str = ''

    def __str__(self) -> str:
        return f'nsv:pre~{self.label}' if self.label else 'nsv:pre'


Directive = ForceBump | Prerelease


@dataclass(frozen=True)
class LogEntry:
    """A single commit as reported by a source-control provider.

    Attributes:
        ref: The full commit SHA (or any opaque reference).
        message: The complete commit message, header first.
        paths: Repository-relative POSIX paths changed by the commit.
        tags: Names of the tags pointing at this commit.
    """

    ref: str
    message: str
    paths: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def header(self) -> str:
        """First line of the message."""
        return self.message.split('\n', 1)[0].strip()
