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

"""Pure types for commit message classification.

This module has **zero** runtime dependencies beyond the standard library
and :mod:`nsv._types`.  Everything here is a frozen dataclass or enum.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from nsv._types import BumpLevel, Directive


class CommitType(Enum):
    """How a commit header is classified.

    Only ``feat`` and ``fix`` carry a bump.  Every other conventional
    type (``docs``, ``ci``, ``chore``, ``refactor``, ``perf``, ...) and
    every non-conventional header is ``OTHER``.
    """

    FEAT = 'feat'
    FIX = 'fix'
    OTHER = 'other'


@dataclass(frozen=True)
class ConventionalHeader:
    """A header matching ``type(scope)!: subject``.

    Attributes:
        type: The lower-cased type token (``"feat"``, ``"docs"``, ...).
        subject: Text after the colon.
        scope: The parenthesised scope, case preserved.  Empty if absent.
        breaking: ``True`` if ``!`` precedes the colon.
    """

    type: str
    subject: str
    scope: str = ''
    breaking: bool = False


@dataclass(frozen=True)
class UnrecognizedHeader:
    """A header that does not follow the conventional grammar.

    Attributes:
        subject: The header line as written.
    """

    subject: str


Header = ConventionalHeader | UnrecognizedHeader


@dataclass(frozen=True)
class Commit:
    """A classified commit.

    Attributes:
        ref: The commit SHA.
        message: The full commit message.
        type: Classification of the header.
        subject: The header subject (whole header if unrecognised).
        scope: Conventional scope, if any.
        breaking: ``True`` for ``!`` or a ``BREAKING CHANGE`` footer.
        bump: This commit's individual contribution.
        conventional: ``False`` if the header did not match the grammar.
        directives: ``nsv:`` directives found in the message body,
            in the order they appear.
    """

    ref: str
    message: str
    type: CommitType = CommitType.OTHER
    subject: str = ''
    scope: str = ''
    breaking: bool = False
    bump: BumpLevel = BumpLevel.NONE
    conventional: bool = False
    directives: tuple[Directive, ...] = ()

    @property
    def header(self) -> str:
        """First line of the message."""
        return self.message.split('\n', 1)[0].strip()

    @property
    def short_ref(self) -> str:
        """Abbreviated reference for display."""
        return self.ref[:7]
