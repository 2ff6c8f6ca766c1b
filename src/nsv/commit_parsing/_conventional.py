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

r"""Conventional Commits header classification.

**Header** (first line)::

    type(scope)!: subject

- Types are case-insensitive and normalised to lower case.
- Scope is optional, parenthesised and case preserved.
- ``!`` immediately before the colon marks a breaking change.

**Footers**: a trailing block of git trailers.  ``BREAKING CHANGE:``
or ``BREAKING-CHANGE:`` (upper case) also marks a breaking change.

Bump contribution of a single commit::

    breaking   -> MAJOR
    feat       -> MINOR
    fix        -> PATCH
    anything   -> NONE

A header that does not match the grammar is still returned as a
:class:`Commit` (``conventional=False``) so it stays visible in the log.

Pure implementation: depends only on ``re`` and sibling modules.
"""

from __future__ import annotations

import re

from nsv._types import BumpLevel, Directive
from nsv.commit_parsing._types import (
    Commit,
    CommitType,
    ConventionalHeader,
    Header,
    UnrecognizedHeader,
)

_TYPE_BUMPS: dict[str, tuple[CommitType, BumpLevel]] = {
    'feat': (CommitType.FEAT, BumpLevel.MINOR),
    'fix': (CommitType.FIX, BumpLevel.PATCH),
}

CC_PATTERN: re.Pattern[str] = re.compile(
    r'^(?P<type>[a-zA-Z]+)'  # type (e.g. feat, fix, chore)
    r'(?:\((?P<scope>[^)]*)\))?'  # optional scope in parens
    r'(?P<breaking>!)?'  # optional breaking change indicator
    r':\s*'  # colon + space
    r'(?P<subject>.+)$',  # subject
)

# Git trailer: "token: value" or "token #value"
_FOOTER_PATTERN: re.Pattern[str] = re.compile(
    r'^(?P<token>[A-Za-z][\w -]*[\w]|BREAKING[- ]CHANGE)'
    r'(?::\s*|\s+#)'
    r'(?P<value>.*)$',
)


def parse_header(line: str) -> Header:
    """Parse a commit header into a tagged variant.

    >>> parse_header('feat(Search)!: drop v1 API')
    ConventionalHeader(type='feat', subject='drop v1 API', scope='Search', breaking=True)
    >>> parse_header('Merge branch main')
    UnrecognizedHeader(subject='Merge branch main')
    """
    subject = line.strip()
    m = CC_PATTERN.match(subject)
    if m is None:
        return UnrecognizedHeader(subject=subject)
    return ConventionalHeader(
        type=m.group('type').lower(),
        subject=m.group('subject').strip(),
        scope=m.group('scope') or '',
        breaking=bool(m.group('breaking')),
    )


def _footer_tokens(lines: list[str]) -> list[str]:
    """Return the tokens of the trailing footer block, in order.

    The footer block is the last paragraph of the message when every
    non-continuation line in it starts with a trailer token.
    """
    while lines and not lines[-1].strip():
        lines = lines[:-1]
    start = len(lines)
    while start > 0 and lines[start - 1].strip():
        start -= 1
    block = lines[start:]
    if not block or not _FOOTER_PATTERN.match(block[0]):
        return []
    tokens: list[str] = []
    for line in block:
        m = _FOOTER_PATTERN.match(line)
        if m:
            tokens.append(m.group('token'))
    return tokens


def has_breaking_footer(message: str) -> bool:
    """Return ``True`` if the message ends with a breaking-change footer."""
    body = message.split('\n')[1:]
    return any(token in ('BREAKING CHANGE', 'BREAKING-CHANGE') for token in _footer_tokens(body))


def classify(ref: str, message: str, *, directives: tuple[Directive, ...] = ()) -> Commit:
    """Classify a full commit message.

    Args:
        ref: The commit SHA.
        message: The full commit message, header first.
        directives: Directives already extracted from the message body;
            attached to the result unchanged.

    Returns:
        A :class:`Commit`.  Never raises: non-conventional headers are
        classified as ``OTHER`` with no bump.
    """
    header = parse_header(message.split('\n', 1)[0])
    if isinstance(header, UnrecognizedHeader):
        return Commit(
            ref=ref,
            message=message,
            subject=header.subject,
            directives=directives,
        )

    commit_type, bump = _TYPE_BUMPS.get(header.type, (CommitType.OTHER, BumpLevel.NONE))
    breaking = header.breaking or has_breaking_footer(message)
    if breaking:
        bump = BumpLevel.MAJOR

    return Commit(
        ref=ref,
        message=message,
        type=commit_type,
        subject=header.subject,
        scope=header.scope,
        breaking=breaking,
        bump=bump,
        conventional=True,
        directives=directives,
    )
