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

r"""Commit message classification.

Two pure layers:

- :func:`parse_header` turns a header line into a tagged variant,
  :class:`ConventionalHeader` or :class:`UnrecognizedHeader`.
- :func:`classify` turns a full message into a :class:`Commit` with
  its individual bump contribution.

``nsv:`` directives are extracted by :mod:`nsv.directives`, a separate
pass over the same message.

Usage::

    from nsv.commit_parsing import classify, parse_header

    header = parse_header('fix(search): handle empty facets')
    assert header.scope == 'search'

    commit = classify('3f2a9c1', 'feat: new API\n\nBREAKING CHANGE: removed v1')
    assert commit.bump == BumpLevel.MAJOR
"""

from nsv.commit_parsing._conventional import (
    CC_PATTERN,
    classify,
    has_breaking_footer,
    parse_header,
)
from nsv.commit_parsing._types import (
    Commit,
    CommitType,
    ConventionalHeader,
    Header,
    UnrecognizedHeader,
)

__all__ = [
    'CC_PATTERN',
    'Commit',
    'CommitType',
    'ConventionalHeader',
    'Header',
    'UnrecognizedHeader',
    'classify',
    'has_breaking_footer',
    'parse_header',
]
