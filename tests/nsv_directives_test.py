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

"""Tests for nsv.directives."""

from __future__ import annotations

import pytest

from nsv._types import BumpLevel, ForceBump, Prerelease
from nsv.directives import DirectiveSet, extract_directives, parse_directive


class TestParseDirective:
    """Tests for parse_directive()."""

    @pytest.mark.parametrize(
        ('line', 'expected'),
        [
            ('nsv:force~major', ForceBump(BumpLevel.MAJOR)),
            ('nsv:force~minor', ForceBump(BumpLevel.MINOR)),
            ('nsv:force~patch', ForceBump(BumpLevel.PATCH)),
            ('NSV:FORCE~MAJOR', ForceBump(BumpLevel.MAJOR)),
            ('  nsv:pre  ', Prerelease()),
            ('nsv:pre~rc', Prerelease('rc')),
            ('nsv:PRE~Alpha-2', Prerelease('Alpha-2')),
        ],
    )
    def test_well_formed(self, line: str, expected: ForceBump | Prerelease) -> None:
        """Recognised forms parse; labels keep their case."""
        assert parse_directive(line) == expected

    @pytest.mark.parametrize(
        'line',
        ['nsv:force', 'nsv:force~huge', 'nsv:pre~', 'nsv:pre~rc.1', 'nsv:pre~two words', 'nsv:skip', 'nsv pre'],
    )
    def test_malformed(self, line: str) -> None:
        """Anything else is not a directive."""
        assert parse_directive(line) is None

    def test_str_round_trip(self) -> None:
        """str() of a directive is its canonical spelling."""
        assert str(ForceBump(BumpLevel.MINOR)) == 'nsv:force~minor'
        assert str(Prerelease()) == 'nsv:pre'
        assert str(Prerelease('rc')) == 'nsv:pre~rc'


class TestExtractDirectives:
    """Tests for extract_directives()."""

    def test_body_lines_in_order(self) -> None:
        """Directives anywhere in the body are returned in order."""
        message = 'feat: ship it\n\nnsv:pre~rc\nSome prose.\n  nsv:force~major\n'
        assert extract_directives(message) == (Prerelease('rc'), ForceBump(BumpLevel.MAJOR))

    def test_header_is_ignored(self) -> None:
        """A directive-looking header does not count."""
        assert extract_directives('nsv:force~major') == ()

    def test_malformed_ignored(self) -> None:
        """Malformed directives are skipped, valid ones kept."""
        message = 'fix: x\n\nnsv:force~enormous\nnsv:pre'
        assert extract_directives(message) == (Prerelease(),)

    def test_inline_mention_ignored(self) -> None:
        """A directive must be alone on its line."""
        assert extract_directives('fix: x\n\nremember nsv:force~major next time') == ()


class TestDirectiveSet:
    """Tests for DirectiveSet accumulation."""

    def test_empty(self) -> None:
        """A fresh set is falsy with no indices."""
        ds = DirectiveSet()
        assert not ds
        assert ds.as_tuple() == ()
        assert ds.force_index == -1
        assert ds.prerelease_index == -1

    def test_first_seen_wins(self) -> None:
        """The newest directive of each kind wins."""
        ds = DirectiveSet()
        ds = ds.add((ForceBump(BumpLevel.MINOR),), 0)
        ds = ds.add((ForceBump(BumpLevel.MAJOR), Prerelease('rc')), 3)
        assert ds.force == ForceBump(BumpLevel.MINOR)
        assert ds.force_index == 0
        assert ds.prerelease == Prerelease('rc')
        assert ds.prerelease_index == 3

    def test_within_commit_first_wins(self) -> None:
        """Two directives of a kind in one commit keep the first."""
        ds = DirectiveSet().add((Prerelease('alpha'), Prerelease('beta')), 2)
        assert ds.prerelease == Prerelease('alpha')

    def test_as_tuple_force_first(self) -> None:
        """as_tuple() lists the force directive before the prerelease."""
        ds = DirectiveSet().add((Prerelease(), ForceBump(BumpLevel.PATCH)), 1)
        assert ds.as_tuple() == (ForceBump(BumpLevel.PATCH), Prerelease())
        assert ds
