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

r"""Semantic version tags: parse, order, increment and format.

A tag is an optional path prefix followed by a semantic version with an
optional ``v`` marker::

    store/v0.11.2-beta.1+20230207
    └─┬─┘ └──────────┬──────────┘
    prefix        version
            └───────┬─────────┘
                 semver   (pre = beta.1, metadata = 20230207)

Increment rules::

    ┌──────────────────────────────┬───────────────────────────────────────┐
    │ Baseline                     │ Result                                │
    ├──────────────────────────────┼───────────────────────────────────────┤
    │ none, PATCH                  │ 0.0.1                                 │
    │ none, MINOR / MAJOR          │ 0.1.0 (never 1.0.0 unless forced)     │
    │ 0.x.y, MAJOR                 │ 0.(x+1).0 (major-zero rule)           │
    │ 0.x.y, nsv:force~major       │ 1.0.0                                 │
    │ x.y.z, nsv:pre~rc            │ bumped core + -rc.1                   │
    │ x.y.z-rc.1, nsv:pre          │ x.y.z-rc.2 (core unchanged)           │
    │ x.y.z-beta.3, nsv:pre~rc     │ x.y.z-rc.1 (label sorts higher)       │
    │ x.y.z-beta.3, nsv:pre~alpha  │ bumped core + -alpha.1                │
    │ x.y.z-rc.1, no nsv:pre       │ x.y.z (promotion)                     │
    └──────────────────────────────┴───────────────────────────────────────┘

Build metadata is never carried over to a new version.

Pure implementation: no I/O, no logging.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from nsv._types import BumpLevel, Directive, ForceBump, Prerelease
from nsv.errors import E, NsvError

# Label used by a bare ``nsv:pre`` when the baseline is not a prerelease.
DEFAULT_PRERELEASE_LABEL = 'beta'

# The only field a --format template may reference.
VERSION_FIELD = '.Version'

_NUM = r'(?:0|[1-9]\d*)'
_IDENTS = r'[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*'

TAG_PATTERN: re.Pattern[str] = re.compile(
    r'^(?:(?P<prefix>.+)/)?'  # optional path prefix, up to the last "/"
    r'(?P<marker>v)?'  # optional "v" marker
    rf'(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})'
    rf'(?:-(?P<pre>{_IDENTS}))?'
    rf'(?:\+(?P<metadata>{_IDENTS}))?$',
)

_PLACEHOLDER: re.Pattern[str] = re.compile(r'\{\{\s*(?P<field>[^{}]*?)\s*\}\}')


@dataclass(frozen=True)
class Tag:
    """A parsed version tag.

    Attributes:
        raw: The full tag name, e.g. ``"store/v0.11.2-beta.1+20230207"``.
        prefix: Path or namespace before the last ``/`` (without it),
            e.g. ``"store"``.  Empty for root-level tags.
        semver: ``major.minor.patch[-pre][+metadata]`` without prefix or
            ``v`` marker.
        version: ``raw`` with the prefix stripped; keeps the ``v`` marker.
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        pre: Prerelease identifiers, e.g. ``"beta.1"``.
        metadata: Build metadata, e.g. ``"20230207"``.
    """

    raw: str
    prefix: str
    semver: str
    version: str
    major: int
    minor: int
    patch: int
    pre: str = ''
    metadata: str = ''

    @classmethod
    def build(
        cls,
        major: int,
        minor: int,
        patch: int,
        *,
        pre: str = '',
        metadata: str = '',
        prefix: str = '',
        v_marker: bool = False,
    ) -> Tag:
        """Assemble a tag from its parts, deriving the string fields."""
        semver = f'{major}.{minor}.{patch}'
        if pre:
            semver += f'-{pre}'
        if metadata:
            semver += f'+{metadata}'
        version = f'v{semver}' if v_marker else semver
        raw = f'{prefix}/{version}' if prefix else version
        return cls(
            raw=raw,
            prefix=prefix,
            semver=semver,
            version=version,
            major=major,
            minor=minor,
            patch=patch,
            pre=pre,
            metadata=metadata,
        )

    @property
    def v_marker(self) -> bool:
        """``True`` if the version carries a leading ``v``."""
        return self.version.startswith('v')

    @property
    def core(self) -> str:
        """The ``major.minor.patch`` core without suffixes."""
        return f'{self.major}.{self.minor}.{self.patch}'

    @property
    def is_prerelease(self) -> bool:
        """``True`` if the tag carries prerelease identifiers."""
        return bool(self.pre)

    def __str__(self) -> str:
        return self.raw


def parse_tag(raw: str) -> Tag:
    """Parse a tag name into a :class:`Tag`.

    Args:
        raw: Tag name such as ``"v1.2.3"`` or ``"api/0.4.0-rc.2"``.

    Returns:
        The parsed tag.

    Raises:
        NsvError: ``NSV-TAG-INVALID-FORMAT`` if the name does not match
            ``[prefix/][v]MAJOR.MINOR.PATCH[-pre][+meta]``.
    """
    m = TAG_PATTERN.match(raw)
    if m is None:
        raise NsvError(
            code=E.TAG_INVALID_FORMAT,
            message=f"'{raw}' is not a semantic version tag",
            hint='Tags must look like [prefix/][v]MAJOR.MINOR.PATCH[-pre][+meta].',
        )
    return Tag.build(
        int(m.group('major')),
        int(m.group('minor')),
        int(m.group('patch')),
        pre=m.group('pre') or '',
        metadata=m.group('metadata') or '',
        prefix=m.group('prefix') or '',
        v_marker=bool(m.group('marker')),
    )


def matches_prefix(tag: Tag, prefix: str) -> bool:
    """Return ``True`` if ``tag`` belongs to the sequence for ``prefix``.

    An empty prefix (a run at the repository root) accepts any tag, so
    a repository released as ``cache/v0.2.0`` keeps that prefix.
    """
    return not prefix or tag.prefix == prefix


def semver_key(tag: Tag) -> tuple[int, int, int, int, tuple[tuple[int, int, str], ...]]:
    """Sort key implementing semver 2.0.0 precedence.

    Build metadata is ignored.  A release sorts above any of its
    prereleases; numeric identifiers compare numerically and below
    alphanumeric ones; a shorter identifier list sorts first when all
    preceding identifiers are equal.
    """
    if not tag.pre:
        return (tag.major, tag.minor, tag.patch, 1, ())
    idents = tuple((0, int(p), '') if p.isdigit() else (1, 0, p) for p in tag.pre.split('.'))
    return (tag.major, tag.minor, tag.patch, 0, idents)


def compare(a: Tag, b: Tag) -> int:
    """Return ``-1``, ``0`` or ``1`` as ``a`` precedes, equals or follows ``b``."""
    ka, kb = semver_key(a), semver_key(b)
    return (ka > kb) - (ka < kb)


def _split_pre(pre: str) -> tuple[str, int | None]:
    """Split ``"beta.3"`` into ``("beta", 3)``; ``"beta"`` into ``("beta", None)``."""
    head, _, last = pre.rpartition('.')
    if last.isdigit():
        return head, int(last)
    return pre, None


def _join_pre(label: str, number: int) -> str:
    return f'{label}.{number}' if label else str(number)


def _bump_core(
    major: int,
    minor: int,
    patch: int,
    level: BumpLevel,
    *,
    forced: bool = False,
) -> tuple[int, int, int]:
    """Apply ``level`` to a core version, honouring the major-zero rule."""
    if level == BumpLevel.MAJOR:
        if major == 0 and not forced:
            return 0, minor + 1, 0
        return major + 1, 0, 0
    if level == BumpLevel.MINOR:
        return major, minor + 1, 0
    if level == BumpLevel.PATCH:
        return major, minor, patch + 1
    return major, minor, patch


def increment(
    baseline: Tag | None,
    level: BumpLevel,
    directives: Iterable[Directive] = (),
    *,
    prefix: str = '',
    default_label: str = DEFAULT_PRERELEASE_LABEL,
) -> Tag:
    """Compute the tag that follows ``baseline``.

    Args:
        baseline: The previous matching tag, or ``None`` for the first
            release (an implicit ``0.0.0``).
        level: The natural bump level of the unreleased commits.
        directives: Resolved directives, at most one per kind.  A
            :class:`ForceBump` replaces ``level``; a :class:`Prerelease`
            cuts or advances a prerelease.
        prefix: Prefix for the first release.  Ignored when a baseline
            exists: its prefix and ``v`` marker are kept verbatim.
        default_label: Label used by a bare ``nsv:pre`` when the baseline
            is not already a prerelease.

    Returns:
        The next tag.  Build metadata is always dropped.

    Raises:
        ValueError: If there is nothing to release (``NONE`` level, no
            directives).
    """
    force: ForceBump | None = None
    pre: Prerelease | None = None
    for directive in directives:
        if isinstance(directive, ForceBump) and force is None:
            force = directive
        elif isinstance(directive, Prerelease) and pre is None:
            pre = directive

    effective = force.level if force is not None else level
    forced = force is not None and force.level == BumpLevel.MAJOR
    if effective == BumpLevel.NONE and pre is None and not (baseline and baseline.pre):
        raise ValueError('nothing to increment: bump level is NONE and no prerelease was requested')

    if baseline is None:
        major, minor, patch = 0, 0, 0
        tag_prefix, v_marker = prefix, False
    else:
        major, minor, patch = baseline.major, baseline.minor, baseline.patch
        tag_prefix, v_marker = baseline.prefix, baseline.v_marker

    new_pre = ''
    if baseline is not None and baseline.pre:
        if pre is not None and force is None:
            # Continue or relabel the progression, normally on the same core.
            label, number = _split_pre(baseline.pre)
            if not pre.label or pre.label == label:
                new_pre = _join_pre(label, (number or 0) + 1)
            else:
                new_pre = _join_pre(pre.label, 1)
                candidate = Tag.build(major, minor, patch, pre=new_pre)
                # The relabelled tag must still sort above the baseline.
                if semver_key(candidate) <= semver_key(baseline):
                    major, minor, patch = _bump_core(major, minor, patch, max(effective, BumpLevel.PATCH))
        else:
            if force is not None:
                major, minor, patch = _bump_core(major, minor, patch, force.level, forced=forced)
            if pre is not None:
                new_pre = _join_pre(pre.label or _split_pre(baseline.pre)[0] or default_label, 1)
    else:
        if pre is not None and effective == BumpLevel.NONE:
            effective = BumpLevel.PATCH
        major, minor, patch = _bump_core(major, minor, patch, effective, forced=forced)
        if pre is not None:
            new_pre = _join_pre(pre.label or default_label, 1)

    return Tag.build(
        major,
        minor,
        patch,
        pre=new_pre,
        prefix=tag_prefix,
        v_marker=v_marker,
    )


def validate_template(template: str) -> None:
    """Check that a ``--format`` template only references ``{{ .Version }}``.

    Raises:
        NsvError: ``NSV-FORMAT-INVALID`` for unknown fields, unbalanced
            braces, or a template without any placeholder.
    """
    fields = [m.group('field') for m in _PLACEHOLDER.finditer(template)]
    hint = 'Use a template such as "v{{ .Version }}" or "api/{{ .Version }}".'
    for field in fields:
        if field != VERSION_FIELD:
            raise NsvError(
                code=E.FORMAT_INVALID,
                message=f"template '{template}' references unknown field '{field}'",
                hint=hint,
            )
    leftover = _PLACEHOLDER.sub('', template)
    if '{{' in leftover or '}}' in leftover:
        raise NsvError(
            code=E.FORMAT_INVALID,
            message=f"template '{template}' has unbalanced braces",
            hint=hint,
        )
    if not fields:
        raise NsvError(
            code=E.FORMAT_INVALID,
            message=f"template '{template}' does not reference {{{{ {VERSION_FIELD} }}}}",
            hint=hint,
        )


def format_tag(tag: Tag, template: str = '') -> str:
    """Render a tag for output.

    Args:
        tag: The tag to render.
        template: Optional template.  ``{{ .Version }}`` is replaced by
            the tag's semver (no prefix, no ``v`` marker).

    Returns:
        ``tag.raw`` without a template, otherwise the rendered template.

    Raises:
        NsvError: ``NSV-FORMAT-INVALID`` if the template is invalid.
    """
    if not template:
        return tag.raw
    validate_template(template)
    return _PLACEHOLDER.sub(lambda _m: tag.semver, template)


__all__ = [
    'DEFAULT_PRERELEASE_LABEL',
    'TAG_PATTERN',
    'Tag',
    'compare',
    'format_tag',
    'increment',
    'matches_prefix',
    'parse_tag',
    'semver_key',
    'validate_template',
]
