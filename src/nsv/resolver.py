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

"""Bump resolution: from commit history to the next tag.

Pipeline::

    SourceControl ──► resolve_scope ──► matching_tag ──► log
                                                          │
             filter_log ◄── stop at the previous tag ◄────┘
                 │
                 ▼
    classify + extract_directives (per commit)
                 │
                 ▼
    resolve: walk newest → oldest
        - natural level = strongest single commit, newest wins ties
        - directives    = most recent of each kind
        - nsv:force~X replaces the natural level
                 │
                 ▼
    increment(previous tag) ──► render(--format) ──► NextVersion

Contributions are never summed: three ``fix`` commits are still a
patch.  An empty history without directives is an explicit
"no release" (``NextVersion.tag is None``).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from nsv._types import BumpLevel, ForceBump, LogEntry, Prerelease
from nsv.backends.vcs import SourceControl
from nsv.commit_parsing import Commit, classify
from nsv.config import Options
from nsv.directives import DirectiveSet, extract_directives
from nsv.formatter import render, validate_template
from nsv.logging import get_logger
from nsv.scope import Scope, filter_log, resolve_scope
from nsv.tag import Tag, increment

logger = get_logger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """The commit that decided the bump.

    Attributes:
        index: Position of the decisive commit in ``log``, or ``-1``
            when no commit decided (nothing to release).
        log: The scoped commits above the previous tag, newest first.
        log_dir: The directory the history was scoped to.
    """

    index: int
    log: tuple[Commit, ...] = ()
    log_dir: str = ''

    @property
    def commit(self) -> Commit | None:
        """The decisive commit, if any."""
        return self.log[self.index] if 0 <= self.index < len(self.log) else None


@dataclass(frozen=True)
class Resolution:
    """Outcome of walking the scoped history.

    Attributes:
        natural: Strongest bump of any single commit.
        level: Level to apply; the forced level when a
            :class:`ForceBump` directive exists.
        index: Log index of the natural winner, or of the directive's
            commit when no commit bumps naturally.
        directives: The winning directives.
    """

    natural: BumpLevel = BumpLevel.NONE
    level: BumpLevel = BumpLevel.NONE
    index: int = -1
    directives: DirectiveSet = field(default_factory=DirectiveSet)

    @property
    def releasable(self) -> bool:
        """``True`` if anything calls for a new tag."""
        return self.level != BumpLevel.NONE or self.directives.prerelease is not None


@dataclass(frozen=True)
class NextVersion:
    """Result of one nsv run.

    Attributes:
        tag: The next tag, or ``None`` when there is nothing to release.
        previous: The matching tag the bump started from.
        match: The decisive commit and the scoped log.
        resolution: Levels and directives behind the decision.
        output: ``tag`` rendered through the ``--format`` template;
            empty when there is nothing to release.
    """

    tag: Tag | None
    previous: Tag | None
    match: MatchResult
    resolution: Resolution = field(default_factory=Resolution)
    output: str = ''

    @property
    def released(self) -> bool:
        """``False`` for the explicit "no release" outcome."""
        return self.tag is not None

    @property
    def log(self) -> tuple[Commit, ...]:
        """Scoped commits, newest first."""
        return self.match.log

    @property
    def log_dir(self) -> str:
        """Directory the history was scoped to; empty at the root."""
        return self.match.log_dir

    @property
    def level(self) -> BumpLevel:
        """The applied bump level."""
        return self.resolution.level

    @property
    def force(self) -> ForceBump | None:
        """The applied force directive."""
        return self.resolution.directives.force

    @property
    def prerelease(self) -> Prerelease | None:
        """The applied prerelease directive."""
        return self.resolution.directives.prerelease


def classify_entries(entries: Iterable[LogEntry]) -> tuple[Commit, ...]:
    """Run both classification passes over each log entry."""
    return tuple(classify(e.ref, e.message, directives=extract_directives(e.message)) for e in entries)


def above_tag(entries: Sequence[LogEntry], tag: Tag | None) -> list[LogEntry]:
    """Return the entries newer than the commit carrying ``tag``."""
    if tag is None:
        return list(entries)
    for i, entry in enumerate(entries):
        if tag.raw in entry.tags:
            return list(entries[:i])
    return list(entries)


def resolve(commits: Sequence[Commit]) -> Resolution:
    """Fold classified commits, newest first, into a single decision.

    Args:
        commits: Scoped commits above the previous tag, newest first.

    Returns:
        The :class:`Resolution`.
    """
    natural = BumpLevel.NONE
    index = -1
    directives = DirectiveSet()
    for i, commit in enumerate(commits):
        if commit.bump > natural:
            natural, index = commit.bump, i
        if commit.directives:
            directives = directives.add(commit.directives, i)
        logger.debug(
            'commit_classified',
            ref=commit.short_ref,
            type=commit.type.value,
            bump=commit.bump.label,
            conventional=commit.conventional,
            directives=[str(d) for d in commit.directives],
        )

    level = directives.force.level if directives.force is not None else natural
    if index == -1:
        index = directives.force_index if directives.force is not None else directives.prerelease_index

    return Resolution(natural=natural, level=level, index=index, directives=directives)


def next_version(
    provider: SourceControl,
    options: Options | None = None,
    *,
    cwd: Path | None = None,
) -> NextVersion:
    """Compute the next tag for the repository behind ``provider``.

    Args:
        provider: Source-control provider.
        options: Run settings.  Defaults to :class:`Options()`.
        cwd: Working directory for scope detection.  Defaults to the
            process working directory.

    Returns:
        The :class:`NextVersion`; ``tag`` is ``None`` when nothing
        calls for a release.

    Raises:
        NsvError: For an invalid template, a scope outside the
            repository, or a provider failure.
    """
    opts = options or Options()
    if opts.format:
        validate_template(opts.format)

    scope: Scope = resolve_scope(provider.repo_root(), cwd or Path.cwd(), opts.path)
    previous = provider.matching_tag(scope.prefix)
    entries = provider.log(since_tag=previous.raw if previous else None, path=scope.log_dir)
    entries = filter_log(above_tag(entries, previous), scope)

    commits = classify_entries(entries)
    resolution = resolve(commits)
    match = MatchResult(index=resolution.index, log=commits, log_dir=scope.log_dir)

    if not resolution.releasable:
        logger.info(
            'no_release',
            previous=previous.raw if previous else None,
            commits=len(commits),
            log_dir=scope.log_dir,
        )
        return NextVersion(tag=None, previous=previous, match=match, resolution=resolution)

    tag = increment(
        previous,
        resolution.level,
        resolution.directives.as_tuple(),
        prefix=scope.prefix,
        default_label=opts.pre_label,
    )
    output = render(tag, opts.format)
    logger.info(
        'next_version',
        tag=tag.raw,
        previous=previous.raw if previous else None,
        level=resolution.level.label,
        natural=resolution.natural.label,
        match=resolution.index,
        log_dir=scope.log_dir,
    )
    return NextVersion(tag=tag, previous=previous, match=match, resolution=resolution, output=output)


__all__ = [
    'MatchResult',
    'NextVersion',
    'Resolution',
    'above_tag',
    'classify_entries',
    'next_version',
    'resolve',
]
