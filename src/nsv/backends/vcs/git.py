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

"""Git source-control backend for nsv.

The :class:`GitCLIBackend` implements the
:class:`~nsv.backends.vcs.SourceControl` protocol by delegating to
``git`` via :func:`~nsv.backends._run.run_command`.

``git log`` output is requested with control-character separators so
that multi-line commit bodies survive parsing::

    \\x1e <sha> \\x1f <decorations> \\x1f <body> \\x1f
    <changed file>
    <changed file>
"""

from __future__ import annotations

import subprocess  # noqa: S404 - only for TimeoutExpired
from pathlib import Path

from nsv._types import LogEntry
from nsv.backends._run import CommandResult, run_command
from nsv.errors import E, NsvError
from nsv.logging import get_logger
from nsv.tag import TAG_PATTERN, Tag, matches_prefix, parse_tag, semver_key

log = get_logger('nsv.backends.git')

_RECORD_SEP = '\x1e'
_FIELD_SEP = '\x1f'
LOG_FORMAT = '%x1e%H%x1f%D%x1f%B%x1f'


def _parse_decorations(decorations: str) -> tuple[str, ...]:
    """Extract tag names from ``%D`` output (``HEAD -> main, tag: v1.0.0``)."""
    tags: list[str] = []
    for item in decorations.split(','):
        item = item.strip()
        if item.startswith('tag: '):
            tags.append(item[len('tag: ') :])
    return tuple(tags)


def parse_log_output(stdout: str) -> list[LogEntry]:
    """Parse ``git log --format=LOG_FORMAT --name-only`` output."""
    entries: list[LogEntry] = []
    for record in stdout.split(_RECORD_SEP):
        if not record.strip():
            continue
        parts = record.split(_FIELD_SEP, 3)
        if len(parts) < 3:
            log.warning('log_record_skipped', record=record[:80])
            continue
        ref, decorations, body = parts[0], parts[1], parts[2]
        files = parts[3] if len(parts) == 4 else ''
        entries.append(
            LogEntry(
                ref=ref.strip(),
                message=body.strip(),
                paths=tuple(line.strip() for line in files.splitlines() if line.strip()),
                tags=_parse_decorations(decorations),
            ),
        )
    return entries


def _tag_order(item: tuple[int, str]) -> tuple[int, int, tuple[object, ...]]:
    """Sort key for ``(creation time, name)``: newest, then highest version."""
    stamp, name = item
    if TAG_PATTERN.match(name) is None:
        return (stamp, 0, ())
    return (stamp, 1, semver_key(parse_tag(name)))


def _run_git(args: list[str], cwd: Path) -> CommandResult:
    """Run ``git`` with paths reported verbatim.

    ``core.quotePath=false`` keeps non-ASCII paths such as
    ``src/café`` unquoted in ``--name-only`` output.

    Raises:
        NsvError: ``NSV-VCS-COMMAND-FAILED`` if git is missing or hangs.
    """
    cmd = ['git', '-c', 'core.quotePath=false', *args]
    try:
        return run_command(cmd, cwd=cwd)
    except FileNotFoundError as exc:
        raise NsvError(
            code=E.VCS_COMMAND_FAILED,
            message=f'git executable not found: {exc}',
            hint='Install git and make sure it is on PATH.',
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise NsvError(
            code=E.VCS_COMMAND_FAILED,
            message=f"'{' '.join(cmd)}' timed out after {exc.timeout} seconds",
            hint='git may be waiting for input; check credential helpers and hooks.',
        ) from exc


class GitCLIBackend:
    """Default :class:`~nsv.backends.vcs.SourceControl` implementation using ``git``.

    Args:
        repo_root: Path to the git repository root.
    """

    def __init__(self, repo_root: Path) -> None:
        """Initialize with the git repository root path."""
        self._root = repo_root

    @classmethod
    def discover(cls, cwd: Path) -> GitCLIBackend:
        """Locate the repository containing ``cwd``.

        Raises:
            NsvError: ``NSV-VCS-NOT-A-REPOSITORY`` outside a git checkout.
        """
        result = _run_git(['rev-parse', '--show-toplevel'], cwd)
        if not result.ok or not result.stdout.strip():
            raise NsvError(
                code=E.VCS_NOT_A_REPOSITORY,
                message=f'{cwd} is not inside a git repository',
                hint=result.stderr.strip() or 'Run nsv from within a git checkout.',
            )
        return cls(Path(result.stdout.strip()))

    def _git(self, *args: str) -> CommandResult:
        """Run a git command in the repository root."""
        return _run_git(list(args), self._root)

    def _git_checked(self, *args: str) -> CommandResult:
        """Run a git command, raising :class:`NsvError` on failure."""
        result = self._git(*args)
        if not result.ok:
            raise NsvError(
                code=E.VCS_COMMAND_FAILED,
                message=f"'{result.command_str}' failed: {result.stderr.strip()}",
                hint="Run 'nsv -v' to see the failing git invocation.",
            )
        return result

    def _has_head(self) -> bool:
        """Return ``False`` for a repository without any commit yet."""
        return self._git('rev-parse', '--verify', '--quiet', 'HEAD').ok

    def repo_root(self) -> Path:
        """Return the repository root."""
        return self._root

    def list_tags(self) -> list[str]:
        """Return tags reachable from HEAD, most recent first.

        Ordered by creation date, then by semantic-version precedence
        for tags created in the same second (e.g. ``v1.0.0`` cut on
        the commit already tagged ``v1.0.0-rc.1``).  git's own
        ``version:refname`` sort puts ``-rc.1`` above the release, so
        the tie is broken here.
        """
        if not self._has_head():
            return []
        result = self._git_checked(
            'for-each-ref',
            '--merged',
            'HEAD',
            '--format=%(creatordate:unix) %(refname:lstrip=2)',
            'refs/tags',
        )
        dated: list[tuple[int, str]] = []
        for line in result.stdout.splitlines():
            stamp, _, name = line.strip().partition(' ')
            if name:
                dated.append((int(stamp) if stamp.isdigit() else 0, name))
        dated.sort(key=_tag_order, reverse=True)
        return [name for _, name in dated]

    def matching_tag(self, prefix: str) -> Tag | None:
        """Return the most recent reachable tag matching ``prefix``."""
        for name in self.list_tags():
            if TAG_PATTERN.match(name) is None:
                log.debug('tag_skipped', tag=name, reason='not a semantic version')
                continue
            tag = parse_tag(name)
            if matches_prefix(tag, prefix):
                log.debug('matching_tag', prefix=prefix, tag=tag.raw)
                return tag
        log.debug('matching_tag', prefix=prefix, tag=None)
        return None

    def log(self, *, since_tag: str | None = None, path: str = '') -> list[LogEntry]:
        """Return commits newest first, excluding ``since_tag`` and older."""
        if not self._has_head():
            return []
        args = ['log', f'--format={LOG_FORMAT}', '--name-only']
        args.append(f'{since_tag}..HEAD' if since_tag else 'HEAD')
        if path:
            args.extend(['--', path])
        result = self._git_checked(*args)
        entries = parse_log_output(result.stdout)
        log.debug('log_read', since_tag=since_tag, path=path, commits=len(entries))
        return entries


__all__ = [
    'GitCLIBackend',
    'LOG_FORMAT',
    'parse_log_output',
]
