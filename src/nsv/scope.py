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

"""Monorepo path scoping.

Running nsv from (or with ``--path`` pointing at) a subdirectory gives
that directory its own version sequence::

    repo/                      log_dir = ''            prefix = ''
    repo/src/search/           log_dir = 'src/search'  prefix = 'search'

Tags are searched and emitted under the prefix (``search/0.4.1``) and
only commits that changed a file below the log dir are classified.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from nsv._types import LogEntry
from nsv.errors import E, NsvError
from nsv.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Scope:
    """The directory a run is scoped to.

    Attributes:
        log_dir: POSIX path relative to the repository root.  Empty at
            the root.
    """

    log_dir: str = ''

    @property
    def is_root(self) -> bool:
        """``True`` if the whole repository is in scope."""
        return not self.log_dir

    @property
    def prefix(self) -> str:
        """Tag prefix: the last component of the log dir."""
        return PurePosixPath(self.log_dir).name if self.log_dir else ''

    def contains(self, path: str) -> bool:
        """Return ``True`` if a repository-relative path lies in scope."""
        if self.is_root:
            return True
        return path == self.log_dir or path.startswith(f'{self.log_dir}/')

    def matches(self, entry: LogEntry) -> bool:
        """Return ``True`` if a commit changed at least one file in scope."""
        return self.is_root or any(self.contains(p) for p in entry.paths)


def resolve_scope(repo_root: Path, cwd: Path, path: str = '') -> Scope:
    """Work out the log dir for this run.

    Args:
        repo_root: Repository root directory.
        cwd: Current working directory, used when ``path`` is empty.
        path: Explicit scope.  Relative paths are taken from the
            repository root.

    Returns:
        The resolved :class:`Scope`.

    Raises:
        NsvError: ``NSV-SCOPE-OUTSIDE-REPO`` if the directory is not
            inside the repository.
    """
    root = repo_root.resolve()
    if path:
        target = Path(path) if Path(path).is_absolute() else root / path
    else:
        target = cwd
    target = target.resolve()

    try:
        rel = target.relative_to(root)
    except ValueError as exc:
        raise NsvError(
            code=E.SCOPE_OUTSIDE_REPO,
            message=f"'{path or cwd}' is not inside the repository at {root}",
            hint='Pass a path relative to the repository root, e.g. --path src/search.',
        ) from exc

    log_dir = rel.as_posix()
    scope = Scope(log_dir='' if log_dir == '.' else log_dir)
    logger.debug('scope_resolved', log_dir=scope.log_dir, prefix=scope.prefix)
    return scope


def filter_log(entries: Iterable[LogEntry], scope: Scope) -> list[LogEntry]:
    """Drop commits that changed nothing inside the scope.

    Order is preserved.
    """
    entries = list(entries)
    kept = [e for e in entries if scope.matches(e)]
    if len(kept) != len(entries):
        logger.debug(
            'commits_out_of_scope',
            log_dir=scope.log_dir,
            excluded=len(entries) - len(kept),
        )
    return kept


__all__ = [
    'Scope',
    'filter_log',
    'resolve_scope',
]
