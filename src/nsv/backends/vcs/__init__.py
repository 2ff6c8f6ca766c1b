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

"""Source-control protocol for nsv.

The :class:`SourceControl` protocol is everything the engine needs from
version control: where the repository is, the previous matching tag,
and the commits above it.  Implementations:

- :class:`~nsv.backends.vcs.git.GitCLIBackend` (``git`` CLI)
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from nsv._types import LogEntry
from nsv.backends.vcs.git import GitCLIBackend as GitCLIBackend
from nsv.tag import Tag

__all__ = [
    'GitCLIBackend',
    'SourceControl',
]


@runtime_checkable
class SourceControl(Protocol):
    """Protocol for read-only history access.

    Calls are synchronous; the provider is queried once per run,
    before the engine starts.
    """

    def repo_root(self) -> Path:
        """Return the repository root directory."""
        ...

    def matching_tag(self, prefix: str) -> Tag | None:
        """Return the latest release tag carrying ``prefix``.

        Args:
            prefix: Tag prefix without the trailing ``/``.  Empty at
                the repository root, where a tag with any prefix
                matches.

        Returns:
            The tag, or ``None`` if no such tag is reachable.
        """
        ...

    def log(self, *, since_tag: str | None = None, path: str = '') -> list[LogEntry]:
        """Return commits newest first.

        Args:
            since_tag: Exclude this tag's commit and everything before
                it.  ``None`` reads back to the root commit.
            path: Restrict to commits touching this repository-relative
                directory.  Empty means the whole repository.
        """
        ...
