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

"""nsv: next semantic version from conventional commits.

Reads the history since the previous release tag, classifies each
commit header (``feat``, ``fix``, ``!``), honours ``nsv:`` directives
in commit bodies and prints the tag that should come next.

Library usage::

    from pathlib import Path

    from nsv import GitCLIBackend, load_options, next_version

    provider = GitCLIBackend.discover(Path.cwd())
    result = next_version(provider, load_options(provider.repo_root()))
    print(result.output)
"""

__version__ = '0.4.0'

from nsv.backends.vcs import GitCLIBackend, SourceControl  # noqa: E402
from nsv.config import Options, load_options  # noqa: E402
from nsv.errors import NsvError  # noqa: E402
from nsv.resolver import NextVersion, next_version  # noqa: E402
from nsv.tag import Tag, parse_tag  # noqa: E402

__all__ = [
    'GitCLIBackend',
    'NextVersion',
    'NsvError',
    'Options',
    'SourceControl',
    'Tag',
    '__version__',
    'load_options',
    'next_version',
    'parse_tag',
]
