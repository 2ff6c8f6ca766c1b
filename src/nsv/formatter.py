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

"""Output rendering for the computed tag.

Templates use Go-template syntax for the single supported field::

    nsv --format 'custom/v{{ .Version }}'     ->  custom/v0.1.0
"""

from __future__ import annotations

from nsv.logging import get_logger
from nsv.tag import Tag, format_tag, validate_template

logger = get_logger(__name__)


def render(tag: Tag, template: str = '') -> str:
    """Render ``tag``, optionally through ``template``."""
    output = format_tag(tag, template)
    if template:
        logger.debug('tag_formatted', tag=tag.raw, template=template, output=output)
    return output


__all__ = [
    'render',
    'validate_template',
]
