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

"""Configuration for nsv.

Settings are merged from four layers, later layers winning::

    defaults  <  nsv.toml  <  NSV_* environment  <  command-line flags

The result is a frozen :class:`Options` value, built once before the
engine runs and never mutated afterwards.

Supported keys (``nsv.toml`` key / environment variable)::

    show      = false          NSV_SHOW        explain how the tag was chosen
    format    = "v{{ .Version }}"
                               NSV_FORMAT      output template
    path      = "src/search"   NSV_PATH        scope to a subdirectory
    pre_label = "beta"         NSV_PRE_LABEL   label for a bare nsv:pre

Usage::

    from nsv.config import load_options

    opts = load_options(repo_root, overrides={'show': True})
"""

from __future__ import annotations

import difflib
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from nsv.errors import E, NsvError
from nsv.logging import get_logger
from nsv.tag import DEFAULT_PRERELEASE_LABEL, validate_template

logger = get_logger(__name__)

CONFIG_FILENAME = 'nsv.toml'

ENV_PREFIX = 'NSV_'

VALID_KEYS: frozenset[str] = frozenset({
    'format',
    'path',
    'pre_label',
    'show',
})

_TYPE_MAP: dict[str, type] = {
    'format': str,
    'path': str,
    'pre_label': str,
    'show': bool,
}

_LABEL_RE = re.compile(r'^[0-9A-Za-z-]+$')

_TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})
_FALSE_VALUES = frozenset({'0', 'false', 'no', 'off'})


@dataclass(frozen=True)
class Options:
    """Immutable settings for one nsv run.

    Attributes:
        show: Render an explanation of the decision alongside the tag.
        format: Output template referencing ``{{ .Version }}``.  Empty
            prints the tag as is.
        path: Directory to scope the run to, relative to the
            repository root.  Empty uses the working directory.
        pre_label: Prerelease label used by a bare ``nsv:pre``.
    """

    show: bool = False
    format: str = ''
    path: str = ''
    pre_label: str = DEFAULT_PRERELEASE_LABEL


def _parse_bool(key: str, value: str) -> bool:
    """Parse a boolean environment value."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise NsvError(
        code=E.CONFIG_INVALID_VALUE,
        message=f"{ENV_PREFIX}{key.upper()} must be a boolean, got '{value}'",
        hint='Booleans accept 1/0, true/false, yes/no and on/off.',
    )


def _validate_value_type(
    key: str,
    value: Any,  # noqa: ANN401 - dynamic config values
    *,
    context: str = CONFIG_FILENAME,
) -> None:
    """Raise if a config value has the wrong type."""
    expected = _TYPE_MAP[key]
    if not isinstance(value, expected):
        raise NsvError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"'{key}' must be {expected.__name__}, got {type(value).__name__}",
            hint=f'Check the value of {key} in {context}.',
        )


def _validate_pre_label(value: str) -> None:
    """Raise if a prerelease label is not a single semver identifier."""
    if not _LABEL_RE.match(value):
        raise NsvError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"pre_label must match [0-9A-Za-z-]+, got '{value}'",
            hint='Use a label such as alpha, beta or rc.',
        )


def _read_config_file(root: Path) -> dict[str, Any]:
    """Read and validate ``nsv.toml`` at the repository root."""
    config_path = root / CONFIG_FILENAME
    if not config_path.is_file():
        logger.debug('no_nsv_config', path=str(config_path))
        return {}

    try:
        doc = tomlkit.parse(config_path.read_text(encoding='utf-8'))
    except (OSError, tomlkit.exceptions.TOMLKitError) as exc:
        raise NsvError(
            code=E.CONFIG_PARSE_ERROR,
            message=f'Failed to read {config_path}: {exc}',
            hint='Fix the TOML syntax at the reported line and column.',
        ) from exc

    raw: dict[str, Any] = doc.unwrap()
    for key, value in raw.items():
        if key not in VALID_KEYS:
            suggestion = difflib.get_close_matches(key, VALID_KEYS, n=1, cutoff=0.6)
            valid = ', '.join(sorted(VALID_KEYS))
            raise NsvError(
                code=E.CONFIG_INVALID_KEY,
                message=f"Unknown key '{key}' in {CONFIG_FILENAME}",
                hint=f"Did you mean '{suggestion[0]}'?" if suggestion else f'Valid keys: {valid}.',
            )
        _validate_value_type(key, value)

    logger.debug('nsv_config_loaded', path=str(config_path), keys=sorted(raw))
    return raw


def _read_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``NSV_*`` variables; empty values are ignored."""
    values: dict[str, Any] = {}
    for key in VALID_KEYS:
        value = env.get(f'{ENV_PREFIX}{key.upper()}', '')
        if not value:
            continue
        values[key] = _parse_bool(key, value) if _TYPE_MAP[key] is bool else value
    return values


def load_options(
    root: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Options:
    """Build the :class:`Options` for a run.

    Args:
        root: Repository root holding the optional ``nsv.toml``.  ``None``
            skips the file layer.
        env: Environment to read ``NSV_*`` variables from.  Defaults to
            :data:`os.environ`.
        overrides: Command-line values.  ``None`` entries are ignored so
            unset flags do not mask lower layers.

    Returns:
        The merged, validated options.

    Raises:
        NsvError: On unknown keys, wrong types, an invalid template or
            an invalid prerelease label.
    """
    merged: dict[str, Any] = {}
    if root is not None:
        merged.update(_read_config_file(root))
    merged.update(_read_env(os.environ if env is None else env))
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key not in VALID_KEYS:
            raise NsvError(code=E.CONFIG_INVALID_KEY, message=f"Unknown option '{key}'")
        _validate_value_type(key, value, context='the command line')
        merged[key] = value

    opts = Options(**merged)
    if opts.format:
        validate_template(opts.format)
    _validate_pre_label(opts.pre_label)
    return opts


__all__ = [
    'CONFIG_FILENAME',
    'Options',
    'VALID_KEYS',
    'load_options',
]
