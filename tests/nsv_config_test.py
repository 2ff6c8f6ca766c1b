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

"""Tests for nsv.config."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from nsv.config import CONFIG_FILENAME, Options, load_options
from nsv.errors import E, NsvError


def _write(root: Path, text: str) -> None:
    (root / CONFIG_FILENAME).write_text(text, encoding='utf-8')


class TestDefaults:
    """Tests for defaults."""

    def test_no_sources(self, tmp_path: Path) -> None:
        """Without file, env or flags the defaults apply."""
        assert load_options(tmp_path, env={}) == Options()

    def test_skip_file_layer(self) -> None:
        """root=None reads no file."""
        assert load_options(None, env={}).pre_label == 'beta'

    def test_frozen(self) -> None:
        """Options cannot be mutated."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            Options().show = True  # type: ignore[misc]


class TestConfigFile:
    """Tests for the nsv.toml layer."""

    def test_reads_keys(self, tmp_path: Path) -> None:
        """All supported keys are read with their types."""
        _write(tmp_path, 'show = true\nformat = "v{{ .Version }}"\npath = "src/api"\npre_label = "rc"\n')
        opts = load_options(tmp_path, env={})
        assert opts == Options(show=True, format='v{{ .Version }}', path='src/api', pre_label='rc')

    def test_unknown_key_suggests(self, tmp_path: Path) -> None:
        """A misspelt key gets a did-you-mean hint."""
        _write(tmp_path, 'fromat = "v{{ .Version }}"\n')
        with pytest.raises(NsvError) as exc_info:
            load_options(tmp_path, env={})
        assert exc_info.value.code == E.CONFIG_INVALID_KEY
        assert "'format'" in exc_info.value.hint

    def test_wrong_type(self, tmp_path: Path) -> None:
        """A string where a boolean is expected is rejected."""
        _write(tmp_path, 'show = "yes"\n')
        with pytest.raises(NsvError) as exc_info:
            load_options(tmp_path, env={})
        assert exc_info.value.code == E.CONFIG_INVALID_VALUE

    def test_parse_error(self, tmp_path: Path) -> None:
        """Invalid TOML raises NSV-CONFIG-PARSE-ERROR."""
        _write(tmp_path, 'show = = true\n')
        with pytest.raises(NsvError) as exc_info:
            load_options(tmp_path, env={})
        assert exc_info.value.code == E.CONFIG_PARSE_ERROR

    def test_invalid_template(self, tmp_path: Path) -> None:
        """A template with an unknown field fails at load time."""
        _write(tmp_path, 'format = "{{ .Tag }}"\n')
        with pytest.raises(NsvError) as exc_info:
            load_options(tmp_path, env={})
        assert exc_info.value.code == E.FORMAT_INVALID

    def test_invalid_pre_label(self, tmp_path: Path) -> None:
        """Labels must be a single identifier."""
        _write(tmp_path, 'pre_label = "rc.1"\n')
        with pytest.raises(NsvError) as exc_info:
            load_options(tmp_path, env={})
        assert exc_info.value.code == E.CONFIG_INVALID_VALUE


class TestPrecedence:
    """Tests for layer precedence."""

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        """NSV_* variables beat nsv.toml."""
        _write(tmp_path, 'pre_label = "alpha"\nshow = true\n')
        opts = load_options(tmp_path, env={'NSV_PRE_LABEL': 'rc', 'NSV_SHOW': 'off'})
        assert opts.pre_label == 'rc'
        assert opts.show is False

    def test_overrides_beat_env(self, tmp_path: Path) -> None:
        """Command-line values beat the environment."""
        opts = load_options(tmp_path, env={'NSV_PATH': 'src/a'}, overrides={'path': 'src/b'})
        assert opts.path == 'src/b'

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        """Unset flags do not mask lower layers."""
        _write(tmp_path, 'path = "src/a"\n')
        opts = load_options(tmp_path, env={}, overrides={'path': None, 'show': None})
        assert opts.path == 'src/a'
        assert opts.show is False

    def test_empty_env_ignored(self, tmp_path: Path) -> None:
        """An exported but empty variable is ignored."""
        _write(tmp_path, 'format = "v{{ .Version }}"\n')
        assert load_options(tmp_path, env={'NSV_FORMAT': ''}).format == 'v{{ .Version }}'

    @pytest.mark.parametrize(('value', 'expected'), [('1', True), ('YES', True), ('0', False), ('false', False)])
    def test_env_booleans(self, value: str, expected: bool) -> None:
        """Boolean variables accept the usual spellings."""
        assert load_options(None, env={'NSV_SHOW': value}).show is expected

    def test_env_bad_boolean(self) -> None:
        """Unrecognised boolean spellings are rejected."""
        with pytest.raises(NsvError) as exc_info:
            load_options(None, env={'NSV_SHOW': 'maybe'})
        assert exc_info.value.code == E.CONFIG_INVALID_VALUE

    def test_unknown_override(self) -> None:
        """Overrides must name real options."""
        with pytest.raises(NsvError) as exc_info:
            load_options(None, env={}, overrides={'colour': True})
        assert exc_info.value.code == E.CONFIG_INVALID_KEY
