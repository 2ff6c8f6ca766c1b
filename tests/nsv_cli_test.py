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

"""Tests for nsv.cli."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from nsv import __version__
from nsv._types import LogEntry
from nsv.cli import build_parser, main
from nsv.errors import E, NsvError
from nsv.tag import Tag, matches_prefix, parse_tag


class _Provider:
    """Minimal in-memory provider for driving the CLI."""

    def __init__(self, root: Path, history: list[LogEntry]) -> None:
        self._root = root
        self._history = history

    def repo_root(self) -> Path:
        return self._root

    def matching_tag(self, prefix: str) -> Tag | None:
        for entry in self._history:
            for name in entry.tags:
                if matches_prefix(parse_tag(name), prefix):
                    return parse_tag(name)
        return None

    def log(self, *, since_tag: str | None = None, path: str = '') -> list[LogEntry]:
        return list(self._history)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ('NSV_SHOW', 'NSV_FORMAT', 'NSV_PATH', 'NSV_PRE_LABEL'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _discover(tmp_path: Path, history: list[LogEntry]):  # noqa: ANN202 - patch helper
    return patch('nsv.cli.GitCLIBackend.discover', return_value=_Provider(tmp_path, history))


_HISTORY = [
    LogEntry('b' * 40, 'fix(search): handle empty query', paths=('src/search/q.go',)),
    LogEntry('a' * 40, 'feat: first', paths=('README.md',), tags=('v0.1.0',)),
]


class TestBuildParser:
    """Tests for build_parser()."""

    def test_defaults(self) -> None:
        """No flags leaves every override unset."""
        args = build_parser().parse_args([])
        assert args.command is None
        assert args.show is False
        assert args.format is None
        assert args.path is None

    def test_verbose_and_quiet_exclusive(self) -> None:
        """-v and -q cannot be combined."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(['-v', '-q'])


class TestNextCommand:
    """Tests for the default command."""

    def test_prints_tag(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The next tag is the only thing on stdout."""
        with _discover(tmp_path, _HISTORY):
            assert main([]) == 0
        assert capsys.readouterr().out == 'v0.1.1\n'

    def test_format_flag(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--format renders through the template."""
        with _discover(tmp_path, _HISTORY):
            assert main(['--format', 'release-{{ .Version }}']) == 0
        assert capsys.readouterr().out == 'release-0.1.1\n'

    def test_path_flag(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--path scopes the run to a component."""
        with _discover(tmp_path, _HISTORY):
            assert main(['--path', 'src/search']) == 0
        assert capsys.readouterr().out == 'search/0.0.1\n'

    def test_show_goes_to_stderr(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """--show explains the decision without polluting stdout."""
        with _discover(tmp_path, _HISTORY):
            assert main(['--show']) == 0
        captured = capsys.readouterr()
        assert captured.out == 'v0.1.1\n'
        assert 'fix(search): handle empty query' in captured.err

    def test_config_file_applies(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """nsv.toml at the repository root is honoured."""
        (tmp_path / 'nsv.toml').write_text('format = "{{ .Version }}"\n', encoding='utf-8')
        with _discover(tmp_path, _HISTORY):
            assert main([]) == 0
        assert capsys.readouterr().out == '0.1.1\n'

    def test_no_release(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Nothing to release prints nothing and succeeds."""
        history = [LogEntry('c' * 40, 'docs: a'), *_HISTORY[1:]]
        with _discover(tmp_path, history):
            assert main([]) == 0
        assert capsys.readouterr().out == ''

    def test_error_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """NsvError is rendered on stderr with exit code 1."""
        with _discover(tmp_path, _HISTORY):
            assert main(['--format', '{{ .Tag }}']) == 1
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'error[NSV-FORMAT-INVALID]' in captured.err

    def test_not_a_repository(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Running outside git reports NSV-VCS-NOT-A-REPOSITORY."""
        error = NsvError(E.VCS_NOT_A_REPOSITORY, 'not a repo')
        with patch('nsv.cli.GitCLIBackend.discover', side_effect=error):
            assert main([]) == 1
        assert 'NSV-VCS-NOT-A-REPOSITORY' in capsys.readouterr().err

    def test_git_not_installed(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A missing git binary is an error, not a traceback."""
        with patch('nsv.backends.vcs.git.run_command', side_effect=FileNotFoundError('git')):
            assert main([]) == 1
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'error[NSV-VCS-COMMAND-FAILED]' in captured.err

    def test_keyboard_interrupt(self) -> None:
        """Ctrl-C exits with 130."""
        with patch('nsv.cli.GitCLIBackend.discover', side_effect=KeyboardInterrupt):
            assert main(['-q']) == 130


class TestSubcommands:
    """Tests for version and explain."""

    def test_version_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """version prints build information as JSON."""
        assert main(['version']) == 0
        info = json.loads(capsys.readouterr().out)
        assert info['version'] == __version__
        assert set(info) == {'version', 'python', 'platform'}

    def test_version_short(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--short prints only the number."""
        assert main(['version', '--short']) == 0
        assert capsys.readouterr().out == f'{__version__}\n'

    def test_explain_known(self, capsys: pytest.CaptureFixture[str]) -> None:
        """explain prints the catalog entry."""
        assert main(['explain', 'NSV-FORMAT-INVALID']) == 0
        assert capsys.readouterr().out.startswith('NSV-FORMAT-INVALID: ')

    def test_explain_unknown(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Unknown codes exit 1."""
        assert main(['explain', 'NSV-NOPE']) == 1
        assert 'Unknown error code' in capsys.readouterr().out
