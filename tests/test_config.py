"""
Unit tests for the runner configuration.
"""
import json
import os

import pytest

from csrun_core.config import RunnerConfig, load_config
from csrun_core.errors import ConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run with an empty working directory and home directory."""
    home = tmp_path / 'home'
    home.mkdir()
    work = tmp_path / 'work'
    work.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.chdir(work)
    return work, home


class TestLoadConfig:

    def test_defaults(self, isolated):
        config = load_config()
        assert config == RunnerConfig()
        assert config.default_references == ['math', 'os']
        assert config.temp_dir is None
        assert config.encoding == 'utf-8-sig'

    def test_working_directory_file(self, isolated):
        work, _ = isolated
        (work / 'csrun.json').write_text(json.dumps({'default_references': ['json']}))
        assert load_config().default_references == ['json']

    def test_home_file(self, isolated):
        _, home = isolated
        (home / '.csrun').mkdir()
        (home / '.csrun' / 'config.json').write_text(json.dumps({'encoding': 'latin-1'}))
        assert load_config().encoding == 'latin-1'

    def test_working_directory_wins(self, isolated):
        work, home = isolated
        (work / 'csrun.json').write_text(json.dumps({'encoding': 'ascii'}))
        (home / '.csrun').mkdir()
        (home / '.csrun' / 'config.json').write_text(json.dumps({'encoding': 'latin-1'}))
        assert load_config().encoding == 'ascii'

    def test_explicit_path(self, isolated, tmp_path):
        path = tmp_path / 'custom.json'
        path.write_text(json.dumps({'temp_dir': str(tmp_path)}))
        assert load_config(str(path)).temp_dir == str(tmp_path)

    def test_explicit_path_missing(self, isolated):
        with pytest.raises(ConfigError, match='not found'):
            load_config(os.path.join('no', 'such.json'))


class TestInvalidConfig:

    @pytest.mark.parametrize('content', [
        '{not json',
        '[1, 2]',
        '{"unknown_key": 1}',
        '{"default_references": "math"}',
    ])
    def test_rejected(self, tmp_path, content):
        path = tmp_path / 'bad.json'
        path.write_text(content)
        with pytest.raises(ConfigError, match='Invalid configuration file'):
            load_config(str(path))
