"""
Shared fixtures for config module tests.
"""
import copy

import pytest

from pzsdev.config.loader import DEFAULT_CONFIG


@pytest.fixture
def valid_config(tmp_path):
    """Complete valid configuration, as the loader returns it."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    for key in ('source', 'template', 'output', 'puzzlescript'):
        config['paths'][key] = tmp_path / config['paths'][key]
    config['root'] = tmp_path
    config['config_file'] = None
    return config


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run the test from an empty working directory."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir
