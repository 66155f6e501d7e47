"""Shared fixtures for minipatch tests."""

import os
from pathlib import Path

import pytest
import yaml

from minipatch import config as config_module

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def tmp_dir(tmp_path):
    """Provide a temporary directory and cd into it."""
    orig = os.getcwd()
    os.chdir(tmp_path)
    yield tmp_path
    os.chdir(orig)


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path_factory, monkeypatch):
    """Keep ~/.minipatch out of every test."""
    home = tmp_path_factory.mktemp("minipatch-home")
    monkeypatch.setattr(config_module, "CONFIG_DIR", home)
    monkeypatch.setattr(config_module, "CONFIG_FILE", home / "config.yml")
    return home


@pytest.fixture
def sample_config_data():
    """Minimal .minipatch.yml data dict."""
    return {
        "encoding": "utf-8",
        "verbose": False,
        "log-file": "",
        "backup-suffix": ".bak",
        "color": "never",
        "max-input-bytes": 4096,
    }


@pytest.fixture
def config_yaml_file(tmp_dir, sample_config_data):
    """Write a config YAML to tmp_dir and return its Path."""
    path = tmp_dir / ".minipatch.yml"
    with open(path, "w") as f:
        yaml.dump(sample_config_data, f, default_flow_style=False)
    return path


@pytest.fixture
def data_dir():
    return DATA_DIR
