"""Pytest configuration and fixtures for QueBar status core tests."""

import sys
from pathlib import Path

import pytest

# Add repository root to path so tests run without installing the package
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

# Test doubles live next to this file
tests_root = Path(__file__).parent
if str(tests_root) not in sys.path:
    sys.path.insert(0, str(tests_root))

from quebar.channel import Channel
from quebar.coalescer import RepaintFlag
from quebar.config import Config, WorkspaceClientConfig

from fakes import FakeHost


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def client_config():
    return WorkspaceClientConfig(url="ws://localhost:6123", reconnect_delay=2.0)


@pytest.fixture
def repaint_flag():
    return RepaintFlag()


@pytest.fixture
def workspace_channel():
    return Channel("workspaces")


@pytest.fixture
def battery_channel():
    return Channel("battery")


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest.fixture
def sample_workspaces():
    """Workspace payload using GlazeWM key spellings."""
    return [
        {"name": "1", "hasFocus": True, "isDisplayed": True},
        {"name": "2", "hasFocus": False, "isDisplayed": False},
        {"name": "web"},
    ]
