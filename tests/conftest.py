"""Shared pytest fixtures for file-sync-server tests."""

import pytest
from dotenv import load_dotenv

from file_sync_server.core.session import SyncSession
from file_sync_server.store import ConfigStore
from file_sync_server.sync.engine import MappingExecutor
from file_sync_server.sync.resolver import PathResolver

load_dotenv()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep host configuration out of every test."""
    for var in (
        "FILE_SYNC_CONFIG",
        "FILE_SYNC_STORE",
        "FILE_SYNC_TREE_DEPTH",
        "FILE_SYNC_DEBUG",
        "LOG_LEVEL",
        "LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def store(tmp_path):
    """ConfigStore backed by a JSON file under tmp_path."""
    return ConfigStore(tmp_path / "state" / "store.json")


@pytest.fixture
def workspace(tmp_path):
    """Empty directory that relative mapping paths resolve against."""
    ws = tmp_path / "ws"
    ws.mkdir()
    return ws


@pytest.fixture
def session(store, workspace):
    """SyncSession whose executor resolves paths against ``workspace``."""
    executor = MappingExecutor(resolver=PathResolver(workspace))
    return SyncSession(store, executor=executor)


@pytest.fixture
def make_files():
    """Factory that writes ``{relative_path: content}`` under a root."""

    def _make(root, files):
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root

    return _make
