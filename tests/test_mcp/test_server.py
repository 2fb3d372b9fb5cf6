"""Tests for mcp/server.py -- registry wiring, ping and call dispatch."""

import pytest

from file_sync_server import __version__
from file_sync_server.mcp import server as server_mod
from file_sync_server.mcp.tools import ALL_SPECS


@pytest.fixture
def wired(session):
    server_mod.set_session(session)
    server_mod.set_registry(server_mod.build_registry())
    yield session
    server_mod.set_session(None)
    server_mod.set_registry(None)


class TestBuildRegistry:
    def test_all_tools_plus_ping(self):
        registry = server_mod.build_registry()
        assert registry.tool_count() == len(ALL_SPECS) + 1

    def test_permissions_file_filters(self, tmp_path):
        perms = tmp_path / "perms"
        perms.write_text("TREE_VIEW\n")
        registry = server_mod.build_registry(str(perms))
        names = {t.name for t in registry.list_tools()}
        assert names == {"ping", "fs_read_tree"}


class TestAccessors:
    def test_session_uninitialized(self):
        server_mod.set_session(None)
        with pytest.raises(RuntimeError, match="not initialized"):
            server_mod.get_session()

    def test_registry_uninitialized(self):
        server_mod.set_registry(None)
        with pytest.raises(RuntimeError, match="not initialized"):
            server_mod.get_registry()


class TestHandlers:
    async def test_list_tools(self, wired):
        tools = await server_mod.handle_list_tools()
        assert "sync_all" in {t.name for t in tools}

    async def test_ping(self, wired):
        result = await server_mod.handle_call_tool("ping", {})
        text = result.content[0].text
        assert __version__ in text
        assert str(wired.store.path) in text

    async def test_unknown_tool(self, wired):
        result = await server_mod.handle_call_tool("wiki_get", None)
        assert result.isError
        assert "Error (unknown_tool)" in result.content[0].text


class TestArgs:
    def test_defaults_keep_only_log_file(self):
        args = server_mod.build_parser().parse_args([])
        assert server_mod.overrides_from_args(args) == {
            "log_file": server_mod.DEFAULT_MCP_LOG_FILE
        }

    def test_all_options(self):
        args = server_mod.build_parser().parse_args(
            [
                "--store", "/s.json",
                "--tree-depth", "0",
                "--debug",
                "--permissions-file", "p",
            ]
        )
        overrides = server_mod.overrides_from_args(args)
        assert overrides["store_path"] == "/s.json"
        assert overrides["tree_depth"] == 0
        assert overrides["debug"] is True
        assert overrides["permissions_file"] == "p"
