"""
Tests for the CLI entry point and REPL commands.

Covers:
- argument parsing
- login/logout against a temporary config
- REPL command routing into the board session
"""

from __future__ import annotations

import pytest

from taskboard.client.channel import ChannelStatus
from taskboard.client.session import BoardSession
from taskboard.kernel.events import make_board
from taskboard.tests.conftest import FakeApi, FakeChannel

from taskboard_cli.config import Config
from taskboard_cli.main import login, logout, parse_args
from taskboard_cli.repl import Repl


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.delenv("TASKBOARD_API_URL", raising=False)
    return Config(config_dir=tmp_path)


# ============================================================================
# parse_args
# ============================================================================


class TestParseArgs:
    def test_empty(self):
        args = parse_args([])
        assert args["command"] is None
        assert args["board_id"] is None
        assert not args["show_help"]

    def test_login_with_token_and_url(self):
        args = parse_args(["login", "--token", "tb_1", "--api-url", "http://x:1"])
        assert args["command"] == "login"
        assert args["token"] == "tb_1"
        assert args["api_url"] == "http://x:1"

    def test_board_and_flags(self):
        args = parse_args(["--board", "b1", "-v"])
        assert args["board_id"] == "b1"
        assert args["show_version"]

    def test_logout_all(self):
        args = parse_args(["logout", "--all"])
        assert args["command"] == "logout"
        assert args["logout_all"]

    @pytest.mark.parametrize("argv", [["--bogus"], ["frobnicate"], ["--board"]])
    def test_bad_input_exits(self, argv, capsys):
        with pytest.raises(SystemExit) as exc:
            parse_args(argv)
        assert exc.value.code == 1
        assert capsys.readouterr().out


# ============================================================================
# login / logout
# ============================================================================


class TestAuthCommands:
    def test_login_requires_token(self, config, capsys):
        assert not login(config, None)
        assert "Usage" in capsys.readouterr().out

    def test_login_then_logout(self, config):
        assert login(config, "tb_1")
        assert config.is_authenticated
        assert logout(config)
        assert not config.is_authenticated
        assert not logout(config)

    def test_login_with_api_url_becomes_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TASKBOARD_API_URL", raising=False)
        flagged = Config(api_url_override="https://boards.example.com/", config_dir=tmp_path)
        assert login(flagged, "tb_hosted", remember_url=True)

        later = Config(config_dir=tmp_path)
        assert later.api_url == "https://boards.example.com"
        assert later.token == "tb_hosted"

    def test_login_without_api_url_keeps_default(self, config):
        assert login(config, "tb_1")
        assert config.default_url == "http://localhost:4000"

    def test_logout_all(self, config, capsys):
        login(config, "tb_1")
        assert logout(config, logout_all=True)
        out = capsys.readouterr().out
        assert "http://localhost:4000" in out
        assert not config.config_file.exists()


# ============================================================================
# REPL
# ============================================================================


@pytest.fixture
def repl(config):
    api = FakeApi(make_board({"todo": ["a", "b"], "done": ["c"]}, board_id="b1"))
    session = BoardSession("b1", token="tb", api=api, channel=FakeChannel(open_=False))
    return Repl(config, "b1", session=session)


class TestRepl:
    @pytest.mark.asyncio
    async def test_move_uses_one_based_index(self, repl):
        await repl.session.start()
        await repl.handle_command("/move a d 2")

        assert [t.id for t in repl.session.columns["done"]] == ["c", "a"]
        assert repl.session.channel.sent[0].type == "reorder"
        await repl.session.close()

    @pytest.mark.asyncio
    async def test_move_rejects_bad_input(self, repl, capsys):
        await repl.session.start()
        await repl.handle_command("/move a nowhere 1")
        await repl.handle_command("/move zz todo 1")
        await repl.handle_command("/move a todo x")

        out = capsys.readouterr().out
        assert "Unknown column" in out
        assert "No task zz" in out
        assert "Invalid number" in out
        assert repl.session.channel.sent == []
        await repl.session.close()

    @pytest.mark.asyncio
    async def test_add_rename_delete(self, repl):
        await repl.session.start()
        await repl.handle_command("/add  Write docs ")
        await repl.handle_command("/rename b Beta")
        await repl.handle_command("/del a")

        calls = repl.session.api.calls
        assert ("create_task", "b1", "Write docs", None, "todo") in calls
        assert ("update_task", "b", {"title": "Beta"}) in calls
        assert ("delete_task", "a") in calls
        await repl.session.close()

    @pytest.mark.asyncio
    async def test_quit_and_unknown(self, repl, capsys):
        await repl.handle_command("/nope")
        assert "Unknown command" in capsys.readouterr().out
        await repl.handle_command("/quit")
        assert not repl.running


class ReportingChannel(FakeChannel):
    """Reports status transitions the way the real channel does."""

    async def open(self):
        await super().open()
        self.on_status(ChannelStatus.OPEN)
        return self

    async def close(self):
        await super().close()
        self.on_status(ChannelStatus.CLOSED)


class TestReplStatus:
    @pytest.fixture
    def live_repl(self, config):
        api = FakeApi(make_board({"todo": ["a"]}, board_id="b1"))
        session = BoardSession("b1", token="tb", api=api, channel=ReportingChannel(open_=False))
        return Repl(config, "b1", session=session)

    @pytest.mark.asyncio
    async def test_clean_session_prints_no_disconnect(self, live_repl, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda prompt="": "/quit")
        await live_repl.start()

        out = capsys.readouterr().out
        assert "Goodbye." in out
        assert "disconnected" not in out

    @pytest.mark.asyncio
    async def test_drop_mid_session_is_reported(self, live_repl, capsys):
        live_repl.session.subscribe(live_repl._on_change)
        await live_repl.session.start()
        live_repl.session.channel.on_status(ChannelStatus.CLOSED)

        assert "live updates disconnected" in capsys.readouterr().out
        await live_repl.session.close()
