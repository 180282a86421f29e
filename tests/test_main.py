"""
Tests for the openaci command line entry point.
"""

from pathlib import Path

import pytest

from openaci.http import HttpIntentRouter
from openaci.intent.router import IntentRouter
from openaci.main import AppLoadError, load_router, main, parse_args

APP_SOURCE = '''
from unittest.mock import MagicMock

from openaci.config import LLMConfig
from openaci.intent.router import IntentRouter

client = MagicMock()
client.name = "fake"

router = IntentRouter(client=client, config=LLMConfig())


def create_router():
    return router


not_a_router = 42
'''


@pytest.fixture
def app_module(tmp_path: Path, monkeypatch) -> str:
    (tmp_path / "cli_test_app.py").write_text(APP_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    return "cli_test_app"


class TestLoadRouter:
    """Tests for resolving module:attribute references."""

    def test_instance(self, app_module: str):
        router = load_router(f"{app_module}:router")
        assert isinstance(router, IntentRouter)

    def test_factory(self, app_module: str):
        assert load_router(f"{app_module}:create_router") is load_router(f"{app_module}:router")

    def test_missing_colon(self):
        with pytest.raises(AppLoadError, match="module:attribute"):
            load_router("just_a_module")

    def test_missing_module(self):
        with pytest.raises(AppLoadError, match="Cannot import"):
            load_router("no_such_module_anywhere:router")

    def test_missing_attribute(self, app_module: str):
        with pytest.raises(AppLoadError, match="no attribute"):
            load_router(f"{app_module}:nothing")

    def test_not_a_router(self, app_module: str):
        with pytest.raises(AppLoadError, match="not an IntentRouter"):
            load_router(f"{app_module}:not_a_router")


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = parse_args(["myapp:router"])
        assert args.app == "myapp:router"
        assert args.port is None
        assert args.debug is False

    def test_options(self):
        args = parse_args(["myapp:router", "--port", "9000", "--host", "127.0.0.1", "--console"])
        assert args.port == 9000
        assert args.host == "127.0.0.1"
        assert args.console is True


class TestMain:
    """Tests for the main() wrapper."""

    def test_bad_reference_exits_1(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["no_such_module_anywhere:router", "--console"])
        assert exc_info.value.code == 1

    def test_http_router_listens(self, monkeypatch):
        calls = []
        router = HttpIntentRouter.__new__(HttpIntentRouter)
        monkeypatch.setattr("openaci.main.load_router", lambda reference: router)
        monkeypatch.setattr(
            HttpIntentRouter, "listen", lambda self, port, host: calls.append((port, host))
        )
        monkeypatch.setenv("PORT", "9123")

        with pytest.raises(SystemExit) as exc_info:
            main(["whatever:router", "--console"])

        assert exc_info.value.code == 0
        assert calls == [(9123, "0.0.0.0")]
