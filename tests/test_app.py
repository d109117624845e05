"""App-level tests for the connection console."""

from __future__ import annotations

import importlib.metadata as metadata
from pathlib import Path

import pytest

from connspec.app import ConnspecApp
from connspec.config import AppConfig, ProfileConfig
from connspec.providers import DisconnectProvider, ProfileConnectProvider


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    config_path = tmp_path / "config.toml"
    monkeypatch.setattr("connspec.config.CONFIG_FILE", config_path)
    monkeypatch.setattr(metadata, "entry_points", lambda: metadata.EntryPoints(()))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("CONNSPEC_ENV", raising=False)
    return config_path


def _config(environment: str | None = "development") -> AppConfig:
    return AppConfig(
        environment=environment,
        profiles={
            "development": ProfileConfig(adapter="sqlite", database=":memory:"),
            "reporting": ProfileConfig(adapter="sqlite", database=":memory:", timeout=1),
            "broken": ProfileConfig(database="missing-adapter.db"),
        },
    )


class _DummyScreen:
    """Minimal stub so providers can reference an app without a running screen stack."""

    def __init__(self, app: ConnspecApp) -> None:
        self.app = app
        self.focused = None


def test_app_connects_current_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("connspec.app._load_app_config", lambda: _config())

    app = ConnspecApp()

    assert app.handler.connected("primary")
    assert app.handler.handle().config["database"] == ":memory:"
    assert app.last_error is None


def test_app_records_error_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("connspec.app._load_app_config", lambda: _config(environment=None))

    app = ConnspecApp()

    assert not app.handler.connected("primary")
    assert app.last_error


def test_app_prefers_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("connspec.app._load_app_config", lambda: _config())
    monkeypatch.setenv("DATABASE_URL", "sqlite:///reports.db?timeout=2")

    app = ConnspecApp()

    assert app.handler.handle().config == {"adapter": "sqlite", "database": "reports.db", "timeout": "2"}


@pytest.mark.anyio
async def test_profile_connect_provider_switches_profile(
    isolated_environment: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("connspec.app._load_app_config", lambda: _config())
    app = ConnspecApp()
    first = app.handler.handle()

    provider = ProfileConnectProvider(_DummyScreen(app))
    hits = [hit async for hit in provider.discover()]
    target = next(hit for hit in hits if "reporting" in (hit.display or ""))
    await target.command()

    handle = app.handler.handle()
    assert handle is not first
    assert handle.config["timeout"] == 1
    assert app.current_environment() == "reporting"
    assert 'environment = "reporting"' in isolated_environment.read_text()


@pytest.mark.anyio
async def test_failed_profile_keeps_previous_connection(
    isolated_environment: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("connspec.app._load_app_config", lambda: _config())
    app = ConnspecApp()
    first = app.handler.handle()

    app.connect_profile("broken")

    assert app.handler.handle() is first
    assert "does not specify adapter" in (app.last_error or "")
    assert app.current_environment() == "development"
    assert not isolated_environment.exists()


@pytest.mark.anyio
async def test_disconnect_provider_removes_primary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("connspec.app._load_app_config", lambda: _config())
    app = ConnspecApp()

    provider = DisconnectProvider(_DummyScreen(app))
    hits = [hit async for hit in provider.discover()]
    assert hits
    await hits[0].command()

    assert not app.handler.connected("primary")


@pytest.mark.anyio
async def test_app_renders_profiles_and_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("connspec.app._load_app_config", lambda: _config())
    app = ConnspecApp()

    async with app.run_test() as pilot:
        await pilot.pause()
        status = app.query_one("#status-bar")
        profiles = app.query_one("#profile-list")
        assert "Adapter: sqlite" in status.status_text()  # type: ignore[attr-defined]
        rendered = profiles.render_profiles()  # type: ignore[attr-defined]
        assert "● development" in rendered
        assert "reporting" in rendered

        app.disconnect()
        await pilot.pause()
        assert "Not connected" in status.status_text()  # type: ignore[attr-defined]


@pytest.mark.anyio
async def test_providers_search_and_hide_disconnect_when_idle(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("connspec.app._load_app_config", lambda: _config(environment=None))
    app = ConnspecApp()
    screen = _DummyScreen(app)

    assert [hit async for hit in DisconnectProvider(screen).discover()] == []

    hits = [hit async for hit in ProfileConnectProvider(screen).search("report")]
    assert len(hits) == 1
    await hits[0].command()

    assert app.handler.connected("primary")
    assert app.current_environment() == "reporting"
