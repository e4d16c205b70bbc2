from pathlib import Path
from typing import Any

import pytest

from core.config import AppSettings, get_user_env_file


class RecordingProxy:
    """Test double for the proxy capability.

    Records every call and emulates a server that honors registration, so
    register/list/unregister flows can be checked end to end.
    """

    def __init__(self, *, fail_with: Exception | None = None) -> None:
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []
        self.registered: list[str] = []
        self.fail_with = fail_with
        self.list_override: Any = ...
        self.closed = False

    async def __aenter__(self) -> "RecordingProxy":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.closed = True

    async def command(
        self, path: str, method: str, body: dict[str, Any] | None = None
    ) -> Any:
        self.calls.append((path, method, body))
        if self.fail_with is not None:
            raise self.fail_with

        if path.endswith("/register_idling_resources"):
            for name in body["classNames"].split(","):
                if name not in self.registered:
                    self.registered.append(name)
            return None
        if path.endswith("/unregister_idling_resources"):
            for name in body["classNames"].split(","):
                if name in self.registered:
                    self.registered.remove(name)
            return None
        if path.endswith("/list_idling_resources"):
            if self.list_override is not ...:
                return self.list_override
            return list(self.registered)
        return None


@pytest.fixture
def recording_proxy() -> RecordingProxy:
    """Fixture for a proxy double that honors registration"""
    return RecordingProxy()


@pytest.fixture
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the working directory and user config dir at tmp_path

    Returns the user .env path that `load_settings` will read.
    """
    for key in ("SERVER_URL", "SESSION_ID", "HTTP_TIMEOUT_SECONDS", "USER_AGENT", "LOG_LEVEL"):
        monkeypatch.delenv(f"ESPRESSO_IDLING_{key}", raising=False)
    home = tmp_path / "home"
    home.mkdir()
    for var in ("HOME", "USERPROFILE", "APPDATA"):
        monkeypatch.setenv(var, str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return get_user_env_file()


@pytest.fixture
def settings(isolated_config: Path) -> AppSettings:
    """Settings isolated from any .env file on the machine"""
    return AppSettings(_env_file=None, server_url="http://espresso.test:6791")
