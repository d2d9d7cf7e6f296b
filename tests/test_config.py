from __future__ import annotations

import pytest

from pykoji.config import HostChannelProfile, KojiConfig, load_override_payload
from pykoji.exceptions import KojiConfigError


def test_from_env_reads_project_and_channel(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KOJI_PROJECT_ID", "proj-1")
    monkeypatch.setenv("KOJI_PROJECT_TOKEN", "tok-1")
    monkeypatch.setenv("KOJI_REPLY_TIMEOUT", "2.5")
    monkeypatch.setenv("KOJI_CHANNEL_HOST", "broker.example.com")
    monkeypatch.setenv("KOJI_CHANNEL_PORT", "1883")
    monkeypatch.setenv("KOJI_CHANNEL_TLS", "off")

    config = KojiConfig.from_env()

    assert config.project_id == "proj-1"
    assert config.project_token == "tok-1"
    assert config.reply_timeout == 2.5
    assert config.channel.host == "broker.example.com"
    assert config.channel.port == 1883
    assert config.channel.tls is False
    assert config.channel.is_configured is True


def test_from_env_explicit_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KOJI_PROJECT_ID", "from-env")
    monkeypatch.setenv("KOJI_REPLY_TIMEOUT", "3")

    config = KojiConfig.from_env(
        project_id="explicit",
        reply_timeout=None,
        channel={"host": "other.example.com"},
    )

    assert config.project_id == "explicit"
    assert config.reply_timeout is None
    assert config.channel == HostChannelProfile(host="other.example.com")


def test_reply_timeout_defaults_to_waiting_forever(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KOJI_REPLY_TIMEOUT", raising=False)

    assert KojiConfig.from_env().reply_timeout is None
    monkeypatch.setenv("KOJI_REPLY_TIMEOUT", "0")
    assert KojiConfig.from_env().reply_timeout is None


def test_require_project_credentials() -> None:
    assert KojiConfig(project_id="p", project_token="t").require_project_credentials() == ("p", "t")
    with pytest.raises(KojiConfigError):
        KojiConfig(project_id="p").require_project_credentials()


def test_load_override_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KOJI_OVERRIDES", raising=False)
    assert load_override_payload() == {}

    assert load_override_payload('{"overrides": {"remixData": {"a": 1}}}') == {"a": 1}
    assert load_override_payload('{"overrides": {}}') == {}
    assert load_override_payload("[1, 2]") == {}

    with pytest.raises(KojiConfigError):
        load_override_payload("{not json")
