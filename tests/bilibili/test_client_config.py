import httpx
import pytest

from bilibili.common import DEFAULT_USER_AGENT
from bilibili.config import ClientConfig, RequestConfig, load_cookies_from_env
from bilibili.exceptions import ConfigurationError
from networking.models import Cookie

ENV_VARS = ("BILIBILI_COOKIE", "BILIBILI_USER_AGENT", "BILIBILI_TIMEOUT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores the original state even after
    # python-dotenv writes these variables behind its back.
    for key in ENV_VARS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults():
    config = ClientConfig()
    assert config.transport is None
    assert config.cancel_scope is None
    assert config.signer is None
    assert config.user_agent == DEFAULT_USER_AGENT
    assert config.timeout is None
    assert RequestConfig().sign is True


def test_from_env_reads_overrides(monkeypatch):
    monkeypatch.setenv("BILIBILI_USER_AGENT", "bili-bot/2.0")
    monkeypatch.setenv("BILIBILI_TIMEOUT", "7.5")

    config = ClientConfig.from_env()

    assert config.user_agent == "bili-bot/2.0"
    assert config.timeout == httpx.Timeout(7.5)


def test_from_env_keeps_explicit_collaborators():
    def signer(url):
        return url

    config = ClientConfig.from_env(signer=signer)

    assert config.signer is signer
    assert config.user_agent == DEFAULT_USER_AGENT
    assert config.timeout is None


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_from_env_rejects_bad_timeout(monkeypatch, raw):
    monkeypatch.setenv("BILIBILI_TIMEOUT", raw)
    with pytest.raises(ConfigurationError):
        ClientConfig.from_env()


def test_from_env_loads_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "BILIBILI_USER_AGENT=from-file/1.0\n"
        "BILIBILI_COOKIE=SESSDATA=abc; bili_jct=def\n"
    )

    config = ClientConfig.from_env(str(env_file))
    cookies = load_cookies_from_env(str(env_file))

    assert config.user_agent == "from-file/1.0"
    assert cookies == [Cookie("SESSDATA", "abc"), Cookie("bili_jct", "def")]


def test_load_cookies_from_env_empty_when_unset():
    assert load_cookies_from_env() == []
