"""Tests for secret parameter lookup."""

from tradelog.infrastructure.secrets import get_secret_parameter, get_url_parameter


def test_reads_query_string_and_fragment():
    assert get_url_parameter("https://app.example/?caffeineAdminToken=abc", "caffeineAdminToken") == "abc"
    assert get_url_parameter("https://app.example/#caffeineAdminToken=xyz", "caffeineAdminToken") == "xyz"
    assert get_url_parameter("https://app.example/", "caffeineAdminToken") is None


def test_url_wins_over_environment():
    env = {"TRADELOG_CAFFEINE_ADMIN_TOKEN": "from-env"}

    assert get_secret_parameter("caffeineAdminToken", url="https://a/?caffeineAdminToken=u", environ=env) == "u"
    assert get_secret_parameter("caffeineAdminToken", environ=env) == "from-env"


def test_missing_or_empty_secret_is_none():
    assert get_secret_parameter("caffeineAdminToken", environ={}) is None
    assert get_secret_parameter("caffeineAdminToken", environ={"TRADELOG_CAFFEINE_ADMIN_TOKEN": ""}) is None


def test_settings_and_secrets_share_env_prefix():
    from tradelog.application import config
    from tradelog.infrastructure import secrets
    from tradelog.utils import ENV_PREFIX

    assert config.ENV_PREFIX is ENV_PREFIX
    assert secrets.ENV_PREFIX is ENV_PREFIX
    assert get_secret_parameter("caffeineAdminToken", environ={f"{ENV_PREFIX}CAFFEINE_ADMIN_TOKEN": "t"}) == "t"
