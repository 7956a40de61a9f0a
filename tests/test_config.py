# pyright: reportUnknownMemberType=false
import dataclasses

import pytest

from wecall.middleware.notifiers import WarningsNotifier
from wecall.networking.config import (
    ConnectionConfig,
    configure,
    get_default_config,
    reset_default_config,
)


def test_config_defaults_are_stable():
    config = ConnectionConfig()

    assert config.app_name is None
    assert config.app_env is None
    assert config.detect_deprecations is True
    assert config.deprecation_notifier is None
    assert config.probe is None


def test_config_is_immutable():
    config = ConnectionConfig(app_name="pokedex")

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.app_name = "other"  # type: ignore[misc]


def test_config_rejects_blank_defaults():
    with pytest.raises(ValueError):
        ConnectionConfig(app_name="")
    with pytest.raises(ValueError):
        ConnectionConfig(app_env="   ")


def test_from_env_reads_wecall_variables():
    config = ConnectionConfig.from_env(
        {
            "WECALL_APP_NAME": "pokedex",
            "WECALL_APP_ENV": "staging",
            "WECALL_DETECT_DEPRECATIONS": "off",
        }
    )

    assert config.app_name == "pokedex"
    assert config.app_env == "staging"
    assert config.detect_deprecations is False


def test_from_env_defaults_when_unset():
    config = ConnectionConfig.from_env({})

    assert config == ConnectionConfig()


@pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
def test_from_env_truthy_values(value):
    config = ConnectionConfig.from_env({"WECALL_DETECT_DEPRECATIONS": value})

    assert config.detect_deprecations is True


def test_configure_swaps_default_snapshot():
    before = get_default_config()
    notifier = WarningsNotifier()

    after = configure(app_name="pokedex", deprecation_notifier=notifier)

    assert after is get_default_config()
    assert after is not before
    assert before.app_name is None
    assert after.app_name == "pokedex"
    assert after.deprecation_notifier is notifier


def test_configure_keeps_unchanged_fields():
    configure(app_name="pokedex")
    configure(app_env="test")

    config = get_default_config()
    assert config.app_name == "pokedex"
    assert config.app_env == "test"


def test_configure_rejects_unknown_fields():
    with pytest.raises(TypeError):
        configure(retries=3)


def test_reset_default_config():
    configure(app_name="pokedex", detect_deprecations=False)

    reset_default_config()

    assert get_default_config() == ConnectionConfig()
