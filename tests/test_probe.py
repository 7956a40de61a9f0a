import sys
import types

from wecall.networking.probe import OsEnvironProbe


def test_app_name_from_environment_variables():
    probe = OsEnvironProbe({"SERVICE_NAME": "berries", "APP_NAME": "pokedex"})

    assert probe.detect_app_name() == "pokedex"


def test_app_name_skips_blank_values():
    probe = OsEnvironProbe({"APP_NAME": "  ", "SERVICE_NAME": "berries"})

    assert probe.detect_app_name() == "berries"


def test_app_name_ignores_launcher_package(monkeypatch):
    main = types.SimpleNamespace(__package__="uvicorn")
    monkeypatch.setitem(sys.modules, "__main__", main)

    assert OsEnvironProbe({}).detect_app_name() is None


def test_app_name_is_none_when_unset():
    assert OsEnvironProbe({}).detect_app_name() is None


def test_environment_precedence():
    probe = OsEnvironProbe({"RAILS_ENV": "production", "APP_ENV": "staging"})

    assert probe.detect_environment() == "staging"


def test_environment_from_legacy_variables():
    assert OsEnvironProbe({"RACK_ENV": "test"}).detect_environment() == "test"


def test_environment_is_none_when_unset():
    assert OsEnvironProbe({}).detect_environment() is None
