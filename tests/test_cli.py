"""Tests for argument parsing and app wiring in cli.main."""

import pytest

import hackerreader.cli as cli
from hackerreader.io import settings
from hackerreader.tui.theme import MONO_THEME


class _FakeApp:
    instances = []

    def __init__(self, client, reader_settings, theme_colors):
        self.client = client
        self.settings = reader_settings
        self.theme_colors = theme_colors
        self.return_code = None
        self.ran = False
        _FakeApp.instances.append(self)

    def run(self):
        self.ran = True


@pytest.fixture
def fake_app(monkeypatch):
    _FakeApp.instances = []
    monkeypatch.setattr(cli, "HackerReaderApp", _FakeApp)
    return _FakeApp


def test_defaults(fake_app):
    assert cli.main([]) == 0
    app = fake_app.instances[0]
    assert app.ran
    assert app.client.collection == "topstories"
    assert app.client.timeout == settings.DEFAULT_TIMEOUT


def test_flags_override_settings_file(fake_app):
    settings.save_settings({"collection": "beststories", "tick_interval": 3})
    cli.main(["--collection", "askstories", "--timeout", "4", "--theme", "mono"])
    app = fake_app.instances[0]
    assert app.client.collection == "askstories"
    assert app.client.timeout == 4.0
    assert app.settings.tick_interval == 3.0
    assert app.theme_colors is MONO_THEME


def test_nonzero_return_code_propagates(fake_app, monkeypatch):
    def run(self):
        self.return_code = 1

    monkeypatch.setattr(_FakeApp, "run", run)
    assert cli.main([]) == 1


def test_unknown_collection_rejected(fake_app):
    with pytest.raises(SystemExit):
        cli.main(["--collection", "nope"])


def test_save_remembers_flags(fake_app):
    cli.main(["--collection", "showstories", "--theme", "mono", "--save"])
    assert settings.load_settings() == {"collection": "showstories", "theme": "mono"}
    # next run without flags picks them up from the file
    cli.main([])
    app = fake_app.instances[-1]
    assert app.client.collection == "showstories"
    assert app.theme_colors is MONO_THEME


def test_flags_not_saved_by_default(fake_app):
    cli.main(["--collection", "showstories"])
    assert not settings.get_config_path().exists()


def test_theme_from_settings_file(fake_app):
    settings.save_settings({"theme": "mono"})
    cli.main([])
    assert fake_app.instances[0].theme_colors is MONO_THEME
