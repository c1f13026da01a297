"""Tests for steady.minibuffer.settings -- persistence and overrides."""

from __future__ import annotations

import json

from steady.minibuffer.settings import (
    DEFAULT_POINT_OFFSET,
    StabilizerSettings,
    load_settings,
    save_settings,
    settings_from_dict,
    settings_to_dict,
)


class TestSerialization:
    def test_from_empty_dict_gives_defaults(self) -> None:
        assert settings_from_dict({}) == StabilizerSettings()

    def test_camel_case_keys(self) -> None:
        settings = settings_from_dict({"minibufferHeight": 12, "pointOffset": 5})
        assert settings == StabilizerSettings(minibuffer_height=12, point_offset=5)

    def test_to_dict(self) -> None:
        assert settings_to_dict(StabilizerSettings(minibuffer_height=7)) == {
            "minibufferHeight": 7,
            "pointOffset": DEFAULT_POINT_OFFSET,
        }


class TestLoadSettings:
    """File and environment precedence."""

    def test_defaults_without_file(self) -> None:
        settings = load_settings()
        assert settings.minibuffer_height is None
        assert settings.point_offset == 3

    def test_save_then_load(self, isolated_config) -> None:
        save_settings(StabilizerSettings(minibuffer_height=15, point_offset=1))
        assert (isolated_config / "minibuffer.json").exists()
        assert load_settings() == StabilizerSettings(minibuffer_height=15, point_offset=1)

    def test_environment_overrides_file(self, monkeypatch) -> None:
        save_settings(StabilizerSettings(minibuffer_height=15, point_offset=1))
        monkeypatch.setenv("STEADY_MINIBUFFER_HEIGHT", "20")
        monkeypatch.setenv("STEADY_POINT_OFFSET", "4")
        assert load_settings() == StabilizerSettings(minibuffer_height=20, point_offset=4)

    def test_bad_environment_value_is_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("STEADY_POINT_OFFSET", "lots")
        assert load_settings().point_offset == DEFAULT_POINT_OFFSET

    def test_corrupt_file_gives_defaults(self, isolated_config) -> None:
        isolated_config.mkdir(parents=True)
        (isolated_config / "minibuffer.json").write_text("{not json")
        assert load_settings() == StabilizerSettings()

    def test_wrong_shape_gives_defaults(self, isolated_config) -> None:
        isolated_config.mkdir(parents=True)
        (isolated_config / "minibuffer.json").write_text(json.dumps([1, 2]))
        assert load_settings() == StabilizerSettings()
