"""Tests for JSON settings and the limits built from them."""

import json

import pytest

from core.config import DEFAULT_CONCURRENCY, DEFAULT_SUPPORTED_EXTENSIONS, LabelerConfig
from infrastructure.settings import JsonSettings, load_settings


def write_settings(tmp_path, data, name="settings.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestJsonSettings:
    """Dotted-key access and loading."""

    def test_dotted_get(self, tmp_path):
        settings = JsonSettings(write_settings(tmp_path, {"limits": {"concurrency": 8}}))
        assert settings.get("limits.concurrency") == 8
        assert settings.get("limits.missing", "d") == "d"
        assert settings.get("limits.concurrency.deeper") is None

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JsonSettings(tmp_path / "absent.json")

    def test_non_object_root_is_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            JsonSettings(write_settings(tmp_path, [1, 2, 3]))

    def test_load_settings_returns_none_when_unusable(self, tmp_path):
        assert load_settings(tmp_path / "absent.json") is None
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        assert load_settings(broken) is None

    def test_load_settings_reads_valid_file(self, tmp_path):
        path = write_settings(tmp_path, {"rename": {"add_sort_prefix": False}})
        settings = load_settings(path)
        assert settings is not None
        assert settings.path == path
        assert settings.get("rename.add_sort_prefix") is False


class TestLabelerConfig:
    """Limits and extension filtering."""

    def test_defaults(self):
        config = LabelerConfig.from_settings(None)
        assert config.max_file_name_length == 260
        assert config.concurrency == DEFAULT_CONCURRENCY
        assert config.supported_extensions == DEFAULT_SUPPORTED_EXTENSIONS
        assert config.add_sort_prefix is True

    @pytest.mark.parametrize(
        "name, supported",
        [
            ("a.JPG", True),
            ("b.Heic", True),
            ("c.mp4", True),
            ("d.txt", False),
            ("noextension", False),
            ("archive.jpg.zip", False),
        ],
    )
    def test_extension_filter_is_case_insensitive(self, name, supported):
        assert LabelerConfig().is_supported(name) is supported

    def test_values_from_settings(self, tmp_path):
        data = {
            "limits": {"max_file_name_length": 120, "concurrency": 4},
            "media": {"supported_extensions": ["JPG", ".png"]},
            "rename": {"add_sort_prefix": False},
        }
        config = LabelerConfig.from_settings(JsonSettings(write_settings(tmp_path, data)))
        assert config.max_file_name_length == 120
        assert config.concurrency == 4
        assert config.supported_extensions == (".jpg", ".png")
        assert config.add_sort_prefix is False
        assert config.is_supported("x.JPG")
        assert not config.is_supported("x.heic")

    @pytest.mark.parametrize("bad", [0, -5, "many", None])
    def test_invalid_limits_fall_back_to_defaults(self, tmp_path, bad):
        data = {"limits": {"max_file_name_length": bad, "concurrency": bad}}
        config = LabelerConfig.from_settings(JsonSettings(write_settings(tmp_path, data)))
        assert config.max_file_name_length == 260
        assert config.concurrency == DEFAULT_CONCURRENCY

    def test_empty_extension_list_keeps_defaults(self, tmp_path):
        data = {"media": {"supported_extensions": ["", 5]}}
        config = LabelerConfig.from_settings(JsonSettings(write_settings(tmp_path, data)))
        assert config.supported_extensions == DEFAULT_SUPPORTED_EXTENSIONS
