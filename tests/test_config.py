"""Test configuration loading and validation"""

import pytest
import yaml

from autoyt.core import config as config_module
from autoyt.core.config import (
    Config,
    FfmpegConfig,
    UploadConfig,
    VideoFormat,
    default_config_dict,
    load_config,
    parse_config,
)
from autoyt.core.exceptions import ConfigError


def write_config(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadConfig:
    """Test reading config.yaml"""

    def test_partial_file(self, temp_dir):
        path = write_config(temp_dir / "config.yaml", {
            "paths": {"data": str(temp_dir / "data")},
            "upload": {"frequency_days": 2, "time_utc": "18:30:00", "tags": ["lofi"]},
        })

        config = load_config(path)

        assert config.paths.data == (temp_dir / "data").resolve()
        assert config.upload.frequency_days == 2
        assert config.upload.time_utc == "18:30:00"
        assert config.upload.tags == ("lofi",)
        assert config.upload.privacy == "public"
        assert config.ffmpeg == FfmpegConfig()
        assert config.video_format == VideoFormat()

    def test_empty_file(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == Config()

    def test_explicit_path_missing(self, temp_dir):
        with pytest.raises(ConfigError) as exc_info:
            load_config(temp_dir / "missing.yaml")

        assert "missing.yaml" in exc_info.value.message

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("paths: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_a_dictionary(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_search_paths(self, temp_dir, monkeypatch):
        found = write_config(temp_dir / "found.yaml", {"upload": {"privacy": "unlisted"}})
        monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [temp_dir / "missing.yaml", found])

        assert load_config().upload.privacy == "unlisted"

    def test_writes_defaults(self, temp_dir, monkeypatch):
        default_path = temp_dir / "home" / "config.yaml"
        monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [temp_dir / "missing.yaml"])
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", default_path)

        config = load_config()

        assert default_path.exists()
        assert yaml.safe_load(default_path.read_text(encoding="utf-8")) == default_config_dict()
        assert config.upload == UploadConfig()
        assert config.ffmpeg == FfmpegConfig()


class TestParseConfig:
    """Test validation of individual values"""

    def test_defaults(self):
        config = parse_config({})

        assert config.ffmpeg.input_args == "-r 1 -loop 1"
        assert config.ffmpeg.output_args == "-acodec copy -r 1 -shortest"
        assert config.video_format.title == "%(by) - %(title)"
        assert config.upload.category_id == "10"

    def test_paths_are_expanded(self, monkeypatch, temp_dir):
        monkeypatch.setenv("HOME", str(temp_dir))

        config = parse_config({"paths": {"root": "~/autoyt"}})

        assert config.paths.root == (temp_dir / "autoyt").resolve()

    def test_integer_category(self):
        assert parse_config({"upload": {"category_id": 22}}).upload.category_id == "22"

    def test_null_section(self):
        assert parse_config({"ffmpeg": None}).ffmpeg == FfmpegConfig()

    @pytest.mark.parametrize("raw", [
        {"paths": "nope"},
        {"paths": {"data": ""}},
        {"paths": {"root": 5}},
        {"ffmpeg": {"path": "  "}},
        {"ffmpeg": {"input_args": ["-r", "1"]}},
        {"video_format": {"title": 3}},
        {"upload": {"tags": "lofi"}},
        {"upload": {"tags": ["lofi", 1]}},
        {"upload": {"privacy": "secret"}},
        {"upload": {"category_id": ""}},
        {"upload": {"category_id": True}},
        {"upload": {"frequency_days": -1}},
        {"upload": {"frequency_days": "2"}},
        {"upload": {"frequency_days": True}},
        {"upload": {"time_utc": "12:00"}},
        {"upload": {"time_utc": "24:00:00"}},
    ])
    def test_invalid_values(self, raw):
        with pytest.raises(ConfigError):
            parse_config(raw)

    def test_error_names_field(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_config({"upload": {"privacy": "secret"}})

        assert exc_info.value.details["field"] == "upload.privacy"
        assert "private, public, unlisted" in exc_info.value.message
