"""
Tests for YAML configuration loading.
"""

import pytest
import yaml
from jointcad.config import (
    ConfigError,
    JoineryDefaults,
    JointcadConfig,
    LoggingSettings,
    config_from_dict,
    load_config,
    save_config,
)


class TestDefaults:

    def test_no_path(self):
        config = load_config()
        assert config == JointcadConfig()
        assert config.joinery.thickness_mm == 3.0
        assert config.joinery.finger_count == 6
        assert config.joinery.align == "left"
        assert config.logging.level == "INFO"

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == JointcadConfig()

    def test_empty_document(self, tmp_path):
        path = tmp_path / "jointcad.yaml"
        path.write_text("")
        assert load_config(path) == JointcadConfig()


class TestLoading:

    def test_partial_sections(self, tmp_path):
        path = tmp_path / "jointcad.yaml"
        path.write_text("joinery:\n  thickness_mm: 4.5\n  type: dovetail\n")
        config = load_config(path)
        assert config.joinery.thickness_mm == 4.5
        assert config.joinery.type == "dovetail"
        assert config.joinery.finger_count == 6
        assert config.logging == LoggingSettings()

    def test_level_normalized(self):
        assert config_from_dict({"logging": {"level": "debug"}}).logging.level == "DEBUG"

    def test_save_and_load(self, tmp_path):
        config = JointcadConfig(
            joinery=JoineryDefaults(thickness_mm=6, finger_count=10, align="right"),
            logging=LoggingSettings(level="WARNING", file="run.log"),
        )
        path = tmp_path / "nested" / "jointcad.yaml"
        save_config(config, path)
        assert yaml.safe_load(path.read_text())["joinery"]["align"] == "right"
        assert load_config(path) == config


class TestErrors:

    @pytest.mark.parametrize("data", [
        {"joinery": {"align": "center"}},
        {"joinery": {"type": "biscuit"}},
        {"joinery": {"thickness_mm": "thick"}},
        {"joinery": {"finger_count": 2.5}},
        {"joinery": {"depth": 3}},
        {"joinery": ["a", "b"]},
        {"logging": {"level": "LOUD"}},
        {"render": {}},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            config_from_dict(data)

    def test_non_mapping_document(self):
        with pytest.raises(ConfigError):
            config_from_dict(["joinery"])

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "jointcad.yaml"
        path.write_text("joinery: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(path)
