import os
import sys
import unittest
import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig
from settings_schema import validate_settings
from db import SettingsRepository


class SettingsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_settings.db"
        self.yaml_path = "test_settings.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def test_yaml_roundtrip(self) -> None:
        cfg = YamlConfig(self.yaml_path)
        self.assertEqual(cfg.load(), {})
        cfg.save({"weight_unit": "lb", "default_rep_range": "10"})
        self.assertEqual(cfg.load(), {"weight_unit": "lb", "default_rep_range": "10"})

    def test_validate_settings(self) -> None:
        validate_settings({"weight_unit": "lb", "history_sessions": 3})
        with self.assertRaises(ValueError):
            validate_settings({"weight_unit": "stone"})
        with self.assertRaises(ValueError):
            validate_settings({"history_sessions": 0})

    def test_defaults_written_to_yaml(self) -> None:
        settings = SettingsRepository(self.db_path, self.yaml_path)
        self.assertEqual(settings.get_text("weight_unit", ""), "kg")
        self.assertEqual(settings.get_int("history_sessions", 0), 5)
        with open(self.yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        self.assertEqual(data["weight_unit"], "kg")
        self.assertEqual(data["default_rep_range"], "")

    def test_yaml_edits_are_picked_up(self) -> None:
        settings = SettingsRepository(self.db_path, self.yaml_path)
        data = YamlConfig(self.yaml_path).load()
        data["weight_unit"] = "lb"
        data["default_rep_range"] = "10"
        YamlConfig(self.yaml_path).save(data)
        self.assertEqual(settings.get_text("weight_unit", "kg"), "lb")
        self.assertEqual(settings.get_text("default_rep_range", ""), "10")
        self.assertEqual(settings.all_settings()["default_rep_range"], "10")

    def test_numeric_rep_range_read_as_text(self) -> None:
        self.assertEqual(validate_settings({"default_rep_range": 10}).default_rep_range, "10")
        self.assertEqual(validate_settings({"default_rep_range": None}).default_rep_range, "")
        settings = SettingsRepository(self.db_path, self.yaml_path)
        data = YamlConfig(self.yaml_path).load()
        data["default_rep_range"] = 10
        YamlConfig(self.yaml_path).save(data)
        self.assertEqual(settings.get_text("default_rep_range", ""), "10")
        self.assertEqual(settings.all_settings()["default_rep_range"], "10")
        reopened = SettingsRepository(self.db_path, self.yaml_path)
        self.assertEqual(reopened.get_text("default_rep_range", ""), "10")

    def test_rpe_scale_is_not_a_setting(self) -> None:
        self.assertNotIn("rpe_scale", SettingsRepository(self.db_path, self.yaml_path).all_settings())
        self.assertNotIn("rpe_scale", validate_settings({"rpe_scale": 20}).model_dump())

    def test_invalid_yaml_rejected(self) -> None:
        YamlConfig(self.yaml_path).save({"weight_unit": "stone"})
        with self.assertRaises(ValueError):
            SettingsRepository(self.db_path, self.yaml_path)


if __name__ == "__main__":
    unittest.main()
