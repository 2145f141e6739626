import os
import tempfile

import yaml

from notables.config import Config


class TestConfig:
    def test_default_config(self, config):
        """Verify defaults are loaded when no file is given."""
        assert config["server"]["port"] == 8080
        assert config["server"]["debug"] is False
        assert config["storage"]["backend"] == "memory"
        assert config["aggregation"]["top_n"] == 10
        assert config["aggregation"]["window_hours"] == 24
        assert config["aggregation"]["fallback_enabled"] is True
        assert config["timeline"]["align_to_hour"] is True
        assert config["search"]["default_limit"] == 100
        assert config["categorizer"]["urgency_rules"] == {}

    def test_load_from_yaml(self):
        """Write a temp YAML with overrides, verify merge."""
        override = {
            "storage": {"backend": "sqlite"},
            "aggregation": {"top_n": 5},
        }
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".yaml", delete=False
        ) as f:
            yaml.dump(override, f)
            temp_path = f.name

        try:
            cfg = Config(temp_path)
            assert cfg["storage"]["backend"] == "sqlite"
            assert cfg["storage"]["sqlite_path"] == "./data/logs.db"  # default preserved
            assert cfg["aggregation"]["top_n"] == 5
            assert cfg["aggregation"]["window_hours"] == 24  # default preserved
        finally:
            os.unlink(temp_path)

    def test_missing_file_uses_defaults(self):
        cfg = Config("/nonexistent/config.yaml")
        assert cfg["server"]["port"] == 8080

    def test_invalid_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("storage: [unclosed")
        cfg = Config(str(path))
        assert cfg["storage"]["backend"] == "memory"

    def test_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "cfg.yaml"
        path.write_text("search:\n  max_limit: 50\n")
        monkeypatch.setenv("CONFIG_PATH", str(path))
        cfg = Config.from_env()
        assert cfg["search"]["max_limit"] == 50
        assert "search" in cfg
        assert cfg.get("missing", "x") == "x"

    def test_instances_do_not_share_state(self):
        a = Config()
        a["aggregation"]["top_n"] = 1
        assert Config()["aggregation"]["top_n"] == 10
