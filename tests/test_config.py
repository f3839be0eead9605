"""Tests for viewer configuration loading."""
import pytest

from db_viewer.config import ViewerConfig, load_viewer_config


class TestViewerConfig:
    """Test defaults and YAML loading."""

    def test_defaults(self):
        """Built-in defaults."""
        config = ViewerConfig()

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 3456
        assert config.server.watch_debounce_seconds == 0.5
        assert config.detection.search_dirs[0] == "."
        assert "schema.ts" in config.detection.schema_filenames
        assert config.logging.level == "INFO"

    def test_from_yaml(self, tmp_path):
        """Values from YAML override defaults; the rest keep theirs."""
        path = tmp_path / "viewer.yaml"
        path.write_text(
            "server:\n"
            "  port: 4000\n"
            "  watch: true\n"
            "logging:\n"
            "  level: debug\n"
        )

        config = ViewerConfig.from_yaml(path)

        assert config.server.port == 4000
        assert config.server.watch is True
        assert config.server.host == "127.0.0.1"
        assert config.logging.level == "DEBUG"

    def test_empty_yaml(self, tmp_path):
        """An empty file gives defaults."""
        path = tmp_path / "viewer.yaml"
        path.write_text("")

        assert ViewerConfig.from_yaml(path) == ViewerConfig()

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ViewerConfig.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_port(self, tmp_path):
        """Out-of-range values are rejected."""
        path = tmp_path / "viewer.yaml"
        path.write_text("server:\n  port: 70000\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            ViewerConfig.from_yaml(path)

    def test_not_a_mapping(self, tmp_path):
        """Top-level YAML must be a mapping."""
        path = tmp_path / "viewer.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must be a mapping"):
            ViewerConfig.from_yaml(path)


class TestLoadViewerConfig:
    """Test file and environment resolution."""

    def test_env_overrides(self, monkeypatch):
        """DB_VIEWER_* variables override defaults."""
        monkeypatch.setenv("DB_VIEWER_HOST", "0.0.0.0")
        monkeypatch.setenv("DB_VIEWER_PORT", "8080")
        monkeypatch.setenv("DB_VIEWER_LOG_LEVEL", "warning")

        config = load_viewer_config()

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8080
        assert config.logging.level == "WARNING"

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        """DB_VIEWER_CONFIG names the YAML file."""
        path = tmp_path / "viewer.yaml"
        path.write_text("server:\n  port: 5000\n")
        monkeypatch.setenv("DB_VIEWER_CONFIG", str(path))

        assert load_viewer_config().server.port == 5000

    def test_env_beats_file(self, tmp_path, monkeypatch):
        """Environment overrides win over the YAML file."""
        path = tmp_path / "viewer.yaml"
        path.write_text("server:\n  port: 5000\n")
        monkeypatch.setenv("DB_VIEWER_PORT", "6000")

        assert load_viewer_config(path).server.port == 6000

    def test_bad_env_port(self, monkeypatch):
        """A non-numeric port override raises ValueError."""
        monkeypatch.setenv("DB_VIEWER_PORT", "abc")

        with pytest.raises(ValueError, match="DB_VIEWER_PORT"):
            load_viewer_config()
