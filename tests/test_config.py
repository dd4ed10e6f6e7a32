"""Tests for configuration loading and validation."""

import pytest
from pydantic import ValidationError

from yumldot.config import RendererConfig, YumlConfig, validate_config


def test_default_config():
    """Defaults work without any file."""
    config = YumlConfig()

    assert config.renderer.binary == "dot"
    assert config.renderer.format == "svg"
    assert config.renderer.timeout_s == 30.0
    assert config.dark_mode is False
    assert config.log_level == "WARNING"
    assert config.log_file is None


def test_load_from_file(temp_dir):
    """Values are read from an explicit TOML file."""
    path = temp_dir / "yumldot.toml"
    path.write_text(
        'dark_mode = true\nlog_level = "debug"\n\n[renderer]\nformat = "png"\ntimeout_s = 5.0\n'
    )

    config = YumlConfig.load(str(path))

    assert config.dark_mode is True
    assert config.log_level == "DEBUG"
    assert config.renderer.format == "png"
    assert config.renderer.timeout_s == 5.0


def test_load_missing_file(temp_dir):
    """A missing explicit path falls back to defaults."""
    config = YumlConfig.load(str(temp_dir / "absent.toml"))

    assert config == YumlConfig()


def test_load_searches_project_dir(temp_dir, monkeypatch):
    """Without a path the project file in the working directory is used."""
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("HOME", str(temp_dir / "home"))
    (temp_dir / "yumldot.toml").write_text("dark_mode = true\n")

    assert YumlConfig.load().dark_mode is True


def test_load_searches_user_dir(temp_dir, monkeypatch):
    """The user config is used when the project has none."""
    home = temp_dir / "home"
    (home / ".yumldot").mkdir(parents=True)
    (home / ".yumldot" / "config.toml").write_text('[renderer]\nbinary = "/opt/graphviz/dot"\n')
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("HOME", str(home))

    assert YumlConfig.load().renderer.binary == "/opt/graphviz/dot"


def test_invalid_toml_falls_back(temp_dir):
    """Unparseable files give defaults instead of crashing."""
    path = temp_dir / "broken.toml"
    path.write_text("dark_mode = [true\n")

    assert YumlConfig.load(str(path)) == YumlConfig()


def test_invalid_values_fall_back(temp_dir):
    """Files that fail validation give defaults."""
    path = temp_dir / "bad.toml"
    path.write_text("[renderer]\ntimeout_s = -1\n")

    assert YumlConfig.load(str(path)).renderer.timeout_s == 30.0


def test_save_and_reload(temp_dir):
    """Saved configs load back unchanged."""
    path = temp_dir / "nested" / "yumldot.toml"
    config = YumlConfig(dark_mode=True, renderer=RendererConfig(format="pdf"))

    config.save(str(path))

    assert path.exists()
    assert YumlConfig.load(str(path)) == config


class TestValidation:
    """Tests for field validation."""

    def test_bad_format(self):
        """Only Graphviz formats yumldot writes are accepted."""
        with pytest.raises(ValidationError):
            RendererConfig(format="gif")

    def test_empty_binary(self):
        """The renderer binary cannot be blank."""
        with pytest.raises(ValidationError):
            RendererConfig(binary="  ")

    def test_non_positive_timeout(self):
        """Timeouts must be positive."""
        with pytest.raises(ValidationError):
            RendererConfig(timeout_s=0)

    def test_bad_log_level(self):
        """Unknown log levels are rejected, even on assignment."""
        config = YumlConfig()

        with pytest.raises(ValidationError):
            config.log_level = "LOUD"


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_no_warnings(self, mocker):
        """A present renderer and no log file gives no warnings."""
        mocker.patch("yumldot.config.shutil.which", return_value="/usr/bin/dot")

        assert validate_config(YumlConfig()) == []

    def test_missing_renderer(self, mocker):
        """A renderer not on PATH is a warning, not an error."""
        mocker.patch("yumldot.config.shutil.which", return_value=None)

        warnings = validate_config(YumlConfig())

        assert len(warnings) == 1
        assert "not found on PATH" in warnings[0]

    def test_log_dir_is_file(self, mocker, temp_dir):
        """A log file under a regular file is flagged."""
        mocker.patch("yumldot.config.shutil.which", return_value="/usr/bin/dot")
        blocker = temp_dir / "blocker"
        blocker.write_text("")

        warnings = validate_config(YumlConfig(log_file=blocker / "yumldot.log"))

        assert warnings == [f"Log file directory is not a directory: {blocker}"]
