"""Tests for CLI commands."""

import pytest
from click.testing import CliRunner
from unittest.mock import patch

from yumldot import __version__
from yumldot.cli import cli
from yumldot.core.errors import RenderError


@pytest.fixture
def invoke(temp_dir):
    """Run the CLI with an isolated (absent) config file."""
    runner = CliRunner()
    config = str(temp_dir / "no-config.toml")

    def _invoke(*args):
        return runner.invoke(cli, ["--config", config, *args])

    return _invoke


def test_version(invoke):
    """--version prints the package version."""
    result = invoke("--version")

    assert result.exit_code == 0
    assert __version__ in result.output


class TestCompileCommand:
    """Tests for yumldot compile."""

    def test_stdout(self, invoke, write_source, kettle_text):
        """DOT goes to stdout untouched."""
        source = write_source(kettle_text)

        result = invoke("compile", str(source))

        assert result.exit_code == 0
        assert result.stdout.startswith("digraph G {\n")
        assert result.stdout.endswith("}\n")
        assert "    A3 -> A4:f1:n [" in result.stdout

    def test_output_file(self, invoke, write_source, class_text, temp_dir):
        """-o writes the DOT to a file."""
        source = write_source(class_text)
        target = temp_dir / "out" / "shop.dot"

        result = invoke("compile", str(source), "-o", str(target))

        assert result.exit_code == 0
        assert "Wrote" in result.output
        assert "    ranksep = 0.7" in target.read_text(encoding="utf-8")

    def test_dark(self, invoke, write_source, kettle_text):
        """--dark switches the header colors."""
        source = write_source(kettle_text)

        result = invoke("compile", str(source), "--dark")

        assert "color=white, fontcolor=white" in result.stdout

    def test_dark_from_config(self, write_source, kettle_text, temp_dir):
        """dark_mode in the config has the same effect."""
        config = temp_dir / "yumldot.toml"
        config.write_text("dark_mode = true\n")
        source = write_source(kettle_text)

        result = CliRunner().invoke(cli, ["--config", str(config), "compile", str(source)])

        assert "color=white, fontcolor=white" in result.stdout

    def test_missing_type(self, invoke, write_source):
        """A document without a type fails with a suggestion."""
        source = write_source("(a)->(b)\n")

        result = invoke("compile", str(source))

        assert result.exit_code == 1
        assert "Missing mandatory 'type' directive" in result.output
        assert "Suggestion:" in result.output

    def test_invalid_expression(self, invoke, write_source):
        """Unclassifiable tokens fail with the token in the message."""
        source = write_source("// {type:activity}\n(a)->oops\n")

        result = invoke("compile", str(source))

        assert result.exit_code == 1
        assert "invalid expression" in result.output

    def test_unsupported_type_is_empty(self, invoke, write_source):
        """Unsupported chart types compile to nothing."""
        source = write_source("// {type:sequence}\n[A]->[B]\n")

        result = invoke("compile", str(source))

        assert result.exit_code == 0
        assert "digraph" not in result.stdout

    def test_missing_source(self, invoke, temp_dir):
        """Click rejects a source that does not exist."""
        result = invoke("compile", str(temp_dir / "absent.yuml"))

        assert result.exit_code == 2


class TestRenderCommand:
    """Tests for yumldot render."""

    def test_render(self, invoke, write_source, kettle_text, temp_dir):
        """The compiled DOT is handed to the renderer with the suffix format."""
        source = write_source(kettle_text)
        target = temp_dir / "kettle.png"

        with patch("yumldot.cli.write_rendered", return_value=target) as mock_write:
            result = invoke("render", str(source), "-o", str(target))

        assert result.exit_code == 0
        assert "Rendered" in result.output
        dot, path = mock_write.call_args.args
        assert dot.startswith("digraph G {")
        assert path == target
        assert mock_write.call_args.kwargs["fmt"] == "png"
        assert mock_write.call_args.kwargs["binary"] == "dot"

    def test_format_option(self, invoke, write_source, kettle_text, temp_dir):
        """-f overrides the suffix."""
        source = write_source(kettle_text)

        with patch("yumldot.cli.write_rendered") as mock_write:
            invoke("render", str(source), "-o", str(temp_dir / "kettle.png"), "-f", "svg")

        assert mock_write.call_args.kwargs["fmt"] == "svg"

    def test_renderer_failure(self, invoke, write_source, kettle_text, temp_dir):
        """Renderer errors exit 1 with an install hint."""
        source = write_source(kettle_text)

        with patch(
            "yumldot.cli.write_rendered",
            side_effect=RenderError("Renderer 'dot' not found on PATH"),
        ):
            result = invoke("render", str(source), "-o", str(temp_dir / "kettle.svg"))

        assert result.exit_code == 1
        assert "not found on PATH" in result.output
        assert "Graphviz" in result.output

    def test_nothing_to_render(self, invoke, write_source, temp_dir):
        """Empty output is not sent to the renderer."""
        source = write_source("// {type:usecase}\n[User]\n")

        with patch("yumldot.cli.write_rendered") as mock_write:
            result = invoke("render", str(source), "-o", str(temp_dir / "x.svg"))

        assert result.exit_code == 1
        assert "Nothing to render" in result.output
        mock_write.assert_not_called()


class TestCheckCommand:
    """Tests for yumldot check."""

    def test_summary(self, invoke, write_source, kettle_text):
        """The summary table lists the options and counts."""
        source = write_source(kettle_text)

        result = invoke("check", str(source))

        assert result.exit_code == 0
        assert "activity" in result.output
        assert "topDown (TB)" in result.output
        assert "10" in result.output
        assert "11" in result.output
        assert "✓ OK" in result.output

    def test_dropped_edges(self, invoke, write_source):
        """Dropped edges produce a warning."""
        source = write_source("// {type:activity}\n(a)->\n->(b)\n")

        result = invoke("check", str(source))

        assert result.exit_code == 0
        assert "2 edge(s) had no node on one side" in result.output

    def test_nothing_compiled(self, invoke, write_source):
        """Unsupported documents are flagged."""
        source = write_source("// {type:state}\n(Idle)->(Busy)\n")

        result = invoke("check", str(source))

        assert "Nothing compiled" in result.output


class TestLumaCommand:
    """Tests for yumldot luma."""

    def test_light_color(self, invoke):
        """Light colors force black text."""
        result = invoke("luma", "white")

        assert result.exit_code == 0
        assert "white: luma 255.00" in result.output
        assert "font color: black" in result.output

    def test_dark_hex(self, invoke):
        """Dark colors force white text."""
        result = invoke("luma", "#000000")

        assert "luma 0.00" in result.output
        assert "font color: white" in result.output

    def test_unknown_color(self, invoke):
        """Unknown colors are neutral and flagged."""
        result = invoke("luma", "blurple")

        assert "Unknown color" in result.output
        assert "luma 128.00" in result.output
        assert "font color: renderer default" in result.output


class TestDoctorCommand:
    """Tests for yumldot doctor."""

    def test_without_graphviz(self, invoke):
        """A missing renderer is not critical."""
        with patch("yumldot.core.doctor.subprocess.run", side_effect=FileNotFoundError()):
            result = invoke("doctor")

        assert result.exit_code == 0
        assert "yumldot doctor" in result.output
        assert "Some checks failed" in result.output

    def test_verbose_lists_dependencies(self, invoke):
        """-v lists every runtime dependency."""
        with patch("yumldot.core.doctor.subprocess.run", side_effect=FileNotFoundError()):
            result = invoke("doctor", "-v")

        for module in ["click", "rich", "pydantic", "structlog", "toml"]:
            assert f"({module})" in result.output
