"""Graphviz adapter: turn DOT text into image bytes.

The compiler never depends on this module; it is only needed to produce
SVG, PNG, PDF or JPG output.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Optional
import structlog

from yumldot.core.errors import RenderError

log = structlog.get_logger()

SUPPORTED_FORMATS = ("svg", "png", "pdf", "jpg")


def renderer_available(binary: str = "dot") -> bool:
    """Check whether the renderer executable is on PATH."""
    return shutil.which(binary) is not None


def format_for_path(path: Path, default: str = "svg") -> str:
    """Output format implied by a file suffix, falling back to ``default``."""
    suffix = path.suffix.lower().lstrip(".")
    if suffix == "jpeg":
        suffix = "jpg"
    return suffix if suffix in SUPPORTED_FORMATS else default


def render_dot(
    dot: str,
    fmt: str = "svg",
    binary: str = "dot",
    timeout: float = 30.0,
) -> bytes:
    """Render DOT text by piping it through the Graphviz binary.

    Args:
        dot: DOT document text
        fmt: Output format (svg, png, pdf, jpg)
        binary: Graphviz executable name or path
        timeout: Seconds to wait for the renderer

    Returns:
        Rendered image bytes

    Raises:
        RenderError: If the format is unsupported, the binary is missing,
            the renderer times out or exits non-zero
    """
    if fmt not in SUPPORTED_FORMATS:
        raise RenderError(f"Unsupported output format '{fmt}'")

    try:
        result = subprocess.run(
            [binary, f"-T{fmt}"],
            input=dot.encode("utf-8"),
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise RenderError(f"Renderer '{binary}' not found on PATH") from None
    except subprocess.TimeoutExpired:
        log.error("render_timeout", binary=binary, timeout=timeout)
        raise RenderError(f"Renderer '{binary}' timed out after {timeout:g}s") from None

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        log.error("render_failed", binary=binary, returncode=result.returncode, stderr=stderr)
        raise RenderError(f"Renderer '{binary}' failed (exit {result.returncode}): {stderr}")

    log.debug("render_complete", format=fmt, size=len(result.stdout))
    return result.stdout


def write_rendered(
    dot: str,
    target: Path,
    fmt: Optional[str] = None,
    binary: str = "dot",
    timeout: float = 30.0,
) -> Path:
    """Render DOT text and write the image to ``target``.

    Args:
        dot: DOT document text
        target: Output file path
        fmt: Output format; inferred from the suffix when None

    Returns:
        The written path
    """
    target = Path(target)
    fmt = fmt or format_for_path(target)
    data = render_dot(dot, fmt=fmt, binary=binary, timeout=timeout)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    log.info("render_written", path=str(target), format=fmt, size=len(data))
    return target
