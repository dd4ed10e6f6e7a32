"""Environment checks behind ``yumldot doctor``.

Compiling needs nothing beyond the Python dependencies. Rendering also needs
the Graphviz ``dot`` binary, so a missing renderer is reported but is not
critical.
"""

import importlib.util
import subprocess
import sys
from dataclasses import dataclass
from typing import Optional

import structlog

log = structlog.get_logger()

MIN_PYTHON = (3, 9)

RUNTIME_DEPENDENCIES = [
    ("click", "CLI framework"),
    ("rich", "Terminal formatting"),
    ("pydantic", "Config validation"),
    ("structlog", "Logging"),
    ("toml", "Config files"),
]

CRITICAL_CHECKS = ("python", "dependencies", "compiler")

SELF_TEST = "// {type:activity}\n(start)->(end)"


@dataclass
class HealthCheck:
    """Outcome of one check."""

    name: str
    passed: bool
    message: str
    details: Optional[str] = None


def check_graphviz(binary: str = "dot") -> HealthCheck:
    """Run ``<binary> -V`` and report the Graphviz version banner."""
    try:
        result = subprocess.run([binary, "-V"], capture_output=True, text=True, timeout=5)
    except FileNotFoundError:
        return HealthCheck(
            "Graphviz",
            False,
            f"'{binary}' not found",
            "Install Graphviz (https://graphviz.org); only 'yumldot render' needs it",
        )
    except subprocess.TimeoutExpired:
        return HealthCheck("Graphviz", False, f"'{binary} -V' timed out")

    # dot prints its version banner on stderr
    banner = (result.stderr or result.stdout).strip()
    if result.returncode != 0:
        log.debug("graphviz_check_failed", returncode=result.returncode, output=banner)
        return HealthCheck(
            "Graphviz", False, f"'{binary} -V' exited with {result.returncode}", banner or None
        )

    return HealthCheck("Graphviz", True, banner.splitlines()[0] if banner else "Available")


def check_python_version() -> HealthCheck:
    """Check the interpreter is new enough."""
    version = ".".join(str(part) for part in sys.version_info[:3])
    if sys.version_info[:2] >= MIN_PYTHON:
        return HealthCheck("Python Version", True, version)

    required = ".".join(str(part) for part in MIN_PYTHON)
    return HealthCheck(
        "Python Version",
        False,
        f"{version} (requires >= {required})",
        f"Upgrade Python to {required} or higher",
    )


def check_dependencies() -> tuple[HealthCheck, list[tuple[str, str, bool]]]:
    """Check every runtime dependency can be found.

    Returns:
        Tuple of (HealthCheck, list of (module, description, installed))
    """
    found = [
        (module, description, importlib.util.find_spec(module) is not None)
        for module, description in RUNTIME_DEPENDENCIES
    ]
    missing = [module for module, _, installed in found if not installed]

    if missing:
        check = HealthCheck(
            "Dependencies",
            False,
            f"{len(missing)} required packages missing",
            f"Missing: {', '.join(missing)}",
        )
    else:
        check = HealthCheck("Dependencies", True, f"{len(found)}/{len(found)} packages available")
    return check, found


def check_config(config_path: Optional[str] = None) -> HealthCheck:
    """Load the configuration and surface validation warnings."""
    from yumldot.config import YumlConfig, validate_config

    config = YumlConfig.load(config_path)
    warnings = validate_config(config)

    if warnings:
        return HealthCheck("Configuration", True, "Loaded with warnings", "\n".join(warnings))
    return HealthCheck(
        "Configuration",
        True,
        "OK",
        f"Renderer: {config.renderer.binary} -T{config.renderer.format}",
    )


def check_compiler() -> HealthCheck:
    """Compile a two-node diagram end to end."""
    from yumldot.core.compiler import compile_document

    dot = compile_document(SELF_TEST)
    if "A1 -> A2" in dot:
        return HealthCheck("Compiler", True, "OK")
    return HealthCheck("Compiler", False, "Self-test produced unexpected output", dot or "(empty)")


def get_all_checks(config_path: Optional[str] = None, binary: str = "dot") -> dict:
    """Run every check.

    Returns:
        Dict with ``checks`` (name -> HealthCheck), ``dependencies`` (per
        module detail) and ``overall`` (``all_passed``, ``critical_passed``)
    """
    deps_check, dep_details = check_dependencies()

    checks = {
        "python": check_python_version(),
        "dependencies": deps_check,
        "compiler": check_compiler(),
        "graphviz": check_graphviz(binary),
        "config": check_config(config_path),
    }

    return {
        "checks": checks,
        "dependencies": dep_details,
        "overall": {
            "all_passed": all(check.passed for check in checks.values()),
            "critical_passed": all(checks[name].passed for name in CRITICAL_CHECKS),
        },
    }
