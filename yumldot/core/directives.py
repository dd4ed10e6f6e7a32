"""Header directives: comment lines of the form ``// {key:value}``."""

import re
from typing import Iterable, Optional

import structlog

from yumldot.core.errors import DirectiveError
from yumldot.core.models import ChartType, Direction, DocumentOptions

log = structlog.get_logger()

DIRECTIVE = re.compile(r"^//\s+\{\s*(\w+)\s*:\s*(\w+)\s*}$")
COMMENT_PREFIX = "//"

BOOLEANS = {"true": True, "false": False}


def is_comment(line: str) -> bool:
    return line.startswith(COMMENT_PREFIX)


def parse_directive(line: str) -> Optional[tuple[str, str]]:
    """Extract ``(key, value)`` from a directive comment, if it is one."""
    match = DIRECTIVE.match(line.strip())
    if not match:
        return None
    return match.group(1), match.group(2)


def apply_directive(options: DocumentOptions, key: str, value: str) -> None:
    """Update ``options`` from one directive.

    Unknown keys are ignored.

    Raises:
        DirectiveError: If a known key has a value it does not accept
    """
    if key == "type":
        try:
            options.chart_type = ChartType(value)
        except ValueError:
            raise DirectiveError(key, value) from None
    elif key == "direction":
        try:
            options.direction = Direction(value)
        except ValueError:
            raise DirectiveError(key, value) from None
    elif key == "generate":
        if value not in BOOLEANS:
            raise DirectiveError(key, value)
        options.generate = BOOLEANS[value]
    else:
        log.debug("directive_ignored", key=key, value=value)


def parse_directives(lines: Iterable[str], dark: bool = False) -> DocumentOptions:
    """Collect document options from every directive comment in ``lines``."""
    options = DocumentOptions(dark=dark)
    for line in lines:
        if not is_comment(line):
            continue
        directive = parse_directive(line)
        if directive is not None:
            apply_directive(options, *directive)
    return options
