"""Label normalisation and escaping helpers.

Two escaping regimes exist and must never be mixed:

* native record labels backslash-escape braces and angle brackets
  (``escape_label``), and
* HTML-like table labels entity-escape ``&``, ``<``, ``>`` and newlines
  (``escape_html``).
"""

import re
from dataclasses import dataclass
from typing import Optional

from yumldot.core.colors import contrast_font_color

BACKGROUND_SUFFIX = re.compile(r"^(.*)\{ *bg *: *([a-zA-Z]+\d*|#[0-9a-fA-F]{6}) *}$")
NOTE_PREFIX = "note:"

# Width at which class box fields are wrapped
CLASS_WRAP_WIDTH = 20

HTML_ENTITIES = {
    "\n": "<BR/>",
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
}


@dataclass
class LabelParts:
    """Label text with its embedded background attribute pulled out."""

    text: str
    background: Optional[str] = None
    font_color: Optional[str] = None
    is_note: bool = False


def extract_background(part: str, allow_note: bool = True) -> LabelParts:
    """Strip a trailing ``{bg:color}`` attribute and a ``note:`` prefix.

    The background color is lower-cased and its luma decides whether a font
    color is forced (see ``contrast_font_color``).

    Args:
        part: Inner text of a bracketed token, brackets removed
        allow_note: Whether ``note:`` marks the element as a note

    Returns:
        LabelParts with the cleaned label text
    """
    parts = LabelParts(text=part.strip())

    match = BACKGROUND_SUFFIX.match(part)
    if match:
        parts.text = match.group(1).strip()
        parts.background = match.group(2).strip().lower()
        parts.font_color = contrast_font_color(parts.background)

    if allow_note and parts.text.startswith(NOTE_PREFIX):
        parts.text = parts.text[len(NOTE_PREFIX):].strip()
        parts.is_note = True

    return parts


def record_name(label: str) -> str:
    """Identity key of a label: the first record field, trimmed."""
    return label.split("|", 1)[0].strip()


def escape_label(label: str) -> str:
    """Escape a label for a native Graphviz record or plain shape."""
    return (
        label.replace("{", "\\{")
        .replace("}", "\\}")
        .replace(";", "\n")
        .replace("<", "\\<")
        .replace(">", "\\>")
    )


def unescape_label(label: str) -> str:
    """Undo ``escape_label`` brace and bracket escapes."""
    return (
        label.replace("\\{", "{")
        .replace("\\}", "}")
        .replace("\\<", "<")
        .replace("\\>", ">")
    )


def escape_html(text: str) -> str:
    """Entity-escape text for an HTML-like table cell."""
    return "".join(HTML_ENTITIES.get(char, char) for char in text)


def word_wrap(line: str, width: int) -> str:
    """Break a line at spaces so each piece is shorter than ``width``.

    Words longer than ``width`` are left intact.
    """
    if len(line) < width:
        return line

    position = line.rfind(" ")
    if position > 0:
        return line[:position] + "\n" + word_wrap(line[position + 1:], width)
    return line


def format_label(label: str, width: int = CLASS_WRAP_WIDTH, allow_divisors: bool = True) -> str:
    """Word-wrap each record field of a label and escape the result.

    Args:
        label: Raw label text, fields separated by ``|``
        width: Wrap width applied per field
        allow_divisors: Whether ``|`` separates fields

    Returns:
        Escaped native label
    """
    fields = label.split("|") if allow_divisors else [label]
    return escape_label("|".join(word_wrap(field, width) for field in fields))
