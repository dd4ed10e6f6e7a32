"""yumldot - yUML diagram compiler.

Turns the compact yUML text notation for activity and class diagrams into
Graphviz DOT, ready for the ``dot`` renderer.

Library callers should run ``yumldot.logging.setup_logging()`` once before
compiling. Until structlog is configured it prints every event, debug
included, to stdout, where it would mix with DOT text written there.
setup_logging sends events to stderr and drops anything below WARNING.
"""

__version__ = "0.1.0"

from yumldot.core.compiler import CompiledDiagram, DiagramCompiler, compile_document
from yumldot.config import YumlConfig

__all__ = [
    "__version__",
    "CompiledDiagram",
    "DiagramCompiler",
    "compile_document",
    "YumlConfig",
]
