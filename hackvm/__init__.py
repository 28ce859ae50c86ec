"""
hackvm - VM intermediate code to Hack assembly translator.

Modules:

    commands.py    -> typed VM commands and segments
    parser.py      -> line parser, sequential advance/peek reader
    labels.py      -> generation state and label allocation
    segments.py    -> (segment, index) addressing plans
    codegen.py     -> assembly generation, call/return protocol, bootstrap
    translator.py  -> multi-unit driver, source discovery
    cli.py         -> ``hackvm`` command
"""

from .codegen import CodeGenerator  # noqa: F401
from .commands import (  # noqa: F401
    Arithmetic,
    Call,
    Command,
    Function,
    Goto,
    IfGoto,
    Label,
    Pop,
    Push,
    Return,
    Segment,
)
from .config import TranslatorConfig  # noqa: F401
from .errors import (  # noqa: F401
    GeneratorError,
    ParseError,
    SegmentRangeError,
    SourceError,
    TranslationError,
)
from .parser import Parser, parse_line  # noqa: F401
from .translator import translate_path, translate_text, translate_units  # noqa: F401

__all__ = [
    "CodeGenerator",
    "Command",
    "Arithmetic",
    "Push",
    "Pop",
    "Label",
    "Goto",
    "IfGoto",
    "Function",
    "Call",
    "Return",
    "Segment",
    "TranslatorConfig",
    "TranslationError",
    "ParseError",
    "SegmentRangeError",
    "SourceError",
    "GeneratorError",
    "Parser",
    "parse_line",
    "translate_path",
    "translate_text",
    "translate_units",
]

__version__ = "0.1.0"
