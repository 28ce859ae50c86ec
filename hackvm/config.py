"""Translator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_ENTRY_FUNCTION = "Sys.init"
DEFAULT_STACK_BASE = 256
LOG_LEVEL_ENV = "HACKVM_LOG"


@dataclass(frozen=True)
class TranslatorConfig:
    entry_function: str = DEFAULT_ENTRY_FUNCTION
    stack_base: int = DEFAULT_STACK_BASE
    annotate: bool = True  # precede each command's code with a "// <command>" line


def default_log_level() -> str:
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


__all__ = ["TranslatorConfig", "DEFAULT_ENTRY_FUNCTION", "DEFAULT_STACK_BASE", "LOG_LEVEL_ENV", "default_log_level"]
