"""Compiler frontends that produce declaration output and diagnostics."""

from .base import Frontend, Program
from .tsc import TscFrontend, TscProgram, parse_tsc_output

__all__ = [
    "Frontend",
    "Program",
    "TscFrontend",
    "TscProgram",
    "parse_tsc_output",
]
