"""
Core models for the dtsbundle engine.

Configuration is a pydantic model so it can be loaded from JSON config files;
the per-file records passed between the frontend and the bundler are plain
dataclasses.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from tree_sitter import Tree

DECLARATION_SUFFIX = ".d.ts"
DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")
# Source extension -> extension of the declaration file tsc emits for it
DECLARATION_EXTENSIONS = {".ts": ".d.ts", ".tsx": ".d.ts", ".mts": ".d.mts", ".cts": ".d.cts"}


# ============================================================================
# Configuration
# ============================================================================


class BundleConfig(BaseModel):
    """Options for one bundling run."""

    base_dir: str
    files: List[str] = Field(default_factory=list)
    excludes: List[str] = Field(default_factory=list)
    externs: List[str] = Field(default_factory=list)
    eol: str = Field(default=os.linesep)
    # Accepted for compatibility with existing configs; has no effect on bundling.
    includes: List[str] = Field(default_factory=list)
    indent: str = Field(default="\t")
    main: Optional[str] = None
    name: str
    out: str
    target: str = Field(default="ESNext", description="tsc --target value")
    compiler: List[str] = Field(default_factory=lambda: ["tsc"], description="Command used to run tsc")

    @field_validator("base_dir")
    @classmethod
    def _absolute_base_dir(cls, value: str) -> str:
        return os.path.abspath(value)

    @field_validator("eol", mode="before")
    @classmethod
    def _default_eol(cls, value: Optional[str]) -> str:
        return value or os.linesep

    @field_validator("indent", mode="before")
    @classmethod
    def _default_indent(cls, value: Optional[str]) -> str:
        return "\t" if value is None else value

    @field_validator("target", mode="before")
    @classmethod
    def _default_target(cls, value: Optional[str]) -> str:
        return value or "ESNext"


# ============================================================================
# Compiler records
# ============================================================================


class DiagnosticCategory(str, Enum):
    """Which compiler pass produced a diagnostic."""

    SYNTACTIC = "syntactic"
    SEMANTIC = "semantic"
    DECLARATION = "declaration"
    EMIT = "emit"


@dataclass
class Diagnostic:
    """A single compiler error. Line and column are 1-based."""

    code: int
    message: str
    file_name: Optional[str] = None
    line: int = 0
    column: int = 0
    category: DiagnosticCategory = DiagnosticCategory.SEMANTIC

    def format(self) -> str:
        if self.file_name is None:
            return f"error TS{self.code}: {self.message}"
        return f"{self.file_name}({self.line},{self.column}): error TS{self.code}: {self.message}"


@dataclass
class SourceFile:
    """A file that is part of the compiled program, in program order."""

    file_name: str
    contents: Optional[str] = None

    @property
    def is_declaration_file(self) -> bool:
        return self.file_name.endswith(DECLARATION_SUFFIXES)

    @property
    def text(self) -> str:
        # Library files are never read unless they are actually bundled
        if self.contents is None:
            with open(self.file_name, "r", encoding="utf-8-sig", newline="") as f:
                self.contents = f.read()
        return self.contents


@dataclass
class CompiledFile:
    """Parsed declaration text, ready to be rewritten or copied into the bundle."""

    file_name: str
    text: str
    tree: Tree
    is_declaration_file: bool = False
    is_external_module: bool = False

    @property
    def source(self) -> bytes:
        return self.text.encode("utf-8")


@dataclass
class EmitOutput:
    """Result of emitting declarations for one source file."""

    emit_skipped: bool
    diagnostics: List[Diagnostic] = field(default_factory=list)
    declaration: Optional[CompiledFile] = None
