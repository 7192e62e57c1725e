from pathlib import Path
from typing import Dict, List, Optional

import pytest

from dtsbundle_engine.compiler.base import Frontend, Program
from dtsbundle_engine.compiler.tsc import declaration_name
from dtsbundle_engine.models import BundleConfig, Diagnostic, EmitOutput, SourceFile
from dtsbundle_engine.parser import TreeSitterParser


class FakeProgram(Program):
    """In-memory program: declaration text and diagnostics are given per source file."""

    def __init__(
        self,
        source_files: List[SourceFile],
        declarations: Dict[str, str],
        diagnostics: Optional[Dict[str, List[Diagnostic]]] = None,
    ):
        self.source_files = source_files
        self.declarations = declarations
        self.diagnostics = diagnostics or {}
        self.parser = TreeSitterParser()
        self.emitted: List[str] = []

    def get_source_files(self) -> List[SourceFile]:
        return list(self.source_files)

    def emit(self, source_file: SourceFile) -> EmitOutput:
        self.emitted.append(source_file.file_name)
        text = self.declarations.get(source_file.file_name)
        if text is None:
            return EmitOutput(emit_skipped=True)
        declaration = self.parser.parse_declaration(declaration_name(source_file.file_name), text)
        return EmitOutput(emit_skipped=False, declaration=declaration)

    def get_semantic_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        return list(self.diagnostics.get(source_file.file_name, []))

    def get_syntactic_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        return []

    def get_declaration_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        return []


class FakeFrontend(Frontend):
    def __init__(self, program: FakeProgram):
        self.program = program
        self.file_names: List[str] = []

    def create_program(self, file_names: List[str], config: BundleConfig) -> FakeProgram:
        self.file_names = list(file_names)
        return self.program


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    src.mkdir()
    return src


@pytest.fixture
def make_config(tmp_path: Path, base_dir: Path):
    def _make(**overrides) -> BundleConfig:
        values = {
            "base_dir": str(base_dir),
            "name": "pkg",
            "out": str(tmp_path / "out" / "pkg.d.ts"),
            "eol": "\n",
            "indent": "\t",
        }
        values.update(overrides)
        return BundleConfig(**values)

    return _make


@pytest.fixture
def make_frontend():
    def _make(source_files, declarations=None, diagnostics=None) -> FakeFrontend:
        return FakeFrontend(FakeProgram(source_files, declarations or {}, diagnostics))

    return _make


@pytest.fixture
def parser() -> TreeSitterParser:
    return TreeSitterParser()
