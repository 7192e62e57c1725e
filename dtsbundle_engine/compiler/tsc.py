"""Compiler frontend backed by the TypeScript ``tsc`` command line.

tsc is run once per bundle with declaration-only emit into a scratch
directory. ``--listFiles`` gives the program's files in program order and
``--pretty false`` gives one machine-readable line per diagnostic; both are
parsed from the process output. Emitted declaration text is read back and
parsed with tree-sitter.
"""

import os
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from dtsbundle_engine.compiler.base import Frontend, Program
from dtsbundle_engine.errors import FrontendError
from dtsbundle_engine.models import (
    DECLARATION_EXTENSIONS,
    DECLARATION_SUFFIX,
    DECLARATION_SUFFIXES,
    BundleConfig,
    Diagnostic,
    DiagnosticCategory,
    EmitOutput,
    SourceFile,
)
from dtsbundle_engine.parser import TreeSitterParser

FILE_DIAGNOSTIC_PATTERN = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<column>\d+)\): error TS(?P<code>\d+): (?P<message>.*)$"
)
GLOBAL_DIAGNOSTIC_PATTERN = re.compile(r"^error TS(?P<code>\d+): (?P<message>.*)$")
PROGRAM_FILE_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts", ".js", ".jsx", ".json")
NEW_LINE_OPTIONS = {"\n": "lf", "\r\n": "crlf"}


@dataclass
class TscOutput:
    """Parsed stdout of a ``tsc --listFiles --pretty false`` run."""

    files: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def categorize(code: int, has_file: bool) -> DiagnosticCategory:
    """
    Assign a compiler pass from the diagnostic code range.

    Only diagnostics without a file are global; option and emit errors that
    name a file (5xxx, 6xxx) stay scoped to that file.
    """
    if not has_file:
        return DiagnosticCategory.EMIT
    if 5000 <= code < 7000:
        return DiagnosticCategory.EMIT
    if 1000 <= code < 2000:
        return DiagnosticCategory.SYNTACTIC
    if 4000 <= code < 5000:
        return DiagnosticCategory.DECLARATION
    return DiagnosticCategory.SEMANTIC


def parse_tsc_output(output: str, cwd: str) -> TscOutput:
    """
    Split tsc output into listed program files and diagnostics.

    Relative paths are resolved against ``cwd``. Indented lines continue the
    message of the preceding diagnostic.
    """
    result = TscOutput()

    for line in output.splitlines():
        if not line.strip():
            continue

        if line[0].isspace():
            if result.diagnostics:
                result.diagnostics[-1].message += "\n" + line.rstrip()
            continue

        match = FILE_DIAGNOSTIC_PATTERN.match(line)
        if match:
            code = int(match.group("code"))
            result.diagnostics.append(
                Diagnostic(
                    code=code,
                    message=match.group("message"),
                    file_name=_resolve(match.group("file"), cwd),
                    line=int(match.group("line")),
                    column=int(match.group("column")),
                    category=categorize(code, has_file=True),
                )
            )
            continue

        match = GLOBAL_DIAGNOSTIC_PATTERN.match(line)
        if match:
            code = int(match.group("code"))
            result.diagnostics.append(
                Diagnostic(code=code, message=match.group("message"), category=categorize(code, has_file=False))
            )
            continue

        if line.strip().endswith(PROGRAM_FILE_EXTENSIONS):
            result.files.append(_resolve(line.strip(), cwd))
        else:
            logger.warning(f"Ignoring unrecognized tsc output: {line}")

    return result


def _resolve(file_name: str, cwd: str) -> str:
    return os.path.normpath(os.path.join(cwd, file_name))


def declaration_name(file_name: str) -> str:
    """Name of the declaration file tsc emits for ``file_name``: ``a.mts`` gives ``a.d.mts``."""
    if file_name.endswith(DECLARATION_SUFFIXES):
        return file_name
    stem, extension = os.path.splitext(file_name)
    return stem + DECLARATION_EXTENSIONS.get(extension, DECLARATION_SUFFIX)


def source_root(file_names: List[str], default: str) -> str:
    """
    Common directory of the non-declaration files in the program.

    This is the root tsc lays out ``--outDir`` from when no ``--rootDir`` is
    given, so emitted files are found relative to it.
    """
    directories = [
        os.path.dirname(file_name)
        for file_name in file_names
        if file_name.endswith(tuple(DECLARATION_EXTENSIONS)) and not file_name.endswith(DECLARATION_SUFFIXES)
    ]
    if not directories:
        return default
    return os.path.commonpath(directories)


class TscProgram(Program):
    """Results of one tsc run: program files, diagnostics and emitted declarations."""

    def __init__(
        self,
        root_dir: str,
        output: TscOutput,
        declarations: Dict[str, str],
        parser: Optional[TreeSitterParser] = None,
    ):
        """
        Args:
            root_dir: Common source directory the declarations were emitted relative to
            output: Parsed tsc output
            declarations: Emitted declaration text keyed by path relative to ``root_dir``
            parser: Parser for emitted declaration text
        """
        self.root_dir = root_dir
        self.source_files = [SourceFile(file_name) for file_name in output.files]
        self.diagnostics = output.diagnostics
        self.declarations = declarations
        self.parser = parser or TreeSitterParser()

    def get_source_files(self) -> List[SourceFile]:
        return list(self.source_files)

    def emit(self, source_file: SourceFile) -> EmitOutput:
        diagnostics = [d for d in self.diagnostics if d.file_name is None] + self._file_diagnostics(
            source_file, DiagnosticCategory.EMIT
        )

        target_name = declaration_name(source_file.file_name)
        relative = os.path.normpath(os.path.relpath(target_name, self.root_dir))
        text = self.declarations.get(relative)
        if text is None:
            logger.debug(f"tsc emitted no declaration for {source_file.file_name}")
            return EmitOutput(emit_skipped=True, diagnostics=diagnostics)

        declaration = self.parser.parse_declaration(target_name, text)
        return EmitOutput(emit_skipped=False, diagnostics=diagnostics, declaration=declaration)

    def get_semantic_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        return self._file_diagnostics(source_file, DiagnosticCategory.SEMANTIC)

    def get_syntactic_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        return self._file_diagnostics(source_file, DiagnosticCategory.SYNTACTIC)

    def get_declaration_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        return self._file_diagnostics(source_file, DiagnosticCategory.DECLARATION)

    def _file_diagnostics(self, source_file: SourceFile, category: DiagnosticCategory) -> List[Diagnostic]:
        file_name = os.path.normcase(os.path.normpath(source_file.file_name))
        return [
            d
            for d in self.diagnostics
            if d.category == category
            and d.file_name is not None
            and os.path.normcase(d.file_name) == file_name
        ]


class TscFrontend(Frontend):
    """Runs ``tsc`` as a subprocess to compile a program with declaration output."""

    def __init__(self, parser: Optional[TreeSitterParser] = None):
        self.parser = parser or TreeSitterParser()

    def build_command(self, file_names: List[str], config: BundleConfig, out_dir: str) -> List[str]:
        command = [
            *config.compiler,
            "--declaration",
            "--emitDeclarationOnly",
            "--module",
            "commonjs",
            "--target",
            config.target,
            "--listFiles",
            "--pretty",
            "false",
            "--outDir",
            out_dir,
        ]
        # Emitted text is indented by splitting on the configured eol
        if config.eol in NEW_LINE_OPTIONS:
            command.extend(["--newLine", NEW_LINE_OPTIONS[config.eol]])
        command.extend(file_names)
        return command

    def create_program(self, file_names: List[str], config: BundleConfig) -> TscProgram:
        if not config.compiler:
            raise FrontendError("No compiler command configured")

        executable = shutil.which(config.compiler[0])
        if executable is None:
            raise FrontendError(f"Could not find compiler executable: {config.compiler[0]}")

        with tempfile.TemporaryDirectory(prefix="dtsbundle-") as out_dir:
            command = self.build_command(file_names, config, out_dir)
            command[0] = executable
            logger.debug(f"Running {' '.join(command)}")

            try:
                completed = subprocess.run(
                    command,
                    cwd=config.base_dir,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    check=False,
                )
            except OSError as e:
                raise FrontendError(f"Failed to run {config.compiler[0]}: {e}") from e

            output = parse_tsc_output(completed.stdout + completed.stderr, config.base_dir)
            declarations = read_declarations(out_dir)

        logger.info(
            f"tsc exited with {completed.returncode}: {len(output.files)} files, "
            f"{len(output.diagnostics)} diagnostics, {len(declarations)} declarations"
        )
        root_dir = source_root(output.files, config.base_dir)
        return TscProgram(root_dir, output, declarations, self.parser)


def read_declarations(out_dir: str) -> Dict[str, str]:
    """Read every emitted declaration file under ``out_dir``, keyed by relative path."""
    declarations: Dict[str, str] = {}
    for root, _dirs, files in os.walk(out_dir):
        for name in files:
            if not name.endswith(DECLARATION_SUFFIXES):
                continue
            path = os.path.join(root, name)
            with open(path, "r", encoding="utf-8-sig", newline="") as f:
                declarations[os.path.normpath(os.path.relpath(path, out_dir))] = f.read()
    return declarations
