"""Bundle orchestrator - decides, file by file, what goes into the bundle.

Files are processed in the order the compiler program reports them:

- files outside the base directory (default libraries, dependencies) and
  excluded files are skipped
- existing declaration files are copied through verbatim
- everything else is emitted; any diagnostic aborts the whole run
- emitted external modules are rewritten and wrapped in a named
  ``declare module`` block, global scripts are written as they are
"""

import os
from typing import Callable, FrozenSet, Iterable, List, Optional

from loguru import logger

from dtsbundle_engine.bundle.schema import BundleResult
from dtsbundle_engine.bundle.writer import OutputAssembler
from dtsbundle_engine.compiler.base import Frontend, Program
from dtsbundle_engine.compiler.tsc import TscFrontend
from dtsbundle_engine.diagnostics import check_emit
from dtsbundle_engine.models import BundleConfig, CompiledFile, SourceFile
from dtsbundle_engine.module_id import resolve_main, resolve_module_id
from dtsbundle_engine.rewriter import module_reference_replacer, rewrite

MessageCallback = Callable[[str], None]


def _no_message(message: str) -> None:
    pass


def is_under(file_name: str, base_dir: str) -> bool:
    """True if ``file_name`` is ``base_dir`` or lies beneath it."""
    path = os.path.normcase(os.path.normpath(file_name))
    base = os.path.normcase(os.path.normpath(base_dir))
    return path == base or path.startswith(base.rstrip(os.sep) + os.sep)


def resolve_filenames(base_dir: str, files: Iterable[str]) -> List[str]:
    """
    Make input paths absolute.

    A path that already resolves (from the working directory) into ``base_dir``
    is kept; anything else is taken relative to ``base_dir``.
    """
    filenames = []
    for filename in files:
        resolved = os.path.abspath(filename)
        if is_under(resolved, base_dir):
            filenames.append(resolved)
        else:
            filenames.append(os.path.abspath(os.path.join(base_dir, filename)))
    return filenames


def build_exclude_set(base_dir: str, excludes: Iterable[str]) -> FrozenSet[str]:
    return frozenset(
        os.path.normcase(os.path.abspath(os.path.join(base_dir, filename))) for filename in excludes
    )


class BundleOrchestrator:
    """Writes one bundle from a compiled program."""

    def __init__(
        self,
        config: BundleConfig,
        program: Program,
        assembler: OutputAssembler,
        excludes: FrozenSet[str] = frozenset(),
        send_message: Optional[MessageCallback] = None,
    ):
        self.config = config
        self.program = program
        self.assembler = assembler
        self.excludes = excludes
        self.send_message = send_message or _no_message
        self.result = BundleResult(out=config.out, name=config.name)

    def run(self) -> BundleResult:
        """Write externs, every bundled file, then the main alias. Raises on the first fatal error."""
        self._write_externs()

        for source_file in self.program.get_source_files():
            self._process(source_file)

        self._write_main_alias()

        logger.info(
            f"Bundled {len(self.result.modules)} modules, {len(self.result.passthrough)} declaration files "
            f"and {len(self.result.ambient)} global scripts into {self.config.out}"
        )
        return self.result

    def _write_externs(self) -> None:
        for path in self.config.externs:
            self.send_message(f"Writing external dependency {path}")
            self.assembler.write_reference(path)
            self.result.externs.append(path)

    def _process(self, source_file: SourceFile) -> None:
        file_name = source_file.file_name

        # Default library, or a dependency from another project
        if not is_under(file_name, self.config.base_dir):
            return

        if os.path.normcase(os.path.normpath(file_name)) in self.excludes:
            logger.debug(f"Excluded {file_name}")
            return

        self.send_message(f"Processing {file_name}")

        # Hand-written or third-party declarations are already self-contained
        if source_file.is_declaration_file:
            logger.debug(f"Copying declaration file {file_name}")
            self.assembler.write_raw(source_file.text)
            self.result.passthrough.append(file_name)
            return

        emit_output = self.program.emit(source_file)
        check_emit(emit_output, self.program, source_file)
        self.write_declaration(emit_output.declaration)

    def write_declaration(self, declaration: CompiledFile) -> None:
        if not declaration.is_external_module:
            logger.debug(f"Writing global script {declaration.file_name}")
            self.assembler.write_raw(declaration.text)
            self.result.ambient.append(declaration.file_name)
            return

        module_id = resolve_module_id(declaration.file_name, self.config.base_dir, self.config.name)
        source = declaration.source
        content = rewrite(declaration.tree, source, module_reference_replacer(module_id, source))

        logger.debug(f"Writing module {module_id}")
        self.assembler.write_module(module_id, content)
        self.result.modules.append(module_id)

    def _write_main_alias(self) -> None:
        if not self.config.main:
            return

        main = resolve_main(self.config.name, self.config.main)
        self.assembler.write_alias(self.config.name, main)
        self.result.main_alias = main
        self.send_message(f"Aliased main module {self.config.name} to {main}")


def generate(
    config: BundleConfig,
    send_message: Optional[MessageCallback] = None,
    frontend: Optional[Frontend] = None,
) -> BundleResult:
    """
    Bundle the declarations of ``config.files`` into ``config.out``.

    Returns once the output has been closed. On EmitterError or StreamError the
    output file is left partially written; callers should discard it.
    """
    frontend = frontend or TscFrontend()

    filenames = resolve_filenames(config.base_dir, config.files)
    excludes = build_exclude_set(config.base_dir, config.excludes)

    program = frontend.create_program(filenames, config)

    with OutputAssembler.open(config.out, config.eol, config.indent) as assembler:
        result = BundleOrchestrator(config, program, assembler, excludes, send_message).run()

    return result
