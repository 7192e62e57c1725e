"""Turn compiler diagnostics into a single fatal error."""

from typing import Iterable, List

from loguru import logger

from dtsbundle_engine.compiler.base import Program
from dtsbundle_engine.errors import EmitterError
from dtsbundle_engine.models import Diagnostic, EmitOutput, SourceFile

ERROR_HEADER = "Declaration generation failed"


def format_diagnostics(diagnostics: Iterable[Diagnostic]) -> str:
    """Header line followed by one ``file(line,col): error TS<code>: <message>`` line per diagnostic."""
    lines = [ERROR_HEADER]
    lines.extend(diagnostic.format() for diagnostic in diagnostics)
    return "\n".join(lines)


def get_error(diagnostics: List[Diagnostic]) -> EmitterError:
    return EmitterError(format_diagnostics(diagnostics), diagnostics)


def check_emit(emit_output: EmitOutput, program: Program, source_file: SourceFile) -> None:
    """
    Raise EmitterError if emitting ``source_file`` produced any diagnostic or was skipped.

    The error lists every diagnostic the program knows for the file, not only
    the ones reported by the emit pass.
    """
    diagnostics = (
        list(emit_output.diagnostics)
        + program.get_semantic_diagnostics(source_file)
        + program.get_syntactic_diagnostics(source_file)
        + program.get_declaration_diagnostics(source_file)
    )

    if emit_output.emit_skipped or emit_output.declaration is None or diagnostics:
        logger.debug(f"Emit failed for {source_file.file_name} with {len(diagnostics)} diagnostics")
        raise get_error(diagnostics)
