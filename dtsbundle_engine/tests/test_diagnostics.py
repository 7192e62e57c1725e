import pytest

from dtsbundle_engine.diagnostics import ERROR_HEADER, check_emit, format_diagnostics, get_error
from dtsbundle_engine.errors import EmitterError
from dtsbundle_engine.models import Diagnostic, DiagnosticCategory, EmitOutput, SourceFile


def _diagnostic(**overrides) -> Diagnostic:
    values = dict(code=2322, message="Type 'string' is not assignable to type 'number'.", file_name="/src/b.ts", line=3, column=7)
    values.update(overrides)
    return Diagnostic(**values)


def test_format_diagnostics() -> None:
    message = format_diagnostics([_diagnostic(), _diagnostic(code=6053, message="File not found.", file_name=None)])
    assert message.splitlines() == [
        ERROR_HEADER,
        "/src/b.ts(3,7): error TS2322: Type 'string' is not assignable to type 'number'.",
        "error TS6053: File not found.",
    ]


def test_get_error_carries_diagnostics() -> None:
    diagnostic = _diagnostic()
    error = get_error([diagnostic])
    assert isinstance(error, EmitterError)
    assert error.diagnostics == [diagnostic]
    assert str(error).startswith(ERROR_HEADER)


def test_check_emit_combines_all_passes(make_frontend, parser) -> None:
    source_file = SourceFile("/src/b.ts")
    semantic = _diagnostic()
    frontend = make_frontend([source_file], diagnostics={"/src/b.ts": [semantic]})
    emit_diagnostic = _diagnostic(code=5023, message="Unknown compiler option.", file_name=None, category=DiagnosticCategory.EMIT)
    emit_output = EmitOutput(
        emit_skipped=False,
        diagnostics=[emit_diagnostic],
        declaration=parser.parse_declaration("/src/b.d.ts", "export {};\n"),
    )

    with pytest.raises(EmitterError) as excinfo:
        check_emit(emit_output, frontend.program, source_file)

    assert excinfo.value.diagnostics == [emit_diagnostic, semantic]


def test_check_emit_fails_when_skipped(make_frontend) -> None:
    source_file = SourceFile("/src/b.ts")
    frontend = make_frontend([source_file])

    with pytest.raises(EmitterError) as excinfo:
        check_emit(EmitOutput(emit_skipped=True), frontend.program, source_file)

    assert excinfo.value.diagnostics == []
    assert str(excinfo.value) == ERROR_HEADER


def test_check_emit_passes_clean_output(make_frontend, parser) -> None:
    source_file = SourceFile("/src/a.ts")
    frontend = make_frontend([source_file])
    emit_output = EmitOutput(emit_skipped=False, declaration=parser.parse_declaration("/src/a.d.ts", "export {};\n"))

    check_emit(emit_output, frontend.program, source_file)
