import io

import pytest

from dtsbundle_engine.bundle.writer import OutputAssembler, indent_text
from dtsbundle_engine.errors import StreamError


class BrokenStream(io.StringIO):
    def write(self, data: str) -> int:
        raise OSError(28, "No space left on device")


def test_indent_skips_empty_lines_and_end() -> None:
    assert indent_text("a\nb\n\nc\n", "\n", "  ") == "a\n  b\n\n  c\n"


def test_indent_with_crlf() -> None:
    assert indent_text("a\r\nb\r\n\r\nc\r\n", "\r\n", "\t") == "a\r\n\tb\r\n\r\n\tc\r\n"


def test_indent_without_trailing_newline() -> None:
    assert indent_text("a\nb", "\n", "\t") == "a\n\tb"


def test_empty_indent_is_identity() -> None:
    assert indent_text("a\nb\n", "\n", "") == "a\nb\n"


def test_write_module_wraps_content() -> None:
    stream = io.StringIO()
    assembler = OutputAssembler(stream, "\n", "\t")

    assembler.write_module("pkg/a", "export const a: number;\nexport const b: string;\n")

    assert stream.getvalue() == (
        "declare module 'pkg/a' {\n" "\texport const a: number;\n" "\texport const b: string;\n" "\n" "}\n"
    )


def test_write_reference_and_alias() -> None:
    stream = io.StringIO()
    assembler = OutputAssembler(stream, "\r\n", "    ")

    assembler.write_reference("typings/node.d.ts")
    assembler.write_alias("pkg", "pkg/a")

    assert stream.getvalue() == (
        '/// <reference path="typings/node.d.ts" />\r\n'
        "declare module 'pkg' {\r\n"
        "    import main = require('pkg/a');\r\n"
        "    export = main;\r\n"
        "}\r\n"
    )


def test_write_failure_raises_stream_error() -> None:
    assembler = OutputAssembler(BrokenStream(), "\n", "\t")

    with pytest.raises(StreamError) as excinfo:
        assembler.write_raw("declare const x: number;\n")

    assert isinstance(excinfo.value.cause, OSError)
    assert excinfo.value.__cause__ is excinfo.value.cause


def test_context_manager_marks_completion_only_on_success(tmp_path) -> None:
    out = tmp_path / "nested" / "bundle.d.ts"

    with OutputAssembler.open(str(out), "\n", "\t") as assembler:
        assembler.write_raw("declare const x: number;\n")
    assert assembler.completed
    assert out.read_text(encoding="utf-8") == "declare const x: number;\n"

    with pytest.raises(RuntimeError):
        with OutputAssembler.open(str(out), "\n", "\t") as failed:
            failed.write_raw("partial")
            raise RuntimeError("boom")
    assert failed.closed
    assert not failed.completed
    assert out.read_text(encoding="utf-8") == "partial"


def test_open_writes_eol_untranslated(tmp_path) -> None:
    out = tmp_path / "bundle.d.ts"
    with OutputAssembler.open(str(out), "\r\n", "\t") as assembler:
        assembler.write_reference("a.d.ts")
    assert out.read_bytes() == b'/// <reference path="a.d.ts" />\r\n'
