import os
import re
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from dtsbundle_engine.errors import StreamError


def indent_text(text: str, eol: str, indent: str) -> str:
    """
    Indent every line break that starts a non-empty line.

    The first line is left alone (it follows the indent written after the
    opening brace) and nothing is inserted before another line break or at the
    end of the text.
    """
    if not indent:
        return text
    escaped = re.escape(eol)
    non_empty_line_start = re.compile(f"{escaped}(?!{escaped}|\\Z)")
    return non_empty_line_start.sub(lambda match: match.group(0) + indent, text)


class OutputAssembler:
    """
    Sequential writer for the bundled declaration file.

    Used as a context manager: a clean exit closes the stream and marks the
    bundle complete, an exception releases the file handle but leaves whatever
    was written in place.
    """

    def __init__(self, stream: TextIO, eol: str, indent: str, out_path: Optional[str] = None):
        self.stream = stream
        self.eol = eol
        self.indent = indent
        self.out_path = out_path
        self.closed = False
        self.completed = False

    @classmethod
    def open(cls, out_path: str, eol: str, indent: str) -> "OutputAssembler":
        try:
            Path(out_path).parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(out_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
            stream = os.fdopen(fd, "w", encoding="utf-8", newline="")
        except OSError as e:
            raise StreamError(f"Could not open {out_path}: {e}", e) from e
        return cls(stream, eol, indent, out_path)

    def __enter__(self) -> "OutputAssembler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return

        if not self.closed:
            self.closed = True
            try:
                self.stream.close()
            except OSError as e:
                logger.warning(f"Could not close partial output {self.out_path}: {e}")

    def write(self, data: str) -> None:
        try:
            self.stream.write(data)
        except OSError as e:
            raise StreamError(f"Failed writing {self.out_path or 'output'}: {e}", e) from e

    def write_reference(self, path: str) -> None:
        self.write(f'/// <reference path="{path}" />' + self.eol)

    def write_raw(self, text: str) -> None:
        self.write(text)

    def write_module(self, module_id: str, content: str) -> None:
        """Write ``content`` re-indented inside ``declare module '<module_id>' { ... }``."""
        self.write(f"declare module '{module_id}' {{" + self.eol + self.indent)
        self.write(indent_text(content, self.eol, self.indent))
        self.write(self.eol + "}" + self.eol)

    def write_alias(self, name: str, main: str) -> None:
        """Declare ``name`` as a module that re-exports ``main``."""
        self.write(f"declare module '{name}' {{" + self.eol + self.indent)
        self.write(f"import main = require('{main}');" + self.eol + self.indent)
        self.write("export = main;" + self.eol)
        self.write("}" + self.eol)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self.stream.close()
        except OSError as e:
            raise StreamError(f"Failed closing {self.out_path or 'output'}: {e}", e) from e
        self.completed = True
