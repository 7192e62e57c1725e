from abc import ABC, abstractmethod
from typing import List

from dtsbundle_engine.models import BundleConfig, Diagnostic, EmitOutput, SourceFile


class Program(ABC):
    """
    A compiled set of source files.

    Mirrors the part of a compiler program the bundler needs: the files in
    program order, per-file declaration emit, and per-file diagnostics.
    """

    @abstractmethod
    def get_source_files(self) -> List[SourceFile]:
        """All files in the program, dependencies first, including library files."""
        pass

    @abstractmethod
    def emit(self, source_file: SourceFile) -> EmitOutput:
        """Emit the declaration output for one non-declaration source file."""
        pass

    @abstractmethod
    def get_semantic_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        pass

    @abstractmethod
    def get_syntactic_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        pass

    @abstractmethod
    def get_declaration_diagnostics(self, source_file: SourceFile) -> List[Diagnostic]:
        pass


class Frontend(ABC):
    """Factory for compiler programs."""

    @abstractmethod
    def create_program(self, file_names: List[str], config: BundleConfig) -> Program:
        """
        Compile ``file_names`` with declaration output enabled.

        Args:
            file_names: Absolute paths of the root files
            config: Bundle options (target level, compiler command, base directory)
        """
        pass
