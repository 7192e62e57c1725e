"""Mapping between file paths and bundled module identifiers."""

import os
import posixpath

from dtsbundle_engine.models import DECLARATION_SUFFIXES


def filename_to_mid(filename: str) -> str:
    """Normalize every path separator in ``filename`` to ``/``."""
    return filename.replace("\\", "/").replace(os.sep, "/")


def resolve_module_id(file_name: str, base_dir: str, name: str) -> str:
    """
    Compute the module id of ``file_name`` inside the bundle named ``name``.

    ``file_name`` must live under ``base_dir``. The base directory prefix and the
    declaration suffix are stripped and what remains is appended to ``name``:
    ``<base>/foo/bar.d.ts`` under ``mylib`` becomes ``mylib/foo/bar``.
    """
    relative = file_name[len(base_dir.rstrip("/\\")):]
    for suffix in DECLARATION_SUFFIXES:
        if relative.endswith(suffix):
            relative = relative[: -len(suffix)]
            break
    else:
        relative = os.path.splitext(relative)[0]

    relative = filename_to_mid(relative)
    if not relative.startswith("/"):
        relative = "/" + relative
    return name + relative


def join_module_id(module_id: str, relative: str) -> str:
    """Resolve a relative module path (``./x``, ``../y``) against the directory of ``module_id``."""
    return posixpath.normpath(posixpath.join(posixpath.dirname(module_id), filename_to_mid(relative)))


def resolve_main(name: str, main: str) -> str:
    """Module the bundle namespace aliases: ``./a`` under ``pkg`` is ``pkg/a``."""
    if not is_relative(main):
        return main
    return posixpath.normpath(posixpath.join(name, filename_to_mid(main)))


def is_relative(module_path: str) -> bool:
    return module_path.startswith(".")
