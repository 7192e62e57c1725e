from dtsbundle_engine.module_id import is_relative, join_module_id, resolve_main, resolve_module_id


def test_resolve_strips_base_dir_and_declaration_suffix() -> None:
    assert resolve_module_id("/base/foo/bar.d.ts", "/base", "mylib") == "mylib/foo/bar"


def test_resolve_ignores_trailing_separator_on_base_dir() -> None:
    assert resolve_module_id("/base/foo/bar.d.ts", "/base/", "mylib") == "mylib/foo/bar"


def test_resolve_normalizes_windows_separators() -> None:
    assert resolve_module_id(r"C:\base\foo\bar.d.ts", "C:\\base", "mylib") == "mylib/foo/bar"


def test_resolve_strips_other_extensions() -> None:
    assert resolve_module_id("/base/index.ts", "/base", "mylib") == "mylib/index"


def test_resolve_strips_module_declaration_suffixes() -> None:
    assert resolve_module_id("/base/x.d.mts", "/base", "ns") == "ns/x"
    assert resolve_module_id("/base/sub/y.d.cts", "/base", "ns") == "ns/sub/y"


def test_resolve_is_stable() -> None:
    results = {resolve_module_id("/base/a/b/c.d.ts", "/base", "ns") for _ in range(3)}
    assert results == {"ns/a/b/c"}


def test_join_sibling() -> None:
    assert join_module_id("mylib/a/b", "./x") == "mylib/a/x"


def test_join_parent() -> None:
    assert join_module_id("mylib/a/b", "../y/z") == "mylib/y/z"


def test_resolve_main() -> None:
    assert resolve_main("pkg", "./a") == "pkg/a"
    assert resolve_main("pkg", "./lib/index") == "pkg/lib/index"
    assert resolve_main("pkg", "other/module") == "other/module"


def test_is_relative() -> None:
    assert is_relative("./a")
    assert is_relative("../a")
    assert not is_relative("lodash")
