"""
Minimal smoke test for the engine structure.
Tests that basic imports work and the parser classifies files.
"""


def test_imports():
    """Test that all basic imports work"""
    from dtsbundle_engine import BundleConfig, generate
    from dtsbundle_engine.bundle import BundleOrchestrator, OutputAssembler
    from dtsbundle_engine.compiler import TscFrontend, parse_tsc_output
    from dtsbundle_engine.parser import TreeSitterParser
    from dtsbundle_engine.rewriter import module_reference_replacer, rewrite

    assert callable(generate)


def test_parser(parser):
    """Test parser initialization and module detection"""
    assert parser.get_language() == "typescript"

    module = parser.parse_declaration("/src/a.d.ts", "import x = require('./x');\nexport = x;\n")
    script = parser.parse_declaration("/src/globals.d.ts", "declare namespace App {\n    const version: string;\n}\n")

    assert module.is_external_module
    assert not script.is_external_module
    assert not module.is_declaration_file
