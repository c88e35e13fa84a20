#!/usr/bin/env python3

import click
import pytest

from solders_codegen.cli_utils import reconstruct_command_line
from solders_codegen.solders_codegen import OUTPUT_NEUTRAL_OPTIONS, solders_codegen


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Test command reconstruction without active Click context (fallback)"""
        assert reconstruct_command_line(solders_codegen) == "solders_codegen"

    def test_arguments_are_shortened_to_names(self, tmp_path):
        source = tmp_path / "annotated.py"
        source.write_text("", encoding="utf-8")
        params = {
            "config": None,
            "force": True,
            "check": False,
            "format_": "ruff",
            "verbose": 2,
            "path": str(source),
            "output": str(tmp_path / "out" / "generated.py"),
        }
        with click.Context(solders_codegen) as ctx:
            ctx.params.update(params)
            full = reconstruct_command_line(solders_codegen)
            neutral = reconstruct_command_line(solders_codegen, exclude=OUTPUT_NEUTRAL_OPTIONS)

        assert full == "solders_codegen annotated.py generated.py --force --format ruff --verbose"
        assert neutral == "solders_codegen annotated.py generated.py --format ruff"

    def test_options_at_default_are_skipped(self):
        @click.command()
        @click.option("--level", default=3)
        @click.option("--name", default=None)
        def command(level, name):
            pass

        with click.Context(command) as ctx:
            ctx.params.update({"level": 3, "name": "x"})
            assert reconstruct_command_line(command) == "solders_codegen --name x"


if __name__ == "__main__":
    pytest.main([__file__])
