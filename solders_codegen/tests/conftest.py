from __future__ import annotations

import importlib.util
import sys
import textwrap
from itertools import count

import pytest

from solders_codegen.pipeline import CodeGeneratorConfig, PipelineGenerator

_module_ids = count()


def generate(source: str, config: CodeGeneratorConfig | None = None) -> str:
    """Run the generator on dedented source text."""
    config = config or CodeGeneratorConfig(add_generation_comment=False)
    return PipelineGenerator(textwrap.dedent(source), config, filename="annotated.py").generate()


@pytest.fixture
def codegen():
    """The generator as a function of source text and optional config."""
    return generate


@pytest.fixture
def load_generated(tmp_path, monkeypatch):
    """Generate a module, write it to tmp_path and import it.

    The module is registered in sys.modules so that dataclasses, enums and
    pickle can resolve it by name.
    """

    def _load(source: str, config: CodeGeneratorConfig | None = None):
        code = generate(source, config)
        name = f"generated_{next(_module_ids)}"
        path = tmp_path / f"{name}.py"
        path.write_text(code, encoding="utf-8")

        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)
        monkeypatch.setitem(sys.modules, name, module)
        spec.loader.exec_module(module)
        return module

    return _load
