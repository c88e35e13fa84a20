"""
Pipeline generator - main entry point for annotation-driven generation.

Orchestrates the pipeline phases for every annotated class of a module:

1. Shape introspection
2. Capability parsing
3. Unit planning and conflict filtering
4. Method synthesis (mapping tables are checked for exhaustiveness here)
5. Assembly into the original source text
6. Validation, optional formatting, and atomic output
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .analyzer.conflicts import ConflictDetector
from .assembler import ClassEdit, SourceAssembler
from .backends.python_backend import PythonBackend
from .capabilities.catalog import CAPABILITIES
from .capabilities.nodes import RawCapability
from .capabilities.parser import CapabilityParser
from .config import CodeGeneratorConfig, OutputMode
from .errors import GenerationError, OutputError
from .formatters import get_formatter
from .output.atomic_writer import AtomicWriter, validate_python
from .planner import UnitPlanner
from .shape.introspector import ShapeIntrospector

logger = logging.getLogger(__name__)

ANNOTATABLE = (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)


@dataclass
class MarkerResolver:
    """Recognizes marker decorators through the imports of a module.

    Attributes:
        macros_module: Dotted name of the macros module
        module_aliases: Dotted names bound to the macros module
        name_aliases: Local names bound to individual markers
    """

    macros_module: str
    module_aliases: set[str] = field(default_factory=set)
    name_aliases: dict[str, str] = field(default_factory=dict)

    def collect(self, tree: ast.Module) -> None:
        """Record every import of the macros module or its markers."""
        package, _, leaf = self.macros_module.rpartition(".")
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.name == self.macros_module:
                        # import pkg.macros binds pkg, used as pkg.macros.marker
                        self.module_aliases.add(alias.asname or alias.name)
            elif isinstance(node, ast.ImportFrom) and node.level == 0:
                if node.module == package and package:
                    for alias in node.names:
                        if alias.name == leaf:
                            self.module_aliases.add(alias.asname or alias.name)
                elif node.module == self.macros_module:
                    for alias in node.names:
                        if alias.name == "*":
                            self.name_aliases.update({name: name for name in CAPABILITIES})
                        else:
                            self.name_aliases[alias.asname or alias.name] = alias.name

    def capability_name(self, decorator: ast.expr) -> str | None:
        """Get the capability a decorator requests, or None if it is not a marker."""
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        dotted = _dotted_name(target)
        if dotted is None:
            return None
        head, _, tail = dotted.rpartition(".")
        if head:
            return tail if head in self.module_aliases else None
        return self.name_aliases.get(tail)


def _dotted_name(expr: ast.expr) -> str | None:
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        base = _dotted_name(expr.value)
        return None if base is None else f"{base}.{expr.attr}"
    return None


class PipelineGenerator:
    """
    Annotation-driven method generator.

    Reads a module whose classes carry marker decorators and produces the
    same module with the markers replaced by generated methods.

    Example:
        >>> generator = PipelineGenerator(source, CodeGeneratorConfig(), "types.py")
        >>> code = generator.generate()
    """

    def __init__(self, source: str, config: CodeGeneratorConfig | None = None, filename: str = "<string>"):
        """
        Initialize the pipeline generator.

        Args:
            source: Text of the annotated module
            config: Code generation configuration
            filename: Name used in diagnostics
        """
        self.source = source
        self.config = config or CodeGeneratorConfig()
        self.filename = filename

        self.introspector = ShapeIntrospector(self.config.layout_attribute)
        self.parser = CapabilityParser()
        self.planner = UnitPlanner(self.config)
        self.detector = ConflictDetector()
        self.backend = PythonBackend(self.config)

        # Names of the classes processed by the last generate() call
        self.generated: list[str] = []

    def generate(self) -> str:
        """
        Generate the output module.

        Returns:
            Source text with generated methods

        Raises:
            GenerationError: If any annotated declaration cannot be generated
        """
        try:
            tree = ast.parse(self.source, filename=self.filename)
        except SyntaxError as e:
            raise OutputError(f"cannot parse input: {e.msg}", filename=self.filename, lineno=e.lineno) from e

        resolver = MarkerResolver(self.config.macros_module)
        resolver.collect(tree)
        known_enums = self._collect_enums(tree)

        edits = []
        self.generated = []
        for node in sorted(self._annotated(tree, resolver), key=lambda n: n.lineno):
            if node.name in self.config.ignore_classes:
                logger.debug("Ignoring %s", node.name)
                continue
            edits.append(self._process(node, resolver, known_enums))
            self.generated.append(node.name)

        if not edits:
            logger.info("%s: no annotated classes", self.filename)
            return self.source

        code = SourceAssembler(self.source).assemble(edits)
        code = self._add_generation_comment(code)

        try:
            validate_python(code)
        except OutputError as e:
            e.locate(filename=self.filename)
            raise

        if self.config.formatter.enabled:
            code = get_formatter(self.config.formatter.backend).format(code, self.config.formatter)

        logger.info("%s: generated methods for %d class(es): %s", self.filename, len(edits), ", ".join(self.generated))
        return code

    def _annotated(self, tree: ast.Module, resolver: MarkerResolver) -> list[ast.stmt]:
        """Find every statement, nested ones included, that carries a marker."""
        return [
            node
            for node in ast.walk(tree)
            if isinstance(node, ANNOTATABLE) and any(resolver.capability_name(d) for d in node.decorator_list)
        ]

    def _collect_enums(self, tree: ast.Module) -> dict[str, list[str]]:
        """Variant names of every enum declared in the module, by class name."""
        return {
            node.name: self.introspector.enum_variants(node)
            for node in ast.walk(tree)
            if isinstance(node, ast.ClassDef) and self.introspector.is_enum(node)
        }

    def _process(self, node: ast.stmt, resolver: MarkerResolver, known_enums: dict[str, list[str]]) -> ClassEdit:
        """Run the pipeline phases for one annotated statement."""
        markers = [d for d in node.decorator_list if resolver.capability_name(d)]
        try:
            declaration = self.introspector.introspect(node)
            raw = [
                RawCapability.from_call(resolver.capability_name(d), d if isinstance(d, ast.Call) else None, d.lineno)
                for d in markers
            ]
            capabilities = self.parser.parse(raw)
            units = self.planner.plan(declaration, capabilities)
            units = self.detector.filter(units, declaration.existing_members)
            methods = self.backend.render(declaration, capabilities, units, known_enums)
        except GenerationError as e:
            e.locate(node.name, self.filename, node.lineno)
            raise

        logger.debug("%s: %s", node.name, ", ".join(p.unit.name for p in units) or "no units")
        return ClassEdit(node=node, markers=markers, methods=methods if units else "")

    def _add_generation_comment(self, code: str) -> str:
        """Insert the generation comment after any shebang or encoding lines."""
        comment = self._generate_command_comment()
        if not comment:
            return code

        lines = code.splitlines(keepends=True)
        position = 0
        while position < len(lines) and position < 2 and _is_preamble(lines[position]):
            position += 1
        lines.insert(position, comment + "\n")
        return "".join(lines)

    def _generate_command_comment(self) -> str:
        """Generate a simplified command line comment for the generated file"""
        if not self.config.add_generation_comment:
            return ""

        from .. import __version__
        from ..cli_utils import PROGRAM_NAME, reconstruct_command_line

        try:
            from ..solders_codegen import OUTPUT_NEUTRAL_OPTIONS
            from ..solders_codegen import solders_codegen as click_command

            command_line = reconstruct_command_line(click_command, exclude=OUTPUT_NEUTRAL_OPTIONS)
        except (ImportError, AttributeError):
            command_line = PROGRAM_NAME

        return f"# Generated by solders_codegen v{__version__} : {command_line}"


def _is_preamble(line: str) -> bool:
    return line.startswith("#!") or (line.startswith("#") and "coding" in line)


def generate_file(
    path: str | Path,
    output: str | Path,
    config: CodeGeneratorConfig | None = None,
) -> str:
    """
    Generate an annotated module and write the result.

    Args:
        path: The annotated module
        output: Where to write the generated module
        config: Code generation configuration

    Returns:
        The generated source text

    Raises:
        GenerationError: If generation fails or the output cannot be written
    """
    config = config or CodeGeneratorConfig()
    path = Path(path)
    output = Path(output)

    source = path.read_text(encoding="utf-8")
    code = PipelineGenerator(source, config, filename=str(path)).generate()

    writer = AtomicWriter()
    validate = config.output.validate_before_write
    if config.output.atomic_write:
        if config.output.mode == OutputMode.FORCE:
            writer.write(output, code, validate=validate)
        else:
            writer.write_if_not_exists(output, code, validate=validate)
    else:
        if config.output.mode != OutputMode.FORCE and output.exists():
            raise OutputError(f"Output file already exists: {output}. Use force mode to overwrite.")
        if validate:
            validate_python(code)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(code, encoding="utf-8")

    logger.info("Wrote %s", output)
    return code
