import json
import logging
import sys
from pathlib import Path

import click

from .pipeline import CodeGeneratorConfig, GenerationError, OutputMode, PipelineGenerator, generate_file

# Options that do not change the generated text
OUTPUT_NEUTRAL_OPTIONS = ("force", "check", "verbose")


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite OUTPUT if it exists")
@click.option("--check", is_flag=True, default=False, help="Exit with status 1 if OUTPUT is not up to date")
@click.option(
    "--format",
    "format_",
    default=None,
    type=click.Choice(["none", "ruff", "black"]),
    help="Format the output (overrides the config file)",
)
@click.option("--verbose", "-v", count=True, help="Increase logging verbosity")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def solders_codegen(config, force, check, format_, verbose, path, output):
    """Generate the methods requested by marker decorators in PATH and write OUTPUT."""
    logging.basicConfig(
        level=logging.DEBUG if verbose > 1 else logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if config is not None:
        with open(config) as f:
            config = json.load(f)
            config = CodeGeneratorConfig.from_dict(config)
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if force:
        config.output.mode = OutputMode.FORCE
    if format_ == "none":
        config.formatter.enabled = False
    elif format_ is not None:
        config.formatter.enabled = True
        config.formatter.backend = format_

    try:
        if check:
            source = Path(path).read_text(encoding="utf-8")
            out = PipelineGenerator(source, config, filename=path).generate()
            output_path = Path(output)
            if not output_path.exists() or output_path.read_text(encoding="utf-8") != out:
                click.echo(f"{output} is not up to date", err=True)
                sys.exit(1)
            return
        generate_file(path, output, config)
    except GenerationError as e:
        raise click.ClickException(str(e)) from e
