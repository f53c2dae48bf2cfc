import json
import logging
from pathlib import Path

import click

from .pipeline import CodeGeneratorConfig, JsonSchemaTypesError, OutputMode, PipelineGenerator, write_generated_files
from .pipeline.config import SUPPORTED_LANGUAGES


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Output module name (defaults to the schema file name)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--language", "-l", default=None, type=click.Choice(SUPPORTED_LANGUAGES))
@click.option("--package", "-p", default=None, type=str, help="Java package of the generated types")
@click.option("--format", "format_output", is_flag=True, default=False, help="Format Python output with black")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing output files")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log generator decisions")
@click.argument("path", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def json_schema_types(name, config, language, package, format_output, force, verbose, path, output):
    """Generate typed accessor wrappers for the JSON Schema at PATH.

    Python output is written to the OUTPUT file; Java output is written as a
    source tree below the OUTPUT directory.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if language is not None:
        config.language = language
    if package is not None:
        config.java_package = package
    if format_output:
        config.formatter.enabled = True
    if force:
        config.output.mode = OutputMode.FORCE

    try:
        codegen = PipelineGenerator.from_file(path, config, name=name)
        files = codegen.generate_files()
        written = write_generated_files(Path(output), files, codegen.language, config.output)
    except JsonSchemaTypesError as e:
        raise click.ClickException(str(e)) from e

    for written_path in written:
        click.echo(str(written_path))
