import json
import logging
from pathlib import Path

import click

from .pipeline import (
    CodegenConfig,
    ConfigError,
    FeatureMappings,
    GeneratedCodeError,
    NameMappings,
    OutputMode,
    ParserGenerator,
    SchemaError,
    analyze_schema,
    load_schema,
)

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


@click.command()
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False, resolve_path=True))
@click.option("--module", "-m", default=None, type=str, help="Module name used for mapping lookups and feature tags")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--name-mappings", default=None, type=click.Path(exists=True, dir_okay=False), help="YAML or JSON name overrides")
@click.option(
    "--feature-mappings", default=None, type=click.Path(exists=True, dir_okay=False), help="YAML or JSON feature tags"
)
@click.option("--force", is_flag=True, default=False, help="Overwrite the output file if it exists")
@click.option("--format", "format_", is_flag=True, default=False, help="Run rustfmt on the generated code")
@click.option("--strict-eof", is_flag=True, default=False, help="Treat end of input inside an element as an error")
@click.option("--report", is_flag=True, default=False, help="Print unmapped types and fields before generating")
@click.option("--verbose", "-v", count=True, help="Increase logging verbosity (-v info, -vv debug)")
@click.argument("schemas", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
def schema_to_parser(output, module, config, name_mappings, feature_mappings, force, format_, strict_eof, report, verbose, schemas):
    logging.basicConfig(
        level=LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)],
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if config is not None:
            with open(config) as f:
                config = CodegenConfig.from_dict(json.load(f), base_dir=Path(config).parent)
        else:
            config = CodegenConfig()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    # Command line flags override the config file
    if module is not None:
        config.module_name = module
    if name_mappings is not None:
        config.name_mappings = NameMappings.from_file(name_mappings)
    if feature_mappings is not None:
        config.feature_mappings = FeatureMappings.from_file(feature_mappings)
    if force:
        config.output.mode = OutputMode.FORCE
    if format_:
        config.formatter.enabled = True
    if strict_eof:
        config.strict_eof = True

    try:
        schema = load_schema(schemas[0])
        for path in schemas[1:]:
            schema = schema.merged(load_schema(path))

        if report:
            click.echo(analyze_schema(schema, config).format(config.module_name), err=True)

        ParserGenerator(schema, config).write(output)
    except (SchemaError, FileExistsError, GeneratedCodeError) as e:
        raise click.ClickException(str(e)) from e
