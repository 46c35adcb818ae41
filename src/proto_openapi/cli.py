"""CLI entry point for proto-openapi."""

import logging
from pathlib import Path

import click

from proto_openapi.descriptor.base import DescriptorSet
from proto_openapi.descriptor.loader import load_descriptor_set
from proto_openapi.errors import GenerationError
from proto_openapi.generator.document import build_document
from proto_openapi.generator.enums import EnumCatalog
from proto_openapi.generator.render import RENDERERS
from proto_openapi.settings import SETTINGS_ENV_VAR, load_settings


def _load(descriptor_path: Path) -> DescriptorSet:
    try:
        return load_descriptor_set(descriptor_path)
    except GenerationError as e:
        raise click.ClickException(e.message) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log generation details.")
def main(verbose: bool):
    """proto-openapi: generate OpenAPI documents from annotated protobuf descriptors."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("descriptor_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Output file for the OpenAPI document.")
@click.option("--settings", "settings_path", default=None, envvar=SETTINGS_ENV_VAR, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="OpenAPI settings file overriding info and servers.")
@click.option("--format", "fmt", default="yaml", type=click.Choice(sorted(RENDERERS)), help="Output format.")
def generate(descriptor_path: Path, output: Path, settings_path: Path | None, fmt: str):
    """Generate an OpenAPI document from a descriptor set file."""
    click.echo(f"Loading {descriptor_path}...")
    descriptor_set = _load(descriptor_path)

    try:
        settings = load_settings(settings_path) if settings_path is not None else None
        document = build_document(descriptor_set, settings)
    except GenerationError as e:
        raise click.ClickException(e.message) from e

    click.echo(f"Found {len(document.operations())} operations and {len(document.components.schemas)} schemas.")

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(RENDERERS[fmt](document), encoding="utf-8")
    click.echo(f"OpenAPI document saved to {output}")


@main.command()
@click.argument("descriptor_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def enums(descriptor_path: Path):
    """List every enum of a descriptor set with its OpenAPI values."""
    catalog = EnumCatalog.from_descriptor_set(_load(descriptor_path))
    for name in sorted(catalog):
        click.echo(f"{name}: {', '.join(catalog[name])}")
