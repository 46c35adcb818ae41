"""Descriptor set loader.

Reads a YAML or JSON dump of compiled .proto files (protobuf-JSON style,
snake_case keys) into a DescriptorSet.
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from proto_openapi.descriptor.base import DescriptorSet
from proto_openapi.errors import DescriptorLoadError


def load_descriptor_set(file_path: Path) -> DescriptorSet:
    """Load a descriptor set file, detecting JSON or YAML by content."""
    text = file_path.read_text(encoding="utf-8")
    data = _parse_text(text, file_path)

    if isinstance(data, list):
        data = {"files": data}
    if not isinstance(data, dict) or "files" not in data:
        raise DescriptorLoadError(f"{file_path}: expected a mapping with a 'files' list", subject=str(file_path))

    try:
        return DescriptorSet.model_validate(data)
    except ValidationError as e:
        raise DescriptorLoadError(f"{file_path}: {e}", subject=str(file_path)) from e


def _parse_text(text: str, file_path: Path):
    if text.lstrip().startswith(("{", "[")):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            # Flow-style YAML also starts with a brace
            pass

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DescriptorLoadError(f"{file_path}: {e}", subject=str(file_path)) from e
