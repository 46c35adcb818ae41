"""Document serialization."""

import json

import yaml

from proto_openapi.generator.models import Document


def render_yaml(document: Document) -> str:
    return yaml.safe_dump(document.to_dict(), sort_keys=False, allow_unicode=True)


def render_json(document: Document) -> str:
    return json.dumps(document.to_dict(), indent=2, ensure_ascii=False) + "\n"


RENDERERS = {
    "yaml": render_yaml,
    "json": render_json,
}
