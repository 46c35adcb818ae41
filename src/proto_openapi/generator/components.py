"""Component schemas: every message reachable from the operations."""

import logging

from proto_openapi.generator.enums import EnumCatalog
from proto_openapi.generator.messages import MessageIndex
from proto_openapi.generator.models import InlineSchema, Operation, Schema, SchemaRef, schema_ref_name
from proto_openapi.generator.response import (
    BAD_REQUEST_CODE,
    DEFAULT_ERROR,
    FIELD_VALIDATION_ERROR,
    VALIDATION_ERROR,
    is_success_code,
)
from proto_openapi.generator.schema import SCHEMA_TYPE_ARRAY, SCHEMA_TYPE_OBJECT, SCHEMA_TYPE_STRING, message_to_schema

logger = logging.getLogger(__name__)


def referenced_schemas(operations: list[Operation]) -> list[str]:
    """Message names referenced by request bodies and success responses, first use first."""
    names: list[str] = []
    for operation in operations:
        for name in operation.schemas():
            if name not in names:
                names.append(name)
    return names


def response_codes(operations: list[Operation]) -> set[str]:
    return {code for operation in operations for code in operation.response_codes()}


def build_components_schemas(
    names: list[str],
    messages: MessageIndex,
    enums: EnumCatalog,
) -> dict[str, Schema]:
    """Build the schema of each named message and of every message they reach.

    A name is marked resolved before its references are followed, so each
    message is built once and reference cycles terminate.
    """
    schemas: dict[str, Schema] = {}
    resolved: set[str] = set()

    def resolve(name: str) -> None:
        if name in resolved:
            return
        resolved.add(name)

        schema = message_to_schema(messages.require(name), enums)
        schemas[name] = schema

        for prop in (schema.properties or {}).values():
            ref = schema_ref_name(prop)
            if ref is not None:
                resolve(ref)

    for name in names:
        resolve(name)

    logger.debug("Resolved %d component schemas", len(schemas))
    return schemas


def response_error_components_schemas(codes: set[str]) -> dict[str, Schema]:
    """Shared error schemas needed by the given response codes.

    A bad request needs ValidationError (and the FieldValidationError it
    lists); any other error code needs DefaultError.
    """
    schemas: dict[str, Schema] = {}

    if BAD_REQUEST_CODE in codes:
        schemas[FIELD_VALIDATION_ERROR] = InlineSchema(
            type=SCHEMA_TYPE_OBJECT,
            properties={
                "field": InlineSchema(type=SCHEMA_TYPE_STRING),
                "message": InlineSchema(type=SCHEMA_TYPE_STRING),
                "location": InlineSchema(type=SCHEMA_TYPE_STRING),
            },
        )
        schemas[VALIDATION_ERROR] = InlineSchema(
            type=SCHEMA_TYPE_OBJECT,
            properties={
                "errors": InlineSchema(type=SCHEMA_TYPE_ARRAY, items=SchemaRef.to(FIELD_VALIDATION_ERROR)),
                "message": InlineSchema(type=SCHEMA_TYPE_STRING),
            },
        )

    if any(code != BAD_REQUEST_CODE and not is_success_code(code) for code in codes):
        schemas[DEFAULT_ERROR] = InlineSchema(
            type=SCHEMA_TYPE_OBJECT,
            properties={
                "errors": InlineSchema(type=SCHEMA_TYPE_ARRAY, items=InlineSchema(type=SCHEMA_TYPE_STRING)),
                "message": InlineSchema(type=SCHEMA_TYPE_STRING),
            },
        )

    return schemas
