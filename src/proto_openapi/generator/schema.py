"""Field and message to Schema conversion."""

from typing import NamedTuple

from proto_openapi.descriptor.base import FieldDescriptor, FieldType, MessageDescriptor, simple_name
from proto_openapi.descriptor.extensions import FieldExtensions, get_field_extensions
from proto_openapi.generator.enums import EnumCatalog
from proto_openapi.generator.models import InlineSchema, Schema, SchemaRef

SCHEMA_TYPE_OBJECT = "object"
SCHEMA_TYPE_STRING = "string"
SCHEMA_TYPE_ARRAY = "array"
SCHEMA_TYPE_BOOL = "boolean"
SCHEMA_TYPE_INTEGER = "integer"
SCHEMA_TYPE_NUMBER = "number"

# google.protobuf.<Name>Value wrappers and the scalar they carry
WRAPPER_TYPES = {
    "DoubleValue": (SCHEMA_TYPE_NUMBER, None),
    "FloatValue": (SCHEMA_TYPE_NUMBER, None),
    "Int64Value": (SCHEMA_TYPE_INTEGER, None),
    "UInt64Value": (SCHEMA_TYPE_INTEGER, None),
    "Int32Value": (SCHEMA_TYPE_INTEGER, None),
    "UInt32Value": (SCHEMA_TYPE_INTEGER, None),
    "BoolValue": (SCHEMA_TYPE_BOOL, None),
    "StringValue": (SCHEMA_TYPE_STRING, None),
    "BytesValue": (SCHEMA_TYPE_STRING, "byte"),
}

WELL_KNOWN_PACKAGE = "google.protobuf."
TIMESTAMP = "google.protobuf.Timestamp"
DYNAMIC_TYPES = {
    "google.protobuf.Value": None,  # any JSON value
    "google.protobuf.Struct": SCHEMA_TYPE_OBJECT,
    "google.protobuf.ListValue": SCHEMA_TYPE_ARRAY,
}


class _FieldType(NamedTuple):
    """Outcome of the type-mapping step: either a scalar type or a reference."""

    type: str | None = None
    format: str | None = None
    ref: str | None = None


def parse_field_type(field: FieldDescriptor) -> _FieldType:
    if field.type in (FieldType.STRING, FieldType.ENUM):
        return _FieldType(SCHEMA_TYPE_STRING)
    if field.type == FieldType.BOOL:
        return _FieldType(SCHEMA_TYPE_BOOL)
    if field.type in (FieldType.DOUBLE, FieldType.FLOAT):
        return _FieldType(SCHEMA_TYPE_NUMBER)
    if field.type == FieldType.BYTES:
        return _FieldType(SCHEMA_TYPE_STRING, "byte")
    if field.type in (FieldType.MESSAGE, FieldType.GROUP):
        return _message_field_type(field.type_name)
    return _FieldType(SCHEMA_TYPE_INTEGER)


def _message_field_type(type_name: str) -> _FieldType:
    name = type_name.lstrip(".")

    if name.startswith(WELL_KNOWN_PACKAGE):
        wrapper = WRAPPER_TYPES.get(simple_name(name))
        if wrapper is not None:
            return _FieldType(*wrapper)
        if name == TIMESTAMP:
            return _FieldType(SCHEMA_TYPE_STRING, "date-time")
        if name in DYNAMIC_TYPES:
            return _FieldType(DYNAMIC_TYPES[name])

    return _FieldType(ref=simple_name(name))


def field_to_schema(
    field: FieldDescriptor,
    message: MessageDescriptor,
    field_extensions: FieldExtensions,
    enums: EnumCatalog,
) -> tuple[str, Schema | None]:
    """Build the schema of one field of ``message``.

    Returns ``(name, None)`` when the field is hidden from schemas; callers
    must skip it.
    """
    if field_extensions.hides_from_schema():
        return field.name, None

    ft = parse_field_type(field)
    required = field_extensions.is_required()
    enum = enums.values_for(field.type_name) if field.type == FieldType.ENUM else []

    scalar: InlineSchema | None = None
    if ft.ref is not None:
        if not field.is_repeated:
            # References carry nothing but the target name
            return field.name, SchemaRef.to(ft.ref, required=required)
        items: Schema = SchemaRef.to(ft.ref)
    else:
        scalar = InlineSchema(type=ft.type, format=ft.format, enum=enum or None)
        if ft.type == SCHEMA_TYPE_ARRAY:
            scalar.items = InlineSchema()
        items = scalar

    schema = InlineSchema(type=SCHEMA_TYPE_ARRAY, items=items) if field.is_repeated else scalar
    schema.is_required = required
    _apply_property(schema, scalar, field_extensions)
    return field.name, schema


def _apply_property(schema: InlineSchema, scalar: InlineSchema | None, field_extensions: FieldExtensions) -> None:
    prop = field_extensions.openapi
    if prop is None:
        return

    schema.example = prop.example or None
    schema.description = prop.description or None

    # Format belongs to the scalar, which is the items of an array
    if scalar is not None and scalar.format is None and not prop.format.is_default():
        scalar.format = prop.format.openapi_name


def message_to_schema(message: MessageDescriptor, enums: EnumCatalog) -> InlineSchema:
    properties: dict[str, Schema] = {}
    for field in message.fields:
        name, schema = field_to_schema(field, message, get_field_extensions(field), enums)
        if schema is not None:
            properties[name] = schema

    return InlineSchema(type=SCHEMA_TYPE_OBJECT, properties=properties or None)
