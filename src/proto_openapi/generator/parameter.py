"""Operation parameters: where each input field travels and how it is described.

A field's location is decided by LOCATION_RULES, tried in order; the first
rule with an answer wins:

1. the field is a placeholder of the endpoint template -> path
2. the field declares a location -> that location
3. the field is aliased to a header -> header
4. the field is not carried by the request body -> query

Anything left travels in the body.
"""

from collections.abc import Callable
from typing import NamedTuple

from proto_openapi.descriptor.base import MessageDescriptor
from proto_openapi.descriptor.extensions import (
    BODY_WILDCARD,
    EndpointDetails,
    FieldExtensions,
    HttpFieldLocation,
    get_field_extensions,
)
from proto_openapi.errors import HeaderMemberNotFoundError
from proto_openapi.generator.enums import EnumCatalog
from proto_openapi.generator.models import InlineSchema, Parameter, Schema, SchemaRef
from proto_openapi.generator.schema import SCHEMA_TYPE_OBJECT, field_to_schema

BODY_METHODS = ("POST", "PUT")


class LocationContext(NamedTuple):
    """What the endpoint tells about its fields."""

    endpoint_parameters: list[str]
    header_members: dict[str, str]
    has_body: bool
    body: str = ""

    @classmethod
    def from_endpoint(cls, details: EndpointDetails, header_members: dict[str, str]) -> "LocationContext":
        return cls(
            endpoint_parameters=details.parameters,
            header_members=header_members,
            has_body=details.method in BODY_METHODS,
            # POST always carries the whole input message
            body=details.body if details.method == "PUT" else "",
        )

    def in_body(self, name: str) -> bool:
        if not self.has_body:
            return False
        if self.body in ("", BODY_WILDCARD) or self.body == name:
            return True
        return False


LocationRule = Callable[[str, FieldExtensions, LocationContext], HttpFieldLocation | None]


def _endpoint_placeholder(name: str, extensions: FieldExtensions, ctx: LocationContext) -> HttpFieldLocation | None:
    # A placeholder is a path parameter even when another location is declared
    return HttpFieldLocation.PATH if name in ctx.endpoint_parameters else None


def _declared_location(name: str, extensions: FieldExtensions, ctx: LocationContext) -> HttpFieldLocation | None:
    return extensions.property_location() if extensions.has_explicit_location() else None


def _header_alias(name: str, extensions: FieldExtensions, ctx: LocationContext) -> HttpFieldLocation | None:
    return HttpFieldLocation.HEADER if name in ctx.header_members else None


def _outside_body(name: str, extensions: FieldExtensions, ctx: LocationContext) -> HttpFieldLocation | None:
    return None if ctx.in_body(name) else HttpFieldLocation.QUERY


LOCATION_RULES: tuple[LocationRule, ...] = (
    _endpoint_placeholder,
    _declared_location,
    _header_alias,
    _outside_body,
)


def resolve_location(name: str, extensions: FieldExtensions, ctx: LocationContext) -> HttpFieldLocation:
    for rule in LOCATION_RULES:
        location = rule(name, extensions, ctx)
        if location is not None:
            return location

    return extensions.property_location()


def build_parameters(
    message: MessageDescriptor,
    ctx: LocationContext,
    enums: EnumCatalog,
) -> list[Parameter]:
    """Build the non-body parameters of an operation from its input message.

    Header aliases rename the parameter. An alias left unused, because the
    message has no such field or the field stays in the body or is hidden,
    is an error.
    """
    members = dict(ctx.header_members)
    parameters: list[Parameter] = []

    for field in message.fields:
        extensions = get_field_extensions(field)

        location = resolve_location(field.name, extensions, ctx)
        if location == HttpFieldLocation.BODY:
            continue

        name, schema = field_to_schema(field, message, extensions, enums)
        if schema is None:
            continue

        # Only fields that become parameters consume their header alias
        header_name = members.pop(field.name, None)
        parameters.append(
            Parameter(
                name=header_name or name,
                location=location.openapi_name,
                # Fields in the endpoint path are always required
                required=schema.is_required or location == HttpFieldLocation.PATH,
                description=getattr(schema, "description", None),
                schema_=parameter_schema(schema),
            )
        )

    if members:
        raise HeaderMemberNotFoundError(sorted(members), message.name)

    return parameters


def parameter_schema(schema: Schema) -> InlineSchema:
    """Inline copy of a field schema fit for a parameter: no references, no description."""
    if isinstance(schema, SchemaRef):
        return InlineSchema(type=SCHEMA_TYPE_OBJECT)

    items = schema.items
    if isinstance(items, SchemaRef):
        items = InlineSchema(type=SCHEMA_TYPE_OBJECT)

    return InlineSchema(
        type=schema.type,
        format=schema.format,
        example=schema.example,
        items=items,
        enum=schema.enum,
    )
