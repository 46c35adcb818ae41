"""Request body of POST and PUT operations."""

from proto_openapi.descriptor.base import FieldType, MethodDescriptor, simple_name
from proto_openapi.descriptor.extensions import BODY_WILDCARD, MethodExtensions, get_field_extensions, get_message_extensions
from proto_openapi.errors import BodyFieldNotFoundError
from proto_openapi.generator.enums import EnumCatalog
from proto_openapi.generator.messages import MessageIndex
from proto_openapi.generator.models import RequestBody, Schema, SchemaRef, json_content
from proto_openapi.generator.schema import field_to_schema


def build_request_body(
    method: MethodDescriptor,
    extensions: MethodExtensions,
    messages: MessageIndex,
    enums: EnumCatalog,
) -> RequestBody | None:
    """POST sends the whole input message; PUT sends the field named by the
    binding's body selector, or the whole message for ``*``. Other verbs
    have no body.
    """
    http_method = extensions.http_method()
    if http_method not in ("POST", "PUT"):
        return None

    input_message = messages.require(method.input_type)
    body = extensions.endpoint_details.body

    if http_method == "POST" or body in ("", BODY_WILDCARD):
        schema: Schema = SchemaRef.to(simple_name(method.input_type))
    else:
        field = input_message.find_field(body)
        if field is None:
            raise BodyFieldNotFoundError(body, input_message.name)

        if field.type == FieldType.MESSAGE and not field.is_repeated:
            schema = SchemaRef.to(simple_name(field.type_name))
        else:
            _, schema = field_to_schema(field, input_message, get_field_extensions(field), enums)
            if schema is None:
                raise BodyFieldNotFoundError(body, input_message.name)

    description = get_message_extensions(input_message).request_body_description()

    return RequestBody(
        required=http_method == "POST",
        description=description or None,
        content=json_content(schema),
    )
