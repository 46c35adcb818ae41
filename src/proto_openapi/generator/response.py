"""Declared responses of an operation and the shared error schemas they use."""

from proto_openapi.descriptor.base import MethodDescriptor, simple_name
from proto_openapi.descriptor.extensions import MethodExtensions, ResponseCode
from proto_openapi.generator.models import Response, SchemaRef, json_content

FIELD_VALIDATION_ERROR = "FieldValidationError"
VALIDATION_ERROR = "ValidationError"
DEFAULT_ERROR = "DefaultError"

SHARED_ERROR_SCHEMAS = (FIELD_VALIDATION_ERROR, VALIDATION_ERROR, DEFAULT_ERROR)

BAD_REQUEST_CODE = ResponseCode.BAD_REQUEST.http_code


def is_success_code(code: str) -> bool:
    return code.startswith("2")


def response_schema_name(code: ResponseCode, method: MethodDescriptor) -> str:
    if is_success_code(code.http_code):
        return simple_name(method.output_type)
    if code == ResponseCode.BAD_REQUEST:
        return VALIDATION_ERROR
    return DEFAULT_ERROR


def build_responses(method: MethodDescriptor, extensions: MethodExtensions) -> dict[str, Response]:
    """Build one Response per code the method documents, in ResponseCode order."""
    responses: dict[str, Response] = {}

    for code in ResponseCode:
        declared = extensions.operation.find_response(code)
        if declared is None:
            continue

        responses[code.http_code] = Response(
            description=declared.description,
            content=json_content(SchemaRef.to(response_schema_name(code, method))),
        )

    return responses

