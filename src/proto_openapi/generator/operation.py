"""Operations and path items built from the service's RPC methods."""

import logging

from proto_openapi.descriptor.base import MethodDescriptor, ServiceDescriptor
from proto_openapi.descriptor.extensions import (
    ServiceExtensions,
    get_method_extensions,
    header_member_names,
)
from proto_openapi.errors import DuplicateOperationError, MissingHttpBindingError, UnsupportedHttpBindingError
from proto_openapi.generator.enums import EnumCatalog
from proto_openapi.generator.messages import MessageIndex
from proto_openapi.generator.models import Operation
from proto_openapi.generator.parameter import LocationContext, build_parameters
from proto_openapi.generator.request_body import build_request_body
from proto_openapi.generator.response import build_responses
from proto_openapi.generator.security import operation_security

logger = logging.getLogger(__name__)


def build_operation(
    method: MethodDescriptor,
    service_extensions: ServiceExtensions,
    messages: MessageIndex,
    enums: EnumCatalog,
) -> tuple[str, str, Operation]:
    """Build the operation of one method.

    Returns ``(verb, endpoint, operation)`` with a lower-case verb.
    """
    extensions = get_method_extensions(method)
    if extensions.http_rule is None:
        raise MissingHttpBindingError(method.name)

    verb, endpoint = extensions.http_method_and_endpoint()
    if not verb:
        raise UnsupportedHttpBindingError(method.name)

    input_message = messages.require(method.input_type)
    messages.require(method.output_type)

    doc = extensions.operation
    operation = Operation(
        operation_id=method.name,
        summary=doc.summary or None,
        description=doc.description or None,
        tags=doc.tags or None,
        security=operation_security(extensions),
    )

    operation.request_body = build_request_body(method, extensions, messages, enums)

    ctx = LocationContext.from_endpoint(
        extensions.endpoint_details,
        header_member_names(service_extensions, extensions),
    )
    operation.parameters = build_parameters(input_message, ctx, enums)
    operation.responses = build_responses(method, extensions)

    return verb, endpoint, operation


def build_path_items(
    service: ServiceDescriptor,
    service_extensions: ServiceExtensions,
    messages: MessageIndex,
    enums: EnumCatalog,
) -> dict[str, dict[str, Operation]]:
    """Map every endpoint template to its operations keyed by verb."""
    path_items: dict[str, dict[str, Operation]] = {}
    owners: dict[tuple[str, str], str] = {}

    for method in service.methods:
        verb, endpoint, operation = build_operation(method, service_extensions, messages, enums)

        previous = owners.get((endpoint, verb))
        if previous is not None:
            raise DuplicateOperationError(method.name, verb, endpoint, previous)
        owners[(endpoint, verb)] = method.name

        path_items.setdefault(endpoint, {})[verb] = operation
        logger.debug("%s bound to %s %s", method.name, verb.upper(), endpoint)

    return path_items
