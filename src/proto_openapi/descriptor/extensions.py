"""Typed access to the extension payloads attached to descriptor nodes.

Every ``get_*_extensions`` function returns a record even when the node
carries nothing, so callers never need to check for missing options. A
payload that is present but malformed is reported as a DescriptorLoadError.
"""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from proto_openapi.descriptor.base import (
    FieldDescriptor,
    FileDescriptor,
    MessageDescriptor,
    MethodDescriptor,
    ServiceDescriptor,
)
from proto_openapi.errors import DescriptorLoadError

# Extension names, as keys of a node's ``options``
E_APP_NAME = "app_name"
E_TITLE = "title"
E_VERSION = "version"
E_SERVER = "server"
E_SERVICE_DEFINITIONS = "service_definitions"
E_HTTP = "http"
E_METHOD_DEFINITIONS = "method_definitions"
E_OPERATION = "operation"
E_MESSAGE = "message"
E_PROPERTY = "property"
E_FIELD_DEFINITIONS = "field_definitions"
E_DATABASE = "database"

ENDPOINT_PARAMETER_RE = re.compile(r"{[A-Za-z_.0-9]*}")

BODY_WILDCARD = "*"


def common_token_prefix(names: list[str]) -> str:
    """Return the leading ``_``-separated tokens shared by all names.

    The last token of a name is never part of the prefix, so stripping it
    always leaves something behind.
    """
    if not names:
        return ""

    tokens = [name.split("_") for name in names]
    limit = min(len(t) for t in tokens) - 1
    shared: list[str] = []
    for i in range(limit):
        token = tokens[0][i]
        if any(t[i] != token for t in tokens[1:]):
            break
        shared.append(token)

    return "_".join(shared) + "_" if shared else ""


class SymbolicEnum(str, Enum):
    """Enum whose values are protobuf symbolic names like RESPONSE_CODE_OK."""

    @classmethod
    def prefix(cls) -> str:
        return common_token_prefix([m.value for m in cls])

    @property
    def short_name(self) -> str:
        return self.value[len(type(self).prefix()):]


# -- file ---------------------------------------------------------------------


class OpenapiServer(BaseModel):
    url: str
    description: str = ""


class FileExtensions(BaseModel):
    app_name: str = ""
    title: str = ""
    version: str = ""
    servers: list[OpenapiServer] = []


# -- service ------------------------------------------------------------------


class SecuritySchemeType(SymbolicEnum):
    UNSPECIFIED = "HTTP_SECURITY_SCHEME_UNSPECIFIED"
    HTTP = "HTTP_SECURITY_SCHEME_HTTP"
    API_KEY = "HTTP_SECURITY_SCHEME_API_KEY"


class SecuritySchemeScheme(SymbolicEnum):
    UNSPECIFIED = "HTTP_SECURITY_SCHEME_SCHEME_UNSPECIFIED"
    BASIC = "HTTP_SECURITY_SCHEME_SCHEME_BASIC"
    BEARER = "HTTP_SECURITY_SCHEME_SCHEME_BEARER"
    DIGEST = "HTTP_SECURITY_SCHEME_SCHEME_DIGEST"
    OAUTH = "HTTP_SECURITY_SCHEME_SCHEME_OAUTH"


class SecuritySchemeBearerFormat(SymbolicEnum):
    UNSPECIFIED = "HTTP_SECURITY_SCHEME_BEARER_FORMAT_UNSPECIFIED"
    JWT = "HTTP_SECURITY_SCHEME_BEARER_FORMAT_JWT"


class HttpSecurityScheme(BaseModel):
    type: SecuritySchemeType = SecuritySchemeType.UNSPECIFIED
    scheme: SecuritySchemeScheme = SecuritySchemeScheme.UNSPECIFIED
    bearer_format: SecuritySchemeBearerFormat = SecuritySchemeBearerFormat.UNSPECIFIED
    name: str = ""
    location: str = Field(default="", alias="in")
    description: str = ""

    model_config = {"populate_by_name": True}


class HeaderMember(BaseModel):
    """Maps an input message field (member_name) to an HTTP header (name)."""

    name: str
    member_name: str


class HttpService(BaseModel):
    security_scheme: HttpSecurityScheme | None = None
    header: list[HeaderMember] = []


class ServiceExtensions(BaseModel):
    service: HttpService | None = None

    def has_security_scheme(self) -> bool:
        if self.service is None or self.service.security_scheme is None:
            return False
        return self.service.security_scheme.type != SecuritySchemeType.UNSPECIFIED

    def header_member_names(self) -> dict[str, str]:
        if self.service is None:
            return {}
        return {h.member_name: h.name for h in self.service.header}


# -- method -------------------------------------------------------------------


class HttpRule(BaseModel):
    """HTTP binding of an RPC method, google.api.http style."""

    get: str | None = None
    post: str | None = None
    put: str | None = None
    delete: str | None = None
    patch: str | None = None
    custom: dict[str, Any] | None = None
    body: str = ""
    additional_bindings: list["HttpRule"] = []

    def method_and_endpoint(self) -> tuple[str, str]:
        """Return the lower-case verb and endpoint template, or ("", "")."""
        for verb in ("get", "post", "put", "delete", "patch"):
            endpoint = getattr(self, verb)
            if endpoint is not None:
                return verb, endpoint
        return "", ""


class HttpMethodAuth(BaseModel):
    scope: list[str] = []
    no_auth: bool = False


class HttpMethod(BaseModel):
    http: HttpMethodAuth | None = None
    header: list[HeaderMember] = []


class ResponseCode(SymbolicEnum):
    OK = "RESPONSE_CODE_OK"
    CREATED = "RESPONSE_CODE_CREATED"
    BAD_REQUEST = "RESPONSE_CODE_BAD_REQUEST"
    UNAUTHORIZED = "RESPONSE_CODE_UNAUTHORIZED"
    NOT_FOUND = "RESPONSE_CODE_NOT_FOUND"
    PRECONDITION_FAILED = "RESPONSE_CODE_PRECONDITION_FAILED"
    INTERNAL_ERROR = "RESPONSE_CODE_INTERNAL_ERROR"

    @property
    def http_code(self) -> str:
        return _HTTP_CODES[self]


_HTTP_CODES = {
    ResponseCode.OK: "200",
    ResponseCode.CREATED: "201",
    ResponseCode.BAD_REQUEST: "400",
    ResponseCode.UNAUTHORIZED: "401",
    ResponseCode.NOT_FOUND: "404",
    ResponseCode.PRECONDITION_FAILED: "412",
    ResponseCode.INTERNAL_ERROR: "500",
}


class OpenapiResponse(BaseModel):
    code: ResponseCode
    description: str = ""


class OpenapiMethod(BaseModel):
    """Documentation of an operation."""

    summary: str = ""
    description: str = ""
    tags: list[str] = []
    responses: list[OpenapiResponse] = []

    def find_response(self, code: ResponseCode) -> OpenapiResponse | None:
        for response in self.responses:
            if response.code == code:
                return response
        return None


class EndpointDetails(BaseModel):
    method: str = ""  # upper-case verb
    parameters: list[str] = []
    body: str = ""


class MethodExtensions(BaseModel):
    http_rule: HttpRule | None = None
    method: HttpMethod | None = None
    operation: OpenapiMethod = OpenapiMethod()
    endpoint_details: EndpointDetails = EndpointDetails()

    def has_http_extension(self) -> bool:
        return self.method is not None and self.method.http is not None

    def http_method_and_endpoint(self) -> tuple[str, str]:
        if self.http_rule is None:
            return "", ""
        return self.http_rule.method_and_endpoint()

    def http_method(self) -> str:
        return self.endpoint_details.method

    def auth_scopes(self) -> list[str] | None:
        """Scopes required by the method, or None when it declares no auth."""
        if not self.has_http_extension() or self.method.http.no_auth:
            return None
        return list(self.method.http.scope)

    def header_member_names(self) -> dict[str, str]:
        if self.method is None:
            return {}
        return {h.member_name: h.name for h in self.method.header}


# -- message ------------------------------------------------------------------


class RequestBodyDoc(BaseModel):
    description: str = ""


class OpenapiOperationDoc(BaseModel):
    request_body: RequestBodyDoc | None = None


class OpenapiMessage(BaseModel):
    operation: OpenapiOperationDoc | None = None


class MessageExtensions(BaseModel):
    openapi_message: OpenapiMessage | None = None

    def request_body_description(self) -> str:
        message = self.openapi_message
        if message is None or message.operation is None or message.operation.request_body is None:
            return ""
        return message.operation.request_body.description


# -- field --------------------------------------------------------------------


class HttpFieldLocation(SymbolicEnum):
    BODY = "HTTP_FIELD_LOCATION_BODY"
    PATH = "HTTP_FIELD_LOCATION_PATH"
    QUERY = "HTTP_FIELD_LOCATION_QUERY"
    HEADER = "HTTP_FIELD_LOCATION_HEADER"

    @property
    def openapi_name(self) -> str:
        return self.short_name.lower()


class PropertyFormat(SymbolicEnum):
    UNSPECIFIED = "PROPERTY_FORMAT_UNSPECIFIED"
    STRING = "PROPERTY_FORMAT_STRING"
    INT32 = "PROPERTY_FORMAT_INT32"
    INT64 = "PROPERTY_FORMAT_INT64"
    FLOAT = "PROPERTY_FORMAT_FLOAT"
    DOUBLE = "PROPERTY_FORMAT_DOUBLE"
    BYTE = "PROPERTY_FORMAT_BYTE"
    BINARY = "PROPERTY_FORMAT_BINARY"
    DATE = "PROPERTY_FORMAT_DATE"
    DATE_TIME = "PROPERTY_FORMAT_DATE_TIME"
    PASSWORD = "PROPERTY_FORMAT_PASSWORD"
    EMAIL = "PROPERTY_FORMAT_EMAIL"
    UUID = "PROPERTY_FORMAT_UUID"
    URI = "PROPERTY_FORMAT_URI"
    HOSTNAME = "PROPERTY_FORMAT_HOSTNAME"
    IPV4 = "PROPERTY_FORMAT_IPV4"
    IPV6 = "PROPERTY_FORMAT_IPV6"

    def is_default(self) -> bool:
        return self in (PropertyFormat.UNSPECIFIED, PropertyFormat.STRING)

    @property
    def openapi_name(self) -> str:
        """date-time style name used by the OpenAPI ``format`` keyword."""
        return self.short_name.lower().replace("_", "-")


class Property(BaseModel):
    """Presentation metadata of a field."""

    example: str = ""
    description: str = ""
    format: PropertyFormat = PropertyFormat.UNSPECIFIED
    required: bool = False
    hide_from_schema: bool = False

    @field_validator("example", mode="before")
    @classmethod
    def example_as_text(cls, v):
        return "" if v is None else str(v)


class HttpFieldProperty(BaseModel):
    location: HttpFieldLocation | None = None


class Database(BaseModel):
    name: str = ""


class FieldExtensions(BaseModel):
    database: Database | None = None
    openapi: Property | None = None
    http: HttpFieldProperty | None = None

    def property_location(self) -> HttpFieldLocation:
        if self.http is not None and self.http.location is not None:
            return self.http.location
        return HttpFieldLocation.BODY

    def has_explicit_location(self) -> bool:
        return self.http is not None and self.http.location is not None

    def is_required(self) -> bool:
        return self.openapi is not None and self.openapi.required

    def hides_from_schema(self) -> bool:
        return self.openapi is not None and self.openapi.hide_from_schema


# -- resolver -----------------------------------------------------------------


def _load(model: type[BaseModel], options: dict[str, Any], name: str, owner: str):
    payload = options.get(name)
    if payload is None:
        return None
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DescriptorLoadError(f"invalid '{name}' extension on '{owner}': {e}", subject=owner) from e


def get_file_extensions(file: FileDescriptor) -> FileExtensions:
    options = file.options
    servers = options.get(E_SERVER) or []
    try:
        return FileExtensions(
            app_name=options.get(E_APP_NAME) or "",
            title=options.get(E_TITLE) or "",
            version=str(options.get(E_VERSION) or ""),
            servers=servers,
        )
    except ValidationError as e:
        raise DescriptorLoadError(f"invalid file extensions on '{file.name}': {e}", subject=file.name) from e


def get_service_extensions(service: ServiceDescriptor) -> ServiceExtensions:
    return ServiceExtensions(
        service=_load(HttpService, service.options, E_SERVICE_DEFINITIONS, service.name),
    )


def get_method_extensions(method: MethodDescriptor) -> MethodExtensions:
    http_rule = _load(HttpRule, method.options, E_HTTP, method.name)
    operation = _load(OpenapiMethod, method.options, E_OPERATION, method.name)

    return MethodExtensions(
        http_rule=http_rule,
        method=_load(HttpMethod, method.options, E_METHOD_DEFINITIONS, method.name),
        operation=operation or OpenapiMethod(),
        endpoint_details=get_endpoint_details(http_rule),
    )


def get_message_extensions(message: MessageDescriptor) -> MessageExtensions:
    return MessageExtensions(
        openapi_message=_load(OpenapiMessage, message.options, E_MESSAGE, message.name),
    )


def get_field_extensions(field: FieldDescriptor) -> FieldExtensions:
    return FieldExtensions(
        database=_load(Database, field.options, E_DATABASE, field.name),
        openapi=_load(Property, field.options, E_PROPERTY, field.name),
        http=_load(HttpFieldProperty, field.options, E_FIELD_DEFINITIONS, field.name),
    )


def header_member_names(service: ServiceExtensions, method: MethodExtensions) -> dict[str, str]:
    """Merge service-wide header aliases with the method's own, method first."""
    names = service.header_member_names()
    names.update(method.header_member_names())
    return names


def get_endpoint_details(rule: HttpRule | None) -> EndpointDetails:
    if rule is None:
        return EndpointDetails()

    method, endpoint = rule.method_and_endpoint()
    parameters = retrieve_endpoint_parameters(endpoint)
    for binding in rule.additional_bindings:
        _, additional = binding.method_and_endpoint()
        for name in retrieve_endpoint_parameters(additional):
            if name not in parameters:
                parameters.append(name)

    return EndpointDetails(method=method.upper(), parameters=parameters, body=rule.body)


def retrieve_endpoint_parameters(endpoint: str) -> list[str]:
    """Extract ``{name}`` placeholders from an endpoint template."""
    parameters: list[str] = []
    for match in ENDPOINT_PARAMETER_RE.findall(endpoint):
        name = match[1:-1]
        if name not in parameters:
            parameters.append(name)
    return parameters
