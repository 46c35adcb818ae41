"""Security scheme of the service and security requirements of operations."""

from proto_openapi.descriptor.extensions import (
    MethodExtensions,
    SecuritySchemeBearerFormat,
    SecuritySchemeScheme,
    SecuritySchemeType,
    ServiceExtensions,
)
from proto_openapi.generator.models import SecurityScheme

SECURITY_SCHEME_NAME = "authorization"


def build_security_scheme(extensions: ServiceExtensions) -> SecurityScheme | None:
    if not extensions.has_security_scheme():
        return None

    scheme = extensions.service.security_scheme
    result = SecurityScheme(type="http", description=scheme.description or None)

    if scheme.type == SecuritySchemeType.API_KEY:
        result.type = "apiKey"
        result.name = scheme.name or None
        result.location = scheme.location or None
    elif scheme.scheme != SecuritySchemeScheme.UNSPECIFIED:
        result.scheme = scheme.scheme.short_name.lower()
        if (
            scheme.scheme == SecuritySchemeScheme.BEARER
            and scheme.bearer_format != SecuritySchemeBearerFormat.UNSPECIFIED
        ):
            result.bearer_format = scheme.bearer_format.short_name

    return result


def operation_security(extensions: MethodExtensions) -> list[dict[str, list[str]]] | None:
    scopes = extensions.auth_scopes()
    if scopes is None:
        return None
    return [{SECURITY_SCHEME_NAME: scopes}]
