"""Document assembly: the entry point of the transformation."""

import logging

from proto_openapi.descriptor.base import DescriptorSet
from proto_openapi.descriptor.extensions import (
    FileExtensions,
    get_file_extensions,
    get_service_extensions,
)
from proto_openapi.errors import DescriptorLoadError, SchemaNameConflictError, ServiceNotFoundError
from proto_openapi.generator.components import (
    build_components_schemas,
    referenced_schemas,
    response_codes,
    response_error_components_schemas,
)
from proto_openapi.generator.enums import EnumCatalog
from proto_openapi.generator.messages import MessageIndex
from proto_openapi.generator.models import Components, Document, Info, Server
from proto_openapi.generator.operation import build_path_items
from proto_openapi.generator.security import SECURITY_SCHEME_NAME, build_security_scheme
from proto_openapi.settings import Settings

logger = logging.getLogger(__name__)


def build_document(descriptor_set: DescriptorSet, settings: Settings | None = None) -> Document:
    """Translate the service of the file being generated into an OpenAPI document.

    The enum catalog and message index are built here, once per call, and
    passed down explicitly.
    """
    file = descriptor_set.target_file()
    if file is None:
        raise DescriptorLoadError(
            f"file to generate '{descriptor_set.file_to_generate}' is not in the descriptor set",
            subject=descriptor_set.file_to_generate or "",
        )
    if not file.services:
        raise ServiceNotFoundError(file.name)
    if len(file.services) > 1:
        logger.warning("%s declares %d services, only '%s' is used", file.name, len(file.services), file.services[0].name)

    service = file.services[0]
    service_extensions = get_service_extensions(service)
    enums = EnumCatalog.from_descriptor_set(descriptor_set)
    messages = MessageIndex(descriptor_set)

    paths = build_path_items(service, service_extensions, messages, enums)
    operations = [op for item in paths.values() for op in item.values()]

    schemas = build_components_schemas(referenced_schemas(operations), messages, enums)
    error_schemas = response_error_components_schemas(response_codes(operations))
    for name in error_schemas:
        if name in schemas:
            raise SchemaNameConflictError(name)
    schemas.update(error_schemas)
    components = Components(schemas=schemas)

    has_security = service_extensions.has_security_scheme()
    if has_security:
        components.security_schemes = {SECURITY_SCHEME_NAME: build_security_scheme(service_extensions)}

    info, servers = _document_info(get_file_extensions(file), settings)
    logger.debug("Document for %s: %d paths, %d schemas", service.name, len(paths), len(schemas))

    return Document(
        info=info,
        servers=servers,
        paths=paths,
        components=components,
        has_security=has_security,
    )


def _document_info(extensions: FileExtensions, settings: Settings | None) -> tuple[Info, list[Server]]:
    info = Info(title=extensions.title, version=extensions.version)
    servers = [Server(url=s.url, description=s.description or None) for s in extensions.servers]

    if settings is not None:
        if settings.info.title:
            info.title = settings.info.title
        if settings.info.version:
            info.version = settings.info.version
        if settings.servers:
            servers = [Server(url=s.url, description=s.description or None) for s in settings.servers]

    return info, servers
