"""Enum catalog: symbolic value names of every enum in a descriptor set."""

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from proto_openapi.descriptor.base import DescriptorSet, EnumDescriptor, MessageDescriptor, simple_name
from proto_openapi.descriptor.extensions import common_token_prefix

logger = logging.getLogger(__name__)


class EnumCatalog(Mapping):
    """Read-only map of fully-qualified enum name to its trimmed value names.

    Imported files are scanned too, since a service message may use an enum
    declared anywhere in the set.
    """

    def __init__(self, enums: dict[str, list[str]]):
        self._enums = MappingProxyType({name: tuple(values) for name, values in enums.items()})

    @classmethod
    def from_descriptor_set(cls, descriptor_set: DescriptorSet) -> "EnumCatalog":
        enums: dict[str, list[str]] = {}
        for file in descriptor_set.files:
            scope = file.package
            for enum in file.enums:
                enums[_qualify(scope, enum.name)] = enum_values(enum)
            for message in file.messages:
                _collect_nested(_qualify(scope, message.name), message, enums)

        logger.debug("Enum catalog built with %d enums", len(enums))
        return cls(enums)

    def values_for(self, type_name: str) -> list[str]:
        """Values of an enum given its type name as found on a field.

        The fully-qualified name is tried first, then the simple name. An
        unknown enum yields an empty list.
        """
        qualified = type_name.lstrip(".")
        if qualified in self._enums:
            return list(self._enums[qualified])

        name = simple_name(type_name)
        for full_name, values in self._enums.items():
            if simple_name(full_name) == name:
                return list(values)

        logger.debug("Enum %s not found in catalog", type_name)
        return []

    def __getitem__(self, key: str) -> tuple[str, ...]:
        return self._enums[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._enums)

    def __len__(self) -> int:
        return len(self._enums)


def enum_values(enum: EnumDescriptor) -> list[str]:
    names = [v.name for v in enum.values]
    prefix = common_token_prefix(names)
    return [name[len(prefix):] for name in names]


def _collect_nested(scope: str, message: MessageDescriptor, enums: dict[str, list[str]]) -> None:
    for enum in message.enum_types:
        enums[_qualify(scope, enum.name)] = enum_values(enum)
    for nested in message.nested_types:
        _collect_nested(_qualify(scope, nested.name), nested, enums)


def _qualify(scope: str, name: str) -> str:
    return f"{scope}.{name}" if scope else name
