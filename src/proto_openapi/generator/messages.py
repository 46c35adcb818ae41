"""Message lookup across every file of a descriptor set."""

from proto_openapi.descriptor.base import DescriptorSet, MessageDescriptor, simple_name
from proto_openapi.errors import MessageNotFoundError


class MessageIndex:
    """Finds message descriptors by fully-qualified or simple name."""

    def __init__(self, descriptor_set: DescriptorSet):
        self._by_full_name: dict[str, MessageDescriptor] = {}
        self._by_name: dict[str, MessageDescriptor] = {}

        for file in descriptor_set.files:
            for message in file.messages:
                self._add(file.package, message)

    def _add(self, scope: str, message: MessageDescriptor) -> None:
        full_name = f"{scope}.{message.name}" if scope else message.name
        self._by_full_name[full_name] = message
        self._by_name.setdefault(message.name, message)
        for nested in message.nested_types:
            self._add(full_name, nested)

    def find(self, type_name: str) -> MessageDescriptor | None:
        message = self._by_full_name.get(type_name.lstrip("."))
        if message is None:
            message = self._by_name.get(simple_name(type_name))
        return message

    def require(self, type_name: str) -> MessageDescriptor:
        message = self.find(type_name)
        if message is None:
            raise MessageNotFoundError(simple_name(type_name))
        return message
