"""Descriptor tree models.

The loader turns a protobuf-JSON flavoured dump of compiled .proto files
into these models. Every node keeps its extension payloads untouched in
``options``; typed access goes through ``descriptor.extensions``.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class FieldType(str, Enum):
    """Field kinds, named as in descriptor.proto."""

    DOUBLE = "TYPE_DOUBLE"
    FLOAT = "TYPE_FLOAT"
    INT64 = "TYPE_INT64"
    UINT64 = "TYPE_UINT64"
    INT32 = "TYPE_INT32"
    FIXED64 = "TYPE_FIXED64"
    FIXED32 = "TYPE_FIXED32"
    BOOL = "TYPE_BOOL"
    STRING = "TYPE_STRING"
    GROUP = "TYPE_GROUP"
    MESSAGE = "TYPE_MESSAGE"
    BYTES = "TYPE_BYTES"
    UINT32 = "TYPE_UINT32"
    ENUM = "TYPE_ENUM"
    SFIXED32 = "TYPE_SFIXED32"
    SFIXED64 = "TYPE_SFIXED64"
    SINT32 = "TYPE_SINT32"
    SINT64 = "TYPE_SINT64"


class FieldLabel(str, Enum):
    OPTIONAL = "LABEL_OPTIONAL"
    REQUIRED = "LABEL_REQUIRED"
    REPEATED = "LABEL_REPEATED"


class FieldDescriptor(BaseModel):
    """A single message field."""

    name: str
    number: int = 0
    type: FieldType = FieldType.STRING
    label: FieldLabel = FieldLabel.OPTIONAL
    type_name: str = ""  # .package.Message for message and enum fields
    options: dict[str, Any] = {}

    @property
    def is_repeated(self) -> bool:
        return self.label == FieldLabel.REPEATED


class EnumValueDescriptor(BaseModel):
    name: str
    number: int = 0


class EnumDescriptor(BaseModel):
    name: str
    values: list[EnumValueDescriptor] = []


class MessageDescriptor(BaseModel):
    name: str
    fields: list[FieldDescriptor] = []
    nested_types: list["MessageDescriptor"] = []
    enum_types: list[EnumDescriptor] = []
    options: dict[str, Any] = {}

    def find_field(self, name: str) -> FieldDescriptor | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None


class MethodDescriptor(BaseModel):
    name: str
    input_type: str  # .package.Request
    output_type: str
    options: dict[str, Any] = {}


class ServiceDescriptor(BaseModel):
    name: str
    methods: list[MethodDescriptor] = []
    options: dict[str, Any] = {}


class FileDescriptor(BaseModel):
    """One compiled .proto file."""

    name: str
    package: str = ""
    dependencies: list[str] = []
    messages: list[MessageDescriptor] = []
    enums: list[EnumDescriptor] = []
    services: list[ServiceDescriptor] = []
    options: dict[str, Any] = {}


class DescriptorSet(BaseModel):
    """Every file loaded for one generation run.

    Imported files come first; the file being generated is named by
    ``file_to_generate`` or, when unset, is the last one.
    """

    files: list[FileDescriptor]
    file_to_generate: str | None = None

    def target_file(self) -> FileDescriptor | None:
        if not self.files:
            return None
        if self.file_to_generate is None:
            return self.files[-1]
        for file in self.files:
            if file.name == self.file_to_generate:
                return file
        return None


def simple_name(type_name: str) -> str:
    """Drop the package path from a fully-qualified type name."""
    return type_name.split(".")[-1]
