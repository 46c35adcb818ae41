import pytest

from proto_openapi.descriptor.base import DescriptorSet, EnumDescriptor, EnumValueDescriptor, FileDescriptor, MessageDescriptor
from proto_openapi.generator.enums import EnumCatalog, enum_values


def _enum(name: str, *values: str) -> EnumDescriptor:
    return EnumDescriptor(name=name, values=[EnumValueDescriptor(name=v, number=i) for i, v in enumerate(values)])


def _catalog() -> EnumCatalog:
    return EnumCatalog.from_descriptor_set(
        DescriptorSet(
            files=[
                FileDescriptor(
                    name="common.proto",
                    package="example.common",
                    enums=[_enum("Color", "COLOR_UNSPECIFIED", "COLOR_RED", "COLOR_GREEN")],
                ),
                FileDescriptor(
                    name="users.proto",
                    package="example.users",
                    messages=[
                        MessageDescriptor(
                            name="User",
                            enum_types=[_enum("Role", "ROLE_ADMIN", "ROLE_MEMBER")],
                            nested_types=[
                                MessageDescriptor(name="Badge", enum_types=[_enum("Level", "GOLD", "SILVER")]),
                            ],
                        ),
                    ],
                ),
            ]
        )
    )


class TestEnumValues:
    def test_strips_common_prefix(self):
        assert enum_values(_enum("Color", "COLOR_UNSPECIFIED", "COLOR_RED")) == ["UNSPECIFIED", "RED"]

    def test_no_common_prefix(self):
        assert enum_values(_enum("Level", "GOLD", "SILVER")) == ["GOLD", "SILVER"]


class TestEnumCatalog:
    def test_keys_are_fully_qualified(self):
        catalog = _catalog()
        assert set(catalog) == {
            "example.common.Color",
            "example.users.User.Role",
            "example.users.User.Badge.Level",
        }

    def test_values_for_qualified_type_name(self):
        assert _catalog().values_for(".example.common.Color") == ["UNSPECIFIED", "RED", "GREEN"]

    def test_values_for_nested_enum(self):
        assert _catalog().values_for(".example.users.User.Role") == ["ADMIN", "MEMBER"]

    def test_values_for_simple_name(self):
        assert _catalog().values_for("Level") == ["GOLD", "SILVER"]

    def test_unknown_enum(self):
        assert _catalog().values_for(".example.Missing") == []

    def test_read_only(self):
        catalog = _catalog()
        with pytest.raises(TypeError):
            catalog["example.common.Color"] = ("X",)
        assert len(catalog) == 3
