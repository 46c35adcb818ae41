import json
from pathlib import Path

import pytest

from proto_openapi.descriptor.base import FieldLabel, FieldType
from proto_openapi.descriptor.loader import load_descriptor_set
from proto_openapi.errors import DescriptorLoadError

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadDescriptorSet:
    def test_load_yaml_fixture(self):
        descriptor_set = load_descriptor_set(FIXTURES / "users.yaml")
        assert [f.name for f in descriptor_set.files] == [
            "example/common/common.proto",
            "example/users/users.proto",
        ]
        assert descriptor_set.target_file().package == "example.users"

    def test_field_types_parsed(self):
        descriptor_set = load_descriptor_set(FIXTURES / "users.yaml")
        response = [m for m in descriptor_set.target_file().messages if m.name == "ListUsersResponse"][0]
        users = response.find_field("users")
        assert users.type == FieldType.MESSAGE
        assert users.label == FieldLabel.REPEATED
        assert users.is_repeated

    def test_load_json(self, tmp_path):
        f = tmp_path / "set.json"
        f.write_text(json.dumps({"files": [{"name": "a.proto", "package": "a"}]}))
        descriptor_set = load_descriptor_set(f)
        assert descriptor_set.files[0].package == "a"

    def test_top_level_list(self, tmp_path):
        f = tmp_path / "set.yaml"
        f.write_text("- name: a.proto\n- name: b.proto\n")
        descriptor_set = load_descriptor_set(f)
        assert descriptor_set.target_file().name == "b.proto"

    def test_file_to_generate(self, tmp_path):
        f = tmp_path / "set.yaml"
        f.write_text("file_to_generate: a.proto\nfiles:\n  - name: a.proto\n  - name: b.proto\n")
        assert load_descriptor_set(f).target_file().name == "a.proto"

    def test_missing_files_key(self, tmp_path):
        f = tmp_path / "set.yaml"
        f.write_text("name: a.proto\n")
        with pytest.raises(DescriptorLoadError):
            load_descriptor_set(f)

    def test_invalid_field_type(self, tmp_path):
        f = tmp_path / "set.yaml"
        f.write_text(
            "files:\n"
            "  - name: a.proto\n"
            "    messages:\n"
            "      - name: A\n"
            "        fields:\n"
            "          - {name: x, type: TYPE_UNKNOWN}\n"
        )
        with pytest.raises(DescriptorLoadError) as exc:
            load_descriptor_set(f)
        assert exc.value.subject == str(f)

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "set.yaml"
        f.write_text("files: [unterminated\n")
        with pytest.raises(DescriptorLoadError):
            load_descriptor_set(f)
