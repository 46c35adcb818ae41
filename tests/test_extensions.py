import pytest

from proto_openapi.descriptor.base import FieldDescriptor, FileDescriptor, MethodDescriptor, ServiceDescriptor
from proto_openapi.descriptor.extensions import (
    HttpFieldLocation,
    HttpRule,
    PropertyFormat,
    ResponseCode,
    SecuritySchemeBearerFormat,
    common_token_prefix,
    get_endpoint_details,
    get_field_extensions,
    get_file_extensions,
    get_method_extensions,
    get_service_extensions,
    header_member_names,
    retrieve_endpoint_parameters,
)
from proto_openapi.errors import DescriptorLoadError


def _method(**options) -> MethodDescriptor:
    return MethodDescriptor(name="GetUser", input_type=".a.Req", output_type=".a.Res", options=options)


class TestCommonTokenPrefix:
    def test_shared_prefix(self):
        assert common_token_prefix(["COLOR_UNSPECIFIED", "COLOR_RED"]) == "COLOR_"

    def test_multi_token_prefix(self):
        names = ["HTTP_FIELD_LOCATION_BODY", "HTTP_FIELD_LOCATION_PATH"]
        assert common_token_prefix(names) == "HTTP_FIELD_LOCATION_"

    def test_last_token_never_consumed(self):
        assert common_token_prefix(["STATUS_ACTIVE"]) == "STATUS_"
        assert common_token_prefix(["ACTIVE", "INACTIVE"]) == ""

    def test_empty(self):
        assert common_token_prefix([]) == ""


class TestSymbolicEnums:
    def test_response_code_http_codes(self):
        assert ResponseCode.OK.http_code == "200"
        assert ResponseCode.NOT_FOUND.http_code == "404"
        assert ResponseCode.PRECONDITION_FAILED.http_code == "412"

    def test_location_openapi_name(self):
        assert HttpFieldLocation.QUERY.openapi_name == "query"
        assert HttpFieldLocation.HEADER.openapi_name == "header"

    def test_property_format_openapi_name(self):
        assert PropertyFormat.DATE_TIME.openapi_name == "date-time"
        assert PropertyFormat.INT32.openapi_name == "int32"
        assert PropertyFormat.STRING.is_default()
        assert not PropertyFormat.EMAIL.is_default()

    def test_bearer_format_short_name(self):
        assert SecuritySchemeBearerFormat.JWT.short_name == "JWT"


class TestFileExtensions:
    def test_reads_file_options(self):
        file = FileDescriptor(
            name="users.proto",
            options={"title": "Users", "version": 2, "server": [{"url": "https://api.example.com"}]},
        )
        ext = get_file_extensions(file)
        assert ext.title == "Users"
        assert ext.version == "2"
        assert ext.servers[0].url == "https://api.example.com"

    def test_missing_options(self):
        ext = get_file_extensions(FileDescriptor(name="users.proto"))
        assert ext.title == ""
        assert ext.servers == []


class TestServiceExtensions:
    def test_no_security_scheme(self):
        ext = get_service_extensions(ServiceDescriptor(name="Svc"))
        assert ext.has_security_scheme() is False
        assert ext.header_member_names() == {}

    def test_unspecified_security_type(self):
        service = ServiceDescriptor(name="Svc", options={"service_definitions": {"security_scheme": {}}})
        assert get_service_extensions(service).has_security_scheme() is False

    def test_header_members(self):
        service = ServiceDescriptor(
            name="Svc",
            options={"service_definitions": {"header": [{"name": "X-Tenant", "member_name": "tenant"}]}},
        )
        assert get_service_extensions(service).header_member_names() == {"tenant": "X-Tenant"}

    def test_malformed_payload(self):
        service = ServiceDescriptor(
            name="Svc",
            options={"service_definitions": {"security_scheme": {"type": "NOT_A_TYPE"}}},
        )
        with pytest.raises(DescriptorLoadError) as exc:
            get_service_extensions(service)
        assert exc.value.subject == "Svc"


class TestMethodExtensions:
    def test_endpoint_details(self):
        ext = get_method_extensions(_method(http={"put": "/users/{id}", "body": "profile"}))
        assert ext.http_method_and_endpoint() == ("put", "/users/{id}")
        assert ext.http_method() == "PUT"
        assert ext.endpoint_details.parameters == ["id"]
        assert ext.endpoint_details.body == "profile"

    def test_no_http_rule(self):
        ext = get_method_extensions(_method())
        assert ext.http_rule is None
        assert ext.http_method_and_endpoint() == ("", "")
        assert ext.http_method() == ""

    def test_custom_pattern_has_no_verb(self):
        ext = get_method_extensions(_method(http={"custom": {"kind": "HEAD", "path": "/users"}}))
        assert ext.http_rule is not None
        assert ext.http_method_and_endpoint() == ("", "")

    def test_auth_scopes(self):
        ext = get_method_extensions(_method(method_definitions={"http": {"scope": ["users:read"]}}))
        assert ext.auth_scopes() == ["users:read"]

    def test_no_auth(self):
        ext = get_method_extensions(_method(method_definitions={"http": {"scope": ["x"], "no_auth": True}}))
        assert ext.auth_scopes() is None
        assert get_method_extensions(_method()).auth_scopes() is None

    def test_find_response(self):
        ext = get_method_extensions(
            _method(operation={"responses": [{"code": "RESPONSE_CODE_NOT_FOUND", "description": "gone"}]})
        )
        assert ext.operation.find_response(ResponseCode.NOT_FOUND).description == "gone"
        assert ext.operation.find_response(ResponseCode.OK) is None

    def test_method_headers_override_service(self):
        service = get_service_extensions(
            ServiceDescriptor(
                name="Svc",
                options={"service_definitions": {"header": [
                    {"name": "X-Tenant", "member_name": "tenant"},
                    {"name": "X-Trace", "member_name": "trace"},
                ]}},
            )
        )
        method = get_method_extensions(
            _method(method_definitions={"header": [{"name": "X-Trace-Id", "member_name": "trace"}]})
        )
        assert header_member_names(service, method) == {"tenant": "X-Tenant", "trace": "X-Trace-Id"}


class TestEndpointParameters:
    def test_placeholders(self):
        assert retrieve_endpoint_parameters("/orgs/{org_id}/users/{user.id}") == ["org_id", "user.id"]

    def test_no_placeholders(self):
        assert retrieve_endpoint_parameters("/users") == []

    def test_additional_bindings_merged(self):
        rule = HttpRule(
            get="/users/{id}",
            additional_bindings=[HttpRule(get="/orgs/{org}/users/{id}")],
        )
        assert get_endpoint_details(rule).parameters == ["id", "org"]


class TestFieldExtensions:
    def test_defaults(self):
        ext = get_field_extensions(FieldDescriptor(name="id"))
        assert ext.property_location() == HttpFieldLocation.BODY
        assert ext.has_explicit_location() is False
        assert ext.is_required() is False
        assert ext.hides_from_schema() is False

    def test_declared_options(self):
        field = FieldDescriptor(
            name="token",
            options={
                "property": {"required": True, "hide_from_schema": True},
                "field_definitions": {"location": "HTTP_FIELD_LOCATION_HEADER"},
                "database": {"name": "token_col"},
            },
        )
        ext = get_field_extensions(field)
        assert ext.property_location() == HttpFieldLocation.HEADER
        assert ext.has_explicit_location() is True
        assert ext.is_required() is True
        assert ext.hides_from_schema() is True
        assert ext.database.name == "token_col"
