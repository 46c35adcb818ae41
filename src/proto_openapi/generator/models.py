"""OpenAPI document models.

Dumped with ``by_alias=True, exclude_none=True`` these produce the plain
dict layout of an OpenAPI 3 document.
"""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer

REF_COMPONENTS_SCHEMAS = "#/components/schemas/"

CONTENT_TYPE_JSON = "application/json"


class SchemaRef(BaseModel):
    """A reference to a named component schema. Carries nothing else."""

    model_config = ConfigDict(populate_by_name=True)

    ref: str = Field(alias="$ref")
    is_required: bool = Field(default=False, exclude=True)

    @classmethod
    def to(cls, name: str, required: bool = False) -> "SchemaRef":
        return cls(ref=REF_COMPONENTS_SCHEMAS + name, is_required=required)

    @property
    def name(self) -> str:
        return self.ref.rsplit("/", 1)[-1]


class InlineSchema(BaseModel):
    """A schema defined in place.

    ``is_required`` is the field-level flag read by the parent; the
    ``required`` list is derived from the properties on every read.
    """

    type: str | None = None  # object / string / array / boolean / integer / number
    format: str | None = None
    description: str | None = None
    example: str | None = None
    items: "Schema | None" = None
    enum: list[str] | None = None
    properties: "dict[str, Schema] | None" = None
    is_required: bool = Field(default=False, exclude=True)

    @property
    def required(self) -> list[str]:
        if not self.properties:
            return []
        return sorted(name for name, prop in self.properties.items() if prop.is_required)

    @model_serializer(mode="wrap")
    def _serialize(self, handler) -> dict[str, Any]:
        data = handler(self)
        if self.required:
            data["required"] = self.required
        return data


Schema = Union[SchemaRef, InlineSchema]

InlineSchema.model_rebuild()


def schema_ref_name(schema: Schema) -> str | None:
    """Name of the component a schema points to, looking through arrays."""
    if isinstance(schema, SchemaRef):
        return schema.name
    if schema.items is not None and isinstance(schema.items, SchemaRef):
        return schema.items.name
    return None


class MediaType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: Schema = Field(alias="schema")


def json_content(schema: Schema) -> dict[str, MediaType]:
    return {CONTENT_TYPE_JSON: MediaType(schema_=schema)}


class Parameter(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(alias="in")  # path / query / header
    required: bool = False
    description: str | None = None
    schema_: InlineSchema = Field(alias="schema")


class RequestBody(BaseModel):
    required: bool = False
    description: str | None = None
    content: dict[str, MediaType]


class Response(BaseModel):
    description: str = ""
    content: dict[str, MediaType]


class Operation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    operation_id: str = Field(alias="operationId")
    summary: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = {}
    security: list[dict[str, list[str]]] | None = None

    def schemas(self) -> list[str]:
        """Names of the message schemas this operation references.

        Error responses are left out: they point at shared error schemas.
        """
        names: list[str] = []
        if self.request_body is not None:
            for media in self.request_body.content.values():
                if (name := schema_ref_name(media.schema_)) is not None:
                    names.append(name)
        for code, response in self.responses.items():
            if not code.startswith("2"):
                continue
            for media in response.content.values():
                if (name := schema_ref_name(media.schema_)) is not None:
                    names.append(name)
        return names

    def response_codes(self) -> list[str]:
        return list(self.responses.keys())


class Info(BaseModel):
    title: str = ""
    version: str = ""


class Server(BaseModel):
    url: str
    description: str | None = None


class SecurityScheme(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    scheme: str | None = None
    bearer_format: str | None = Field(default=None, alias="bearerFormat")
    name: str | None = None
    location: str | None = Field(default=None, alias="in")
    description: str | None = None


class Components(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schemas: dict[str, Schema] = {}
    security_schemes: dict[str, SecurityScheme] | None = Field(default=None, alias="securitySchemes")


class Document(BaseModel):
    openapi: str = "3.0.3"
    info: Info
    servers: list[Server] = []
    paths: dict[str, dict[str, Operation]] = {}
    components: Components = Components()
    has_security: bool = Field(default=False, exclude=True)

    def operations(self) -> list[Operation]:
        return [op for item in self.paths.values() for op in item.values()]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
