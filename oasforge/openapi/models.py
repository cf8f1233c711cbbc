#  Copyright 2026 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

"""Mutable pydantic models for the subset of OpenAPI 3.1 edited by the transforms.

Unknown fields are kept (`extra='allow'`), so vendor extensions (`x-...`) survive a parse/dump cycle. Objects that
may be replaced by a `$ref` are typed as a union of `Reference` and the object, discriminated on the `$ref` key.
"""

from typing import Any, Iterator, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    SerializerFunctionWrapHandler,
    Tag as VariantTag,
    field_validator,
    model_serializer,
    model_validator,
)
from typing_extensions import Annotated

from oasforge.openapi.status import StatusCode

# Order in which operations appear in a path item.
HTTP_METHODS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')

ParameterLocation = Literal['query', 'header', 'path', 'cookie']


class OpenApiModel(BaseModel):
    """Base for document objects: mutable, populated by field name or alias, extensions preserved."""
    model_config = ConfigDict(extra='allow', populate_by_name=True)


class Reference(BaseModel):
    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    ref: str = Field(alias='$ref')
    summary: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def component(cls, kind: str, name: str) -> 'Reference':
        """Reference to `#/components/{kind}/{name}`."""
        return cls(ref=f'#/components/{kind}/{name}')


def _reference_tag(value: Any) -> str:
    if isinstance(value, dict):
        return 'ref' if '$ref' in value else 'item'
    return 'ref' if isinstance(value, Reference) else 'item'


def _reference_or(item_type: Any) -> Any:
    return Annotated[
        Union[Annotated[Reference, VariantTag('ref')], Annotated[item_type, VariantTag('item')]],
        Discriminator(_reference_tag),
    ]


class ExternalDocs(OpenApiModel):
    url: str
    description: Optional[str] = None


class Server(OpenApiModel):
    url: str
    description: Optional[str] = None
    variables: Optional[dict[str, Any]] = None


class Tag(OpenApiModel):
    name: str
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = Field(default=None, alias='externalDocs')


class Info(OpenApiModel):
    title: str
    version: str
    summary: Optional[str] = None
    description: Optional[str] = None
    terms_of_service: Optional[str] = Field(default=None, alias='termsOfService')
    contact: Optional[dict[str, Any]] = None
    license: Optional[dict[str, Any]] = None


class MediaType(OpenApiModel):
    schema_: Optional[dict[str, Any]] = Field(default=None, alias='schema')
    example: Any = None
    examples: Optional[dict[str, Any]] = None
    encoding: Optional[dict[str, Any]] = None


class Parameter(OpenApiModel):
    name: str
    in_: ParameterLocation = Field(alias='in')
    description: Optional[str] = None
    required: Optional[bool] = None
    deprecated: Optional[bool] = None
    schema_: Optional[dict[str, Any]] = Field(default=None, alias='schema')
    example: Any = None
    examples: Optional[dict[str, Any]] = None
    style: Optional[str] = None
    explode: Optional[bool] = None


class RequestBody(OpenApiModel):
    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)
    required: Optional[bool] = None


class Response(OpenApiModel):
    description: str = ''
    headers: Optional[dict[str, Any]] = None
    content: Optional[dict[str, MediaType]] = None
    links: Optional[dict[str, Any]] = None


ParameterOrRef = _reference_or(Parameter)
RequestBodyOrRef = _reference_or(RequestBody)
ResponseOrRef = _reference_or(Response)


class Responses(OpenApiModel):
    """The responses map of an operation.

    In a document it is a flat map (`{"default": ..., "200": ..., "2XX": ...}`); here the default response is kept
    apart from the ones keyed by `StatusCode`.
    """
    default: Optional[ResponseOrRef] = None
    responses: dict[str, ResponseOrRef] = Field(default_factory=dict)

    @model_validator(mode='before')
    @classmethod
    def _split_flat_map(cls, data: Any) -> Any:
        if not isinstance(data, dict) or 'responses' in data:
            return data
        split: dict[str, Any] = {'responses': {}}
        for key, value in data.items():
            if key == 'default':
                split['default'] = value
            elif isinstance(key, str) and key.startswith('x-'):
                split[key] = value
            else:
                split['responses'][key] = value
        return split

    @field_validator('responses', mode='before')
    @classmethod
    def _parse_status_codes(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {StatusCode.parse(key): item for key, item in value.items()}

    @model_serializer(mode='wrap')
    def _dump_flat_map(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        flat: dict[str, Any] = dict(data.pop('responses', None) or {})
        default = data.pop('default', None)
        if default is not None:
            flat['default'] = default
        flat.update(data)
        return flat

    def __contains__(self, status: object) -> bool:
        return status in self.responses


class Operation(OpenApiModel):
    tags: Optional[list[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = Field(default=None, alias='externalDocs')
    operation_id: Optional[str] = Field(default=None, alias='operationId')
    parameters: Optional[list[ParameterOrRef]] = None
    request_body: Optional[RequestBodyOrRef] = Field(default=None, alias='requestBody')
    responses: Optional[Responses] = None
    deprecated: Optional[bool] = None
    security: Optional[list[dict[str, list[str]]]] = None
    servers: Optional[list[Server]] = None


class PathItem(OpenApiModel):
    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    servers: Optional[list[Server]] = None
    parameters: Optional[list[ParameterOrRef]] = None

    def operations(self) -> Iterator[tuple[str, Operation]]:
        """Iterate over the `(method, operation)` pairs that are set, in document order."""
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                yield method, operation


PathItemOrRef = _reference_or(PathItem)


class Components(OpenApiModel):
    schemas: Optional[dict[str, Any]] = None
    responses: Optional[dict[str, ResponseOrRef]] = None
    parameters: Optional[dict[str, ParameterOrRef]] = None
    examples: Optional[dict[str, Any]] = None
    request_bodies: Optional[dict[str, RequestBodyOrRef]] = Field(default=None, alias='requestBodies')
    headers: Optional[dict[str, Any]] = None
    security_schemes: Optional[dict[str, Any]] = Field(default=None, alias='securitySchemes')


class OpenApi(OpenApiModel):
    openapi: str = '3.1.0'
    info: Info
    servers: Optional[list[Server]] = None
    paths: Optional[dict[str, PathItemOrRef]] = None
    components: Optional[Components] = None
    security: Optional[list[dict[str, list[str]]]] = None
    tags: Optional[list[Tag]] = None
    external_docs: Optional[ExternalDocs] = Field(default=None, alias='externalDocs')

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'OpenApi':
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Dump as a JSON-compatible document: aliased keys, unset (`None`) fields left out."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)
