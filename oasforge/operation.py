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

"""How response types describe themselves in a document.

Anything passed as a response type to the transforms (`op.response(200, MyModel)`) is resolved with `get_output()` to
an object following the `OperationOutput` protocol. Supported out of the box:

- pydantic models (`ResponseModel` subclasses also provide their status code, description and examples)
- `str` and `PlainText`, `Html`, `bytes`, `Json[T]` for any type pydantic can describe
- `None` and `NoContent` for empty responses
- `Union[...]` of any of the above

A type can document itself by implementing the protocol with classmethods, and types that cannot be changed can be
registered with `register_output()`.
"""

import types
import typing
from collections import defaultdict
from typing import Any, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel
from pydantic.errors import PydanticInvalidForJsonSchema, PydanticSchemaGenerationError
from structlog import get_logger
from typing_extensions import Annotated

from oasforge.gen import GenContext
from oasforge.openapi.models import MediaType, Operation, Response
from oasforge.openapi.status import StatusCode

logger = get_logger()

InferredResponse = tuple[Optional[StatusCode], Response]


@runtime_checkable
class OperationOutput(Protocol):
    """Documentation contract of a response type.

    `inferred_responses` returns `(status, response)` pairs, a `None` status meaning the default response.
    """

    def operation_response(self, ctx: GenContext, operation: Operation) -> Optional[Response]:
        ...

    def inferred_responses(self, ctx: GenContext, operation: Operation) -> list[InferredResponse]:
        ...


class ContentType:
    """`Annotated` metadata choosing the media type of a response: `Annotated[str, ContentType('text/csv')]`."""

    __slots__ = ('media_type',)

    def __init__(self, media_type: str) -> None:
        self.media_type = media_type

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ContentType) and other.media_type == self.media_type

    def __hash__(self) -> int:
        return hash(self.media_type)

    def __repr__(self) -> str:
        return f'ContentType({self.media_type!r})'


class Json:
    """`Json[T]` documents `T` as an `application/json` response."""

    def __class_getitem__(cls, item: Any) -> Any:
        return Annotated[item, ContentType('application/json')]


class NoContent:
    """An empty response (204 when inferred)."""
    pass


Html = Annotated[str, ContentType('text/html')]
PlainText = Annotated[str, ContentType('text/plain')]


class MediaOutput:
    """A response with a single media type whose schema comes from a type."""

    def __init__(self, media_type: str, inner_type: Any, *, status: int = 200, description: str = '') -> None:
        self.media_type = media_type
        self.inner_type = inner_type
        self.status = status
        self.description = description

    def _schema(self, ctx: GenContext) -> dict[str, Any]:
        if self.inner_type is str:
            return {'type': 'string'}
        if self.inner_type is bytes:
            return {'type': 'string', 'format': 'binary'}
        return ctx.schema_for(self.inner_type)

    def _media_type(self, ctx: GenContext) -> MediaType:
        return MediaType(schema_=self._schema(ctx))

    def operation_response(self, ctx: GenContext, operation: Operation) -> Optional[Response]:
        try:
            media_type = self._media_type(ctx)
        except (PydanticSchemaGenerationError, PydanticInvalidForJsonSchema):
            logger.debug('no schema for response type', type_name=repr(self.inner_type))
            return None
        return Response(description=self.description, content={self.media_type: media_type})

    def inferred_responses(self, ctx: GenContext, operation: Operation) -> list[InferredResponse]:
        response = self.operation_response(ctx, operation)
        if response is None:
            return []
        return [(StatusCode.code(self.status), response)]


class ModelOutput(MediaOutput):
    """A pydantic model as JSON, using the metadata of `ResponseModel` subclasses when present."""

    def __init__(self, model: type) -> None:
        super().__init__(
            'application/json',
            model,
            status=getattr(model, 'http_status_code', 200),
            description=getattr(model, 'response_description', None) or '',
        )

    def _media_type(self, ctx: GenContext) -> MediaType:
        media_type = super()._media_type(ctx)
        model_examples = getattr(self.inner_type, 'openapi_examples', None)
        if model_examples:
            media_type.examples = {
                name: {'summary': example.summary, 'value': example.value.model_dump(mode='json')}
                for name, example in model_examples.items()
            }
        return media_type


class NoContentOutput:
    inner_type: Any = None

    def operation_response(self, ctx: GenContext, operation: Operation) -> Optional[Response]:
        return Response(description='No Content')

    def inferred_responses(self, ctx: GenContext, operation: Operation) -> list[InferredResponse]:
        return [(StatusCode.code(204), Response(description='No Content'))]


class UnionOutput:
    """Any of several outputs.

    The operation response is the one of the first member. Inferred responses of members sharing a status code are
    merged, their schemas combined with `oneOf`.
    """

    def __init__(self, members: list[Any], outputs: list[OperationOutput]) -> None:
        self.inner_type = Union[tuple(members)]
        self.outputs = outputs

    def operation_response(self, ctx: GenContext, operation: Operation) -> Optional[Response]:
        return self.outputs[0].operation_response(ctx, operation)

    def inferred_responses(self, ctx: GenContext, operation: Operation) -> list[InferredResponse]:
        by_status: dict[Optional[StatusCode], list[Response]] = defaultdict(list)
        for output in self.outputs:
            for status, response in output.inferred_responses(ctx, operation):
                by_status[status].append(response)
        return [(status, _merge_responses(responses)) for status, responses in by_status.items()]


def _merge_responses(responses: list[Response]) -> Response:
    """Merge responses sharing a status code.

    Schemas of a media type are combined with `oneOf`. For the description, headers and examples the first response
    providing one wins.
    """
    if len(responses) == 1:
        return responses[0]

    description = next((r.description for r in responses if r.description), '')
    headers: dict[str, Any] = {}
    schemas: dict[str, list[dict[str, Any]]] = defaultdict(list)
    example: dict[str, Any] = {}
    examples: dict[str, dict[str, Any]] = defaultdict(dict)
    for response in responses:
        for header_name, header in (response.headers or {}).items():
            headers.setdefault(header_name, header)
        for media_type_name, media_type in (response.content or {}).items():
            media_schemas = schemas[media_type_name]
            if media_type.schema_ is not None:
                media_schemas.append(media_type.schema_)
            if media_type.example is not None:
                example.setdefault(media_type_name, media_type.example)
            for example_name, value in (media_type.examples or {}).items():
                examples[media_type_name].setdefault(example_name, value)

    content: dict[str, MediaType] = {}
    for media_type_name, media_schemas in schemas.items():
        schema: Optional[dict[str, Any]] = None
        if len(media_schemas) == 1:
            schema = media_schemas[0]
        elif media_schemas:
            schema = {'oneOf': media_schemas}
        content[media_type_name] = MediaType(
            schema_=schema,
            example=example.get(media_type_name),
            examples=examples[media_type_name] or None,
        )
    return Response(description=description, headers=headers or None, content=content or None)



_output_registry: dict[Any, OperationOutput] = {}


def register_output(tp: Any, output: OperationOutput) -> None:
    """Document `tp` with `output` wherever it is used as a response type."""
    _output_registry[tp] = output


def unregister_output(tp: Any) -> None:
    _output_registry.pop(tp, None)


def _is_union(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    return origin is Union or origin is types.UnionType


def get_output(tp: Any) -> OperationOutput:
    """Resolve a response type to its documentation."""
    registered = _output_registry.get(tp)
    if registered is not None:
        return registered

    if tp is None or tp is type(None) or tp is NoContent:
        return NoContentOutput()

    if typing.get_origin(tp) is Annotated:
        inner, *metadata = typing.get_args(tp)
        for item in metadata:
            if isinstance(item, ContentType):
                return MediaOutput(item.media_type, inner)
        return get_output(inner)

    if _is_union(tp):
        members = list(typing.get_args(tp))
        return UnionOutput(members, [get_output(member) for member in members])

    if isinstance(tp, OperationOutput):
        return tp

    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return ModelOutput(tp)

    # subclasses (str enums, constrained strings) are described by pydantic
    if tp is str:
        return MediaOutput('text/plain', str)
    if tp is bytes:
        return MediaOutput('application/octet-stream', bytes)

    return MediaOutput('application/json', tp)


def output_inner_type(output: OperationOutput) -> Any:
    """The type examples of a response documented by `output` are validated against, None when it does not say."""
    return getattr(output, 'inner_type', None)


def infer_operation_responses(ctx: GenContext, operation: Operation, tp: Any) -> list[InferredResponse]:
    """Inferred responses of `tp`, honoring the context flags."""
    if not ctx.infer_responses:
        return []
    inferred = get_output(tp).inferred_responses(ctx, operation)
    if ctx.all_error_responses:
        return inferred
    return [(status, response) for status, response in inferred if not is_error_status(status)]


def is_error_status(status: Optional[StatusCode]) -> bool:
    return status is not None and status[0] in '45'
