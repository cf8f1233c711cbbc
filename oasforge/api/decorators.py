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

"""`@api_endpoint`: documents a Twisted `render_*` handler and takes care of its input and output.

    class ItemResource(Resource):
        isLeaf = True

        @api_endpoint(
            path='/items/{item_id}',
            method='GET',
            operation_id='get_item',
            summary='Get an item',
            query_params_model=ItemParams,
            response_model=Union[ItemResponse, NotFoundResponse],
            docs=lambda op: op.parameter('item_id', lambda p: p.example('42')),
        )
        def render_GET(self, request, *, params):
            ...

The handler receives the validated `params=` (query string) and `body=` (JSON body) keyword arguments, and may
return a `ResponseModel`, a `Deferred` firing with one, or anything Twisted accepts (bytes, NOT_DONE_YET).
"""

import functools
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Literal, Optional, TypeVar, Union

import structlog
from pydantic import BaseModel, ValidationError
from twisted.internet.defer import Deferred
from twisted.python.failure import Failure
from twisted.web.http import Request

from oasforge.api.schemas.base import ErrorResponse, ResponseModel

if TYPE_CHECKING:
    from oasforge.transform import TransformOperation

logger = structlog.get_logger()

F = TypeVar('F', bound=Callable[..., Any])

HttpMethod = Literal['GET', 'POST', 'PUT', 'DELETE', 'PATCH', 'HEAD', 'OPTIONS']

OperationDocs = Callable[['TransformOperation'], 'TransformOperation']

JSON_CONTENT_TYPE = b'application/json; charset=utf-8'


@dataclass
class EndpointMetadata:
    """Everything the generator needs to document one handler."""
    path: str
    method: HttpMethod
    operation_id: str
    summary: str
    description: str = ''
    tags: list[str] = field(default_factory=list)
    query_params_model: Optional[type[BaseModel]] = None
    request_model: Optional[type[BaseModel]] = None
    # a single response type or a Union of them
    response_model: Any = None
    deprecated: bool = False
    path_params_descriptions: dict[str, str] = field(default_factory=dict)
    # transform applied to the generated operation
    docs: Optional[OperationDocs] = None


_endpoint_registry: list[EndpointMetadata] = []


def get_endpoint_registry() -> list[EndpointMetadata]:
    """Endpoints decorated so far, in declaration order."""
    return _endpoint_registry


def clear_endpoint_registry() -> None:
    _endpoint_registry.clear()


class InternalErrorResponse(ErrorResponse):
    """Sent when the Deferred of a handler fails."""
    http_status_code: ClassVar[int] = 500


class _BadRequest(Exception):
    pass


def _write_model(request: Request, response: ResponseModel) -> bytes:
    request.setResponseCode(response.http_status_code)
    return response.json_dumpb()


def _render_result(request: Request, result: Any) -> Any:
    if isinstance(result, ResponseModel):
        return _write_model(request, result)
    return result


def _query_args(request: Request) -> dict[str, Any]:
    """Decode `request.args`. Repeated keys become lists, single values stay scalars."""
    decoded: dict[str, Any] = {}
    for key, values in (request.args or {}).items():
        name = key.decode('utf-8') if isinstance(key, bytes) else key
        items = [value.decode('utf-8') if isinstance(value, bytes) else value for value in values]
        decoded[name] = items if len(items) > 1 else items[0]
    return decoded


def _handler_kwargs(request: Request, metadata: EndpointMetadata) -> dict[str, Any]:
    """Validate the query string and body of the request.

    Raises:
        _BadRequest: If the input does not match the models.
    """
    kwargs: dict[str, Any] = {}

    if metadata.query_params_model is not None:
        try:
            kwargs['params'] = metadata.query_params_model.model_validate(_query_args(request))
        except ValidationError as e:
            raise _BadRequest(str(e)) from e

    if metadata.request_model is not None:
        raw = request.content.read() if request.content is not None else b''
        try:
            kwargs['body'] = metadata.request_model.model_validate(json.loads(raw))
        except (ValidationError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise _BadRequest(str(e)) from e

    return kwargs


def _finish_deferred(request: Request, result: Union[ResponseModel, bytes, None]) -> None:
    # None: the request was already finished by the handler
    if result is None:
        return
    request.write(_render_result(request, result))
    request.finish()


def _fail_deferred(request: Request, failure: Failure, operation_id: str) -> None:
    message = failure.getErrorMessage()
    logger.error('unhandled error in deferred endpoint', operation_id=operation_id, error=message)
    request.write(_write_model(request, InternalErrorResponse(error=f'Internal Server Error: {message}')))
    request.finish()


def api_endpoint(
    *,
    path: str,
    method: HttpMethod,
    operation_id: str,
    summary: str,
    description: str = '',
    tags: Optional[list[str]] = None,
    query_params_model: Optional[type[BaseModel]] = None,
    request_model: Optional[type[BaseModel]] = None,
    response_model: Any = None,
    deprecated: bool = False,
    path_params_descriptions: Optional[dict[str, str]] = None,
    docs: Optional[OperationDocs] = None,
) -> Callable[[F], F]:
    """Register a handler for documentation and validate its requests.

    Args:
        path: URL path of the endpoint, parameters in braces (e.g. '/items/{item_id}')
        method: HTTP method
        operation_id: unique identifier of the operation
        summary: short description
        description: longer description
        tags: tags grouping the operation in the documentation
        query_params_model: model of the query string, passed to the handler as `params=`
        request_model: model of the JSON body, passed to the handler as `body=`
        response_model: response type(s) of the handler, a single one or a Union
        deprecated: whether the endpoint is deprecated
        path_params_descriptions: descriptions of the path parameters
        docs: transform applied to the generated operation

    Invalid input is answered with a 400 `ErrorResponse` without calling the handler.
    """
    metadata = EndpointMetadata(
        path=path,
        method=method,
        operation_id=operation_id,
        summary=summary,
        description=description,
        tags=list(tags or []),
        query_params_model=query_params_model,
        request_model=request_model,
        response_model=response_model,
        deprecated=deprecated,
        path_params_descriptions=dict(path_params_descriptions or {}),
        docs=docs,
    )

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: Any, request: Request, *args: Any, **kwargs: Any) -> Any:
            request.setHeader(b'content-type', JSON_CONTENT_TYPE)

            try:
                kwargs.update(_handler_kwargs(request, metadata))
            except _BadRequest as e:
                return _write_model(request, ErrorResponse(error=str(e)))

            result = func(self, request, *args, **kwargs)

            if isinstance(result, Deferred):
                from twisted.web.server import NOT_DONE_YET
                result.addCallback(lambda value: _finish_deferred(request, value))
                result.addErrback(lambda failure: _fail_deferred(request, failure, operation_id))
                return NOT_DONE_YET
            return _render_result(request, result)

        wrapper._openapi_metadata = metadata  # type: ignore[attr-defined]
        _endpoint_registry.append(metadata)
        return wrapper  # type: ignore[return-value]

    return decorator
