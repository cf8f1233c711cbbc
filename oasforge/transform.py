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

"""Transforms wrap a part of, or the whole of, an `OpenApi` document and edit it with chained calls.

Example documentation for an imaginary government-provided API:

    op.description('An example operation.') \
        .response_with(200, Json[str], lambda res: res.description(
            "Something was probably successful, we don't know what this returns, but it's at least JSON."
        )) \
        .response_with(500, Html, lambda res: res.description(
            'Sometimes arbitrary 500 is returned with randomized HTML.'
        )) \
        .default_response(str)

Transform functions take a single transform and return it, which makes documentation composable:

    def no_content(op: TransformOperation) -> TransformOperation:
        return op.response(204, NoContent)

    op.description('this operation always returns nothing').pipe(no_content)

Mistakes such as documenting the same status twice or editing a parameter that does not exist do not interrupt a
chain: they are reported to the current generation context (see `oasforge.gen`).
"""

from typing import Any, Callable, Iterator, Optional

from pydantic import TypeAdapter
from pydantic_core import to_jsonable_python
from structlog import get_logger

from oasforge.exception import DefaultResponseExists, GenError, ParameterNotExists, PathNotExists, ResponseExists
from oasforge.gen import current_context, error_filter
from oasforge.openapi.models import (
    Components,
    OpenApi,
    Operation,
    Parameter,
    PathItem,
    Response,
    Responses,
    Server,
    Tag,
)
from oasforge.openapi.status import StatusCode
from oasforge.operation import get_output, output_inner_type

logger = get_logger()


def filter_no_duplicate_response(err: GenError) -> bool:
    """Error filter hiding "response already exists" errors."""
    return not isinstance(err, (DefaultResponseExists, ResponseExists))


def _example_value(type_: Any, example: Any) -> Any:
    if type_ is None or type_ is Any:
        return to_jsonable_python(example)
    adapter = TypeAdapter(type_)
    return adapter.dump_python(adapter.validate_python(example), mode='json')


class TransformOpenApi:
    """A transform helper that wraps `OpenApi`."""

    def __init__(self, api: OpenApi) -> None:
        self.api = api

    def title(self, title: str) -> 'TransformOpenApi':
        self.api.info.title = title
        return self

    def summary(self, summary: str) -> 'TransformOpenApi':
        self.api.info.summary = summary
        return self

    def description(self, desc: str) -> 'TransformOpenApi':
        self.api.info.description = desc
        return self

    def version(self, version: str) -> 'TransformOpenApi':
        self.api.info.version = version
        return self

    def tag(self, name: str, description: Optional[str] = None) -> 'TransformOpenApi':
        """Declare a tag, or update the description of an already declared one."""
        if self.api.tags is None:
            self.api.tags = []
        for tag in self.api.tags:
            if tag.name == name:
                if description is not None:
                    tag.description = description
                return self
        self.api.tags.append(Tag(name=name, description=description))
        return self

    def server(self, url: str, description: Optional[str] = None) -> 'TransformOpenApi':
        if self.api.servers is None:
            self.api.servers = []
        self.api.servers.append(Server(url=url, description=description))
        return self

    def security_scheme(self, name: str, scheme: dict[str, Any]) -> 'TransformOpenApi':
        if self.api.components is None:
            self.api.components = Components()
        if self.api.components.security_schemes is None:
            self.api.components.security_schemes = {}
        self.api.components.security_schemes[name] = scheme
        return self

    def _path_items(self) -> Iterator[tuple[str, PathItem]]:
        for path, item in (self.api.paths or {}).items():
            if isinstance(item, PathItem):
                yield path, item

    def path(self, path: str, transform: Callable[['TransformPathItem'], 'TransformPathItem']) -> 'TransformOpenApi':
        """Modify a path of the document. Hiding it removes it."""
        item = (self.api.paths or {}).get(path)
        if item is None:
            current_context().error(PathNotExists(path))
            return self
        if not isinstance(item, PathItem):
            logger.debug('path is a reference, skipping', path=path)
            return self

        t = transform(TransformPathItem(item))

        if t.is_hidden:
            assert self.api.paths is not None
            del self.api.paths[path]

        return self

    def default_response(self, output_type: Any) -> 'TransformOpenApi':
        """Set a default response for all operations that do not already have one."""
        for _, item in self._path_items():
            TransformPathItem(item).default_response(output_type)
        return self

    def default_response_with(
        self,
        output_type: Any,
        transform: Callable[['TransformResponse'], 'TransformResponse'],
    ) -> 'TransformOpenApi':
        """Set a default response for all operations that do not already have one.

        The transform function is applied to the generated documentation of each operation.
        """
        for _, item in self._path_items():
            TransformPathItem(item).default_response_with(output_type, transform)
        return self

    def pipe(self, transform: Callable[['TransformOpenApi'], 'TransformOpenApi']) -> 'TransformOpenApi':
        """Apply another transform function."""
        return transform(self)

    @property
    def inner(self) -> OpenApi:
        return self.api


class TransformPathItem:
    """A transform helper that wraps `PathItem`."""

    def __init__(self, path_item: PathItem) -> None:
        self.is_hidden = False
        self.path_item = path_item

    def hidden(self, hidden: bool = True) -> 'TransformPathItem':
        """Hide the path from the documentation.

        Hiding an item causes it to be ignored completely, there is no way to restore or "unhide" it afterwards.
        """
        self.is_hidden = hidden
        return self

    def summary(self, summary: str) -> 'TransformPathItem':
        self.path_item.summary = summary
        return self

    def description(self, desc: str) -> 'TransformPathItem':
        self.path_item.description = desc
        return self

    def default_response(self, output_type: Any) -> 'TransformPathItem':
        """Set a default response for all operations in the path that do not already have one."""
        with error_filter(filter_no_duplicate_response):
            for _, operation in self.path_item.operations():
                TransformOperation(operation).default_response(output_type)
        return self

    def default_response_with(
        self,
        output_type: Any,
        transform: Callable[['TransformResponse'], 'TransformResponse'],
    ) -> 'TransformPathItem':
        """Set a default response for all operations in the path that do not already have one.

        The transform function is applied to the generated documentation of each operation.
        """
        with error_filter(filter_no_duplicate_response):
            for _, operation in self.path_item.operations():
                TransformOperation(operation).default_response_with(output_type, transform)
        return self

    def pipe(self, transform: Callable[['TransformPathItem'], 'TransformPathItem']) -> 'TransformPathItem':
        """Apply another transform function."""
        return transform(self)

    @property
    def inner(self) -> PathItem:
        return self.path_item


class TransformOperation:
    """A transform helper that wraps `Operation`."""

    def __init__(self, operation: Operation) -> None:
        self.is_hidden = False
        self.operation = operation
        self.log = logger.new(operation_id=operation.operation_id)

    def id(self, name: str) -> 'TransformOperation':
        """Specify the operation ID."""
        self.operation.operation_id = name
        self.log = self.log.bind(operation_id=name)
        return self

    def summary(self, summary: str) -> 'TransformOperation':
        self.operation.summary = summary
        return self

    def description(self, desc: str) -> 'TransformOperation':
        self.operation.description = desc
        return self

    def tag(self, tag: str) -> 'TransformOperation':
        if self.operation.tags is None:
            self.operation.tags = []
        if tag not in self.operation.tags:
            self.operation.tags.append(tag)
        return self

    def deprecated(self, deprecated: bool = True) -> 'TransformOperation':
        self.operation.deprecated = deprecated or None
        return self

    def hidden(self, hidden: bool = True) -> 'TransformOperation':
        """Hide the operation from the documentation.

        Hiding an item causes it to be ignored completely, there is no way to restore or "unhide" it afterwards.
        """
        self.is_hidden = hidden
        return self

    def parameter(
        self,
        name: str,
        transform: Callable[['TransformParameter'], 'TransformParameter'],
        type_: Any = None,
    ) -> 'TransformOperation':
        """Modify a parameter of the operation.

        `type_` is the type examples of the parameter are validated against. Hiding the parameter removes it.
        """
        parameters = self.operation.parameters or []
        for idx, param in enumerate(parameters):
            if isinstance(param, Parameter) and param.name == name:
                break
        else:
            current_context().error(ParameterNotExists(name))
            return self

        t = transform(TransformParameter(param, type_))

        if t.is_hidden:
            del parameters[idx]

        return self

    def parameter_untyped(
        self,
        name: str,
        transform: Callable[['TransformParameter'], 'TransformParameter'],
    ) -> 'TransformOperation':
        """Modify a parameter of the operation without knowing its type."""
        return self.parameter(name, transform)

    def _responses(self) -> Responses:
        if self.operation.responses is None:
            self.operation.responses = Responses()
        return self.operation.responses

    def _operation_response(self, output_type: Any) -> tuple[Optional[Response], Any]:
        output = get_output(output_type)
        response = output.operation_response(current_context(), self.operation)
        if response is None:
            self.log.debug('no response info of type', type_name=repr(output_type))
        return response, output_inner_type(output)

    def _set_default_response(
        self,
        output_type: Any,
        transform: Optional[Callable[['TransformResponse'], 'TransformResponse']],
    ) -> 'TransformOperation':
        response, inner_type = self._operation_response(output_type)
        if response is None:
            return self
        responses = self._responses()

        if responses.default is not None:
            current_context().error(DefaultResponseExists())
            return self

        if transform is not None and transform(TransformResponse(response, inner_type)).is_hidden:
            return self

        responses.default = response
        return self

    def _add_response(
        self,
        status: StatusCode,
        output_type: Any,
        transform: Optional[Callable[['TransformResponse'], 'TransformResponse']],
    ) -> 'TransformOperation':
        response, inner_type = self._operation_response(output_type)
        if response is None:
            return self
        responses = self._responses()

        if transform is not None and transform(TransformResponse(response, inner_type)).is_hidden:
            return self

        existing = status in responses.responses
        responses.responses[status] = response
        if existing:
            current_context().error(ResponseExists(status))
        return self

    def default_response(self, output_type: Any) -> 'TransformOperation':
        """Set a default response for the operation if it does not already have one."""
        return self._set_default_response(output_type, None)

    def default_response_with(
        self,
        output_type: Any,
        transform: Callable[['TransformResponse'], 'TransformResponse'],
    ) -> 'TransformOperation':
        """Set a default response for the operation if it does not already have one.

        The transform function is applied to the generated documentation.
        """
        return self._set_default_response(output_type, transform)

    def response(self, code: int, output_type: Any) -> 'TransformOperation':
        """Add a response to the operation with the given status code."""
        return self._add_response(StatusCode.code(code), output_type, None)

    def response_with(
        self,
        code: int,
        output_type: Any,
        transform: Callable[['TransformResponse'], 'TransformResponse'],
    ) -> 'TransformOperation':
        """Add a response to the operation with the given status code.

        The transform function is applied to the generated documentation.
        """
        return self._add_response(StatusCode.code(code), output_type, transform)

    def response_range(self, hundreds: int, output_type: Any) -> 'TransformOperation':
        """Add a response to the operation with the given status code range (e.g. 2XX).

        Note that the range is `100`-based, so for the range `2XX`, `2` must be provided.
        """
        return self._add_response(StatusCode.range(hundreds), output_type, None)

    def response_range_with(
        self,
        hundreds: int,
        output_type: Any,
        transform: Callable[['TransformResponse'], 'TransformResponse'],
    ) -> 'TransformOperation':
        """Add a response to the operation with the given status code range (e.g. 2XX).

        Note that the range is `100`-based, so for the range `2XX`, `2` must be provided.
        The transform function is applied to the generated documentation.
        """
        return self._add_response(StatusCode.range(hundreds), output_type, transform)

    def pipe(self, transform: Callable[['TransformOperation'], 'TransformOperation']) -> 'TransformOperation':
        """Apply another transform function."""
        return transform(self)

    @property
    def inner(self) -> Operation:
        return self.operation


class TransformParameter:
    """A transform helper that wraps `Parameter`.

    The type given at construction validates examples.
    """

    def __init__(self, param: Parameter, type_: Any = None) -> None:
        self.is_hidden = False
        self.param = param
        self.type_ = type_

    def hidden(self, hidden: bool = True) -> 'TransformParameter':
        """Hide the parameter from the documentation.

        Hiding an item causes it to be ignored completely, there is no way to restore or "unhide" it afterwards.
        """
        self.is_hidden = hidden
        return self

    def description(self, desc: str) -> 'TransformParameter':
        """Provide or override the description of the parameter."""
        self.param.description = desc
        return self

    def required(self, required: bool = True) -> 'TransformParameter':
        self.param.required = required
        return self

    def example(self, example: Any) -> 'TransformParameter':
        """Provide or override an example for the parameter."""
        self.param.example = _example_value(self.type_, example)
        return self

    def pipe(self, transform: Callable[['TransformParameter'], 'TransformParameter']) -> 'TransformParameter':
        """Apply another transform function."""
        return transform(self)

    @property
    def inner(self) -> Parameter:
        return self.param


class TransformResponse:
    """A transform helper that wraps `Response`.

    The type given at construction validates examples.
    """

    def __init__(self, response: Response, type_: Any = None) -> None:
        self.is_hidden = False
        self.response = response
        self.type_ = type_

    def hidden(self, hidden: bool = True) -> 'TransformResponse':
        """Hide the response from the documentation.

        Hiding an item causes it to be ignored completely, there is no way to restore or "unhide" it afterwards.
        """
        self.is_hidden = hidden
        return self

    def description(self, desc: str) -> 'TransformResponse':
        """Provide or override the description of the response."""
        self.response.description = desc
        return self

    def example(self, example: Any) -> 'TransformResponse':
        """Provide or override an example for every media type of the response."""
        value = _example_value(self.type_, example)
        for media_type in (self.response.content or {}).values():
            media_type.example = value
        return self

    def pipe(self, transform: Callable[['TransformResponse'], 'TransformResponse']) -> 'TransformResponse':
        """Apply another transform function."""
        return transform(self)

    @property
    def inner(self) -> Response:
        return self.response
