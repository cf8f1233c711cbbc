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

"""OpenAPI document generator for the endpoints registered with @api_endpoint."""

import re
from typing import Any, Callable, Optional

from structlog import get_logger

from oasforge.api.decorators import EndpointMetadata, get_endpoint_registry
from oasforge.conf.settings import GeneratorSettings
from oasforge.exception import DuplicateParameter, GenError, GenerationFailed, OperationExists
from oasforge.gen import GenContext, gen_context
from oasforge.openapi.models import (
    Components,
    Info,
    MediaType,
    OpenApi,
    Operation,
    Parameter,
    PathItem,
    RequestBody,
    Response,
    Responses,
    Server,
)
from oasforge.openapi.status import StatusCode
from oasforge.operation import infer_operation_responses, is_error_status
from oasforge.transform import TransformOpenApi, TransformOperation, TransformPathItem
from oasforge.utils.yaml import load_mapping

logger = get_logger()

_PATH_PARAM_RE = re.compile(r'{([^}/]+)}')

PathDocs = Callable[[TransformPathItem], TransformPathItem]
ApiDocs = Callable[[TransformOpenApi], TransformOpenApi]


def path_parameter_names(path: str) -> list[str]:
    """Names of the parameters of a path template: '/a/{x}/b/{y}' -> ['x', 'y']."""
    return _PATH_PARAM_RE.findall(path)


class OpenAPIGenerator:
    """Generates an OpenAPI document from registered endpoints.

    The document is built from the metadata collected by @api_endpoint, then the transform functions run in order:
    each endpoint's `docs`, the path transforms registered with `path_docs()` and the one given to `generate()`.
    Documentation errors are collected in `errors`.
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None, base: Optional[OpenApi] = None) -> None:
        if settings is None:
            from oasforge.conf.get_settings import get_global_settings
            settings = get_global_settings()
        self.settings = settings
        self.base = base
        self.errors: list[GenError] = []
        self._path_docs: list[tuple[str, PathDocs]] = []
        self.log = logger.new(title=settings.TITLE)

    def path_docs(self, path: str, transform: PathDocs) -> 'OpenAPIGenerator':
        """Register a transform for a path item. Hiding the path removes it from the document."""
        self._path_docs.append((path, transform))
        return self

    def _base_document(self) -> OpenApi:
        if self.base is not None:
            return self.base.model_copy(deep=True)
        if self.settings.BASE_DOCUMENT is not None:
            return OpenApi.from_dict(load_mapping(self.settings.BASE_DOCUMENT))
        return OpenApi(info=Info(title=self.settings.TITLE, version=self.settings.VERSION))

    def _build_parameters(self, ctx: GenContext, metadata: EndpointMetadata) -> list[Parameter]:
        """Build parameters from the path template and the query params model."""
        parameters: list[Parameter] = []

        for param_name in path_parameter_names(metadata.path):
            parameters.append(Parameter(
                name=param_name,
                in_='path',
                required=True,
                description=metadata.path_params_descriptions.get(param_name),
                schema_={'type': 'string'},
            ))

        if metadata.query_params_model:
            names = {p.name for p in parameters}
            schema = ctx.object_schema(metadata.query_params_model)
            required_fields = set(schema.get('required', []))

            for field_name, field_schema in schema.get('properties', {}).items():
                if field_name in names:
                    ctx.error(DuplicateParameter(field_name))
                    continue
                parameters.append(Parameter(
                    name=field_name,
                    in_='query',
                    required=field_name in required_fields,
                    description=field_schema.get('description'),
                    schema_=field_schema,
                ))

        return parameters

    def _build_request_body(self, ctx: GenContext, metadata: EndpointMetadata) -> Optional[RequestBody]:
        if not metadata.request_model:
            return None

        return RequestBody(
            required=True,
            content={'application/json': MediaType(schema_=ctx.schema_for(metadata.request_model))},
        )

    def _build_responses(self, ctx: GenContext, operation: Operation, metadata: EndpointMetadata) -> Responses:
        responses = Responses()
        if metadata.response_model is not None:
            for status, response in infer_operation_responses(ctx, operation, metadata.response_model):
                if not response.description:
                    response.description = 'Error' if is_error_status(status) else 'Success'
                if status is None:
                    responses.default = response
                else:
                    responses.responses[status] = response

        if responses.default is None and not responses.responses:
            responses.responses[StatusCode.code(200)] = Response(description=self.settings.DEFAULT_RESPONSE_DESCRIPTION)

        return responses

    def _build_operation(self, ctx: GenContext, metadata: EndpointMetadata) -> Optional[Operation]:
        """Build an operation, or None when its documentation hides it."""
        operation = Operation(
            operation_id=metadata.operation_id,
            summary=metadata.summary,
            description=metadata.description or None,
            tags=list(metadata.tags) or None,
            deprecated=metadata.deprecated or None,
        )
        operation.parameters = self._build_parameters(ctx, metadata) or None
        operation.request_body = self._build_request_body(ctx, metadata)
        operation.responses = self._build_responses(ctx, operation, metadata)

        if metadata.docs is not None:
            t = metadata.docs(TransformOperation(operation))
            if t.is_hidden:
                self.log.debug('operation hidden', operation_id=metadata.operation_id)
                return None

        return operation

    def _add_operations(self, ctx: GenContext, api: OpenApi) -> None:
        if api.paths is None:
            api.paths = {}

        for metadata in get_endpoint_registry():
            method = metadata.method.lower()
            item = api.paths.get(metadata.path)
            if item is None:
                item = PathItem()
            elif not isinstance(item, PathItem):
                self.log.warn('path is a reference in the base document, skipping endpoint', path=metadata.path)
                continue

            if getattr(item, method) is not None:
                ctx.error(OperationExists(metadata.path, method))
                continue

            operation = self._build_operation(ctx, metadata)
            if operation is None:
                continue

            setattr(item, method, operation)
            api.paths[metadata.path] = item

    def _apply_path_docs(self, api: OpenApi) -> None:
        transform = TransformOpenApi(api)
        for path, path_docs in self._path_docs:
            transform.path(path, path_docs)

    def generate(self, transform: Optional[ApiDocs] = None) -> OpenApi:
        """Generate the complete OpenAPI document.

        Raises:
            GenerationFailed: If documentation errors were reported and FAIL_ON_ERRORS is set.
        """
        self.errors = []
        api = self._base_document()
        api.openapi = self.settings.OPENAPI_VERSION
        if self.settings.DESCRIPTION is not None:
            api.info.description = self.settings.DESCRIPTION
        if self.settings.SERVERS:
            api.servers = [Server(url=url) for url in self.settings.SERVERS]

        with gen_context(
            infer_responses=self.settings.INFER_RESPONSES,
            all_error_responses=self.settings.ALL_ERROR_RESPONSES,
            extract_schemas=self.settings.EXTRACT_SCHEMAS,
            error_handler=self.errors.append,
        ) as ctx:
            self._add_operations(ctx, api)
            self._apply_path_docs(api)
            if transform is not None:
                TransformOpenApi(api).pipe(transform)

            schemas = ctx.component_schemas()
            if schemas:
                if api.components is None:
                    api.components = Components()
                api.components.schemas = {**(api.components.schemas or {}), **schemas}

        for error in self.errors:
            self.log.warn('documentation error', error=str(error))

        if self.errors and self.settings.FAIL_ON_ERRORS:
            raise GenerationFailed(self.errors)

        return api

    def generate_dict(self, transform: Optional[ApiDocs] = None) -> dict[str, Any]:
        """Generate the document as a JSON-compatible dictionary."""
        return self.generate(transform).to_dict()
