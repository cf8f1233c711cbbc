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

"""Base classes for the request and response models of documented endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal

from oasforge.utils.pydantic import BaseModel


@dataclass(frozen=True)
class OpenAPIExample:
    """A named example of a response: a summary and a model instance, validated when it is built."""
    summary: str
    value: BaseModel


class RequestModel(BaseModel):
    """Base class for request bodies (frozen, unknown fields rejected)."""
    pass


class ResponseModel(BaseModel):
    """Base class for endpoint responses.

    Class-level documentation read by the generator and by `op.response(...)`:
    - http_status_code: status used by the route decorator and for inferred responses.
    - response_description: description of the response, empty when None.
    - openapi_examples: named examples, see `add_openapi_example()`.
    """
    http_status_code: ClassVar[int] = 200
    response_description: ClassVar[str | None] = None
    openapi_examples: ClassVar[dict[str, OpenAPIExample] | None] = None

    @classmethod
    def add_openapi_example(cls, name: str, summary: str, value: ResponseModel) -> None:
        """Attach an example. Examples reference the class itself, so they are added after its definition."""
        if not isinstance(value, cls):
            raise TypeError(f'example {name!r} must be a {cls.__name__}, got {type(value).__name__}')
        examples = dict(cls.__dict__.get('openapi_examples') or {})
        examples[name] = OpenAPIExample(summary=summary, value=value)
        cls.openapi_examples = examples


class SuccessResponse(ResponseModel):
    """Successful response carrying `success=True`."""
    success: Literal[True] = True


class ErrorResponse(ResponseModel):
    """Standard error response, 400 unless a subclass overrides `http_status_code`."""
    http_status_code: ClassVar[int] = 400
    response_description: ClassVar[str | None] = 'Error'
    success: Literal[False] = False
    error: str


class NotFoundResponse(ErrorResponse):
    http_status_code: ClassVar[int] = 404
    response_description: ClassVar[str | None] = 'Not Found'
