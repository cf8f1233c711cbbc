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

"""Ambient context used while generating documentation.

Transforms do not fail on documentation mistakes (a duplicate response, a parameter that does not exist, ...): they
report a `GenError` to the current `GenContext` and carry on. The context decides whether the error is shown, through
its error filter, and hands shown errors to the error handler installed with `on_error`.

The context is held in a `ContextVar`, so every thread and every asyncio task sees its own.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter
from structlog import get_logger

from oasforge.exception import GenError
from oasforge.schema_utils import SchemaRegistryMixin

logger = get_logger()

T = TypeVar('T')

ErrorFilter = Callable[[GenError], bool]
ErrorHandler = Callable[[GenError], None]


def show_all_errors(_err: GenError) -> bool:
    return True


@dataclass
class GenContext(SchemaRegistryMixin):
    """State shared by everything that generates documentation in the current context."""

    # Infer responses from the response types of endpoints.
    infer_responses: bool = True

    # Also infer error responses (status >= 400), not only the successful ones.
    all_error_responses: bool = True

    # Register pydantic models under components/schemas and refer to them, instead of inlining them.
    extract_schemas: bool = True

    show_error: ErrorFilter = show_all_errors
    error_handler: Optional[ErrorHandler] = None

    _schemas: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def error(self, err: GenError) -> None:
        """Report a documentation error."""
        shown = self.show_error(err)
        logger.debug('documentation error', error=str(err), error_type=type(err).__name__, shown=shown)
        if shown and self.error_handler is not None:
            self.error_handler(err)

    def reset_error_filter(self) -> None:
        self.show_error = show_all_errors

    def schema_for(self, tp: Any) -> dict[str, Any]:
        """JSON schema for a type, as it should appear in the document."""
        if not self.extract_schemas:
            return TypeAdapter(tp).json_schema()
        if isinstance(tp, type) and issubclass(tp, BaseModel):
            return self._register_model(tp)
        return self._inline_schema(tp)

    def object_schema(self, model: type[BaseModel]) -> dict[str, Any]:
        """Full schema of a model, never a `$ref`. The enums and models used by its fields are registered."""
        return self._inline_schema(model)

    def component_schemas(self) -> dict[str, Any]:
        return self._collected_schemas()


_current_context: ContextVar[Optional[GenContext]] = ContextVar('oasforge_gen_context', default=None)


def current_context() -> GenContext:
    """Return the context in use, creating a default one the first time."""
    ctx = _current_context.get()
    if ctx is None:
        ctx = GenContext()
        _current_context.set(ctx)
    return ctx


def in_context(func: Callable[[GenContext], T]) -> T:
    """Run `func` with the current context."""
    return func(current_context())


def reset_context() -> None:
    """Drop the current context, the next access creates a fresh one."""
    _current_context.set(None)


def on_error(handler: Optional[ErrorHandler]) -> None:
    """Install the handler called with every shown documentation error."""
    current_context().error_handler = handler


def extract_schemas(extract: bool) -> None:
    current_context().extract_schemas = extract


def infer_responses(infer: bool) -> None:
    current_context().infer_responses = infer


def all_error_responses(infer: bool) -> None:
    current_context().all_error_responses = infer


@contextmanager
def gen_context(**fields: Any) -> Iterator[GenContext]:
    """Use a fresh context (built from `fields`) inside the block, then go back to the previous one."""
    ctx = GenContext(**fields)
    token = _current_context.set(ctx)
    try:
        yield ctx
    finally:
        _current_context.reset(token)


@contextmanager
def error_filter(show_error: ErrorFilter) -> Iterator[GenContext]:
    """Hide errors rejected by `show_error` inside the block.

    Filters nest: an error is shown only if every active filter accepts it. The prior filter is restored on exit.
    """
    ctx = current_context()
    previous = ctx.show_error
    ctx.show_error = lambda err: previous(err) and show_error(err)
    try:
        yield ctx
    finally:
        ctx.show_error = previous
