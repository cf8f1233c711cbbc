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

from oasforge.openapi.status import StatusCode


class OasForgeError(Exception):
    """Base class for exceptions in oasforge."""
    pass


class GenError(OasForgeError):
    """A recoverable error found while generating documentation.

    These are never raised by the transforms, they are reported to the generation context instead (see
    `oasforge.gen`), so a chain of transforms always runs to the end.

    In some cases there is not enough contextual information to tell whether an error really is one; those are
    reported anyway.
    """
    pass


class ParameterNotExists(GenError):
    def __init__(self, name: str) -> None:
        super().__init__(f'parameter "{name}" does not exist for the operation')
        self.name = name


class DefaultResponseExists(GenError):
    def __init__(self) -> None:
        super().__init__('the default response already exists for the operation')


class ResponseExists(GenError):
    def __init__(self, status: StatusCode) -> None:
        super().__init__(f'the response for status "{status}" already exists for the operation')
        self.status = status


class OperationExists(GenError):
    def __init__(self, path: str, method: str) -> None:
        super().__init__(f'the operation "{method}" already exists for the path "{path}"')
        self.path = path
        self.method = method


class DuplicateRequestBody(GenError):
    """A second request body for an operation.

    Part of the error set so handlers can match every kind of documentation error. The generator builds at most one
    request body per operation and the transforms never set one, so nothing in this package reports it.
    """

    def __init__(self) -> None:
        super().__init__('duplicate request body for the operation')


class DuplicateParameter(GenError):
    def __init__(self, name: str) -> None:
        super().__init__(f'duplicate parameter "{name}" for the operation')
        self.name = name


class PathNotExists(GenError):
    def __init__(self, path: str) -> None:
        super().__init__(f'path "{path}" does not exist in the document')
        self.path = path


class GenerationFailed(OasForgeError):
    """Raised by the generator when documentation errors were reported and the settings ask to fail on them."""

    def __init__(self, errors: list[GenError]) -> None:
        lines = '\n'.join(f'  - {error}' for error in errors)
        super().__init__(f'{len(errors)} documentation error(s):\n{lines}')
        self.errors = errors
