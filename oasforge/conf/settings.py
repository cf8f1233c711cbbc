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

"""Settings of the documentation generator."""

from typing import Optional

from pydantic import field_validator

from oasforge.utils import pydantic


class GeneratorSettings(pydantic.BaseModel):
    # Document info
    TITLE: str = 'API'
    VERSION: str = '0.1.0'
    DESCRIPTION: Optional[str] = None

    # Version written in the `openapi` field, only 3.x documents are supported.
    OPENAPI_VERSION: str = '3.1.0'

    # Server URLs listed in the document.
    SERVERS: list[str] = []

    # Document to start from (JSON or YAML), endpoints are added on top of its paths.
    BASE_DOCUMENT: Optional[str] = None

    # Infer responses from the `response_model` of the endpoints.
    INFER_RESPONSES: bool = True

    # When inferring, also document error responses (status >= 400).
    ALL_ERROR_RESPONSES: bool = True

    # Put models under components/schemas instead of inlining them.
    EXTRACT_SCHEMAS: bool = True

    # Raise GenerationFailed instead of only logging documentation errors.
    FAIL_ON_ERRORS: bool = False

    # Description of the response of endpoints without any response model.
    DEFAULT_RESPONSE_DESCRIPTION: str = 'Success'

    @field_validator('OPENAPI_VERSION')
    @classmethod
    def _check_openapi_version(cls, version: str) -> str:
        if not version.startswith('3.'):
            raise ValueError(f'only OpenAPI 3.x documents are supported, got {version}')
        return version
