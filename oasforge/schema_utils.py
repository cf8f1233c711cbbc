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

"""Component schemas collected while generating a document."""

from typing import Any

from pydantic import BaseModel, TypeAdapter

REF_TEMPLATE = '#/components/schemas/{model}'


def schema_ref(name: str) -> dict[str, str]:
    return {'$ref': REF_TEMPLATE.format(model=name)}


class SchemaRegistryMixin:
    """Collects the JSON schemas of the models used in a document, to be written under `components/schemas`.

    Models are registered by class name. Schemas of models nested in other types end up as `$defs`, which are moved
    to the top level so that every `$ref` resolves against `components/schemas`.
    """

    _schemas: dict[str, Any]

    def _register_model(self, model: type[BaseModel]) -> dict[str, str]:
        """Register a model, once, and return a `$ref` to it."""
        if model.__name__ not in self._schemas:
            self._schemas[model.__name__] = model.model_json_schema(ref_template=REF_TEMPLATE)
        return schema_ref(model.__name__)

    def _inline_schema(self, tp: Any) -> dict[str, Any]:
        """Schema of any type. The models it refers to are registered and referenced."""
        schema = TypeAdapter(tp).json_schema(ref_template=REF_TEMPLATE)
        for name, nested in schema.pop('$defs', {}).items():
            self._schemas.setdefault(name, nested)
        return schema

    def _collected_schemas(self) -> dict[str, Any]:
        """All registered schemas, nested `$defs` moved to the top level. The registry is left untouched."""
        collected: dict[str, Any] = {}
        for name, schema in self._schemas.items():
            if '$defs' in schema:
                schema = {key: value for key, value in schema.items() if key != '$defs'}
                for nested_name, nested in self._schemas[name]['$defs'].items():
                    collected.setdefault(nested_name, nested)
            collected[name] = schema
        return collected
