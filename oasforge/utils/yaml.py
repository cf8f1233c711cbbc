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

"""Loading of settings and base documents from YAML or JSON files."""

import json
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel

EXTENDS_KEY = 'extends'

T = TypeVar('T', bound=BaseModel)

PathLike = Union[Path, str]


def merge_mappings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with `overrides` applied over `base`.

    Nested mappings are merged key by key, any other value (lists included) is replaced. The inputs are not modified.

    >>> merge_mappings({'a': 1, 'b': {'c': 2, 'd': 3}}, {'b': {'d': 4}, 'e': [5]})
    {'a': 1, 'b': {'c': 2, 'd': 4}, 'e': [5]}
    """
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_mappings(current, value)
        else:
            merged[key] = value
    return merged


def load_mapping(filepath: PathLike) -> dict[str, Any]:
    """Read a mapping from a `.json` file, or from YAML for any other extension. An empty YAML file is empty."""
    path = Path(filepath)
    if not path.is_file():
        raise ValueError(f"'{filepath}' is not a file")

    with path.open('r') as file:
        contents = json.load(file) if path.suffix == '.json' else yaml.safe_load(file)

    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ValueError(f"'{filepath}' cannot be parsed as a dictionary")
    return contents


def _extended_path(path: Path, extends: Any, custom_root: Optional[Path]) -> Path:
    candidate = path.parent / str(extends)
    if not candidate.is_file() and custom_root is not None:
        candidate = custom_root / str(extends)
    return candidate


def load_extended_mapping(filepath: PathLike, *, custom_root: Optional[Path] = None) -> dict[str, Any]:
    """Read a mapping that may extend another file through its 'extends' key.

    The extended file is looked up relative to the extending one, then relative to `custom_root`. Chains are followed
    to the end and values of an extending file win over the ones it extends. The 'extends' key is not part of the
    result.
    """
    chain: list[dict[str, Any]] = []
    seen: set[Path] = set()
    path: Optional[Path] = Path(filepath)

    while path is not None:
        resolved = path.resolve()
        if resolved in seen:
            raise ValueError(f"'{filepath}' has circular extensions")
        seen.add(resolved)

        contents = load_mapping(path)
        extends = contents.pop(EXTENDS_KEY, None)
        chain.append(contents)
        path = _extended_path(path, extends, custom_root) if extends else None

    merged: dict[str, Any] = {}
    for contents in reversed(chain):
        merged = merge_mappings(merged, contents)
    return merged


def model_from_extended_yaml(model: type[T], *, filepath: PathLike, custom_root: Optional[Path] = None) -> T:
    """Validate the mapping of a file, extensions applied, as an instance of `model`."""
    return model.model_validate(load_extended_mapping(filepath, custom_root=custom_root))
