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

"""Status code keys for the responses map of an operation."""

import re

_RANGE_RE = re.compile(r'^([1-5])XX$', re.IGNORECASE)


class StatusCode(str):
    """A key of the OpenAPI responses map.

    It is either an exact code (`"200"`) or a class of codes (`"2XX"`). Since it is a `str`, it can be used directly
    as a dict key and dumps as-is.
    """

    __slots__ = ()

    @classmethod
    def code(cls, code: int) -> 'StatusCode':
        """An exact HTTP status code, e.g. `StatusCode.code(404)` -> `"404"`."""
        if isinstance(code, bool) or not isinstance(code, int):
            raise ValueError(f'status code must be an int, got {code!r}')
        if not 100 <= code <= 599:
            raise ValueError(f'status code must be between 100 and 599, got {code}')
        return cls(str(code))

    @classmethod
    def range(cls, hundreds: int) -> 'StatusCode':
        """A status code class. The range is `100`-based, so `StatusCode.range(2)` -> `"2XX"`."""
        if isinstance(hundreds, bool) or not isinstance(hundreds, int):
            raise ValueError(f'status range must be an int, got {hundreds!r}')
        if not 1 <= hundreds <= 5:
            raise ValueError(f'status range must be between 1 and 5, got {hundreds}')
        return cls(f'{hundreds}XX')

    @classmethod
    def parse(cls, value: 'str | int') -> 'StatusCode':
        """Parse a key as found in a document: `200`, `"200"` or `"2XX"`."""
        if isinstance(value, int):
            return cls.code(value)
        match = _RANGE_RE.match(value)
        if match:
            return cls.range(int(match.group(1)))
        if value.isdigit():
            return cls.code(int(value))
        raise ValueError(f'invalid status code: {value!r}')

    @property
    def is_range(self) -> bool:
        return self.endswith('XX')

    def __repr__(self) -> str:
        return f'StatusCode({str.__repr__(self)})'
