# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from pathlib import Path
from typing import Optional, Union

from pydantic import field_validator

from bsexp.utils import pydantic


class BsexpSettings(pydantic.BaseModel):
    # Line width under which a list is rendered on a single line by the pretty printer.
    PRETTY_WIDTH: int = 60

    # Spaces added per nesting level by the pretty printer.
    PRETTY_INDENT: int = 1

    # Reject containers bigger than this many bytes before parsing anything, `None` disables the check.
    DECODE_MAX_INPUT_BYTES: Optional[int] = None

    # Reject containers declaring more atoms than this, `None` disables the check.
    DECODE_MAX_ATOMS: Optional[int] = None

    # Reject containers declaring more nodes than this, `None` disables the check.
    DECODE_MAX_NODES: Optional[int] = None

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'BsexpSettings':
        """Takes a filepath to a yaml file and returns a validated BsexpSettings instance."""
        from bsexp.utils.yaml import dict_from_extended_yaml
        return cls(**dict_from_extended_yaml(filepath=filepath))

    @field_validator('PRETTY_WIDTH')
    @classmethod
    def _validate_width(cls, width: int) -> int:
        if width <= 0:
            raise ValueError('PRETTY_WIDTH must be positive')
        return width

    @field_validator('PRETTY_INDENT', 'DECODE_MAX_INPUT_BYTES', 'DECODE_MAX_ATOMS', 'DECODE_MAX_NODES')
    @classmethod
    def _validate_non_negative(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError('value cannot be negative')
        return value
