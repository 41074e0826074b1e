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

import pytest

from bsexp.utils.yaml import deep_merge, dict_from_extended_yaml, dict_from_yaml


def write(path: Path, contents: str) -> Path:
    path.write_text(contents)
    return path


def test_dict_from_yaml_invalid_filepath():
    with pytest.raises(ValueError) as e:
        dict_from_yaml(filepath='fake_file.yml')

    assert str(e.value) == "'fake_file.yml' is not a file"


def test_dict_from_yaml_empty(tmp_path):
    filepath = write(tmp_path / 'empty.yml', '')

    assert dict_from_yaml(filepath=filepath) == {}


def test_dict_from_yaml_invalid_contents(tmp_path):
    filepath = write(tmp_path / 'number.yml', '123\n')

    with pytest.raises(ValueError) as e:
        dict_from_yaml(filepath=filepath)

    assert str(e.value) == f"'{filepath}' cannot be parsed as a dictionary"


def test_dict_from_yaml_valid(tmp_path):
    filepath = write(tmp_path / 'valid.yml', 'a: 1\nb:\n  c: 2\n  d: 3\n')

    assert dict_from_yaml(filepath=filepath) == dict(a=1, b=dict(c=2, d=3))


def test_dict_from_extended_yaml_invalid_filepath():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath='fake_file.yml')

    assert str(e.value) == "'fake_file.yml' is not a file"


def test_dict_from_extended_yaml_without_extends(tmp_path):
    filepath = write(tmp_path / 'valid.yml', 'a: 1\n')

    assert dict_from_extended_yaml(filepath=filepath) == dict(a=1)


def test_dict_from_extended_yaml_invalid_base(tmp_path):
    filepath = write(tmp_path / 'extends.yml', 'extends: missing.yml\na: 1\n')

    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=filepath)

    assert str(e.value) == f"'{tmp_path / 'missing.yml'}' is not a file"


def test_dict_from_extended_yaml_self_reference(tmp_path):
    filepath = write(tmp_path / 'self.yml', 'extends: self.yml\n')

    with pytest.raises(AssertionError):
        dict_from_extended_yaml(filepath=filepath)


def test_dict_from_extended_yaml_recursive(tmp_path):
    write(tmp_path / 'base.yml', 'a: 1\nb:\n  c: 2\n  d: 3\n')
    (tmp_path / 'nested').mkdir()
    write(tmp_path / 'nested' / 'middle.yml', 'extends: ../base.yml\nb:\n  d: 4\n')
    filepath = write(tmp_path / 'top.yml', 'extends: nested/middle.yml\ne: 5\n')

    assert dict_from_extended_yaml(filepath=filepath) == dict(a=1, b=dict(c=2, d=4), e=5)


def test_deep_merge_replaces_non_dicts():
    first = dict(a=dict(b=1), c=dict(d=2))
    deep_merge(first, dict(a=3, c=dict(e=4)))

    assert first == dict(a=3, c=dict(d=2, e=4))
