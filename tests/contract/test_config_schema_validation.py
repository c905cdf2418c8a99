from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from sheet2word.config.loader import SCHEMA_PATH

"""Config schema contract test: packaged schema vs. documented keys."""

EXAMPLE_YAML = """
output_directory: ./output
title: Packing Sheet
transpose: true
split_columns: true
archive_name: converted_files.zip
archive_folder: converted_files
default_name: converted
delivery_delay_seconds: 0.3
"""


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_is_packaged_and_valid():
    schema = _schema()
    jsonschema.Draft7Validator.check_schema(schema)
    assert schema["additionalProperties"] is False


def test_config_schema_valid_example():
    jsonschema.validate(yaml.safe_load(EXAMPLE_YAML), _schema())


def test_config_schema_empty_is_valid():
    jsonschema.validate({}, _schema())


@pytest.mark.parametrize(
    "patch",
    [
        {"unknown": 1},
        {"output_directory": ""},
        {"title": 3},
        {"split_columns": "yes"},
        {"archive_name": "converted_files"},
        {"archive_folder": ""},
        {"delivery_delay_seconds": 10},
    ],
)
def test_config_schema_rejects(patch):
    with pytest.raises(ValidationError):
        jsonschema.validate(patch, _schema())
