"""Test that all JSON schemas in metaprop/specs/ are valid Draft 2020-12 schemas."""

import json
from pathlib import Path

import jsonschema
import pytest
from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from metaprop.config import RECORD_SCHEMA_NAME, SPECS_DIR

EXPECTED_SCHEMA_URI = "https://json-schema.org/draft/2020-12/schema"


def discover_schema_files() -> list[Path]:
    """Discover all schema files in the specs directory."""
    return sorted(SPECS_DIR.glob("*.schema.json"))


def load_schema(name: str) -> dict:
    """Load a JSON schema from the specs directory."""
    with open(SPECS_DIR / f"{name}.schema.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.mark.parametrize(
    "schema_path",
    discover_schema_files(),
    ids=lambda p: p.name,
)
def test_schema_parses_as_draft202012(schema_path: Path) -> None:
    """Verify each schema file is a valid Draft 2020-12 JSON Schema.

    Checks:
    1. File loads as valid UTF-8 JSON
    2. Contains $schema field matching Draft 2020-12 URI
    3. Resolves to Draft202012Validator
    4. Passes schema self-validation via check_schema()
    """
    try:
        content = schema_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        pytest.fail(f"{schema_path.name}: Failed to read as UTF-8: {e}")

    try:
        schema = json.loads(content)
    except json.JSONDecodeError as e:
        pytest.fail(f"{schema_path.name}: Invalid JSON: {e}")

    if "$schema" not in schema:
        pytest.fail(f"{schema_path.name}: Missing '$schema' field")

    if schema["$schema"] != EXPECTED_SCHEMA_URI:
        pytest.fail(
            f"{schema_path.name}: Expected $schema='{EXPECTED_SCHEMA_URI}', "
            f"got '{schema['$schema']}'"
        )

    validator_cls = validator_for(schema)
    if validator_cls is not Draft202012Validator:
        pytest.fail(
            f"{schema_path.name}: Expected Draft202012Validator, got {validator_cls.__name__}"
        )

    try:
        validator_cls.check_schema(schema)
    except SchemaError as e:
        pytest.fail(f"{schema_path.name}: Schema self-validation failed: {e}")


def test_record_schema_exists() -> None:
    """The decoder's record schema ships with the package."""
    assert (SPECS_DIR / f"{RECORD_SCHEMA_NAME}.schema.json") in discover_schema_files()


class TestRecordSchemaContract:
    """What the record schema accepts and rejects."""

    @pytest.fixture
    def schema(self):
        return load_schema(RECORD_SCHEMA_NAME)

    def test_full_record(self, schema):
        jsonschema.validate(
            {
                "externalId": "e1",
                "component": "c1",
                "displayCategory": "Group A",
                "categoryId": "-1",
                "displayName": "Name",
                "displayValue": "42",
                "metaType": "Int",
                "filelink": "",
                "filename": "",
                "link": "",
                "CanSet": False,
            },
            schema,
        )

    def test_nulls_and_extra_keys(self, schema):
        jsonschema.validate({"externalId": None, "extra": 1}, schema)

    def test_unknown_meta_type_is_left_to_decoder(self, schema):
        jsonschema.validate({"metaType": "Boolean"}, schema)

    @pytest.mark.parametrize(
        "instance",
        [[], "e1", {"displayValue": 42}, {"CanSet": "yes"}],
    )
    def test_rejected(self, schema, instance):
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(instance, schema)
