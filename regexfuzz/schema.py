"""Schema validation for corpus configurations."""

import json
from pathlib import Path
from typing import Dict, Any

from jsonschema import validate, ValidationError


DEFAULT_SCHEMA_PATH = Path(__file__).parent / 'corpus-schema.json'


class SchemaValidator:
    """Validates corpus configuration against the schema"""

    def __init__(self, schema_path: Path = DEFAULT_SCHEMA_PATH):
        with open(schema_path, 'r') as f:
            self.schema = json.load(f)

    def validate(self, config_path: Path) -> Dict[str, Any]:
        """Validate configuration and return parsed data"""
        with open(config_path, 'r') as f:
            try:
                config = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid configuration: {config_path} is not JSON ({e})")

        return self.validate_data(config)

    def validate_data(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Validate already loaded configuration data"""
        try:
            validate(instance=config, schema=self.schema)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e.message}")

        return config
