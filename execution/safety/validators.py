# validators for agent replies
"""Agent response validation"""
from typing import Dict, Any, List
from pydantic import BaseModel
from jsonschema import validate, ValidationError as JsonSchemaValidationError


SUCCESS_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "result": {"type": "number"},
    },
    "required": ["id", "result"],
}

ERROR_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "error": {
            "type": "object",
            "properties": {
                "code": {"type": "string", "minLength": 1},
                "message": {"type": "string"},
                "position": {"type": ["integer", "null"]},
            },
            "required": ["code", "message"],
        },
    },
    "required": ["id", "error"],
}


class ValidationResult(BaseModel):
    """Result of validation"""
    is_valid: bool
    errors: List[str] = []
    warnings: List[str] = []


class ResponseValidator:
    """Validates task replies received from agents"""

    def validate_success(self, body: Any, task_id: str) -> ValidationResult:
        """
        Validate a 200 reply

        Args:
            body: Decoded JSON body
            task_id: Id of the task that was sent

        Returns:
            ValidationResult
        """
        return self._validate(body, SUCCESS_RESPONSE_SCHEMA, task_id, forbidden="error")

    def validate_error(self, body: Any, task_id: str) -> ValidationResult:
        """Validate a structured 400 reply"""
        return self._validate(body, ERROR_RESPONSE_SCHEMA, task_id, forbidden="result")

    @staticmethod
    def _validate(
        body: Any,
        schema: Dict[str, Any],
        task_id: str,
        forbidden: str,
    ) -> ValidationResult:
        errors = []
        warnings = []

        try:
            validate(instance=body, schema=schema)
        except JsonSchemaValidationError as e:
            errors.append(f"Response schema validation failed: {e.message}")
            return ValidationResult(is_valid=False, errors=errors)

        if body["id"] != task_id:
            errors.append(f"Response id {body['id']!r} does not match task {task_id!r}")
        # a reply is either a result or an error, never both
        if body.get(forbidden) is not None:
            errors.append(f"Response must not carry '{forbidden}'")

        unexpected = set(body.keys()) - set(schema["properties"].keys()) - {forbidden}
        if unexpected:
            warnings.append(f"Unexpected fields: {sorted(unexpected)}")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )
