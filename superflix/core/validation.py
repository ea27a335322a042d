"""Declarative field checks for raw request bodies.

Each ``Check`` pairs a field with one rule and the message reported when the
rule fails. All checks are evaluated, so a body can collect several errors
for the same field.
"""
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from email_validator import EmailNotValidError, validate_email
from fastapi import Request
from pydantic import BaseModel, ValidationError

from .errors import BodyValidationError, FieldError, field_errors_from_pydantic

Rule = Callable[[str], bool]


def min_length(length: int) -> Rule:
    return lambda value: len(value) >= length


def is_alphanumeric(value: str) -> bool:
    return value.isascii() and value.isalnum()


def is_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class Check:
    def __init__(self, field: str, message: str, rule: Rule):
        self.field = field
        self.message = message
        self.rule = rule

    def run(self, body: Dict[str, Any]) -> Optional[FieldError]:
        value = body.get(self.field)
        # Missing values are checked as empty strings
        text = "" if value is None else str(value)
        if self.rule(text):
            return None
        return FieldError(field=self.field, message=self.message)


def run_checks(body: Dict[str, Any], checks: Sequence[Check]) -> List[FieldError]:
    return [error for error in (check.run(body) for check in checks) if error is not None]


def validated_body(model: Type[BaseModel], checks: Sequence[Check]):
    """Build a dependency that checks the raw JSON body, then parses it into ``model``."""

    async def dependency(request: Request) -> BaseModel:
        try:
            body = await request.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        errors = run_checks(body, checks)
        if errors:
            raise BodyValidationError(errors)

        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise BodyValidationError(field_errors_from_pydantic(e.errors()))

    return dependency
