#!/usr/bin/env python3

from typing import Any, Dict, Iterator, List

from docmeta.core.metadata import FieldIssue


class ValidationResult:
    def __init__(self):
        self.errors: List[FieldIssue] = []

    def add(self, field: str, message: str):
        self.errors.append(FieldIssue(field=field, message=message))

    @property
    def valid(self) -> bool:
        return not self.errors

    def is_valid(self) -> bool:
        return self.valid

    def fields(self) -> List[str]:
        return [e.field for e in self.errors]

    def messages(self) -> List[str]:
        return [e.message for e in self.errors]

    def summary(self) -> str:
        return ", ".join(self.messages())

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": [e.to_dict() for e in self.errors]}

    def __len__(self):
        return len(self.errors)

    def __iter__(self) -> Iterator[FieldIssue]:
        return iter(self.errors)

    def __repr__(self):
        return f"<ValidationResult valid={self.is_valid()} errors={len(self.errors)}>"
