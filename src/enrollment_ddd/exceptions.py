"""Exceptions raised by enrollment-ddd.

Database driver errors raised while running a query are not wrapped; they
reach the caller unchanged.
"""

from __future__ import annotations

from difflib import get_close_matches


class EnrollmentDDDError(Exception):
    """Root of every exception raised by this package."""


class EntityNotFoundError(EnrollmentDDDError):
    """``require()`` found no row with the requested id."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id={entity_id!r} not found")


# ── Persistence ──────────────────────────────────────────────────────


class PersistenceError(EnrollmentDDDError):
    """A unit of work or row mapping failed."""


class SessionManagementError(PersistenceError):
    """The unit of work could not open, configure or close its session."""


class UnitOfWorkError(PersistenceError):
    """Commit or rollback failed; the driver error is the ``__cause__``."""


class MappingError(PersistenceError):
    """A database row could not be turned into a domain aggregate."""


# ── Specifications ───────────────────────────────────────────────────


def _did_you_mean(suggestions: list[str]) -> str:
    return f" Did you mean: {', '.join(suggestions)}?" if suggestions else ""


class SpecificationError(EnrollmentDDDError):
    """A specification dict cannot be compiled against the student schema."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)


class OperatorNotFoundError(SpecificationError):
    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.suggestions = get_close_matches(operator, valid_operators, n=3)
        hint = _did_you_mean(self.suggestions)
        super().__init__(
            f"Unknown operator '{operator}'.{hint} "
            f"Valid operators: {', '.join(sorted(valid_operators))}"
        )


class FieldNotFoundError(SpecificationError):
    """No column or relationship named ``field`` on ``model_name``."""

    def __init__(
        self, field: str, model_name: str, available: list[str], path: str
    ) -> None:
        self.field = field
        self.model_name = model_name
        self.suggestions = get_close_matches(field, available, n=5)
        hint = _did_you_mean(self.suggestions)
        super().__init__(
            f"'{model_name}' has no field '{field}' (path '{path}').{hint}",
            path=path,
        )


class RelationshipTraversalError(SpecificationError):
    """A dotted path continues past a plain column, e.g. ``name.first``."""

    def __init__(self, field: str, model_name: str, path: str) -> None:
        self.field = field
        self.model_name = model_name
        super().__init__(
            f"'{field}' on '{model_name}' is a column, not a relationship "
            f"(path '{path}')",
            path=path,
        )
