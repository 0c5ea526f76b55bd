"""Operators understood by student specifications."""

from __future__ import annotations

import operator
from collections.abc import Callable
from enum import Enum
from typing import Any


class SpecificationOperator(str, Enum):
    EQ = "="
    GT = ">"
    LT = "<"
    ICONTAINS = "icontains"

    # Structural nodes
    AND = "and"
    ANY = "any"


def _icontains(actual: Any, expected: Any) -> bool:
    return str(expected).lower() in str(actual).lower()


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    # A missing value never satisfies an ordering, same as SQL NULL
    return lambda actual, expected: actual is not None and compare(actual, expected)


# In-memory counterpart of each comparison the SQL compiler emits.
COMPARISONS: dict[SpecificationOperator, Callable[[Any, Any], bool]] = {
    SpecificationOperator.EQ: operator.eq,
    SpecificationOperator.GT: _ordered(operator.gt),
    SpecificationOperator.LT: _ordered(operator.lt),
    SpecificationOperator.ICONTAINS: _ordered(_icontains),
}
