from .ast import (
    AndSpecification,
    AnySpecification,
    AttributeSpecification,
    resolve_field,
)
from .builder import SpecificationBuilder
from .operators import COMPARISONS, SpecificationOperator

__all__ = [
    "AndSpecification",
    "AnySpecification",
    "AttributeSpecification",
    "COMPARISONS",
    "SpecificationBuilder",
    "SpecificationOperator",
    "resolve_field",
]
