"""Symbol and type models shared by the semantic layer and the refactoring.

This module defines the resolved-symbol data structures handed out by the
type-resolution service: static type information for expressions, method
signatures, and the tagged outcome of resolving an invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


class TypeKind(str, Enum):
    """Kind of type definition."""

    CLASS = "CLASS"
    INTERFACE = "INTERFACE"
    STRUCT = "STRUCT"
    ENUM = "ENUM"
    RECORD = "RECORD"
    DELEGATE = "DELEGATE"
    TYPE_PARAMETER = "TYPE_PARAMETER"
    ERROR = "ERROR"  # referenced but not declared anywhere in the project


class CandidateReason(str, Enum):
    """Why an invocation resolved to candidates instead of a single symbol."""

    OVERLOAD_RESOLUTION_FAILURE = "overload_resolution_failure"
    AMBIGUOUS = "ambiguous"


class ParameterSymbol(BaseModel):
    """A method parameter as reported by the type-resolution service."""

    name: str = Field(..., description="Parameter name")
    type_name: str = Field(..., description="Canonical display string of the type")
    is_optional: bool = Field(False, description="Has a default value")
    is_params: bool = Field(False, description="Declared with the params modifier")


class MethodSymbol(BaseModel):
    """A resolved member signature."""

    name: str = Field(..., description="Simple method name")
    containing_type: str = Field(..., description="Display name of the declaring type")
    parameters: list[ParameterSymbol] = Field(default_factory=list)
    type_parameters: list[str] = Field(default_factory=list)
    return_type: str | None = Field(None, description="Return type, None for void")

    @property
    def parameter_types(self) -> list[str]:
        """Parameter type display strings in declaration order."""
        return [p.type_name for p in self.parameters]

    @property
    def required_parameter_count(self) -> int:
        return sum(1 for p in self.parameters if not (p.is_optional or p.is_params))

    def accepts_argument_count(self, count: int) -> bool:
        """Check whether a call with ``count`` arguments can bind to this method."""
        if count < self.required_parameter_count:
            return False
        if any(p.is_params for p in self.parameters):
            return True
        return count <= len(self.parameters)

    def to_display_string(self) -> str:
        """Fully qualified display form, e.g. ``Shop.IOrders.Place(int, string)``."""
        generic = f"<{', '.join(self.type_parameters)}>" if self.type_parameters else ""
        params = ", ".join(self.parameter_types)
        return f"{self.containing_type}.{self.name}{generic}({params})"


class TypeInfo(BaseModel):
    """Resolved static type of an expression."""

    name: str = Field(..., description="Display name, including type arguments")
    qualified_name: str = Field(..., description="Namespace-qualified name without type arguments")
    kind: TypeKind
    namespace: str = Field("", description="Containing namespace ('' for global)")
    type_arguments: list[str] = Field(default_factory=list)

    @property
    def containing_namespaces(self) -> list[str]:
        """Namespace chain from innermost to outermost."""
        if not self.namespace:
            return []
        parts = self.namespace.split(".")
        return [".".join(parts[:i]) for i in range(len(parts), 0, -1)]


@dataclass(frozen=True)
class Resolved:
    """The invocation binds to exactly one method."""

    symbol: MethodSymbol


@dataclass(frozen=True)
class Ambiguous:
    """Resolution failed; several methods are plausible targets."""

    reason: CandidateReason
    candidates: tuple[MethodSymbol, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Unresolved:
    """No method could be found for the invocation."""

    reason: str = ""


ResolutionResult = Resolved | Ambiguous | Unresolved
