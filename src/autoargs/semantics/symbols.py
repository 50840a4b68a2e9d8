"""Symbol table for C# declarations.

The scanner fills a SymbolTable with every type declared in a project. The
semantic model then uses it to resolve type names written in source to
declared types and to look up the members reachable from a receiver type.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field

from autoargs.core.models import MethodSymbol, ParameterSymbol, TypeKind
from autoargs.semantics.ast_utils import CSharpAstUtils


class FileContext(BaseModel):
    """File-level context for type name resolution.

    Contains the namespace a name is written in and the document's using
    directives, used to resolve short names to qualified names.
    """

    namespace: str = Field("", description="Enclosing namespace ('' for global)")
    usings: list[str] = Field(default_factory=list, description="Imported namespaces")
    aliases: dict[str, str] = Field(
        default_factory=dict, description="using aliases (alias -> target type text)"
    )

    def enclosing_namespaces(self) -> list[str]:
        """Namespaces searched for a short name, innermost first, ending with global."""
        parts = self.namespace.split(".") if self.namespace else []
        chain = [".".join(parts[:i]) for i in range(len(parts), 0, -1)]
        chain.append("")
        return chain


class TypeSymbol(BaseModel):
    """A type declared in the project."""

    name: str = Field(..., description="Simple name")
    qualified_name: str = Field(..., description="Namespace- and outer-type-qualified name")
    namespace: str = Field("", description="Containing namespace")
    kind: TypeKind
    type_parameters: list[str] = Field(default_factory=list)
    base_types: list[str] = Field(
        default_factory=list, description="Base type texts as written in source"
    )
    methods: list[MethodSymbol] = Field(default_factory=list)
    member_types: dict[str, str] = Field(
        default_factory=dict, description="field/property name -> declared type text"
    )
    file_context: FileContext = Field(default_factory=FileContext)


class MemberMatch(BaseModel):
    """A member found on a receiver type, with generic arguments substituted."""

    method: MethodSymbol
    declared_in: TypeSymbol


class SymbolTable(BaseModel):
    """All declared types of a project, indexed for name resolution."""

    type_map: dict[str, list[str]] = Field(
        default_factory=dict, description="short_name -> [qualified_names]"
    )
    types: dict[str, TypeSymbol] = Field(
        default_factory=dict, description="qualified_name -> symbol"
    )

    def add_type(self, symbol: TypeSymbol) -> None:
        """Register a type; partial declarations merge their members."""
        existing = self.types.get(symbol.qualified_name)
        if existing is not None:
            existing.methods.extend(symbol.methods)
            existing.member_types.update(symbol.member_types)
            for base in symbol.base_types:
                if base not in existing.base_types:
                    existing.base_types.append(base)
            return
        self.types[symbol.qualified_name] = symbol
        names = self.type_map.setdefault(symbol.name, [])
        if symbol.qualified_name not in names:
            names.append(symbol.qualified_name)

    def resolve_type(self, type_name: str, context: FileContext) -> str | None:
        """Resolve a type name as written in source to a declared qualified name.

        Resolution order:
        1. using aliases
        2. the name as written, prefixed by each enclosing namespace (innermost first)
        3. the name prefixed by each using directive
        4. a unique declaration with that simple name

        Generic arguments are ignored. Candidates are sorted so the result does
        not depend on declaration order.
        """
        base, _ = CSharpAstUtils.split_type_arguments(type_name)
        base = base.removeprefix("global::")
        if base in context.aliases:
            base, _ = CSharpAstUtils.split_type_arguments(context.aliases[base])

        for namespace in context.enclosing_namespaces():
            candidate = f"{namespace}.{base}" if namespace else base
            if candidate in self.types:
                return candidate

        for using in sorted(context.usings):
            candidate = f"{using}.{base}"
            if candidate in self.types:
                return candidate

        short_name = base.rsplit(".", 1)[-1]
        candidates = sorted(
            qn
            for qn in self.type_map.get(short_name, [])
            if qn == base or qn.endswith(f".{base}")
        )
        return candidates[0] if len(candidates) == 1 else None

    def get_type(self, qualified_name: str) -> TypeSymbol | None:
        return self.types.get(qualified_name)

    def walk_hierarchy(
        self, qualified_name: str, type_arguments: list[str] | None = None
    ) -> Iterator[tuple[TypeSymbol, dict[str, str]]]:
        """Yield the type and its base types breadth-first.

        Each symbol comes with the mapping from its type parameters to the
        concrete type texts seen from the starting type.
        """
        queue: list[tuple[str, list[str]]] = [(qualified_name, type_arguments or [])]
        seen: set[str] = set()
        while queue:
            current, args = queue.pop(0)
            if current in seen:
                continue
            seen.add(current)
            symbol = self.types.get(current)
            if symbol is None:
                continue
            mapping = dict(zip(symbol.type_parameters, args))
            yield symbol, mapping
            for base_text in symbol.base_types:
                base_name, base_args = CSharpAstUtils.split_type_arguments(base_text)
                resolved = self.resolve_type(base_name, symbol.file_context)
                if resolved is None:
                    continue
                queue.append(
                    (
                        resolved,
                        [
                            CSharpAstUtils.substitute_type_parameters(arg, mapping)
                            for arg in base_args
                        ],
                    )
                )

    def find_members(
        self, qualified_name: str, type_arguments: list[str], method_name: str
    ) -> list[MemberMatch]:
        """Find methods named ``method_name`` on a type and its base types.

        Parameter and return types are expressed in terms of the receiver's
        type arguments; identical signatures reached through several bases
        are reported once.
        """
        matches: list[MemberMatch] = []
        seen_signatures: set[tuple[str, ...]] = set()
        for symbol, mapping in self.walk_hierarchy(qualified_name, type_arguments):
            containing = _display_name(symbol, mapping)
            for method in symbol.methods:
                if method.name != method_name:
                    continue
                substituted = _substitute_method(method, mapping, containing)
                key = (
                    str(len(substituted.type_parameters)),
                    *substituted.parameter_types,
                )
                if key in seen_signatures:
                    continue
                seen_signatures.add(key)
                matches.append(MemberMatch(method=substituted, declared_in=symbol))
        return matches

    def find_methods(
        self, qualified_name: str, type_arguments: list[str], method_name: str
    ) -> list[MethodSymbol]:
        return [m.method for m in self.find_members(qualified_name, type_arguments, method_name)]

    def find_member_type(
        self, qualified_name: str, type_arguments: list[str], member_name: str
    ) -> tuple[str, TypeSymbol] | None:
        """Declared type of a field or property, with the declaring type."""
        for symbol, mapping in self.walk_hierarchy(qualified_name, type_arguments):
            if member_name in symbol.member_types:
                text = CSharpAstUtils.substitute_type_parameters(
                    symbol.member_types[member_name], mapping
                )
                return text, symbol
        return None


def _display_name(symbol: TypeSymbol, mapping: dict[str, str]) -> str:
    if not symbol.type_parameters:
        return symbol.qualified_name
    args = [mapping.get(p, p) for p in symbol.type_parameters]
    return f"{symbol.qualified_name}<{', '.join(args)}>"


def _substitute_method(
    method: MethodSymbol, mapping: dict[str, str], containing_type: str
) -> MethodSymbol:
    # method type parameters shadow the type's
    mapping = {k: v for k, v in mapping.items() if k not in method.type_parameters}
    sub = CSharpAstUtils.substitute_type_parameters
    return MethodSymbol(
        name=method.name,
        containing_type=containing_type,
        type_parameters=list(method.type_parameters),
        return_type=sub(method.return_type, mapping) if method.return_type else None,
        parameters=[
            ParameterSymbol(
                name=p.name,
                type_name=sub(p.type_name, mapping),
                is_optional=p.is_optional,
                is_params=p.is_params,
            )
            for p in method.parameters
        ],
    )
