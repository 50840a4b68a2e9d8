"""C# syntax helpers for the semantic layer.

This module provides utility functions for extracting declaration
information (names, namespaces, usings, parameters, type text) from
AutoArgs syntax nodes.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from autoargs.core.models import ParameterSymbol, TypeKind
from autoargs.syntax.tree import SyntaxNode

TYPE_DECLARATIONS: dict[str, TypeKind] = {
    "class_declaration": TypeKind.CLASS,
    "interface_declaration": TypeKind.INTERFACE,
    "struct_declaration": TypeKind.STRUCT,
    "record_declaration": TypeKind.RECORD,
    "record_struct_declaration": TypeKind.STRUCT,
    "enum_declaration": TypeKind.ENUM,
    "delegate_declaration": TypeKind.DELEGATE,
}

TYPE_NODE_KINDS = frozenset(
    {
        "predefined_type",
        "identifier",
        "generic_name",
        "qualified_name",
        "alias_qualified_name",
        "array_type",
        "nullable_type",
        "tuple_type",
        "pointer_type",
        "function_pointer_type",
        "ref_type",
        "scoped_type",
        "implicit_type",
    }
)

PARAMETER_KINDS = ("parameter", "parameter_array", "params_array")

_IDENTIFIER = re.compile(r"[A-Za-z_@][A-Za-z0-9_]*")


@dataclass(frozen=True)
class ParameterSyntax:
    """One declared parameter, located in its parameter list."""

    anchor: SyntaxNode
    type_node: SyntaxNode | None
    name: str | None
    is_params: bool
    is_optional: bool


class CSharpAstUtils:
    """C# syntax utility functions for AutoArgs syntax nodes."""

    @staticmethod
    def normalize_type_text(text: str) -> str:
        """Canonical display form of a type: no inner whitespace except after commas.

        ``Dictionary< string ,int >`` becomes ``Dictionary<string, int>``.
        """
        text = " ".join(text.split())
        text = re.sub(r"\s*([<>\[\]\.\?\*:])\s*", r"\1", text)
        text = re.sub(r"\s*,\s*", ", ", text)
        # rank specifiers keep their commas tight: int[,]
        return re.sub(r"\[[, ]*\]", lambda m: "[" + "," * m.group().count(",") + "]", text)

    @staticmethod
    def split_type_arguments(type_text: str) -> tuple[str, list[str]]:
        """Split ``Ns.Name<A, B<C>>`` into (``Ns.Name``, [``A``, ``B<C>``]).

        Array, nullable and tuple types are returned unchanged with no arguments.
        """
        text = CSharpAstUtils.normalize_type_text(type_text)
        open_pos = text.find("<")
        if open_pos < 0 or not text.endswith(">") or text.startswith("("):
            return text, []
        base = text[:open_pos]
        inner = text[open_pos + 1:-1]
        args: list[str] = []
        depth = 0
        current = ""
        for ch in inner:
            if ch in "<([":
                depth += 1
            elif ch in ">)]":
                depth -= 1
            if ch == "," and depth == 0:
                args.append(current.strip())
                current = ""
                continue
            current += ch
        if current.strip():
            args.append(current.strip())
        return base, args

    @staticmethod
    def substitute_type_parameters(type_text: str, mapping: dict[str, str]) -> str:
        """Replace whole-word type parameter names using ``mapping``."""
        if not mapping:
            return type_text
        return _IDENTIFIER.sub(lambda m: mapping.get(m.group(), m.group()), type_text)

    @staticmethod
    def get_type_text(type_node: SyntaxNode) -> str:
        return CSharpAstUtils.normalize_type_text(type_node.text)

    @staticmethod
    def get_name(node: SyntaxNode) -> str | None:
        """Declared name of a declaration node."""
        name_node = node.child_by_field_name("name")
        if name_node is None:
            for child in node.children:
                if child.kind == "identifier":
                    name_node = child
                    break
        if name_node is None:
            return None
        return name_node.text

    @staticmethod
    def get_body(node: SyntaxNode) -> SyntaxNode | None:
        body = node.child_by_field_name("body")
        if body is not None:
            return body
        for child in node.children:
            if child.kind == "declaration_list":
                return child
        return None

    @staticmethod
    def get_type_parameters(node: SyntaxNode) -> list[str]:
        """Names declared in a ``type_parameter_list`` child, in order."""
        names: list[str] = []
        for child in node.children:
            if child.kind != "type_parameter_list":
                continue
            for param in child.children:
                if param.kind != "type_parameter":
                    continue
                name = CSharpAstUtils.get_name(param)
                if name:
                    names.append(name)
        return names

    @staticmethod
    def get_base_types(node: SyntaxNode) -> list[str]:
        """Type texts listed after ``:`` in a type declaration."""
        bases: list[str] = []
        for child in node.children:
            if child.kind != "base_list":
                continue
            for base in child.named_children:
                if base.kind == "primary_constructor_base_type":
                    inner = base.named_children
                    if inner:
                        base = inner[0]
                bases.append(CSharpAstUtils.get_type_text(base))
        return bases

    @staticmethod
    def get_return_type(method_node: SyntaxNode) -> str | None:
        type_node = method_node.child_by_field_name("returns")
        if type_node is None:
            type_node = method_node.child_by_field_name("type")
        if type_node is None:
            return None
        text = CSharpAstUtils.get_type_text(type_node)
        return None if text == "void" else text

    @staticmethod
    def find_parameter_type_node(param_node: SyntaxNode) -> SyntaxNode | None:
        type_node = param_node.child_by_field_name("type")
        if type_node is not None:
            return type_node
        # no labelled type: the type is the named child right before the name
        name_node = param_node.child_by_field_name("name")
        previous: SyntaxNode | None = None
        for child in param_node.children:
            if child is name_node:
                return previous
            if child.kind in TYPE_NODE_KINDS:
                previous = child
        return None

    @staticmethod
    def find_parameter_list(callable_node: SyntaxNode) -> SyntaxNode | None:
        params_node = callable_node.child_by_field_name("parameters")
        if params_node is not None:
            return params_node
        for child in callable_node.children:
            if child.kind == "parameter_list":
                return child
        return None

    @staticmethod
    def iter_parameter_syntax(params_node: SyntaxNode) -> Iterator[ParameterSyntax]:
        """Walk a ``parameter_list`` in declaration order.

        Newer grammars leave a ``params`` parameter unwrapped: the ``params``
        token and its ``type``/``name`` fields sit directly in the list.
        """
        children = params_node.children
        index = 0
        while index < len(children):
            child = children[index]
            index += 1
            if child.kind in PARAMETER_KINDS:
                tokens = {c.text for c in child.children if not c.is_named}
                yield ParameterSyntax(
                    anchor=child,
                    type_node=CSharpAstUtils.find_parameter_type_node(child),
                    name=CSharpAstUtils.get_name(child),
                    is_params=child.kind != "parameter" or "params" in tokens or any(
                        c.kind == "modifier" and c.text == "params" for c in child.children
                    ),
                    is_optional="=" in tokens or any(
                        c.kind == "equals_value_clause" for c in child.children
                    ),
                )
                continue
            if child.text != "params":
                continue
            type_node: SyntaxNode | None = None
            name_node: SyntaxNode | None = None
            while index < len(children) and children[index].text not in (",", ")"):
                sibling = children[index]
                index += 1
                if sibling.field_name == "type":
                    type_node = sibling
                elif sibling.field_name == "name":
                    name_node = sibling
            yield ParameterSyntax(
                anchor=child,
                type_node=type_node,
                name=name_node.text if name_node is not None else None,
                is_params=True,
                is_optional=False,
            )

    @staticmethod
    def build_parameters(callable_node: SyntaxNode) -> list[ParameterSymbol]:
        """Parameters of a method, constructor, delegate or local function."""
        params_node = CSharpAstUtils.find_parameter_list(callable_node)
        if params_node is None:
            return []

        parameters: list[ParameterSymbol] = []
        for syntax in CSharpAstUtils.iter_parameter_syntax(params_node):
            if syntax.type_node is None or syntax.name is None:
                continue
            parameters.append(
                ParameterSymbol(
                    name=syntax.name,
                    type_name=CSharpAstUtils.get_type_text(syntax.type_node),
                    is_optional=syntax.is_optional,
                    is_params=syntax.is_params,
                )
            )
        return parameters

    @staticmethod
    def get_namespace(node: SyntaxNode) -> str:
        """Namespace enclosing ``node`` (block-scoped and file-scoped)."""
        parts: list[str] = []
        for ancestor in node.ancestors():
            if ancestor.kind in ("namespace_declaration", "file_scoped_namespace_declaration"):
                name_node = ancestor.child_by_field_name("name")
                if name_node is not None:
                    parts.append(name_node.text)
        # file-scoped namespaces may be siblings of the declarations they cover
        top = node
        while top.parent is not None and top.parent.parent is not None:
            top = top.parent
        if top.parent is not None and top.kind != "file_scoped_namespace_declaration":
            for sibling in top.parent.children[:top.index]:
                if sibling.kind == "file_scoped_namespace_declaration":
                    name_node = sibling.child_by_field_name("name")
                    if name_node is not None and name_node.text not in parts:
                        parts.append(name_node.text)
        return ".".join(reversed(parts))

    @staticmethod
    def extract_usings(root: SyntaxNode) -> tuple[list[str], dict[str, str]]:
        """Collect ``using`` namespaces and ``using Alias = Target`` aliases."""
        namespaces: list[str] = []
        aliases: dict[str, str] = {}
        for node in root.descendants():
            if node.kind != "using_directive":
                continue
            tokens = [c.text for c in node.children if not c.is_named]
            named = [c for c in node.children if c.is_named]
            if not named or "static" in tokens:
                continue
            if "=" in tokens and len(named) >= 2:
                aliases[named[0].text] = CSharpAstUtils.get_type_text(named[-1])
            else:
                namespaces.append(CSharpAstUtils.get_type_text(named[-1]))
        return namespaces, aliases

    @staticmethod
    def get_enclosing_type_name(node: SyntaxNode) -> str | None:
        """Qualified name of the innermost type declaration around ``node``."""
        names: list[str] = []
        declaration: SyntaxNode | None = None
        for ancestor in node.ancestors():
            if ancestor.kind in TYPE_DECLARATIONS:
                name = CSharpAstUtils.get_name(ancestor)
                if name:
                    names.append(name)
                    declaration = ancestor
        if declaration is None:
            return None
        namespace = CSharpAstUtils.get_namespace(declaration)
        qualified = ".".join(reversed(names))
        return f"{namespace}.{qualified}" if namespace else qualified
