"""C# declaration scanner.

This module scans parsed C# documents to build a symbol table
containing every type declaration together with its methods,
fields and properties.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from autoargs.core.models import MethodSymbol
from autoargs.semantics.ast_utils import TYPE_DECLARATIONS, CSharpAstUtils
from autoargs.semantics.symbols import FileContext, SymbolTable, TypeSymbol
from autoargs.syntax.tree import SyntaxNode

logger = logging.getLogger(__name__)

_FIELD_DECLARATIONS = ("field_declaration", "event_field_declaration")


class CSharpScanner:
    """Scan C# documents to build a symbol table.

    Collects type and member declarations without looking at method bodies.
    """

    def scan_documents(self, roots: Mapping[str, SyntaxNode]) -> SymbolTable:
        """Scan all documents and build the symbol table.

        Args:
            roots: Parsed compilation units keyed by document path

        Returns:
            SymbolTable containing all declarations
        """
        symbol_table = SymbolTable()
        for path in sorted(roots):
            try:
                self.scan_document(roots[path], symbol_table)
            except Exception as e:
                logger.warning(f"Failed to scan {path}: {e}")
        return symbol_table

    def scan_document(self, root: SyntaxNode, symbol_table: SymbolTable) -> None:
        """Scan one compilation unit into ``symbol_table``."""
        usings, aliases = CSharpAstUtils.extract_usings(root)
        self._scan_declarations(root, "", usings, aliases, symbol_table)

    def _scan_declarations(
        self,
        node: SyntaxNode,
        namespace: str,
        usings: list[str],
        aliases: dict[str, str],
        symbol_table: SymbolTable,
        parent_type: TypeSymbol | None = None,
    ) -> None:
        """Recursively scan for namespace and type declarations.

        Args:
            node: Current syntax node
            namespace: Namespace the node's children are declared in
            usings: Document using directives
            aliases: Document using aliases
            symbol_table: Symbol table to populate
            parent_type: Enclosing type (for nested types)
        """
        for child in node.children:
            if child.kind == "namespace_declaration":
                name = CSharpAstUtils.get_name(child)
                body = CSharpAstUtils.get_body(child)
                if name is None or body is None:
                    continue
                nested = f"{namespace}.{name}" if namespace else name
                self._scan_declarations(body, nested, usings, aliases, symbol_table)

            elif child.kind == "file_scoped_namespace_declaration":
                name = CSharpAstUtils.get_name(child)
                if name is None:
                    continue
                namespace = f"{namespace}.{name}" if namespace else name
                # members may be nested in the declaration or follow it as siblings
                self._scan_declarations(child, namespace, usings, aliases, symbol_table)

            elif child.kind in TYPE_DECLARATIONS:
                self._scan_type(child, namespace, usings, aliases, symbol_table, parent_type)

            elif child.kind == "declaration_list":
                self._scan_declarations(
                    child, namespace, usings, aliases, symbol_table, parent_type
                )

    def _scan_type(
        self,
        node: SyntaxNode,
        namespace: str,
        usings: list[str],
        aliases: dict[str, str],
        symbol_table: SymbolTable,
        parent_type: TypeSymbol | None,
    ) -> None:
        name = CSharpAstUtils.get_name(node)
        if name is None:
            return

        if parent_type is not None:
            qualified_name = f"{parent_type.qualified_name}.{name}"
        elif namespace:
            qualified_name = f"{namespace}.{name}"
        else:
            qualified_name = name

        kind = TYPE_DECLARATIONS[node.kind]
        if node.kind == "record_declaration" and any(
            c.text == "struct" for c in node.children if not c.is_named
        ):
            kind = TYPE_DECLARATIONS["struct_declaration"]

        symbol = TypeSymbol(
            name=name,
            qualified_name=qualified_name,
            namespace=namespace,
            kind=kind,
            type_parameters=CSharpAstUtils.get_type_parameters(node),
            base_types=CSharpAstUtils.get_base_types(node),
            file_context=FileContext(namespace=namespace, usings=usings, aliases=aliases),
        )

        body = CSharpAstUtils.get_body(node)
        if body is not None:
            self._scan_members(body, symbol)
        symbol_table.add_type(symbol)

        if body is not None:
            self._scan_declarations(body, namespace, usings, aliases, symbol_table, symbol)

    def _scan_members(self, body: SyntaxNode, owner: TypeSymbol) -> None:
        """Collect methods, properties and fields declared directly in ``body``."""
        for child in body.children:
            if child.kind == "method_declaration":
                name = CSharpAstUtils.get_name(child)
                if name is None:
                    continue
                owner.methods.append(
                    MethodSymbol(
                        name=name,
                        containing_type=owner.qualified_name,
                        parameters=CSharpAstUtils.build_parameters(child),
                        type_parameters=CSharpAstUtils.get_type_parameters(child),
                        return_type=CSharpAstUtils.get_return_type(child),
                    )
                )

            elif child.kind in ("property_declaration", "event_declaration"):
                name = CSharpAstUtils.get_name(child)
                type_node = child.child_by_field_name("type")
                if name and type_node is not None:
                    owner.member_types[name] = CSharpAstUtils.get_type_text(type_node)

            elif child.kind in _FIELD_DECLARATIONS:
                for declaration in child.children:
                    if declaration.kind != "variable_declaration":
                        continue
                    type_node = declaration.child_by_field_name("type")
                    if type_node is None:
                        continue
                    type_text = CSharpAstUtils.get_type_text(type_node)
                    for declarator in declaration.children:
                        if declarator.kind != "variable_declarator":
                            continue
                        name = CSharpAstUtils.get_name(declarator)
                        if name:
                            owner.member_types[name] = type_text
