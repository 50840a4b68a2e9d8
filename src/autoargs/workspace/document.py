"""Documents of a project snapshot."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from autoargs.semantics.model import SemanticModel
from autoargs.syntax.parser import parse_compilation_unit
from autoargs.workspace.cancellation import CancellationToken

if TYPE_CHECKING:
    from autoargs.syntax.tree import SyntaxNode
    from autoargs.workspace.project import Project

logger = logging.getLogger(__name__)


class Document:
    """One C# source file inside a Project snapshot.

    The syntax tree and semantic model are computed on first request and
    cached for the lifetime of the snapshot.
    """

    def __init__(self, path: str, text: str, project: Project) -> None:
        self.path = path
        self.text = text
        self.project = project
        self._root: SyntaxNode | None = None
        self._semantic_model: SemanticModel | None = None

    def __repr__(self) -> str:
        return f"<Document {self.path}>"

    def parse(self) -> SyntaxNode:
        if self._root is None:
            self._root = parse_compilation_unit(self.text)
        return self._root

    async def get_syntax_root(
        self, cancellation_token: CancellationToken | None = None
    ) -> SyntaxNode:
        """Return the document's compilation unit.

        Raises:
            OperationCancelledError: If the token is cancelled.
        """
        token = cancellation_token or CancellationToken.none()
        token.throw_if_cancellation_requested()
        if self._root is None:
            # parsing is CPU-bound; yield once so a caller's cancel can land first
            await asyncio.sleep(0)
            token.throw_if_cancellation_requested()
        return self.parse()

    async def get_semantic_model(
        self, cancellation_token: CancellationToken | None = None
    ) -> SemanticModel:
        """Return the type-resolution service for this document.

        Raises:
            OperationCancelledError: If the token is cancelled.
        """
        token = cancellation_token or CancellationToken.none()
        token.throw_if_cancellation_requested()
        if self._semantic_model is None:
            root = await self.get_syntax_root(token)
            symbol_table = self.project.get_symbol_table()
            token.throw_if_cancellation_requested()
            self._semantic_model = SemanticModel(root, symbol_table, self.project.references)
        return self._semantic_model

    def with_syntax_root(self, root: SyntaxNode) -> Document:
        """Return the same document in a new project snapshot with ``root`` as its tree."""
        logger.debug(f"Updating syntax root of {self.path}")
        return self.project.with_document_root(self.path, root).get_document(self.path)
