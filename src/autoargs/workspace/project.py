"""Project snapshots.

A Project is an immutable set of C# documents plus the names of the
external libraries the project references. Editing a document produces a
new Project; the old snapshot keeps working.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from autoargs.core.errors import DocumentNotFoundError
from autoargs.semantics.scanner import CSharpScanner
from autoargs.semantics.symbols import SymbolTable
from autoargs.workspace.document import Document

if TYPE_CHECKING:
    from autoargs.syntax.tree import SyntaxNode

logger = logging.getLogger(__name__)

# csproj items whose Include attribute names an external dependency
_REFERENCE_ITEMS = ("PackageReference", "Reference", "ProjectReference")


class Project:
    """Immutable snapshot of a C# project."""

    def __init__(
        self,
        sources: Mapping[str, str],
        references: Iterable[str] = (),
        name: str = "Project",
        _roots: Mapping[str, SyntaxNode] | None = None,
    ) -> None:
        """Initialize a project snapshot.

        Args:
            sources: Document text keyed by path.
            references: Display names of external dependencies (assemblies,
                packages) the project compiles against.
            name: Project name, used in log messages.
        """
        self.name = name
        self.references: tuple[str, ...] = tuple(references)
        self._documents: dict[str, Document] = {}
        for path in sorted(sources):
            document = Document(path, sources[path], self)
            if _roots and path in _roots:
                document._root = _roots[path]
            self._documents[path] = document
        self._symbol_table: SymbolTable | None = None

    @classmethod
    def from_sources(
        cls, sources: Mapping[str, str], references: Iterable[str] = (), name: str = "Project"
    ) -> Project:
        return cls(sources, references, name)

    @classmethod
    def from_directory(
        cls, source_path: Path, extra_references: Iterable[str] = ()
    ) -> Project:
        """Load every ``*.cs`` file under ``source_path``.

        References come from the ``*.csproj`` files found under the directory
        plus ``extra_references``.

        Args:
            source_path: Root directory of the project.
            extra_references: Additional reference names.

        Returns:
            Project snapshot of the directory.
        """
        source_path = Path(source_path).resolve()
        sources: dict[str, str] = {}
        for cs_file in sorted(source_path.rglob("*.cs")):
            if any(part in ("bin", "obj") for part in cs_file.relative_to(source_path).parts):
                continue
            try:
                sources[str(cs_file)] = cs_file.read_text(encoding="utf-8-sig")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to read {cs_file}: {e}")

        references: list[str] = []
        for project_file in sorted(source_path.rglob("*.csproj")):
            references.extend(references_from_project_file(project_file))
        references.extend(extra_references)

        logger.debug(
            f"Loaded {len(sources)} documents and {len(references)} references from {source_path}"
        )
        return cls(sources, dict.fromkeys(references), name=source_path.name)

    @property
    def documents(self) -> list[Document]:
        return list(self._documents.values())

    @property
    def document_paths(self) -> list[str]:
        return list(self._documents)

    def get_document(self, path: str) -> Document:
        """Return the document at ``path``.

        Raises:
            DocumentNotFoundError: If the project has no such document.
        """
        document = self._documents.get(str(path))
        if document is None:
            raise DocumentNotFoundError(str(path))
        return document

    def with_document_root(self, path: str, root: SyntaxNode) -> Project:
        """New snapshot where the document at ``path`` has syntax ``root``.

        Documents that did not change keep their parsed trees.
        """
        self.get_document(path)
        sources = {p: d.text for p, d in self._documents.items()}
        sources[path] = root.full_text
        roots = {p: d._root for p, d in self._documents.items() if d._root is not None}
        roots[path] = root
        return Project(sources, self.references, self.name, _roots=roots)

    def get_symbol_table(self) -> SymbolTable:
        """Declarations of all documents, built on first use."""
        if self._symbol_table is None:
            roots = {path: doc.parse() for path, doc in self._documents.items()}
            self._symbol_table = CSharpScanner().scan_documents(roots)
            logger.debug(
                f"Built symbol table for {self.name}: {len(self._symbol_table.types)} types"
            )
        return self._symbol_table


def references_from_project_file(project_file: Path) -> list[str]:
    """Reference names declared in an MSBuild project file.

    Reads the ``Include`` attribute of ``PackageReference``, ``Reference``
    and ``ProjectReference`` items. A file that cannot be parsed yields no
    references.
    """
    try:
        tree = ET.parse(project_file)
    except (ET.ParseError, OSError) as e:
        logger.warning(f"Failed to read project file {project_file}: {e}")
        return []

    names: list[str] = []
    for element in tree.iter():
        # SDK-style files have no namespace; legacy ones use the msbuild namespace
        tag = element.tag.rsplit("}", 1)[-1]
        if tag not in _REFERENCE_ITEMS:
            continue
        include = element.get("Include")
        if include:
            names.append(include.strip())
    return names
