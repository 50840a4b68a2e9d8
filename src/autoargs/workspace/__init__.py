"""Host workspace: projects, documents and cancellation."""

from autoargs.workspace.cancellation import CancellationToken
from autoargs.workspace.document import Document
from autoargs.workspace.project import Project, references_from_project_file

__all__ = [
    "CancellationToken",
    "Document",
    "Project",
    "references_from_project_file",
]
