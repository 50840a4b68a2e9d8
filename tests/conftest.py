"""Shared pytest fixtures for AutoArgs tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from autoargs.core.config import AutoArgsConfig
from autoargs.syntax.tree import TextSpan
from autoargs.workspace.document import Document
from autoargs.workspace.project import Project

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")

CARET = "$$"

ORDER_SERVICE = """\
namespace Shop.Services
{
    public interface IOrderService
    {
        void Place(int quantity, string sku);
        bool Cancel(int orderId);
        bool Cancel(int orderId, bool notify);
        int Count();
    }

    public class OrderRepository
    {
        public void Save(int id, string name) { }
    }
}
"""


@pytest.fixture
def config() -> AutoArgsConfig:
    """Default configuration, isolated from the environment and .env files."""
    return AutoArgsConfig(_env_file=None)


@pytest.fixture
def csharp_sample_path() -> Path:
    """Path to the C# sample solution."""
    return Path(__file__).parent / "fixtures" / "csharp_sample"


@pytest.fixture
def make_document() -> Callable[..., tuple[Document, TextSpan]]:
    """Build a one-project workspace from source marked with ``$$`` at the caret.

    Returns a function taking the marked source, optional extra documents
    and the project's references, and returning the marked document and
    the caret span.
    """

    def _make(
        source: str,
        extra_sources: Mapping[str, str] | None = None,
        references: Sequence[str] = ("NSubstitute",),
        path: str = "Tests.cs",
    ) -> tuple[Document, TextSpan]:
        position = source.index(CARET)
        text = source.replace(CARET, "", 1)
        sources = {path: text, **(extra_sources or {"Services.cs": ORDER_SERVICE})}
        project = Project.from_sources(sources, references)
        return project.get_document(path), TextSpan(position, 0)

    return _make
