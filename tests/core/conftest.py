"""Fixtures for the pure resolution/execution modules."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from jiractl.types.core import UserDict

DirectoryFactory = Callable[[list[UserDict]], Callable[[str, str, int], list[UserDict]]]


@pytest.fixture
def directory() -> DirectoryFactory:
    """Build a directory search that returns a fixed result list and counts calls."""

    def _make(results: list[UserDict]) -> Callable[[str, str, int], list[UserDict]]:
        def search(query: str, project: str, max_results: int) -> list[UserDict]:
            search.calls.append(query)  # type: ignore[attr-defined]
            return list(results)

        search.calls = []  # type: ignore[attr-defined]
        return search

    return _make
