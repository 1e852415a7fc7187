"""Shared pytest fixtures for scope-guard tests."""

from __future__ import annotations

from dataclasses import dataclass

import pytest


@dataclass
class Cell:
    """Mutable slot standing in for storage owned outside the guard."""

    value: int = 0


@pytest.fixture()
def cell() -> Cell:
    """Cell holding ``0``."""
    return Cell()


@pytest.fixture()
def calls() -> list[object]:
    """Recorder for cleanup invocations."""
    return []
