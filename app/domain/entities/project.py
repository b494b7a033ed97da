"""Domain entity representing a planning project."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Project:
    """Project attributes consumed by the chat and notification features.

    A project has one lead, one formulator and any number of collaborators.
    The three associations may overlap.
    """

    id: int
    name: str
    lead_id: int | None = None
    formulator_id: int | None = None
    collaborator_ids: frozenset[int] = field(default_factory=frozenset)


__all__ = ["Project"]
