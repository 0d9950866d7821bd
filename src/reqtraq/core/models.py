"""
reqtraq.core.models - Core data models for requirements.

Provides dataclasses for representing requirements, requirement levels
and the filters used to select requirements from a graph.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Pattern

from reqtraq.core.patterns import req_type_of

DELETED_MARKER = "DELETED"


class RequirementLevel(Enum):
    """Document level a requirement belongs to, from the top down."""

    SYSTEM = "system"
    HIGH = "high"
    LOW = "low"
    CODE = "code"

    @classmethod
    def for_req_type(cls, req_type: str) -> Optional["RequirementLevel"]:
        """Map a requirement type code (SYS, SWH, ...) to its level."""
        return REQ_TYPE_TO_LEVEL.get(req_type)


REQ_TYPE_TO_LEVEL: Dict[str, RequirementLevel] = {
    "SYS": RequirementLevel.SYSTEM,
    "SWH": RequirementLevel.HIGH,
    "HWH": RequirementLevel.HIGH,
    "SWL": RequirementLevel.LOW,
    "HWL": RequirementLevel.LOW,
}


@dataclass
class ReqFilter:
    """
    Independent regular expression filters over a requirement.

    A filter that is None always matches. Patterns are searched, not
    anchored, so "thrust" matches anywhere in the field.

    Attributes:
        id_filter: Pattern searched in the requirement ID
        title_filter: Pattern searched in the title
        body_filter: Pattern searched in the body
    """

    id_filter: Optional[Pattern[str]] = None
    title_filter: Optional[Pattern[str]] = None
    body_filter: Optional[Pattern[str]] = None

    @classmethod
    def from_strings(
        cls, id: Optional[str] = None, title: Optional[str] = None, body: Optional[str] = None
    ) -> "ReqFilter":
        """Compile a filter from pattern strings, skipping empty ones."""
        return cls(
            id_filter=re.compile(id) if id else None,
            title_filter=re.compile(title) if title else None,
            body_filter=re.compile(body) if body else None,
        )

    def is_empty(self) -> bool:
        return self.id_filter is None and self.title_filter is None and self.body_filter is None


@dataclass
class Req:
    """
    Represents one parsed requirement, or a code reference.

    Attributes:
        id: Unique requirement identifier (e.g., "REQ-0-DDLN-SWH-001")
        title: Requirement title
        body: Free text of the requirement
        level: Document level (SYSTEM, HIGH, LOW, CODE)
        path: Certdoc or source file the requirement was found in
        position: Zero-based order of appearance within its file
        parent_ids: IDs of the requirements this one derives from
        attributes: Named fields such as RATIONALE or VERIFICATION
        parents: Resolved parent requirements (filled by ReqGraph.resolve)
        children: Resolved child requirements (filled by ReqGraph.resolve)
    """

    id: str
    title: str = ""
    body: str = ""
    level: Optional[RequirementLevel] = None
    path: str = ""
    position: int = 0
    parent_ids: List[str] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
    parents: List["Req"] = field(default_factory=list, compare=False, repr=False)
    children: List["Req"] = field(default_factory=list, compare=False, repr=False)

    def req_type(self) -> str:
        """
        Extract the type code from the requirement ID.

        For REQ-0-DDLN-SWL-001, returns "SWL". Malformed IDs return "".
        """
        return req_type_of(self.id)

    def is_deleted(self) -> bool:
        """Deleted requirements stay in the graph, marked in their title."""
        return DELETED_MARKER in self.title

    def matches(self, filter: ReqFilter, diffs: Optional[Dict[str, List[str]]]) -> bool:
        """
        Check the requirement against a filter and an optional diff set.

        Args:
            filter: Regular expression filters; absent filters always match
            diffs: Mapping of changed requirement ID to changed fields, or
                None to ignore changes

        Returns:
            True if every present filter matches and, when diffs is given,
            the requirement ID is one of its keys
        """
        if filter.id_filter is not None and not filter.id_filter.search(self.id):
            return False
        if filter.title_filter is not None and not filter.title_filter.search(self.title):
            return False
        if filter.body_filter is not None and not filter.body_filter.search(self.body):
            return False
        if diffs is not None:
            return self.id in diffs
        return True

    def __str__(self) -> str:
        return f"{self.id}: {self.title}"
