"""
reqtraq.core.graph - Requirement graph.

A ReqGraph maps requirement IDs to Req records. Certdoc requirements are
keyed by their ID; code references are keyed by the referencing file
(optionally suffixed with "#anchor") and carry level CODE.

The graph has no locking: populate it from one writer, then query it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from reqtraq.core.models import Req, RequirementLevel
from reqtraq.errors import DuplicateIDError

logger = logging.getLogger(__name__)


def code_ref_key(path: str, anchor: str = "") -> str:
    """Graph key of a code reference."""
    if anchor:
        return f"{path}#{anchor}"
    return path


class ReqGraph(dict[str, Req]):
    """Mapping from requirement ID to requirement."""

    def add_req(self, req: Req, path: str) -> None:
        """Add a requirement found in the certdoc at path.

        Args:
            req: The requirement; its path is overwritten.
            path: Certdoc the requirement was parsed from.

        Raises:
            DuplicateIDError: If the ID is already in the graph. The
                existing requirement is kept.
        """
        if req.id in self:
            existing = self[req.id]
            raise DuplicateIDError(
                f"Requirement {req.id} in {path} already defined in {existing.path}"
            )
        req.path = path
        self[req.id] = req
        logger.debug("added %s from %s", req.id, path)

    def add_code_refs(self, id: str, path: str, anchor: str, referenced_ids: list[str]) -> Req:
        """Record that a source file references requirements.

        Repeated calls for the same file and anchor extend the existing
        record. Referenced IDs do not need to be in the graph yet.

        Args:
            id: Identifier of the code reference (usually the file path).
            path: Source file containing the references.
            anchor: Symbol within the file, or "" for the whole file.
            referenced_ids: Requirement IDs the code refers to.

        Returns:
            The CODE-level record.

        Raises:
            DuplicateIDError: If the key is held by a certdoc requirement.
        """
        key = code_ref_key(path, anchor)
        ref = self.get(key)
        if ref is None:
            ref = Req(id=id, level=RequirementLevel.CODE, path=path)
            self[key] = ref
        elif ref.level != RequirementLevel.CODE:
            raise DuplicateIDError(f"Code reference {key} collides with requirement {ref.id}")

        for req_id in referenced_ids:
            if req_id not in ref.parent_ids:
                ref.parent_ids.append(req_id)
        return ref

    def by_level(self, level: RequirementLevel) -> list[Req]:
        """Requirements of one level, ordered by file then position."""
        reqs = [r for r in self.values() if r.level == level]
        return sorted(reqs, key=lambda r: (r.path, r.position, r.id))

    def ords_by_position(self) -> Iterator[Req]:
        """Yield the SYSTEM requirements in order of position.

        Each call starts a new iteration over the current graph.
        """
        ords = [r for r in self.values() if r.level == RequirementLevel.SYSTEM]
        ords.sort(key=lambda r: (r.position, r.path, r.id))
        yield from ords

    def resolve(self) -> list[str]:
        """Link every requirement to its parents and children.

        Returns:
            One message per parent reference that is not in the graph.
        """
        for req in self.values():
            req.parents = []
            req.children = []

        errors: list[str] = []
        for key in sorted(self):
            req = self[key]
            for parent_id in req.parent_ids:
                parent = self.get(parent_id)
                if parent is None or parent.level == RequirementLevel.CODE:
                    if req.level == RequirementLevel.CODE:
                        errors.append(f"Invalid reference in {key}: {parent_id} does not exist")
                    else:
                        errors.append(f"Invalid parent of {req.id}: {parent_id} does not exist")
                    continue
                req.parents.append(parent)
                parent.children.append(req)
        return errors
