"""
reqtraq.core - Requirement models, ID grammar and the requirement graph
"""

from reqtraq.core.models import Req, ReqFilter, RequirementLevel
from reqtraq.core.patterns import REQ_ID_PATTERN, find_req_ids, req_type_of
from reqtraq.core.graph import ReqGraph

__all__ = [
    "Req",
    "ReqFilter",
    "RequirementLevel",
    "REQ_ID_PATTERN",
    "find_req_ids",
    "req_type_of",
    "ReqGraph",
]
