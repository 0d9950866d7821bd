"""
reqtraq.core.patterns - Requirement ID grammar and certdoc lookup tables.

Requirement IDs have the form:
    REQ-[project number]-[project abbreviation]-[SYS|SWH|SWL|HWH|HWL]-[serial]

for example REQ-0-DDLN-SWH-002. Certdoc file names have the form:
    [project number]-[project abbreviation]-[document number]-[document type]

for example 0-DDLN-100-ORD.lyx.
"""

import re
from typing import Dict, List

# Groups: project number, project abbreviation, requirement type, serial
REQ_ID_PATTERN = re.compile(r"REQ-(\d+)-(\w+)-(\w+)-(\d+)")

# Groups: project number, project abbreviation, document number, document type
CERTDOC_PATTERN = re.compile(r"(\d+)-(\w+)-(\d+)-(\w+)")

# Certdoc type -> type of the requirements it defines
FILE_TYPE_TO_REQ_TYPE: Dict[str, str] = {
    "ORD": "SYS",
    "SRD": "SWH",
    "HRD": "HWH",
    "SDD": "SWL",
    "HDD": "HWL",
}

# Requirement type -> "<document number>-<document type>" of the defining certdoc
DOC_NAME_PER_REQ_TYPE: Dict[str, str] = {
    "SYS": "100-ORD",
    "SWH": "211-SRD",
    "SWL": "212-SDD",
    "HWH": "311-HRD",
    "HWL": "312-HDD",
}

# Certdoc type -> document number
DOC_NAME_CONVENTIONS: Dict[str, str] = {
    "H": "0",
    "DS": "1",
    "SRS": "6",
    "SDS": "7",
    "SCS": "8",
    "HRS": "9",
    "HCS": "10",
    "DAS": "11",
    "HDS": "12",
    "HVVS": "13",
    "HAS": "14",
    "HCMS": "15",
    "TAS": "34",
    "ORD": "100",
    "SP": "150",
    "SFA": "151",
    "PSAC": "200",
    "SCMP": "201",
    "SQAP": "202",
    "SDP": "203",
    "SVP": "204",
    "TQP": "205",
    "SAS": "206",
    "SRD": "211",
    "SDD": "212",
    "SVCP": "213",
    "PHAK": "300",
    "HRD": "311",
    "HDD": "312",
    "CLPSAC": "101",
    "CLSDP": "102",
    "CLSVP": "103",
    "CLSCMP": "104",
    "CLSQAP": "105",
    "CLSDD": "107",
    "CLSRD": "106",
    "CLSVCP": "108",
    "CLSCI": "109",
    "CLTQP": "110",
    "CLSAS": "111",
    "TPPSAC": "201",
    "TPSRD": "206",
    "TPSDD": "207",
    "TPSVCP": "208",
    "TPHRD": "209",
    "TPORD": "210",
    "TPSFHA": "211",
    "TPFFPA": "212",
}


def find_req_ids(text: str) -> List[str]:
    """Return every requirement ID in text, left to right."""
    return [m.group(0) for m in REQ_ID_PATTERN.finditer(text)]


def req_type_of(req_id: str) -> str:
    """
    Extract the type segment from a requirement ID.

    For REQ-0-DDLN-SWL-001, returns "SWL". Returns "" when the ID does
    not follow the grammar.
    """
    match = REQ_ID_PATTERN.search(req_id)
    if match:
        return match.group(3)
    return ""
