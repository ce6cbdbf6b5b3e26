"""
Parser for the profile table printed by `ask init -l`.

Expected output (header row first, blank line last):

    Profile              Associated AWS Profile
    [default]            "my-aws"
    [dev]                ** NULL **
    [ci]                 __AWS_CREDENTIALS_IN_ENVIRONMENT_VARIABLE__

Each data row is turned into a ProfileRecord. Rows that do not look like
`[name] <value>` come back as ParseError values instead of raising, so one
odd line never hides the rest of the table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union


HEADER_FRAGMENT = "Associated AWS Profile"
NULL_AWS_PROFILE = "** NULL **"
ENVIRONMENT_VARIABLE_USED_FOR_AWS = "__AWS_CREDENTIALS_IN_ENVIRONMENT_VARIABLE__"
ENVIRONMENT_VARIABLE = "ENVIRONMENT VARIABLE"

_ROW_RE = re.compile(r"^\s*\[(?P<name>[^\[\]]*)\](?P<rest>.*)$")


@dataclass(frozen=True)
class ProfileRecord:
    profile_name: str
    cloud_credential_ref: Optional[str]


@dataclass(frozen=True)
class ParseError:
    raw_line: str
    reason: str


ParsedLine = Union[ProfileRecord, ParseError]


@dataclass
class ListingParse:
    records: List[ProfileRecord] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.errors)

    @property
    def row_count(self) -> int:
        return len(self.records) + len(self.errors)


def is_listing_row(line: str) -> bool:
    """False for blank lines and the column header, True for anything else."""
    if not line.strip():
        return False
    if HEADER_FRAGMENT in line:
        return False
    return True


def _credential_ref(rest: str) -> Optional[str]:
    if NULL_AWS_PROFILE in rest:
        return None
    if ENVIRONMENT_VARIABLE_USED_FOR_AWS in rest:
        return ENVIRONMENT_VARIABLE
    return rest.strip().replace('"', "")


def parse_profile_line(line: str) -> ParsedLine:
    m = _ROW_RE.match(line)
    if m is None:
        return ParseError(line, "expected '[profile]' at start of line")

    name = m.group("name").strip()
    rest = m.group("rest")
    if not name:
        return ParseError(line, "empty profile name")
    if "[" in rest or "]" in rest:
        return ParseError(line, "unexpected bracket after profile name")
    if not rest.strip():
        return ParseError(line, "missing AWS profile column")

    ref = _credential_ref(rest)
    if ref == "":
        return ParseError(line, "empty AWS profile value")
    return ProfileRecord(profile_name=name, cloud_credential_ref=ref)


def parse_listing(stdout: str) -> ListingParse:
    result = ListingParse()
    for raw in stdout.split("\n"):
        line = raw.rstrip("\r")
        if not is_listing_row(line):
            continue
        parsed = parse_profile_line(line)
        if isinstance(parsed, ParseError):
            result.errors.append(parsed)
        else:
            result.records.append(parsed)
    return result
