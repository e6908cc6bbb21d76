# selector/schemas.py
import json
import re
from typing import List

from pydantic import BaseModel

# Markers are drawn 100px wide; shift each pick so the marker centres on it
MARKER_OFFSET = 50

_INT_RE = re.compile(r"[+-]?[0-9]+")


class MalformedPickError(ValueError):
    pass


class Coordinate(BaseModel):
    x: int
    y: int


class AnnotatePage(BaseModel):
    image: str


class ViewPage(BaseModel):
    image: str
    coordinates: List[Coordinate] = []
    annotated: bool = False


def atoi(text: str) -> int:
    """Parse a base-10 integer; anything that isn't one parses as 0."""
    if _INT_RE.fullmatch(text):
        return int(text)
    return 0


def parse_pick(pick: str) -> Coordinate:
    fields = pick.split(",")
    if len(fields) < 2:
        raise MalformedPickError(f"pick has no y field: {pick!r}")
    return Coordinate(x=atoi(fields[0]) - MARKER_OFFSET, y=atoi(fields[1]) - MARKER_OFFSET)


def encode_picks(picks: List[str]) -> bytes:
    return json.dumps(picks, separators=(",", ":")).encode("utf-8")


def decode_picks(raw: bytes) -> List[str]:
    """Decode a stored annotation record into its list of pick strings."""
    picks = json.loads(raw)
    if picks is None:
        return []
    if not isinstance(picks, list) or not all(isinstance(p, str) for p in picks):
        raise ValueError("annotation record is not a JSON array of strings")
    return picks
