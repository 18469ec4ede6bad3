"""
Citation cleanup for grounding metadata.
"""

from typing import Any, Iterable, List, Optional

from .schemas import Source


def _field(candidate: Any, name: str) -> Any:
    if isinstance(candidate, dict):
        return candidate.get(name)
    return getattr(candidate, name, None)


def dedupe_sources(candidates: Optional[Iterable[Any]]) -> List[Source]:
    """
    Keep well-formed citations, first occurrence per uri, in original order.

    Candidates may be dicts or objects with uri/title attributes; entries with a
    missing or empty uri or title are dropped. Never raises.
    """
    sources: List[Source] = []
    seen = set()
    for candidate in candidates or []:
        uri = _field(candidate, "uri")
        title = _field(candidate, "title")
        if not isinstance(uri, str) or not isinstance(title, str) or not uri or not title:
            continue
        if uri in seen:
            continue
        seen.add(uri)
        sources.append(Source(uri=uri, title=title))
    return sources
