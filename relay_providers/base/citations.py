"""Citation extraction and post-processing helpers.

Vendors surface sources in two structurally different ways:

* a citations array on the response (Perplexity, Gemini grounding); the
  vendor adapter maps it to :class:`Citation` records itself;
* markdown links embedded in the generated text (OpenAI web search), which
  :func:`extract_markdown_citations` recovers after the fact.

The remaining helpers operate on :class:`Citation` lists regardless of where
they came from.
"""
from __future__ import annotations

import dataclasses
import re
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

from .models import Citation

_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\((https?://[^)]+)\)")
_CITATION_MARKER = re.compile(r"\[(\d+)\]")


def extract_domain(url: str) -> str:
    """Return the host of ``url`` without a leading ``www.`` (``url`` if unparsable)."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return url
    if not host:
        return url
    return host[4:] if host.startswith("www.") else host


def extract_markdown_citations(text: str) -> List[Citation]:
    """Collect ``[title](url)`` links from ``text``.

    Links are de-duplicated by URL and numbered from 1 in first-seen order.
    """
    citations: List[Citation] = []
    seen: set[str] = set()
    for match in _MARKDOWN_LINK.finditer(text or ""):
        title, url = match.group(1), match.group(2)
        if url in seen:
            continue
        seen.add(url)
        citations.append(Citation(index=len(citations) + 1, url=url, title=title))
    return citations


def build_citation_url_map(citations: Iterable[Citation]) -> Dict[int, str]:
    """Map citation index to URL."""
    return {c.index: c.url for c in citations}


def link_citation_markers(content: str, citations: Optional[List[Citation]]) -> str:
    """Rewrite ``[n]`` markers as ``[[n]](url)`` links for known citations.

    Markers without a matching citation are left untouched.
    """
    if not citations:
        return content
    urls = build_citation_url_map(citations)

    def _replace(match: re.Match[str]) -> str:
        url = urls.get(int(match.group(1)))
        return f"[[{match.group(1)}]]({url})" if url else match.group(0)

    return _CITATION_MARKER.sub(_replace, content)


def normalize_citations(citations: Iterable[Citation]) -> List[Citation]:
    """Return copies with ``domain`` filled in from the URL where missing."""
    return [c if c.domain else dataclasses.replace(c, domain=extract_domain(c.url)) for c in citations]


def find_citation_by_url(url: str, citations: Iterable[Citation]) -> Optional[Citation]:
    return next((c for c in citations if c.url == url), None)


__all__ = [
    "extract_domain",
    "extract_markdown_citations",
    "build_citation_url_map",
    "link_citation_markers",
    "normalize_citations",
    "find_citation_by_url",
]
