"""Locate the resource behind the largest visual paint."""

from __future__ import annotations

import re
from urllib.parse import urljoin

from perfaudit.analysis.report_access import as_dict, audit_items
from perfaudit.constants.analysis import PAINT_ELEMENT_AUDIT, SNIPPET_CSS_URL_PATTERN, SNIPPET_SRC_PATTERN
from perfaudit.model import PaintElement

_SRC_RE = re.compile(SNIPPET_SRC_PATTERN)
_CSS_URL_RE = re.compile(SNIPPET_CSS_URL_PATTERN)


def _base_url(report: object) -> str | None:
    data = as_dict(report)
    for key in ("finalUrl", "requestedUrl"):
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _url_from_snippet(snippet: str) -> str | None:
    for pattern in (_SRC_RE, _CSS_URL_RE):
        match = pattern.search(snippet)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def find_paint_resource_url(report: object) -> str | None:
    """Return the absolute URL of the paint element's resource, if any.

    An explicit ``url`` on the paint element wins. Otherwise an ``src=``
    attribute, then a CSS ``url(...)``, is pulled from the element snippet and
    resolved against the report's final URL.
    """
    items = audit_items(report, PAINT_ELEMENT_AUDIT)
    if not items:
        return None
    first = items[0]

    explicit = first.get("url")
    if isinstance(explicit, str) and explicit:
        return explicit

    snippet = as_dict(first.get("node")).get("snippet")
    if not isinstance(snippet, str):
        return None
    found = _url_from_snippet(snippet)
    if found is None:
        return None
    base = _base_url(report)
    return urljoin(base, found) if base else found


def find_paint_element(report: object) -> PaintElement | None:
    items = audit_items(report, PAINT_ELEMENT_AUDIT)
    if not items:
        return None
    node = as_dict(items[0].get("node"))
    if not node:
        return None
    selector = node.get("selector")
    label = node.get("nodeLabel")
    return PaintElement(
        selector=selector if isinstance(selector, str) else "",
        url=find_paint_resource_url(report),
        node_label=label if isinstance(label, str) else None,
    )
