"""Constants describing valid audit targets."""

from __future__ import annotations

from typing import Literal

type Device = Literal["mobile", "desktop"]

VALID_DEVICES: frozenset[str] = frozenset({"mobile", "desktop"})
DEFAULT_DEVICE: Device = "mobile"

VALID_CATEGORIES: frozenset[str] = frozenset({"performance", "accessibility", "best-practices", "seo"})
DEFAULT_CATEGORIES: tuple[str, ...] = ("performance",)

VALID_URL_SCHEMES: frozenset[str] = frozenset({"http", "https"})
