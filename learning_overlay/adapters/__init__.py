"""Platform adapter registry and detection.

WHY: A session decides once, from the page URL, which streaming source it
is on, and from then on talks only to that adapter through the
BaseAdapter interface. Shared code never branches on the platform.

HOW: PLATFORM_RULES is an ordered list of (platform, predicate) pairs
over the parsed URL. detect_platform() returns the first match.
ADAPTERS maps platform keys to adapter *classes*; get_adapter()
instantiates one for a page.

RULES:
- detect_platform is a pure function of the URL
- Rules are checked in order; the first match wins
- Amazon counts as Prime Video only when the path contains "video"
- Unknown platforms return None (the session stays inactive)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple, Type
from urllib.parse import urlsplit

from learning_overlay.adapters.binge import BingeAdapter
from learning_overlay.adapters.crunchyroll import CrunchyrollAdapter
from learning_overlay.adapters.disney_plus import DisneyPlusAdapter
from learning_overlay.adapters.hbo import HBOAdapter
from learning_overlay.adapters.netflix import NetflixAdapter
from learning_overlay.adapters.paramount_plus import ParamountPlusAdapter
from learning_overlay.adapters.prime_video import PrimeVideoAdapter
from learning_overlay.adapters.stan import StanAdapter

if TYPE_CHECKING:
    from learning_overlay.adapters.base import BaseAdapter, Page

ADAPTERS: Dict[str, Type[BaseAdapter]] = {
    cls.platform: cls
    for cls in (
        NetflixAdapter,
        HBOAdapter,
        PrimeVideoAdapter,
        DisneyPlusAdapter,
        ParamountPlusAdapter,
        BingeAdapter,
        StanAdapter,
        CrunchyrollAdapter,
    )
}

_HostRule = Callable[[str, str], bool]

PLATFORM_RULES: List[Tuple[str, _HostRule]] = [
    ("netflix", lambda host, path: "netflix.com" in host),
    ("hbo", lambda host, path: "hbomax.com" in host or "max.com" in host),
    ("prime", lambda host, path: "primevideo.com" in host or ("amazon." in host and "video" in path)),
    ("disney", lambda host, path: "disneyplus.com" in host),
    ("paramount", lambda host, path: "paramountplus.com" in host),
    ("binge", lambda host, path: "binge.com.au" in host),
    ("stan", lambda host, path: "stan.com.au" in host),
    ("crunchyroll", lambda host, path: "crunchyroll.com" in host),
]


def detect_platform(url: str) -> Optional[str]:
    """Return the platform key for a page URL, or None if unsupported."""
    parts = urlsplit(url if "//" in url else f"//{url}")
    host = (parts.hostname or "").lower()
    path = parts.path.lower()
    for platform, rule in PLATFORM_RULES:
        if rule(host, path):
            return platform
    return None


def get_adapter(platform: Optional[str], page: Page) -> Optional[BaseAdapter]:
    """Instantiate the adapter for platform, or None if there is none."""
    adapter_cls = ADAPTERS.get(platform or "")
    return adapter_cls(page) if adapter_cls else None


__all__ = ["ADAPTERS", "PLATFORM_RULES", "detect_platform", "get_adapter"]
