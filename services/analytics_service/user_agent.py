"""User-agent parsing for page-view analytics.

Good enough for dashboard breakdowns (browser, OS, device class); not a
full UA database. Rules are checked in order and the first match wins,
which is why Chrome-on-iOS and Edge are tested before plain Chrome.
"""

import re
from typing import NamedTuple, Optional

from services.events_service.slugs import is_uuid

# (name, pattern, substring that vetoes the rule)
_BROWSER_RULES = (
    ("Chrome", re.compile(r"CriOS/(\d+[.\d]*)"), None),
    ("Edge", re.compile(r"Edg/(\d+[.\d]*)"), None),
    ("Opera", re.compile(r"OPR/(\d+[.\d]*)"), None),
    ("Chrome", re.compile(r"Chrome/(\d+[.\d]*)"), "Edg"),
    ("Safari", re.compile(r"Version/(\d+[.\d]*).*Safari"), None),
    ("Firefox", re.compile(r"Firefox/(\d+[.\d]*)"), None),
)

_OS_RULES = (
    ("Windows", re.compile(r"Windows NT (\d+[.\d]*)"), None),
    ("macOS", re.compile(r"Mac OS X (\d+[_.\d]*)"), None),
    ("iOS", re.compile(r"iPhone OS (\d+[_.\d]*)"), None),
    ("iPadOS", re.compile(r"iPad.*OS (\d+[_.\d]*)"), None),
    ("Android", re.compile(r"Android (\d+[.\d]*)"), None),
    ("ChromeOS", re.compile(r"CrOS"), None),
    ("Linux", re.compile(r"Linux"), None),
)

_MOBILE_RE = re.compile(r"Mobile|iPhone|Android.*Mobile")
_TABLET_RE = re.compile(r"iPad|Android(?!.*Mobile)|Tablet")
_EVENT_PATH_RE = re.compile(r"/events/([^/]+)")


class ParsedUserAgent(NamedTuple):
    browser: str = "Unknown"
    browser_version: str = ""
    os: str = "Unknown"
    os_version: str = ""
    device_type: str = "desktop"


def _first_match(rules, ua: str) -> tuple[str, str]:
    for name, pattern, veto in rules:
        match = pattern.search(ua)
        if match is None or (veto and veto in ua):
            continue
        version = match.group(1) if pattern.groups else ""
        return name, version.replace("_", ".")
    return "Unknown", ""


def parse_user_agent(ua: Optional[str]) -> ParsedUserAgent:
    ua = ua or ""
    browser, browser_version = _first_match(_BROWSER_RULES, ua)
    os_name, os_version = _first_match(_OS_RULES, ua)

    if _MOBILE_RE.search(ua):
        device_type = "mobile"
    elif _TABLET_RE.search(ua):
        device_type = "tablet"
    else:
        device_type = "desktop"

    return ParsedUserAgent(browser, browser_version, os_name, os_version, device_type)


def resolve_event_id(path: Optional[str]) -> Optional[str]:
    """Event id from an ``/events/<uuid>/...`` path.

    Slug paths return None; the client sends event_id explicitly for those.
    """
    match = _EVENT_PATH_RE.search(path or "")
    if match and is_uuid(match.group(1)):
        return match.group(1)
    return None
