"""Shared test fixtures for the learning_overlay test suite.

WHY: Parser, adapter, and session tests all need the same subtitle
payloads and a page to run adapters against. Centralizing them here keeps
every test module working from one authoritative sample.

HOW: Module-level constants hold the raw payloads (WebVTT, SRT, TTML).
FakePage / FakeElement / FakeVideo are in-memory stand-ins for the page
protocols in learning_overlay.adapters.base; fixtures hand out fresh
instances.

RULES:
- SAMPLE_SRT, SAMPLE_VTT_EQUIVALENT, and SAMPLE_TTML describe the same
  three cues and must parse to identical segments.
- SAMPLE_VTT is the two-cue file with a header, inline tags, and an SSA
  style code.
- The auth token env var is cleared for every test so nothing reaches
  a real backend.
"""

from typing import Dict, List, Optional

import pytest


# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------

SAMPLE_VTT = """WEBVTT
Kind: captions
Language: en

1
00:00:01.000 --> 00:00:03.500 align:start position:10%
<i>Hello</i>   there!

2
00:00:04.000 --> 00:00:06.000
{\\an8}General
Kenobi.
"""

SAMPLE_SRT = """1
00:00:01,000 --> 00:00:02,500
Bonjour <b>tout</b> le monde

2
00:00:03,000 --> 00:00:04,000
Comment ça va ?

3
00:00:05,250 --> 00:00:07,000
Très bien,
merci.
"""

SAMPLE_VTT_EQUIVALENT = """WEBVTT

00:00:01.000 --> 00:00:02.500
Bonjour <b>tout</b> le monde

00:00:03.000 --> 00:00:04.000
Comment ça va ?

00:00:05.250 --> 00:00:07.000
Très bien,
merci.
"""

SAMPLE_TTML = """<?xml version="1.0" encoding="UTF-8"?>
<tt xmlns="http://www.w3.org/ns/ttml" xmlns:ttp="http://www.w3.org/ns/ttml#parameter" ttp:tickRate="10000000">
  <body>
    <div>
      <p begin="10000000t" end="25000000t">Bonjour <span>tout</span> le monde</p>
      <p begin="00:00:03.000" end="00:00:04.000">Comment ça va ?</p>
      <p begin="5.25s" dur="1.75s">Très bien,<br/>merci.</p>
    </div>
  </body>
</tt>
"""

EXPECTED_FRENCH_SEGMENTS = [
    (1.0, 2.5, "Bonjour tout le monde"),
    (3.0, 4.0, "Comment ça va ?"),
    (5.25, 7.0, "Très bien, merci."),
]


# ---------------------------------------------------------------------------
# In-memory page
# ---------------------------------------------------------------------------


class FakeElement:
    """Element with inline style text, a parent, and attributes."""

    def __init__(
        self,
        style: str = "",
        parent: Optional["FakeElement"] = None,
        attributes: Optional[Dict[str, str]] = None,
    ) -> None:
        self.style = style
        self._parent = parent
        self.attributes = dict(attributes or {})

    @property
    def parent(self) -> Optional["FakeElement"]:
        return self._parent

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)


class FakeVideo(FakeElement):
    """Media element with a settable playback position."""

    def __init__(
        self,
        current_time: float = 0.0,
        duration: float = float("nan"),
        ready_state: int = 4,
        parent: Optional[FakeElement] = None,
    ) -> None:
        super().__init__(parent=parent)
        self.current_time = current_time
        self.playback_rate = 1.0
        self.duration = duration
        self.paused = True
        self.ready_state = ready_state

    def play(self) -> None:
        self.paused = False

    def pause(self) -> None:
        self.paused = True


class FakePage:
    """Selector -> elements map; an element is attached while it is in the map."""

    def __init__(self) -> None:
        self._elements: Dict[str, List[FakeElement]] = {}

    def add(self, selector: str, element: FakeElement) -> FakeElement:
        self._elements.setdefault(selector, []).append(element)
        return element

    def add_element(self, selector: str, **kwargs) -> FakeElement:
        return self.add(selector, FakeElement(**kwargs))

    def add_video(self, selector: str = "video", **kwargs) -> FakeVideo:
        video = FakeVideo(**kwargs)
        self.add(selector, video)
        return video

    def remove(self, element: FakeElement) -> None:
        for elements in self._elements.values():
            while element in elements:
                elements.remove(element)

    def query_selector(self, selector: str) -> Optional[FakeElement]:
        elements = self._elements.get(selector)
        return elements[0] if elements else None

    def query_selector_all(self, selector: str) -> List[FakeElement]:
        return list(self._elements.get(selector, []))

    def contains(self, element: FakeElement) -> bool:
        return any(element in elements for elements in self._elements.values())


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _no_auth_token(monkeypatch):
    """Keep every test offline regardless of the developer's .env."""
    monkeypatch.delenv("LEARNING_OVERLAY_AUTH_TOKEN", raising=False)


@pytest.fixture
def page():
    """An empty in-memory page."""
    return FakePage()


@pytest.fixture
def sample_vtt():
    return SAMPLE_VTT


@pytest.fixture
def sample_srt():
    return SAMPLE_SRT


@pytest.fixture
def sample_ttml():
    return SAMPLE_TTML


@pytest.fixture
def sample_vtt_equivalent():
    return SAMPLE_VTT_EQUIVALENT


@pytest.fixture
def expected_french_segments():
    """(start, end, text) triples shared by the SRT, VTT and TTML samples."""
    return list(EXPECTED_FRENCH_SEGMENTS)
