"""Integration tests for OverlaySession.

WHY: The session is where everything meets: detection, the adapter, the
channel, the sync loop, the renderers, and the vocabulary cache. These
tests check the lifecycle guarantees end to end: bounded startup,
full-replacement subtitle deliveries, and a teardown that releases
everything exactly once.

HOW: A Netflix session runs against the FakePage from conftest.py with
tiny timeouts and tick intervals, under asyncio.run(). Subtitles arrive
by publishing TTML on the session's channel, as a host would.

RULES:
- Unsupported sites and missing videos end INACTIVE, never raise.
- close() unsubscribes, restores native subtitles, and stops the loop.
"""

import asyncio

import pytest

from learning_overlay.adapters.base import HIDDEN_STYLE
from learning_overlay.channel import SubtitleMessage
from learning_overlay.config import DisplayMode, OverlayConfig
from learning_overlay.core.colors import KNOWN_COLOR
from learning_overlay.core.ir import Segment, VocabStatus
from learning_overlay.session import OverlaySession, SessionState
from learning_overlay.vocab.storage import LocalVocabStore

NETFLIX_URL = "https://www.netflix.com/watch/81234567"


@pytest.fixture
def make_session(page, tmp_path):
    def _make(url=NETFLIX_URL, **config):
        config.setdefault("target_language", "french")
        return OverlaySession(
            url,
            page,
            config=OverlayConfig(**config),
            store=LocalVocabStore(tmp_path),
            video_timeout=0.1,
            poll_interval=0.005,
            tick_interval=0.005,
        )

    return _make


@pytest.fixture
def player(page):
    """A ready Netflix player with a native subtitle layer."""
    container = page.add_element(".watch-video--player-view")
    video = page.add_video(parent=container, current_time=1.0)
    layer = page.add_element(".player-timedtext", style="color: white;")
    return video, layer


def _publish(session, data):
    session.channel.publish(SubtitleMessage(platform="netflix", data=data))


class TestStartup:

    def test_unsupported_site_is_inactive(self, make_session):
        session = make_session("https://example.com/video")
        assert asyncio.run(session.start()) is SessionState.INACTIVE
        assert session.controls is None
        session.close()
        assert session.state is SessionState.CLOSED

    def test_missing_video_times_out(self, make_session, page):
        session = make_session()
        assert asyncio.run(session.start()) is SessionState.INACTIVE
        assert session.channel.listener_count("netflix") == 0
        assert not session.sync.running

    def test_video_that_never_loads_times_out(self, make_session, page):
        page.add_video(ready_state=0)
        session = make_session()
        assert asyncio.run(session.start()) is SessionState.INACTIVE

    def test_close_during_video_wait(self, make_session):
        session = make_session()

        async def _run():
            task = asyncio.create_task(session.start())
            await asyncio.sleep(0.01)
            session.close()
            return await task

        assert asyncio.run(_run()) is SessionState.CLOSED

    def test_active_session(self, make_session, player):
        video, layer = player
        session = make_session()

        async def _run():
            state = await session.start()
            running = session.sync.running
            session.close()
            return state, running

        state, running = asyncio.run(_run())
        assert state is SessionState.ACTIVE
        assert running
        assert session.platform == "netflix"


class TestSubtitleFlow:

    def test_overlay_follows_playback(self, make_session, player, sample_ttml):
        video, layer = player
        session = make_session()

        async def _run():
            await session.start()
            assert session.channel.listener_count("netflix") == 1
            assert HIDDEN_STYLE in layer.style

            _publish(session, sample_ttml)
            first = session.overlay.current.text

            video.current_time = 3.5
            await asyncio.sleep(0.03)
            second = session.overlay.current.text

            video.current_time = 20.0
            await asyncio.sleep(0.03)
            third = session.overlay.current

            session.close()
            return first, second, third

        first, second, third = asyncio.run(_run())
        assert first == "Bonjour tout le monde"
        assert second == "Comment ça va ?"
        assert third is None

    def test_each_delivery_replaces_segments(self, make_session, player, sample_ttml):
        session = make_session()

        async def _run():
            await session.start()
            _publish(session, sample_ttml)
            session.channel.publish(SubtitleMessage(
                platform="netflix",
                data="1\n00:00:00,500 --> 00:00:01,500\nRemplacé\n",
                format="srt",
            ))
            texts = [s.text for s in session.segments]
            lines = len(session.transcript.lines)
            session.close()
            return texts, lines

        texts, lines = asyncio.run(_run())
        assert texts == ["Remplacé"]
        assert lines == 1

    def test_close_releases_everything(self, make_session, player, sample_ttml):
        video, layer = player
        session = make_session()

        async def _run():
            await session.start()
            _publish(session, sample_ttml)
            session.close()
            session.close()

        asyncio.run(_run())
        assert session.channel.listener_count("netflix") == 0
        assert layer.style == "color: white;"
        assert not session.sync.running
        assert session.overlay.current is None
        assert session.state is SessionState.CLOSED

    def test_native_layer_that_appears_later_is_hidden(self, make_session, page):
        page.add_video(current_time=1.0)
        session = make_session()

        async def _run():
            await session.start()
            layer = page.add_element(".player-timedtext", style="")
            await asyncio.sleep(0.03)
            hidden = HIDDEN_STYLE in layer.style
            session.close()
            return hidden, layer

        hidden, layer = asyncio.run(_run())
        assert hidden
        assert layer.style == ""


class TestDisplayModes:

    def test_transcript_mode(self, make_session, player, sample_ttml):
        session = make_session()

        async def _run():
            await session.start()
            _publish(session, sample_ttml)
            session.set_display_mode("transcript")
            result = (session.transcript.active_index, session.overlay.current, session.transcript.visible)
            session.close()
            return result

        active_index, overlay_current, visible = asyncio.run(_run())
        assert active_index == 0
        assert overlay_current is None
        assert visible

    def test_transcript_highlight_survives_redelivery(self, make_session, player, sample_ttml):
        session = make_session(display_mode="transcript")

        async def _run():
            await session.start()
            _publish(session, sample_ttml)
            before = session.transcript.active_index
            _publish(session, sample_ttml)
            await asyncio.sleep(0.03)
            after = session.transcript.active_index
            session.close()
            return before, after

        assert asyncio.run(_run()) == (0, 0)

    def test_off_mode_restores_native_subtitles(self, make_session, player, sample_ttml):
        video, layer = player
        session = make_session()

        async def _run():
            await session.start()
            _publish(session, sample_ttml)
            session.set_display_mode(DisplayMode.off)
            result = (layer.style, session.overlay.current, session.overlay.visible)
            session.set_display_mode("overlay")
            rehidden = HIDDEN_STYLE in layer.style
            session.close()
            return result, rehidden

        (style, overlay_current, visible), rehidden = asyncio.run(_run())
        assert style == "color: white;"
        assert overlay_current is None
        assert not visible
        assert rehidden

    def test_starting_in_off_mode_keeps_native_subtitles(self, make_session, player):
        video, layer = player
        session = make_session(display_mode="off")

        async def _run():
            await session.start()
            style = layer.style
            session.close()
            return style

        assert asyncio.run(_run()) == "color: white;"


class TestVocabulary:

    def test_status_edit_rerenders_and_persists(self, make_session, player, sample_ttml, tmp_path):
        session = make_session()

        async def _run():
            await session.start()
            _publish(session, sample_ttml)
            session.update_word_status("Bonjour", "known")
            colors = {
                t.token.normalized_text: t.color
                for t in session.overlay.tokens if t.token.is_word
            }
            session.close()
            return colors

        colors = asyncio.run(_run())
        assert colors["bonjour"] == KNOWN_COLOR
        assert colors["monde"] != KNOWN_COLOR
        assert LocalVocabStore(tmp_path).load("french")["bonjour"].status is VocabStatus.KNOWN

    def test_without_target_language(self, page):
        session = OverlaySession(NETFLIX_URL, page, config=OverlayConfig())
        assert session.cache is None
        assert session.update_word_status("bonjour", "known") is None
        assert session.get_word_status("bonjour") is VocabStatus.UNKNOWN

    def test_show_word_status_toggle(self, make_session, player, sample_ttml):
        session = make_session()

        async def _run():
            await session.start()
            _publish(session, sample_ttml)
            session.set_show_word_status(False)
            colors = {t.color for t in session.overlay.tokens if t.token.is_word}
            session.close()
            return colors

        assert asyncio.run(_run()) == {KNOWN_COLOR}

    def test_lookup_word_offline_is_unavailable(self, make_session):
        session = make_session()
        result = asyncio.run(session.lookup_word("Bonjour"))
        assert not result.available

    def test_delivery_outside_event_loop(self, make_session, caplog):
        session = make_session()
        session._on_segments([Segment(1.0, 2.0, "Bonjour")])
        assert [s.text for s in session.segments] == ["Bonjour"]
        assert "No running event loop" in caplog.text
