"""Tests for AsciiSession, the tick-driven animation driver."""

import numpy as np
import pytest

from ascii_ripple.config import ConfigurationError, RainConfig, RenderOptions
from ascii_ripple.ripple import RippleState, ripple_state
from ascii_ripple.session import AsciiSession


@pytest.fixture
def session(two_char_lookup, rng):
    return AsciiSession(render_options=RenderOptions(enable_directional_contrast=False),
                        rain_config=RainConfig(intensity=4, variation=0.2),
                        lookup=two_char_lookup, rng=rng)


@pytest.fixture
def black_buffer():
    return np.zeros((24, 36, 3), dtype=np.uint8)


class TestClick:

    def test_single_ripple(self, session):
        burst = session.click(10, 20, now=100)
        assert len(burst) == 1
        assert session.ripples == burst

    def test_cascade(self, two_char_lookup):
        session = AsciiSession(ripple_count=3, ripple_config={"duration": 500},
                               lookup=two_char_lookup)
        burst = session.click(0, 0, now=0)
        assert [r.start_time for r in burst] == [0, 200, 400]
        assert all(r.config.duration == 500 for r in burst)

    def test_clicks_ignore_cap(self, two_char_lookup):
        session = AsciiSession(max_ripples=1, ripple_count=3, lookup=two_char_lookup)
        session.click(0, 0, now=0)
        assert len(session.ripples) == 3

    def test_invalid_ripple_count(self):
        with pytest.raises(ConfigurationError):
            AsciiSession(ripple_count=0)


class TestMouseMove:

    def test_throttled(self, session):
        assert session.mouse_move(1, 1, now=0) is not None
        assert session.mouse_move(2, 2, now=30) is None
        assert session.mouse_move(3, 3, now=60) is not None
        assert len(session.ripples) == 2

    def test_uses_mouse_config(self, session):
        ripple = session.mouse_move(1, 1, now=0)
        assert ripple.config.duration == 1000
        assert ripple.config.amplitude == 0.25

    def test_respects_cap(self, two_char_lookup):
        session = AsciiSession(max_ripples=1, lookup=two_char_lookup)
        session.click(0, 0, now=0)
        assert session.mouse_move(5, 5, now=100) is None
        assert len(session.ripples) == 1


class TestRain:

    def test_disabled_by_default(self, session):
        assert session.spawn_rain(100, 100, now=1000) == []
        assert not session.rain_enabled

    def test_first_drop_immediate_then_interval(self, session):
        session.set_rain(True, now=0)
        assert len(session.spawn_rain(100, 100, now=0)) == 1
        assert session.spawn_rain(100, 100, now=200) == []
        later = session.spawn_rain(100, 100, now=760)
        # intensity 4 -> drops due at 250, 500, 750
        assert [d.start_time for d in later] == [250, 500, 750]

    def test_drops_inside_area(self, session):
        session.set_rain(True, now=0)
        for drop in session.spawn_rain(30, 40, now=5000):
            assert 0 <= drop.origin_x < 30
            assert 0 <= drop.origin_y < 40

    def test_cap_skips_drops(self, two_char_lookup, rng):
        session = AsciiSession(max_ripples=2, rain_config={"intensity": 10},
                               lookup=two_char_lookup, rng=rng)
        session.set_rain(True, now=0)
        session.spawn_rain(100, 100, now=1000)
        assert len(session.ripples) == 2

    def test_disable_stops_spawning(self, session):
        session.set_rain(True, now=0)
        session.spawn_rain(100, 100, now=0)
        session.set_rain(False, now=10)
        assert session.spawn_rain(100, 100, now=5000) == []

    def test_rain_survives_long_gap(self, two_char_lookup, rng, black_buffer):
        session = AsciiSession(rain_config=RainConfig(intensity=3, variation=0),
                               lookup=two_char_lookup, rng=rng)
        session.set_rain(True, now=0)
        session.tick(black_buffer, now=0)
        session.tick(black_buffer, now=60_000)
        assert session.ripples
        assert all(58_000 <= d.start_time <= 60_000 for d in session.ripples)
        assert all(ripple_state(d, 60_000) is RippleState.ACTIVE for d in session.ripples)

    def test_expired_ripples_free_the_cap(self, two_char_lookup, rng):
        session = AsciiSession(max_ripples=1, rain_config=RainConfig(intensity=1, variation=0),
                               lookup=two_char_lookup, rng=rng)
        session.click(0, 0, now=0)
        session.set_rain(True, now=3000)
        spawned = session.spawn_rain(100, 100, now=3000)
        assert len(spawned) == 1
        assert session.ripples == spawned

    def test_seeded_sessions_repeat(self, two_char_lookup):
        runs = []
        for _ in range(2):
            s = AsciiSession(lookup=two_char_lookup, rng=np.random.default_rng(5))
            s.set_rain(True, now=0)
            runs.append(s.spawn_rain(100, 100, now=2000))
        assert runs[0] == runs[1]


class TestTick:

    def test_static_frame(self, session, black_buffer):
        frame = session.tick(black_buffer, now=0)
        assert (frame.cols, frame.rows) == (6, 2)
        assert frame.to_text() == "      \n      "

    def test_prunes_expired(self, session, black_buffer):
        session.click(0, 0, now=0)
        session.tick(black_buffer, now=1000)
        assert len(session.ripples) == 1
        session.tick(black_buffer, now=2001)
        assert session.ripples == []

    def test_keeps_pending(self, session, black_buffer):
        session.click(0, 0, now=500)
        session.tick(black_buffer, now=0)
        assert len(session.ripples) == 1

    def test_ripple_shows_in_frame(self, black_buffer, two_char_lookup):
        session = AsciiSession(ripple_config={"amplitude": 1.0},
                               render_options=RenderOptions(enable_directional_contrast=False),
                               lookup=two_char_lookup)
        session.click(3, 6, now=0)
        frame = session.tick(black_buffer, now=0)
        assert frame.chars[0][0] == "#"
        assert frame.chars[1][5] == " "

    def test_tick_spawns_rain(self, session, black_buffer):
        session.set_rain(True, now=0)
        session.tick(black_buffer, now=0)
        assert len(session.ripples) == 1
        drop = session.ripples[0]
        assert 0 <= drop.origin_x < 36
        assert 0 <= drop.origin_y < 24

    def test_is_animating(self, session, black_buffer):
        assert not session.is_animating(0)
        session.click(0, 0, now=0)
        assert session.is_animating(1000)
        assert not session.is_animating(2001)
        session.set_rain(True, now=3000)
        assert session.is_animating(3000)

    def test_tick_canvas(self, session):
        frame = session.tick_canvas(4, 2, now=0, base_vector=[1.0] * 6)
        assert frame.lines() == ["####", "####"]
