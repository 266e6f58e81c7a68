"""
Property-Based Tests - Invariants across random inputs.

Invariants tested:
    1. Cursor round trip - next then previous returns to the same index
    2. Cursor range - movement always lands inside [0, total)
    3. Segmenter determinism - identical input gives identical lines
    4. Segmenter coverage - lines cover the decoded text in order
    5. Duplicate window - identical text inside the window is spoken once
    6. Repeat - always speaks, regardless of the window
"""

from hypothesis import given, settings, strategies as st

from turnabout_access.language import Language
from turnabout_access.speech import Category, SpeechSink
from turnabout_access.testing import RecordingSpeech
from turnabout_access.text import decode_packed, segment, segment_lines
from turnabout_access.trackers import Cursor, rotation_hint


# =============================================================================
# Hypothesis Strategies
# =============================================================================

text_strategy = st.text(
    alphabet=st.characters(
        min_codepoint=0x21,
        max_codepoint=0x2FFF,
        blacklist_categories=("Zs", "Zl", "Zp", "Cc", "Cs"),
    ),
    min_size=0,
    max_size=200,
)

lengths_strategy = st.lists(st.integers(min_value=1, max_value=40), min_size=1, max_size=10)

noise_strategy = st.lists(st.integers(min_value=1, max_value=128), max_size=3)


def pack(text, noise):
    codes = []
    for ch in text:
        codes.extend(noise)
        codes.append(ord(ch) + 128)
    return codes + [0xFFFF, 0]


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


# =============================================================================
# Property Tests
# =============================================================================

class TestCursorProperties:
    """Properties of the wrapping navigation cursor."""

    @given(st.integers(min_value=1, max_value=50), st.integers(min_value=0, max_value=49))
    def test_next_then_previous_round_trip(self, total, start):
        cursor = Cursor(index=start % total, total=total)
        before = cursor.index
        cursor.next()
        cursor.previous()
        assert cursor.index == before

    @given(
        st.integers(min_value=1, max_value=30),
        st.lists(st.booleans(), max_size=60),
    )
    def test_always_in_range(self, total, moves):
        cursor = Cursor()
        cursor.clamp(total)
        for forward in moves:
            index = cursor.next() if forward else cursor.previous()
            assert 0 <= index < total

    @given(st.lists(st.booleans(), max_size=10))
    def test_empty_total_is_noop(self, moves):
        cursor = Cursor()
        cursor.clamp(0)
        for forward in moves:
            assert (cursor.next() if forward else cursor.previous()) is None
        assert cursor.index == -1


class TestSegmenterProperties:
    """Properties of decoding and segmentation."""

    @given(text_strategy, noise_strategy)
    def test_decode_ignores_control_codes(self, text, noise):
        assert decode_packed(pack(text, noise)) == text

    @given(text_strategy, noise_strategy, st.sampled_from(list(Language)), st.sampled_from([0, 1]))
    @settings(max_examples=200)
    def test_deterministic(self, text, noise, language, segment_set):
        codes = pack(text, noise)
        assert segment(codes, language, segment_set) == segment(list(codes), language, segment_set)

    @given(text_strategy, lengths_strategy)
    def test_lines_cover_text_in_order(self, text, lengths):
        lines = segment_lines(text, lengths)
        assert "".join(lines) == text
        for line, length in zip(lines, lengths):
            assert len(line) <= length

    @given(text_strategy, lengths_strategy)
    def test_at_most_one_extra_line(self, text, lengths):
        assert len(segment_lines(text, lengths)) <= len(lengths) + 1


class TestSpeechProperties:
    """Properties of the duplicate window and repeat."""

    @given(
        st.lists(
            st.tuples(st.sampled_from(["Zoom 106%", "Line drawn", "Piece 1 of 8"]),
                      st.floats(min_value=0.0, max_value=1.0)),
            max_size=30,
        )
    )
    def test_no_identical_pair_inside_window(self, events):
        clock = FakeClock()
        speech = RecordingSpeech()
        sink = SpeechSink(speech, clock=clock)
        emitted = []
        for text, gap in events:
            clock.now += gap
            if sink.announce(text, Category.MENU):
                emitted.append((text, clock.now))
        for (a, t1), (b, t2) in zip(emitted, emitted[1:]):
            if a == b:
                assert t2 - t1 >= 0.5
        assert speech.spoken == [text for text, _ in emitted]

    @given(st.integers(min_value=1, max_value=10))
    def test_repeat_always_speaks(self, times):
        speech = RecordingSpeech()
        sink = SpeechSink(speech, clock=FakeClock())
        sink.output("Phoenix", "Objection!", Category.DIALOGUE)
        for _ in range(times):
            assert sink.repeat_last() is True
        assert len(speech.spoken) == times + 1


class TestRotationProperties:
    """Properties of the rotation hint."""

    @given(st.integers(min_value=0, max_value=3))
    def test_hint_reaches_upright(self, rotation):
        action, presses = rotation_hint(rotation)
        if action == "decrement":
            assert (rotation - presses) % 4 == 0
        elif action == "increment":
            assert (rotation + presses) % 4 == 0
        else:
            assert rotation == 0
        assert presses <= 2
