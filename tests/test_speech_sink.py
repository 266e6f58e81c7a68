"""
Tests for the speech sink: formatting, duplicate window, repeat memory
and best-effort delivery.
"""

import pytest

from turnabout_access.speech import (
    Announcement,
    Category,
    NullCapability,
    SpeechSink,
    TextCleaner,
    format_text,
)
from turnabout_access.testing import RecordingSpeech


class TestFormatting:
    """Tests for announcement formatting."""

    def test_dialogue_with_speaker_is_prefixed(self):
        assert format_text("Phoenix", "Objection!", Category.DIALOGUE) == "Phoenix: Objection!"

    def test_dialogue_without_speaker_is_verbatim(self):
        assert format_text("", "Objection!", Category.DIALOGUE) == "Objection!"
        assert format_text("   ", "Objection!", Category.DIALOGUE) == "Objection!"

    @pytest.mark.parametrize("category", [c for c in Category if c != Category.DIALOGUE])
    def test_other_categories_ignore_speaker(self, category):
        assert format_text("Phoenix", "Hold it!", category) == "Hold it!"

    def test_cleaner_strips_markup_and_whitespace(self):
        text = "<color=#ff0000>Take</color>\n that!　 <b>Now</b>"
        assert TextCleaner.clean(text) == "Take that! Now"

    def test_cleaner_drops_control_characters(self):
        assert TextCleaner.clean("Zoom\x07 106%\x00") == "Zoom 106%"

    def test_announcement_text_property(self):
        announcement = Announcement("Hello", Category.DIALOGUE, speaker="Maya")
        assert announcement.text == "Maya: Hello"


class TestOutput:
    """Tests for SpeechSink.output."""

    def test_empty_body_is_noop(self, sink, speech):
        assert sink.output("Phoenix", "", Category.DIALOGUE) is False
        assert sink.output("Phoenix", "   ", Category.DIALOGUE) is False
        assert speech.call_count == 0
        assert sink.last_message is None

    def test_output_reaches_capability(self, sink, speech):
        assert sink.output("Phoenix", "Objection!", Category.DIALOGUE) is True
        assert speech.spoken == ["Phoenix: Objection!"]
        assert speech.calls[0].interrupt is False

    def test_last_message_recorded(self, sink, clock):
        sink.output("Maya", "Nick!", Category.DIALOGUE)
        assert sink.last_message.body == "Nick!"
        assert sink.last_message.speaker == "Maya"
        assert sink.last_message.category == Category.DIALOGUE
        assert sink.last_message.timestamp == clock.now
        assert sink.last_emit_time == clock.now

    def test_markup_only_body_is_noop(self, sink, speech):
        assert sink.announce("<color=#fff></color>") is False
        assert speech.call_count == 0


class TestDuplicateWindow:
    """Tests for duplicate suppression."""

    def test_identical_text_within_window_is_dropped(self, sink, speech, clock):
        sink.announce("Zoom 110%", Category.MENU)
        clock.advance(0.2)
        assert sink.announce("Zoom 110%", Category.MENU) is False
        assert speech.spoken == ["Zoom 110%"]

    def test_identical_text_after_window_is_emitted(self, sink, speech, clock):
        sink.announce("Zoom 110%", Category.MENU)
        clock.advance(0.5)
        assert sink.announce("Zoom 110%", Category.MENU) is True
        assert speech.spoken == ["Zoom 110%", "Zoom 110%"]

    def test_dropped_duplicate_does_not_extend_window(self, sink, speech, clock):
        sink.announce("Line drawn")
        first = sink.last_emit_time
        clock.advance(0.3)
        sink.announce("Line drawn")
        assert sink.last_emit_time == first
        clock.advance(0.3)
        # 0.6s after the emitted one, even though only 0.3s after the dropped one
        assert sink.announce("Line drawn") is True
        assert len(speech.spoken) == 2

    def test_different_text_is_never_dropped(self, sink, speech):
        sink.announce("Piece 1 of 8")
        sink.announce("Piece 2 of 8")
        sink.announce("Piece 1 of 8")
        assert speech.spoken == ["Piece 1 of 8", "Piece 2 of 8", "Piece 1 of 8"]

    def test_key_is_formatted_text(self, sink, speech):
        sink.output("Phoenix", "Hold it!", Category.DIALOGUE)
        sink.output("Edgeworth", "Hold it!", Category.DIALOGUE)
        assert len(speech.spoken) == 2

    def test_custom_window(self, speech, clock):
        sink = SpeechSink(speech, duplicate_window_s=0.0, clock=clock)
        sink.announce("Ready.")
        sink.announce("Ready.")
        assert speech.spoken == ["Ready.", "Ready."]


class TestRepeat:
    """Tests for the repeat buffer."""

    def test_repeat_with_nothing_buffered(self, sink, speech):
        assert sink.repeat_last() is False
        assert speech.call_count == 0

    def test_repeat_replays_dialogue(self, sink, speech):
        sink.output("Phoenix", "Objection!", Category.DIALOGUE)
        assert sink.repeat_last() is True
        assert speech.spoken == ["Phoenix: Objection!", "Phoenix: Objection!"]

    def test_repeat_bypasses_window(self, sink, speech, clock):
        sink.output(None, "The night of the murder.", Category.NARRATOR)
        sink.repeat_last()
        sink.repeat_last()
        assert len(speech.spoken) == 3

    @pytest.mark.parametrize("category", [
        Category.MENU, Category.SYSTEM_MESSAGE, Category.INVESTIGATION, Category.EVIDENCE,
    ])
    def test_status_announcements_do_not_replace_buffer(self, sink, speech, category):
        sink.output("Maya", "Nick, look!", Category.DIALOGUE)
        sink.announce("Zoom 106%", category)
        sink.repeat_last()
        assert speech.last == "Maya: Nick, look!"
        assert sink.repeat_buffer == ("Maya", "Nick, look!", Category.DIALOGUE)

    def test_narrator_replaces_dialogue(self, sink, speech):
        sink.output("Maya", "Nick!", Category.DIALOGUE)
        sink.output(None, "Later that day.", Category.NARRATOR)
        sink.repeat_last()
        assert speech.last == "Later that day."


class TestBestEffortDelivery:
    """Tests for speech unavailability handling."""

    def test_unavailable_capability_is_silent(self, clock, diagnostics):
        speech = RecordingSpeech(available=False)
        sink = SpeechSink(speech, clock=clock, diagnostics=diagnostics)
        assert sink.announce("Vase puzzle.") is True
        assert speech.call_count == 0
        # Formatting and memory still work
        assert sink.last_message.body == "Vase puzzle."

    def test_null_capability_never_raises(self, clock):
        sink = SpeechSink(NullCapability(), clock=clock)
        sink.output("Phoenix", "Objection!", Category.DIALOGUE)
        sink.repeat_last()
        sink.stop()

    def test_failing_capability_disabled_after_first_error(self, speech, clock, diagnostics):
        sink = SpeechSink(speech, clock=clock, diagnostics=diagnostics)
        speech.configure(fail=True)
        sink.announce("first")
        sink.announce("second")
        sink.announce("third")
        assert speech.call_count == 1
        assert len(diagnostics.records("speech")) == 1

    def test_transient_error_keeps_speech_on(self, speech, clock, diagnostics):
        sink = SpeechSink(speech, clock=clock, diagnostics=diagnostics)
        speech.configure(fail=True, error=OSError("client restarting"))
        assert sink.announce("first") is True
        speech.configure(fail=False)
        sink.announce("second")
        sink.announce("third")
        assert speech.spoken == ["second", "third"]
        assert [r.error_type for r in diagnostics.records("speech")] == ["OSError"]

    def test_repeated_transient_errors_reported_once(self, speech, clock, diagnostics):
        sink = SpeechSink(speech, clock=clock, diagnostics=diagnostics)
        speech.configure(fail=True, error=OSError("client restarting"))
        sink.announce("one")
        sink.announce("two")
        sink.announce("three")
        assert speech.call_count == 3
        assert len(diagnostics.records("speech")) == 1

        # A success ends the run; the next failure is reported again
        speech.configure(fail=False)
        sink.announce("four")
        speech.configure(fail=True)
        sink.announce("five")
        assert len(diagnostics.records("speech")) == 2

    def test_set_capability_re_enables(self, clock):
        broken = RecordingSpeech(fail=True)
        sink = SpeechSink(broken, clock=clock)
        sink.announce("lost")
        working = RecordingSpeech()
        sink.set_capability(working)
        sink.announce("heard")
        assert working.spoken == ["heard"]

    def test_speak_raw_interrupt(self, sink, speech):
        assert sink.speak_raw("Hotspot 1 of 3", interrupt=True) is True
        assert speech.calls[-1].interrupt is True

    def test_speak_raw_blank(self, sink, speech):
        assert sink.speak_raw("  ") is False
        assert speech.call_count == 0

    def test_stop_forwards(self, sink, speech):
        sink.stop()
        assert speech.calls[-1].method == "stop"
