"""Tick-based MIDI timing constants.

The interchange format uses **480 ticks per quarter note** (PPQN = 480).
Generated patterns are expressed in grid **steps**; the codec turns a step
into ticks using the note-length subdivision chosen by the caller.
"""

TICKS_PER_BEAT = 480

MIDI_QUARTER_NOTE = TICKS_PER_BEAT
MIDI_EIGHTH_NOTE = TICKS_PER_BEAT // 2
MIDI_SIXTEENTH_NOTE = TICKS_PER_BEAT // 4
MIDI_THIRTYSECOND_NOTE = TICKS_PER_BEAT // 8
MIDI_SIXTYFOURTH_NOTE = TICKS_PER_BEAT // 16

# Grid step length for each note-length subdivision ("16n" = one step per sixteenth).
STEP_TICKS = {
	"4n": MIDI_QUARTER_NOTE,
	"8n": MIDI_EIGHTH_NOTE,
	"16n": MIDI_SIXTEENTH_NOTE,
	"32n": MIDI_THIRTYSECOND_NOTE,
	"64n": MIDI_SIXTYFOURTH_NOTE,
}

DEFAULT_NOTE_LENGTH = "16n"

# Sounding length of a grid note as a fraction of its step, leaving a gap before the next one.
DEFAULT_GATE = 0.8

# Controllers used to signal accent and slide to hardware receivers.
CC_ACCENT = 16
CC_SLIDE = 17
