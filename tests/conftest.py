import typing

import pytest

import melodyseq.midi_codec
import melodyseq.pattern


# A C minor phrase: sixteen sixteenth notes, each slightly shorter than its step.
PHRASE_PITCHES = [60, 62, 63, 65, 67, 65, 63, 62, 60, 67, 68, 70, 72, 70, 68, 67]


def make_sequence (pitches: typing.Sequence[int], step: int = 120, duration: int = 100, velocity: int = 100) -> melodyseq.pattern.NoteSequence:

	"""Build a monophonic sequence with evenly spaced notes."""

	notes = tuple(
		melodyseq.pattern.NoteEvent(position=i * step, pitch=pitch, velocity=velocity, duration=duration)
		for i, pitch in enumerate(pitches)
	)

	return melodyseq.pattern.NoteSequence(notes=notes)


@pytest.fixture
def sixteen_note_phrase () -> melodyseq.pattern.NoteSequence:

	"""The reference sixteen-note phrase as a sequence."""

	return make_sequence(PHRASE_PITCHES)


@pytest.fixture
def phrase_bytes (sixteen_note_phrase: melodyseq.pattern.NoteSequence) -> bytes:

	"""The reference phrase encoded as a MIDI file."""

	return melodyseq.midi_codec.encode(sixteen_note_phrase)
