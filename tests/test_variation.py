import math
import unittest

import pytest

import melodyseq
import melodyseq.exceptions
import melodyseq.midi_codec
import melodyseq.pattern
import melodyseq.scales
import melodyseq.seeded_random
import melodyseq.variation


def test_two_transpositions_an_octave_apart (phrase_bytes: bytes) -> None:

	"""Transpositions 0 and 12 give two streams, the second an octave higher."""

	streams = melodyseq.vary(phrase_bytes, melodyseq.VariationOptions(transpositions=(0, 12)))

	assert len(streams) == 2

	low, high = (melodyseq.midi_codec.decode(data) for data in streams)

	assert min(n.note_number for n in high.notes) == min(n.note_number for n in low.notes) + 12


def test_untouched_variant_matches_source (phrase_bytes: bytes) -> None:

	"""With every stage disabled the variant re-encodes to the same bytes."""

	assert melodyseq.vary(phrase_bytes, melodyseq.VariationOptions()) == [phrase_bytes]


def test_seeded_humanize_is_reproducible (phrase_bytes: bytes) -> None:

	options = melodyseq.VariationOptions(transpositions=(0, 7), humanize_ms=20, swing_amount=0.3, seed=5)

	assert melodyseq.vary(phrase_bytes, options) == melodyseq.vary(phrase_bytes, options)


def test_transposition_round_trip (sixteen_note_phrase: melodyseq.pattern.NoteSequence) -> None:

	"""Transposing up then down restores the pitches."""

	notes = list(sixteen_note_phrase.notes)
	restored = melodyseq.variation.transpose(melodyseq.variation.transpose(notes, 5), -5)

	assert [n.note_number for n in restored] == [n.note_number for n in notes]


def test_transpose_clamps_to_midi_range () -> None:

	notes = [melodyseq.pattern.NoteEvent(position=0, pitch=120)]

	assert melodyseq.variation.transpose(notes, 12)[0].note_number == 127


def test_retrograde_involution (sixteen_note_phrase: melodyseq.pattern.NoteSequence) -> None:

	"""Reversing twice restores onsets when every note has the same length."""

	notes = list(sixteen_note_phrase.notes)
	twice = melodyseq.variation.retrograde(melodyseq.variation.retrograde(notes))

	assert [n.position for n in twice] == pytest.approx([n.position for n in notes])
	assert [n.note_number for n in twice] == [n.note_number for n in notes]


def test_retrograde_reverses_order (sixteen_note_phrase: melodyseq.pattern.NoteSequence) -> None:

	reversed_notes = melodyseq.variation.retrograde(sixteen_note_phrase.notes)

	assert [n.note_number for n in reversed_notes] == list(reversed([n.note_number for n in sixteen_note_phrase.notes]))
	assert reversed_notes[0].position == 0


def test_invert_mirrors_around_root () -> None:

	"""Root C, first note E4: the axis is C4, so E4 becomes G#3 and G4 becomes F3."""

	notes = [melodyseq.pattern.NoteEvent(position=0, pitch=64), melodyseq.pattern.NoteEvent(position=120, pitch=67)]

	assert [n.note_number for n in melodyseq.variation.invert(notes, "C")] == [56, 53]


def test_quantize_keeps_scale (sixteen_note_phrase: melodyseq.pattern.NoteSequence) -> None:

	shifted = melodyseq.variation.transpose(sixteen_note_phrase.notes, 1)
	quantized = melodyseq.variation.quantize(shifted, "C", "minor")
	formula = {0, 2, 3, 5, 7, 8, 10}

	assert all(n.note_number % 12 in formula for n in quantized)


class HumanizeTests (unittest.TestCase):

	"""
	Tests for timing and velocity jitter.
	"""

	def test_bounds (self) -> None:

		"""
		Onsets stay near their origin, never negative, and velocities stay valid.
		"""

		notes = [melodyseq.pattern.NoteEvent(position=i * 120, pitch=60, velocity=127 if i % 2 else 1, duration=100) for i in range(32)]
		rng = melodyseq.seeded_random.SeededRandom(3)

		# 30 ms at 120 BPM and 480 ticks per beat is 28.8 ticks of spread.
		result = melodyseq.variation.humanize(notes, 30, rng, 480, 120)

		for before, after in zip(notes, result):
			self.assertGreaterEqual(after.position, 0)
			self.assertLessEqual(abs(after.position - before.position), 14.4 + 1e-9)
			self.assertTrue(1 <= after.velocity <= 127)
			self.assertGreater(after.duration, 0)


	def test_zero_amount_is_identity (self) -> None:

		notes = [melodyseq.pattern.NoteEvent(position=0, pitch=60)]
		rng = melodyseq.seeded_random.SeededRandom(3)
		state = rng.getstate()

		self.assertEqual(melodyseq.variation.humanize(notes, 0, rng, 480, 120), notes)
		self.assertEqual(rng.getstate(), state)


class VaryErrorTests (unittest.TestCase):

	"""
	Bad input fails before anything is produced.
	"""

	def test_empty_sequence (self) -> None:

		with self.assertRaises(melodyseq.exceptions.InputError):
			melodyseq.variation.vary_sequence(melodyseq.pattern.NoteSequence(), melodyseq.VariationOptions())


	def test_non_finite_end (self) -> None:

		sequence = melodyseq.pattern.NoteSequence(notes=(melodyseq.pattern.NoteEvent(position=math.inf, pitch=60),))

		with self.assertRaises(melodyseq.exceptions.InputError):
			melodyseq.variation.vary_sequence(sequence, melodyseq.VariationOptions())


	def test_bad_swing (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.VariationOptions(swing_amount=1.5).validate()


	def test_negative_humanize (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.VariationOptions(humanize_ms=-1).validate()


	def test_no_transpositions (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.VariationOptions(transpositions=()).validate()


	def test_garbage_bytes (self) -> None:

		with self.assertRaises(melodyseq.exceptions.EncodingError):
			melodyseq.vary(b"definitely not midi", melodyseq.VariationOptions())


def test_pipeline_retrograde_with_invert (sixteen_note_phrase: melodyseq.pattern.NoteSequence) -> None:

	"""Inversion and retrograde both apply, in that order."""

	options = melodyseq.VariationOptions(invert=True, retrograde=True)
	(variant,) = melodyseq.variation.vary_sequence(sixteen_note_phrase, options)

	inverted = melodyseq.variation.invert(list(sixteen_note_phrase.notes), "C")
	expected = melodyseq.variation.retrograde(inverted)

	assert [n.note_number for n in variant.notes] == [n.note_number for n in expected]
	assert [n.position for n in variant.notes] == [n.position for n in expected]
