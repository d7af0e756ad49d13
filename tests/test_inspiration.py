import unittest

import pytest

import melodyseq
import melodyseq.exceptions
import melodyseq.inspiration
import melodyseq.midi_codec
import melodyseq.pattern

from conftest import make_sequence


SEED_PHRASE = [60, 63, 67, 65]


class InspirationTests (unittest.TestCase):

	"""
	Tests for Markov phrase generation.
	"""

	def test_three_notes_rejected (self) -> None:

		"""
		An order-2 model needs at least four notes.
		"""

		with self.assertRaises(melodyseq.exceptions.InputError):
			melodyseq.inspiration.inspire_sequence(make_sequence([60, 62, 63]), melodyseq.InspirationOptions(seed=1))


	def test_four_notes_fill_requested_length (self) -> None:

		"""
		At full density the phrase runs to the end of the requested bars.
		"""

		options = melodyseq.InspirationOptions(length_in_bars=2, density=1.0, seed=1)
		result = melodyseq.inspiration.inspire_sequence(make_sequence(SEED_PHRASE, duration=120), options)
		total = 2 * 4 * 480

		self.assertGreater(len(result), 2)
		self.assertTrue(all(note.position < total for note in result.notes))
		self.assertGreaterEqual(result.end_tick, total)


	def test_opens_with_seed_notes (self) -> None:

		"""
		The first two notes of the seed start the phrase, back to back.
		"""

		result = melodyseq.inspiration.inspire_sequence(make_sequence(SEED_PHRASE, duration=90), melodyseq.InspirationOptions(seed=2))

		self.assertEqual([n.note_number for n in result.notes[:2]], [60, 63])
		self.assertEqual([n.position for n in result.notes[:2]], [0, 90])


	def test_emitted_notes_in_scale_and_range (self) -> None:

		options = melodyseq.InspirationOptions(length_in_bars=8, seed=3, root="C", scale_name="minor")
		result = melodyseq.inspiration.inspire_sequence(make_sequence([60, 72, 55, 79, 48, 84], duration=60), options)
		formula = {0, 2, 3, 5, 7, 8, 10}

		for note in result.notes[2:]:
			self.assertIn(note.note_number % 12, formula)
			self.assertTrue(0 <= note.note_number <= 127)
			self.assertEqual(note.velocity, 101)


	def test_climbing_seed_stays_in_scale (self) -> None:

		"""
		A seed rising an octave per note folds back into range instead of pinning at the top.
		"""

		options = melodyseq.InspirationOptions(length_in_bars=2, density=1.0, seed=5, root="C#", scale_name="minor")
		result = melodyseq.inspiration.inspire_sequence(make_sequence([37, 49, 61, 73], duration=120), options)
		formula = {0, 2, 3, 5, 7, 8, 10}
		generated = result.notes[2:]

		self.assertGreater(len(generated), 2)

		for note in generated:
			self.assertIn((note.note_number - 1) % 12, formula)
			self.assertTrue(0 <= note.note_number <= 127)

		self.assertNotEqual({note.note_number for note in generated}, {127})


	def test_zero_density_keeps_only_seed_notes (self) -> None:

		options = melodyseq.InspirationOptions(density=0.0, seed=4)
		result = melodyseq.inspiration.inspire_sequence(make_sequence(SEED_PHRASE), options)

		self.assertEqual(len(result), 2)


	def test_same_seed_same_phrase (self) -> None:

		sequence = make_sequence(SEED_PHRASE + [62, 60, 58, 60])
		options = melodyseq.InspirationOptions(seed=9)

		self.assertEqual(
			melodyseq.inspiration.inspire_sequence(sequence, options),
			melodyseq.inspiration.inspire_sequence(sequence, options)
		)


	def test_bar_limit (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.InspirationOptions(length_in_bars=65).validate()


	def test_density_range (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.InspirationOptions(density=1.2).validate()


def test_inspire_bytes (phrase_bytes: bytes) -> None:

	"""The byte-level entry point decodes, generates and encodes."""

	data = melodyseq.inspire(phrase_bytes, melodyseq.InspirationOptions(length_in_bars=4, seed=6))
	result = melodyseq.midi_codec.decode(data)

	assert len(result) > 2
	assert max(note.position for note in result.notes) < 4 * 4 * 480
