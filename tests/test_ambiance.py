import unittest

import melodyseq.ambiance
import melodyseq.exceptions
import melodyseq.parameters
import melodyseq.scales


class AmbianceTests (unittest.TestCase):

	"""
	Tests for named ambiance presets.
	"""

	def test_all_presets_generate (self) -> None:

		"""
		Every preset yields a pattern drawn from its own lists.
		"""

		for name, preset in melodyseq.ambiance.AMBIANCE_PRESETS.items():

			result = melodyseq.ambiance.generate_ambiance(name, seed=21)
			params = result.parameters
			scale = set(melodyseq.scales.build_scale(params.root, params.scale_name, params.octave_min, params.octave_max))

			self.assertIn(params.scale_name, preset.scales)
			self.assertIn(params.style.value, preset.styles)
			self.assertIn(params.mood.value, preset.moods)
			self.assertIn(params.part.value, preset.parts)
			self.assertTrue(preset.tempo_range[0] <= result.suggested_tempo <= preset.tempo_range[1])
			self.assertIn(result.suggested_synth, preset.synth_presets)
			self.assertTrue(all(note.pitch in scale for note in result.notes))


	def test_seed_reproduces_everything (self) -> None:

		a = melodyseq.ambiance.generate_ambiance("hypnotique", seed=5)
		b = melodyseq.ambiance.generate_ambiance("hypnotique", seed=5)

		self.assertEqual(a, b)
		self.assertEqual(a.parameters.seed, 5)


	def test_overrides (self) -> None:

		result = melodyseq.ambiance.generate_ambiance("tribal", seed=7, root="D", step_count=32)

		self.assertEqual(result.parameters.root, "D")
		self.assertEqual(result.parameters.step_count, 32)
		self.assertIs(result.parameters.mood, melodyseq.parameters.Mood.DENSE)


	def test_unknown_ambiance (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.ambiance.generate_ambiance("joyeux", seed=1)


	def test_unknown_override (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.ambiance.generate_ambiance("tribal", seed=1, tempo=120)


	def test_available_names (self) -> None:

		self.assertEqual(
			sorted(melodyseq.ambiance.available_ambiances()),
			["cosmique", "energique", "hypnotique", "mysterieux", "nostalgique", "tribal"]
		)
