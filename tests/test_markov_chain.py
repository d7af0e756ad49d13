import unittest

import melodyseq.exceptions
import melodyseq.markov_chain
import melodyseq.seeded_random


class MarkovModelTests (unittest.TestCase):

	"""
	Tests for the order-n Markov model.
	"""

	def test_build_collects_bags (self) -> None:

		"""
		Each window maps to every value that followed it, duplicates kept.
		"""

		model = melodyseq.markov_chain.MarkovModel.build([2, 2, -4, 2, 2, -4])

		self.assertEqual(model.transitions[(2, 2)], [-4, -4])
		self.assertEqual(model.transitions[(2, -4)], [2])
		self.assertEqual(model.transitions[(-4, 2)], [2])
		self.assertEqual(len(model.transitions), 3)


	def test_sample_from_bag (self) -> None:

		"""
		A key with a single follower always yields it.
		"""

		model = melodyseq.markov_chain.MarkovModel.build([1, 2, 3, 1, 2, 3])
		rng = melodyseq.seeded_random.SeededRandom(4)

		for _ in range(10):
			self.assertEqual(model.sample((1, 2), rng), 3)


	def test_unseen_key_uses_pool (self) -> None:

		"""
		Unknown and short keys fall back to the full history.
		"""

		values = [5, 7, 9, 11]
		model = melodyseq.markov_chain.MarkovModel.build(values)
		rng = melodyseq.seeded_random.SeededRandom(8)

		for _ in range(20):
			self.assertIn(model.sample((100, 100), rng), values)
			self.assertIn(model.sample((5,), rng), values)


	def test_one_draw_per_sample (self) -> None:

		model = melodyseq.markov_chain.MarkovModel.build([1, 2, 3, 4])
		a = melodyseq.seeded_random.SeededRandom(1)
		b = melodyseq.seeded_random.SeededRandom(1)

		model.sample((1, 2), a)
		b.random()

		self.assertEqual(a.getstate(), b.getstate())


	def test_empty_values (self) -> None:

		with self.assertRaises(melodyseq.exceptions.InputError):
			melodyseq.markov_chain.MarkovModel.build([])
