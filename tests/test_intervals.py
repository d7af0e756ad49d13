import unittest

import melodyseq.exceptions
import melodyseq.intervals
import melodyseq.scales


class DictStore:

	"""A plain-dict key-value store, standing in for any persistence backend."""

	def __init__ (self) -> None:

		self.data: dict = {}

	def get (self, name: str):

		return self.data.get(name)

	def set (self, name: str, intervals) -> None:

		self.data[name] = list(intervals)

	def list (self):

		return list(self.data)


class ScaleRegistryTests (unittest.TestCase):

	"""
	Tests for the scale registry and its injectable store.
	"""

	def test_builtin_lookup (self) -> None:

		"""
		Built-in formulas are available without registering anything.
		"""

		registry = melodyseq.intervals.ScaleRegistry()

		self.assertEqual(registry.get_intervals("major"), [0, 2, 4, 5, 7, 9, 11])
		self.assertIn("arabicMaqam", registry)
		self.assertEqual(len(melodyseq.intervals.DEFAULT_SCALES), 19)


	def test_register_normalizes (self) -> None:

		"""
		User formulas gain a root and lose duplicates.
		"""

		registry = melodyseq.intervals.ScaleRegistry()

		self.assertEqual(registry.register_scale("mine", [7, 3, 3]), [0, 3, 7])
		self.assertEqual(registry.get_intervals("mine"), [0, 3, 7])
		self.assertIn("mine", registry.names())


	def test_registries_are_independent (self) -> None:

		"""
		Registering in one registry leaves others untouched.
		"""

		a = melodyseq.intervals.ScaleRegistry()
		b = melodyseq.intervals.ScaleRegistry()
		a.register_scale("only_a", [0, 5])

		self.assertIn("only_a", a)
		self.assertNotIn("only_a", b)


	def test_custom_store (self) -> None:

		"""
		Any object with get/set/list can back the registry.
		"""

		store = DictStore()
		registry = melodyseq.intervals.ScaleRegistry(store=store)
		registry.register_scale("stored", [0, 1, 7])

		self.assertEqual(store.data["stored"], [0, 1, 7])
		self.assertIsInstance(store, melodyseq.intervals.ScaleStore)
		self.assertEqual(
			melodyseq.scales.build_scale("C", "stored", 3, 3, registry=registry),
			["C3", "C#3", "G3"]
		)


	def test_cannot_overwrite_builtin (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.intervals.ScaleRegistry().register_scale("minor", [0, 1])


	def test_interval_range (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.intervals.ScaleRegistry().register_scale("wide", [0, 12])


	def test_empty_name (self) -> None:

		with self.assertRaises(melodyseq.exceptions.ValidationError):
			melodyseq.intervals.ScaleRegistry().register_scale("", [0, 3])


	def test_unknown_falls_back (self) -> None:

		self.assertEqual(
			melodyseq.intervals.ScaleRegistry().get_intervals("missing"),
			melodyseq.intervals.DEFAULT_SCALES["minor"]
		)
