import logging
import typing

import melodyseq.exceptions
import melodyseq.seeded_random


logger = logging.getLogger(__name__)

ValueType = typing.TypeVar("ValueType")


class MarkovModel (typing.Generic[ValueType]):

	"""
	A fixed-order Markov model learned from one list of observations.

	Each key is a tuple of ``order`` consecutive values; its bag holds every
	value that followed that window in the source, duplicates included, so
	sampling the bag uniformly reproduces the observed frequencies.
	"""

	def __init__ (
		self,
		transitions: typing.Dict[typing.Tuple[ValueType, ...], typing.List[ValueType]],
		pool: typing.Sequence[ValueType],
		order: int
	) -> None:

		if not pool:
			raise melodyseq.exceptions.InputError("Markov pool cannot be empty")

		self.transitions = transitions
		self.pool = list(pool)
		self.order = order

	@classmethod
	def build (cls, values: typing.Sequence[ValueType], order: int = 2) -> "MarkovModel[ValueType]":

		"""Learn transitions from a list of observations.

		Example:
			```python
			model = MarkovModel.build([2, 2, -4, 2, 2, -4])
			model.transitions[(2, 2)]  # → [-4, -4]
			```
		"""

		if order < 1:
			raise ValueError("Order must be at least 1")

		if not values:
			raise melodyseq.exceptions.InputError("Cannot build a Markov model from no values")

		transitions: typing.Dict[typing.Tuple[ValueType, ...], typing.List[ValueType]] = {}

		for i in range(len(values) - order):
			key = tuple(values[i:i + order])
			transitions.setdefault(key, []).append(values[i + order])

		return cls(transitions, values, order)

	def sample (self, key: typing.Sequence[ValueType], rng: melodyseq.seeded_random.SeededRandom) -> ValueType:

		"""Draw the value following ``key``.

		Unseen keys (including ones shorter than the order) fall back to a
		uniform draw from every observed value. Either way exactly one draw
		is consumed.
		"""

		bag = self.transitions.get(tuple(key))

		if not bag:
			logger.debug(f"Unseen Markov key {tuple(key)}, sampling from the pool")
			return rng.choice(self.pool)

		return rng.choice(bag)
