"""
Seeded random streams for generation.

Generators take a SeededRandom rather than a ``random.Random``. It is a
Mulberry32 generator with 32-bit state, so a given seed produces the same
patterns here as in other Mulberry32-based tools, on any platform.
"""

import logging
import math
import random
import typing


logger = logging.getLogger(__name__)

T = typing.TypeVar("T")

_MASK = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5


def _imul (a: int, b: int) -> int:

	"""Low 32 bits of the product of two 32-bit integers."""

	return (a * b) & _MASK


class SeededRandom:

	"""
	A deterministic Mulberry32 stream keyed by a 32-bit seed.

	Every draw derives from ``random()``, so two instances created with the
	same seed produce the same values for the same sequence of calls, on any
	platform and for any number of calls. The state is a single 32-bit
	integer and there is no dependence on the clock.

	Instances are cheap: create one per generation call and never share one
	between concurrent calls.

	Example:
		```python
		rng = SeededRandom(42)
		rng.random()        # same value every run
		rng.choice([-2, -1, 1, 2])
		```
	"""

	def __init__ (self, seed: int) -> None:

		self.seed = int(seed)
		self._state = self.seed & _MASK

	def random (self) -> float:

		"""
		Return the next float in [0, 1).
		"""

		self._state = (self._state + _INCREMENT) & _MASK

		t = self._state
		t = _imul(t ^ (t >> 15), t | 1)
		t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK

		return ((t ^ (t >> 14)) & _MASK) / 4294967296.0

	def below (self, n: int) -> int:

		"""
		Return an integer in [0, n), scaling one draw by ``n``.
		"""

		if n <= 0:
			raise ValueError("n must be positive")

		return int(math.floor(self.random() * n))

	def choice (self, options: typing.Sequence[T]) -> T:

		"""
		Pick one element uniformly.
		"""

		if not options:
			raise IndexError("Cannot choose from an empty sequence")

		return options[self.below(len(options))]

	def uniform (self, low: float, high: float) -> float:

		return low + (high - low) * self.random()

	def getstate (self) -> int:

		return self._state

	def setstate (self, state: int) -> None:

		self._state = int(state) & _MASK


def create (seed: typing.Optional[int] = None) -> SeededRandom:

	"""Create a fresh stream for one generation call.

	When ``seed`` is None the seed is drawn from the operating system, so
	the result cannot be reproduced; the chosen seed is logged at debug
	level. Pass a seed whenever output must be repeatable.
	"""

	if seed is None:
		seed = random.SystemRandom().getrandbits(32)
		logger.debug(f"No seed supplied, using random seed {seed}")

	return SeededRandom(seed)
