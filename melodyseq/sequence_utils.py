import typing

import melodyseq.seeded_random

T = typing.TypeVar("T")
NumberType = typing.TypeVar("NumberType", int, float)


def generate_bresenham_sequence (steps: int, pulses: int, start: int = 0) -> typing.List[int]:

	"""
	Generate a rhythm using Bresenham's line algorithm.

	The accumulator starts at ``start``, grows by ``pulses`` every step and
	emits a hit (subtracting ``steps``) whenever it reaches ``steps``.
	"""

	if steps < 0:
		raise ValueError("Steps cannot be negative")

	if pulses < 0 or pulses > steps:
		raise ValueError(f"Pulses ({pulses}) must be between 0 and steps ({steps})")

	sequence = [0] * steps

	if pulses == 0:
		return sequence

	error = start

	for i in range(steps):
		error += pulses
		if error >= steps:
			sequence[i] = 1
			error -= steps

	return sequence


def generate_euclidean_sequence (steps: int, pulses: int) -> typing.List[int]:

	"""Distribute ``pulses`` hits as evenly as possible over ``steps``.

	A Bresenham accumulator preloaded so that the first step is always a
	hit (when there is at least one pulse).

	Example:
		```python
		generate_euclidean_sequence(8, 4)  # → [1, 0, 1, 0, 1, 0, 1, 0]
		generate_euclidean_sequence(8, 3)  # → [1, 0, 0, 1, 0, 0, 1, 0]
		```
	"""

	return generate_bresenham_sequence(steps, pulses, start=steps - pulses)


def clamp (value: NumberType, low: NumberType, high: NumberType) -> NumberType:

	"""Limit a value to ``[low, high]``."""

	return max(low, min(high, value))


def weighted_choice (options: typing.List[typing.Tuple[T, float]], rng: melodyseq.seeded_random.SeededRandom) -> T:

	"""Pick one item from a list of (value, weight) pairs.

	Weights are relative - they don't need to sum to 1.0. Higher weight means
	higher probability of selection. One draw is consumed.

	Parameters:
		options: List of `(value, weight)` tuples
		rng: Seeded random stream

	Example:
		```python
		degree = melodyseq.sequence_utils.weighted_choice([
			("tonic", 0.4),
			("second", 0.3),
			("fifth", 0.2),
			("nearby", 0.1),
		], rng)
		```
	"""

	if not options:
		raise ValueError("Options list cannot be empty")

	total = sum(weight for _, weight in options)

	if total <= 0:
		raise ValueError("Total weight must be positive")

	threshold = rng.random() * total
	cumulative = 0.0

	for value, weight in options:
		cumulative += weight
		if threshold < cumulative:
			return value

	return options[-1][0]
