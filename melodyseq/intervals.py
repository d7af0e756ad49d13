import logging
import typing

import melodyseq.exceptions


logger = logging.getLogger(__name__)


DEFAULT_SCALES: typing.Dict[str, typing.List[int]] = {
	"major": [0, 2, 4, 5, 7, 9, 11],
	"minor": [0, 2, 3, 5, 7, 8, 10],
	"harmonicMinor": [0, 2, 3, 5, 7, 8, 11],
	"phrygian": [0, 1, 3, 5, 7, 8, 10],
	"phrygianDominant": [0, 1, 4, 5, 7, 8, 10],
	"dorian": [0, 2, 3, 5, 7, 9, 10],
	"hungarianMinor": [0, 2, 3, 6, 7, 8, 11],
	"doubleHarmonic": [0, 1, 4, 5, 7, 8, 11],
	"neapolitanMinor": [0, 1, 3, 5, 7, 8, 11],
	"enigmatic": [0, 1, 4, 6, 8, 10, 11],
	"wholetone": [0, 2, 4, 6, 8, 10],
	"perso": [0, 3, 10],
	"perso2": [0, 3, 7, 8, 10],
	"perso3": [0, 4, 7, 11],
	"minimalDark": [0, 1, 7],
	"acidTriad": [0, 3, 7],
	"bluesScale": [0, 3, 5, 6, 7, 10],
	"japanese": [0, 1, 5, 7, 8],
	"arabicMaqam": [0, 1, 4, 5, 7, 8, 10],
}

FALLBACK_SCALE = "minor"


@typing.runtime_checkable
class ScaleStore (typing.Protocol):

	"""
	Key-value storage for user scales.
	"""

	def get (self, name: str) -> typing.Optional[typing.List[int]]:

		...

	def set (self, name: str, intervals: typing.List[int]) -> None:

		...

	def list (self) -> typing.List[str]:

		...


class MemoryScaleStore:

	"""
	A ScaleStore kept in a plain dict. Nothing is persisted.
	"""

	def __init__ (self, initial: typing.Optional[typing.Dict[str, typing.List[int]]] = None) -> None:

		self._scales: typing.Dict[str, typing.List[int]] = {}

		if initial:
			for name, intervals in initial.items():
				self._scales[name] = list(intervals)

	def get (self, name: str) -> typing.Optional[typing.List[int]]:

		intervals = self._scales.get(name)
		return list(intervals) if intervals is not None else None

	def set (self, name: str, intervals: typing.List[int]) -> None:

		self._scales[name] = list(intervals)

	def list (self) -> typing.List[str]:

		return sorted(self._scales)


def normalize_intervals (intervals: typing.Iterable[int]) -> typing.List[int]:

	"""Validate a semitone formula and return it sorted, deduplicated and rooted at 0.

	Parameters:
		intervals: Semitone offsets from the root, each an integer in 0–11.

	Returns:
		Ascending list starting with 0.

	Raises:
		ValidationError: If any interval is not an integer between 0 and 11.

	Example:
		```python
		normalize_intervals([7, 3, 3])  # → [0, 3, 7]
		```
	"""

	values = list(intervals)

	for value in values:
		if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 11:
			raise melodyseq.exceptions.ValidationError(f"Scale intervals must be integers between 0 and 11, got {value!r}")

	return sorted(set(values) | {0})


class ScaleRegistry:

	"""
	Named interval sets: the built-in table plus whatever the store holds.

	Built-in names always win and cannot be overwritten. Lookups of an
	unknown name fall back to natural minor, so a stale scale name coming
	from a saved preset still produces music.
	"""

	def __init__ (self, store: typing.Optional[ScaleStore] = None, defaults: typing.Optional[typing.Dict[str, typing.List[int]]] = None) -> None:

		self.store: ScaleStore = store if store is not None else MemoryScaleStore()
		self.defaults: typing.Dict[str, typing.List[int]] = dict(defaults if defaults is not None else DEFAULT_SCALES)

	def __contains__ (self, name: object) -> bool:

		return isinstance(name, str) and (name in self.defaults or self.store.get(name) is not None)

	def get_intervals (self, name: str) -> typing.List[int]:

		"""
		Return the formula for a scale name, or natural minor if it is unknown.
		"""

		if name in self.defaults:
			return list(self.defaults[name])

		stored = self.store.get(name)

		if stored is not None:
			return list(stored)

		logger.debug(f"Unknown scale {name!r}, falling back to {FALLBACK_SCALE}")
		return list(DEFAULT_SCALES[FALLBACK_SCALE])

	def register_scale (self, name: str, intervals: typing.Iterable[int]) -> typing.List[int]:

		"""Add a user scale to the backing store.

		Parameters:
			name: Scale name used by ``build_scale()`` and ``quantize_to_scale()``.
			intervals: Semitone offsets from the root (0–11). The root is
				added if missing, duplicates are removed.

		Returns:
			The normalized formula as stored.

		Raises:
			ValidationError: If the name is empty or built in, or an interval
				is out of range.
		"""

		if not name:
			raise melodyseq.exceptions.ValidationError("Scale name cannot be empty")

		if name in self.defaults:
			raise melodyseq.exceptions.ValidationError(f"Cannot overwrite built-in scale {name!r}")

		formula = normalize_intervals(intervals)
		self.store.set(name, formula)
		logger.info(f"Registered scale {name!r}: {formula}")

		return formula

	def names (self) -> typing.List[str]:

		"""List built-in scales followed by stored ones."""

		stored = [name for name in self.store.list() if name not in self.defaults]
		return list(self.defaults) + stored


DEFAULT_REGISTRY = ScaleRegistry()


def get_intervals (name: str, registry: typing.Optional[ScaleRegistry] = None) -> typing.List[int]:

	"""
	Return a named formula from the registry, falling back to natural minor.
	"""

	return (registry or DEFAULT_REGISTRY).get_intervals(name)
