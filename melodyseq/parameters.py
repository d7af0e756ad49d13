import dataclasses
import enum
import math
import typing

import melodyseq.constants
import melodyseq.exceptions
import melodyseq.scales


class Style (enum.Enum):

	"""Musical style driving the part generators."""

	GOA = "goa"
	PSY = "psy"
	PROG = "prog"
	DOWNTEMPO = "downtempo"
	DEEP = "deep"
	AMBIENT = "ambient"


class Mood (enum.Enum):

	"""Ambiance applied after generation."""

	DEFAULT = "default"
	DARK = "dark"
	UPLIFTING = "uplifting"
	DENSE = "dense"


class Part (enum.Enum):

	"""Structural role of a generated pattern."""

	BASSLINE = "bassline"
	LEAD = "lead"
	PAD = "pad"
	ARPEGGIO = "arpeggio"
	HYPNOTIC_LEAD = "hypnoticLead"


EnumType = typing.TypeVar("EnumType", bound=enum.Enum)


def _coerce (enum_type: typing.Type[EnumType], value: typing.Union[str, EnumType], field: str) -> EnumType:

	"""Accept either an enum member or its string value."""

	if isinstance(value, enum_type):
		return value

	try:
		return enum_type(value)
	except ValueError:
		allowed = [member.value for member in enum_type]
		raise melodyseq.exceptions.ValidationError(f"Unknown {field} {value!r}. Expected one of {allowed}") from None


@dataclasses.dataclass (frozen=True)
class GenerationParameters:

	"""
	Everything needed to generate one pattern.

	``style``, ``mood`` and ``part`` accept enum members or their string
	values (``"psy"``, ``"dark"``, ``"hypnoticLead"``). Two calls with equal
	parameters and the same ``seed`` produce identical patterns; with no
	seed the result is not reproducible.

	Example:
		```python
		params = GenerationParameters(part="bassline", style="psy", root="C", scale_name="minor", step_count=16, seed=42)
		notes = melodyseq.generate(params)
		```
	"""

	root: str = "C"
	scale_name: str = "minor"
	style: typing.Union[Style, str] = Style.PSY
	mood: typing.Union[Mood, str] = Mood.DEFAULT
	part: typing.Union[Part, str] = Part.BASSLINE
	step_count: int = 16
	octave_min: int = 2
	octave_max: int = 4
	seed: typing.Optional[int] = None

	def __post_init__ (self) -> None:

		object.__setattr__(self, "style", _coerce(Style, self.style, "style"))
		object.__setattr__(self, "mood", _coerce(Mood, self.mood, "mood"))
		object.__setattr__(self, "part", _coerce(Part, self.part, "part"))

	def validate (self) -> None:

		"""Check every field before any generation work begins.

		Raises:
			ValidationError: For a non-positive or oversized step count, an
				inverted or out-of-range octave range, an unknown root, or a
				range whose highest note is above MIDI note 127.
		"""

		if isinstance(self.step_count, bool) or not isinstance(self.step_count, int):
			raise melodyseq.exceptions.ValidationError(f"step_count must be an integer, got {self.step_count!r}")

		if self.step_count <= 0:
			raise melodyseq.exceptions.ValidationError(f"step_count must be positive, got {self.step_count}")

		if self.step_count > melodyseq.constants.MAX_STEP_COUNT:
			raise melodyseq.exceptions.ValidationError(f"step_count must be at most {melodyseq.constants.MAX_STEP_COUNT}, got {self.step_count}")

		if self.octave_min > self.octave_max:
			raise melodyseq.exceptions.ValidationError(f"octave_min ({self.octave_min}) must be <= octave_max ({self.octave_max})")

		if self.octave_min < melodyseq.constants.MIN_OCTAVE or self.octave_max > melodyseq.constants.MAX_OCTAVE:
			raise melodyseq.exceptions.ValidationError(f"Octaves must lie within {melodyseq.constants.MIN_OCTAVE}..{melodyseq.constants.MAX_OCTAVE}")

		if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
			raise melodyseq.exceptions.ValidationError(f"seed must be an integer, got {self.seed!r}")

		root_pc = melodyseq.scales.key_name_to_pc(self.root)

		# The highest degree of the top octave is at most eleven semitones above its root.
		if (self.octave_max + 1) * 12 + root_pc + 11 > 127:
			raise melodyseq.exceptions.ValidationError(f"Octave {self.octave_max} of {self.root} reaches above MIDI note 127")

	def with_changes (self, **changes: typing.Any) -> "GenerationParameters":

		return dataclasses.replace(self, **changes)


def check_unit_interval (value: float, name: str) -> None:

	"""Raise ValidationError unless ``value`` is a finite number in [0, 1]."""

	if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or not 0 <= value <= 1:
		raise melodyseq.exceptions.ValidationError(f"{name} must be between 0 and 1, got {value!r}")
