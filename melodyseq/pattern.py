import dataclasses
import logging
import math
import typing

import melodyseq.constants
import melodyseq.constants.pulses
import melodyseq.constants.velocity
import melodyseq.exceptions
import melodyseq.scales


logger = logging.getLogger(__name__)

PitchType = typing.Union[int, str]


@dataclasses.dataclass (frozen=True)
class NoteEvent:

	"""
	A single pitched, timed note.

	``position`` and ``duration`` are in grid steps for generated patterns
	and in ticks for sequences decoded from MIDI. ``pitch`` is either a note
	name with octave (``"C3"``) or a MIDI note number.
	"""

	position: float
	pitch: PitchType
	velocity: int = melodyseq.constants.velocity.DEFAULT_VELOCITY
	duration: float = 1
	accent: bool = False
	slide: bool = False

	def __post_init__ (self) -> None:

		if not melodyseq.constants.velocity.MIN_VELOCITY <= self.velocity <= melodyseq.constants.velocity.MAX_VELOCITY:
			raise melodyseq.exceptions.ValidationError(f"Velocity must be between 1 and 127, got {self.velocity}")

		if not self.duration > 0:
			raise melodyseq.exceptions.ValidationError(f"Duration must be positive, got {self.duration}")

		if self.position < 0:
			raise melodyseq.exceptions.ValidationError(f"Position cannot be negative, got {self.position}")

		# Resolving here rejects unparseable note names at construction time.
		melodyseq.scales.to_midi(self.pitch)

	@property
	def note_number (self) -> int:

		"""The pitch as a MIDI note number (C4 = 60)."""

		return melodyseq.scales.to_midi(self.pitch)

	@property
	def end (self) -> float:

		return self.position + self.duration

	def with_changes (self, **changes: typing.Any) -> "NoteEvent":

		"""
		Return a copy with some fields replaced.
		"""

		return dataclasses.replace(self, **changes)


@dataclasses.dataclass (frozen=True)
class GridCell:

	"""
	One cell of the editor grid. Empty cells are stored as None.
	"""

	on: bool = True
	velocity: int = melodyseq.constants.velocity.DEFAULT_VELOCITY
	accent: bool = False
	slide: bool = False


# Note name → one cell per step.
Grid = typing.Dict[str, typing.List[typing.Optional[GridCell]]]


@dataclasses.dataclass (frozen=True)
class NoteSequence:

	"""
	A flat, tick-timed note list plus the timing it was recorded with.
	"""

	notes: typing.Tuple[NoteEvent, ...] = ()
	ticks_per_beat: int = melodyseq.constants.TICKS_PER_BEAT
	bpm: float = melodyseq.constants.DEFAULT_BPM

	def __post_init__ (self) -> None:

		if self.ticks_per_beat <= 0:
			raise melodyseq.exceptions.ValidationError("ticks_per_beat must be positive")

		if self.bpm <= 0:
			raise melodyseq.exceptions.ValidationError("bpm must be positive")

		object.__setattr__(self, "notes", tuple(self.notes))

	def __len__ (self) -> int:

		return len(self.notes)

	@property
	def end_tick (self) -> float:

		"""
		Latest note end, or 0 for an empty sequence.
		"""

		if not self.notes:
			return 0

		return max(note.end for note in self.notes)

	def with_notes (self, notes: typing.Iterable[NoteEvent]) -> "NoteSequence":

		return dataclasses.replace(self, notes=tuple(notes))


def _numeric_field (record: typing.Mapping[str, typing.Any], name: str, default: float, index: int) -> float:

	"""Read a numeric field, substituting ``default`` when missing or not finite."""

	value = record.get(name)

	if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
		logger.warning(f"Note {index}: missing or invalid {name} ({value!r}), using {default}")
		return default

	return value


def note_from_mapping (record: typing.Mapping[str, typing.Any], index: int = 0, default_duration: float = melodyseq.constants.pulses.MIDI_SIXTEENTH_NOTE) -> NoteEvent:

	"""Build a NoteEvent from a loosely shaped record.

	Missing or non-finite ``position``, ``duration`` and ``velocity`` fields
	are replaced with defaults (0, ``default_duration`` and 100) and logged,
	so a partly malformed record still yields a usable note. Velocity is
	clamped into 1–127 and a non-positive duration is replaced. The pitch is
	required.

	Parameters:
		record: Mapping with ``pitch`` and optionally ``position``,
			``duration``, ``velocity``, ``accent``, ``slide``.
		index: Position of the record in its list, used in log messages.
		default_duration: Duration used when the record has none.
	"""

	if "pitch" not in record:
		raise melodyseq.exceptions.InputError(f"Note {index} has no pitch")

	position = max(0.0, _numeric_field(record, "position", 0, index))
	duration = _numeric_field(record, "duration", default_duration, index)
	velocity = _numeric_field(record, "velocity", melodyseq.constants.velocity.DEFAULT_VELOCITY, index)

	if duration <= 0:
		logger.warning(f"Note {index}: non-positive duration {duration}, using {default_duration}")
		duration = default_duration

	return NoteEvent(
		position = position,
		pitch = record["pitch"],
		velocity = clamp_velocity(velocity),
		duration = duration,
		accent = bool(record.get("accent", False)),
		slide = bool(record.get("slide", False))
	)


def clamp_velocity (velocity: float) -> int:

	"""Round and clamp a velocity into the valid MIDI note-on range."""

	return max(melodyseq.constants.velocity.MIN_VELOCITY, min(melodyseq.constants.velocity.MAX_VELOCITY, int(round(velocity))))


def sort_notes (notes: typing.Iterable[NoteEvent]) -> typing.List[NoteEvent]:

	"""
	Order notes by onset, then pitch.
	"""

	return sorted(notes, key=lambda note: (note.position, note.note_number))
