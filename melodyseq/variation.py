"""
Deterministic variations of an existing note sequence.

Every variant runs the same fixed pipeline, because each stage assumes the
earlier ones already ran:

1. transpose
2. invert (mirror around the root)
3. quantize to the scale
4. swing
5. humanize
6. retrograde

One random stream is created per call and shared, in order, by the
variants, so the same options and seed always give the same output.
"""

import dataclasses
import logging
import math
import typing

import melodyseq.constants.velocity
import melodyseq.exceptions
import melodyseq.intervals
import melodyseq.midi_codec
import melodyseq.parameters
import melodyseq.pattern
import melodyseq.scales
import melodyseq.seeded_random
import melodyseq.sequence_utils
import melodyseq.swing


logger = logging.getLogger(__name__)

# Humanize shaping: later notes drift more loosely and play slightly softer.
TIMING_LOOSENESS = 0.3
VELOCITY_DECAY = 0.1
VELOCITY_JITTER = 0.15
DURATION_JITTER_SECONDS = 0.1
MIN_DURATION_SECONDS = 0.05


@dataclasses.dataclass (frozen=True)
class VariationOptions:

	"""
	What to do to a sequence. One variant is produced per transposition.
	"""

	transpositions: typing.Tuple[int, ...] = (0,)
	swing_amount: float = 0.0
	humanize_ms: float = 0.0
	retrograde: bool = False
	invert: bool = False
	seed: typing.Optional[int] = None
	root: str = "C"
	scale_name: str = "minor"
	keep_scale: bool = False

	def __post_init__ (self) -> None:

		object.__setattr__(self, "transpositions", tuple(self.transpositions))

	def validate (self) -> None:

		"""
		Raise ValidationError if any option is out of range.
		"""

		if not self.transpositions:
			raise melodyseq.exceptions.ValidationError("At least one transposition is required")

		for offset in self.transpositions:
			if isinstance(offset, bool) or not isinstance(offset, int) or abs(offset) > 127:
				raise melodyseq.exceptions.ValidationError(f"Transposition must be an integer between -127 and 127, got {offset!r}")

		melodyseq.parameters.check_unit_interval(self.swing_amount, "swing_amount")

		if isinstance(self.humanize_ms, bool) or not isinstance(self.humanize_ms, (int, float)) or not math.isfinite(self.humanize_ms) or self.humanize_ms < 0:
			raise melodyseq.exceptions.ValidationError(f"humanize_ms must be a non-negative number, got {self.humanize_ms!r}")

		if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
			raise melodyseq.exceptions.ValidationError(f"seed must be an integer, got {self.seed!r}")

		melodyseq.scales.key_name_to_pc(self.root)


def _clamp_pitch (pitch: int) -> int:

	return melodyseq.sequence_utils.clamp(pitch, 0, 127)


def transpose (notes: typing.Iterable[melodyseq.pattern.NoteEvent], semitones: int) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Shift every pitch by ``semitones``, clamped into the MIDI range."""

	return [note.with_changes(pitch=_clamp_pitch(note.note_number + semitones)) for note in notes]


def invert (notes: typing.Sequence[melodyseq.pattern.NoteEvent], root: str) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Mirror pitches around the root in the octave of the first note.

	Example:
		```python
		# Root C, first note E4 (64): the axis is C4 (60), so E4 → G#3 (56).
		invert([NoteEvent(0, 64)], "C")[0].pitch  # → 56
		```
	"""

	if not notes:
		return []

	axis = melodyseq.scales.key_name_to_pc(root) + 12 * (notes[0].note_number // 12)

	return [note.with_changes(pitch=_clamp_pitch(2 * axis - note.note_number)) for note in notes]


def quantize (
	notes: typing.Iterable[melodyseq.pattern.NoteEvent],
	root: str,
	scale_name: str,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Snap every pitch to the nearest degree of the scale."""

	return [
		note.with_changes(pitch=_clamp_pitch(melodyseq.scales.quantize_to_scale(note.note_number, root, scale_name, registry)))
		for note in notes
	]


def apply_swing (notes: typing.Iterable[melodyseq.pattern.NoteEvent], swing_amount: float, ticks_per_beat: int) -> typing.List[melodyseq.pattern.NoteEvent]:

	return melodyseq.swing.apply_swing(notes, swing_amount, ticks_per_beat)


def humanize (
	notes: typing.Sequence[melodyseq.pattern.NoteEvent],
	amount_ms: float,
	rng: melodyseq.seeded_random.SeededRandom,
	ticks_per_beat: int,
	bpm: float
) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Add bounded random jitter to timing, velocity and length.

	For note ``i`` of ``n``, three draws are taken in order:

	- onset moves by ``(r - 0.5) * amount_ticks * (1 - 0.3 * i / n)``, never
	  before tick 0, where ``amount_ticks`` is ``amount_ms`` at the
	  sequence's tempo;
	- velocity becomes ``velocity * (1 - 0.1 * i / n) + (r - 0.5) * 0.15 * 127``,
	  clamped into 1–127;
	- duration moves by up to ±50 ms, never below 50 ms.

	Nothing is drawn when ``amount_ms`` is 0.
	"""

	if amount_ms <= 0 or not notes:
		return list(notes)

	ticks_per_second = ticks_per_beat * bpm / 60
	amount_ticks = amount_ms * ticks_per_second / 1000
	min_duration = MIN_DURATION_SECONDS * ticks_per_second
	count = len(notes)
	result: typing.List[melodyseq.pattern.NoteEvent] = []

	for i, note in enumerate(notes):

		phrase_position = i / count

		timing = (rng.random() - 0.5) * amount_ticks * (1 - phrase_position * TIMING_LOOSENESS)
		velocity = note.velocity * (1 - phrase_position * VELOCITY_DECAY) + (rng.random() - 0.5) * VELOCITY_JITTER * melodyseq.constants.velocity.MAX_VELOCITY
		duration = note.duration + (rng.random() - 0.5) * DURATION_JITTER_SECONDS * ticks_per_second

		result.append(note.with_changes(
			position = max(0.0, note.position + timing),
			velocity = melodyseq.pattern.clamp_velocity(velocity),
			duration = max(min_duration, duration)
		))

	return result


def retrograde (notes: typing.Iterable[melodyseq.pattern.NoteEvent]) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Play the sequence backwards.

	Each note keeps its duration and now starts at ``end - onset - duration``
	(never before 0), where ``end`` is the latest note end. Applying it twice
	to notes of equal length restores the original onsets.
	"""

	notes = list(notes)

	if not notes:
		return []

	end = max(note.end for note in notes)

	reversed_notes = [note.with_changes(position=max(0.0, end - note.position - note.duration)) for note in notes]

	return melodyseq.pattern.sort_notes(reversed_notes)


def _check_source (sequence: melodyseq.pattern.NoteSequence) -> None:

	if not sequence.notes:
		raise melodyseq.exceptions.InputError("Cannot vary an empty sequence")

	if not math.isfinite(sequence.end_tick):
		raise melodyseq.exceptions.InputError(f"Sequence end time is not finite: {sequence.end_tick}")


def vary_sequence (
	sequence: melodyseq.pattern.NoteSequence,
	options: VariationOptions,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> typing.List[melodyseq.pattern.NoteSequence]:

	"""Produce one variant per transposition.

	Options and the source are checked before any variant is built, so a
	bad call produces nothing.

	Raises:
		ValidationError: If the options are invalid.
		InputError: If the sequence is empty or its end time is not finite.
	"""

	options.validate()
	_check_source(sequence)

	rng = melodyseq.seeded_random.create(options.seed)
	source = list(sequence.notes)
	variants: typing.List[melodyseq.pattern.NoteSequence] = []

	for offset in options.transpositions:

		notes = transpose(source, offset)

		if options.invert:
			notes = invert(notes, options.root)

		if options.keep_scale:
			notes = quantize(notes, options.root, options.scale_name, registry)

		notes = apply_swing(notes, options.swing_amount, sequence.ticks_per_beat)
		notes = humanize(notes, options.humanize_ms, rng, sequence.ticks_per_beat, sequence.bpm)

		if options.retrograde:
			notes = retrograde(notes)

		variants.append(sequence.with_notes(melodyseq.pattern.sort_notes(notes)))

	logger.debug(f"Built {len(variants)} variants of {len(source)} notes")

	return variants


def vary (
	source: bytes,
	options: VariationOptions,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> typing.List[bytes]:

	"""Decode a MIDI byte stream, vary it and encode each variant.

	Example:
		```python
		low, high = vary(data, VariationOptions(transpositions=(0, 12), seed=1))
		```
	"""

	options.validate()
	sequence = melodyseq.midi_codec.decode(source)

	return [melodyseq.midi_codec.encode(variant) for variant in vary_sequence(sequence, options, registry)]
