import dataclasses
import logging
import math
import typing

import melodyseq.constants
import melodyseq.constants.velocity
import melodyseq.exceptions
import melodyseq.intervals
import melodyseq.markov_chain
import melodyseq.midi_codec
import melodyseq.parameters
import melodyseq.pattern
import melodyseq.scales
import melodyseq.seeded_random
import melodyseq.sequence_utils


logger = logging.getLogger(__name__)

MIN_SEED_NOTES = 4
MARKOV_ORDER = 2
MAX_STEPS_PER_BAR = 64


def _fold_into_midi_range (pitch: int) -> int:

	"""Move a pitch by whole octaves until it lies in 0-127."""

	while pitch > 127:
		pitch -= 12

	while pitch < 0:
		pitch += 12

	return pitch


@dataclasses.dataclass (frozen=True)
class InspirationOptions:

	"""
	Settings for a phrase written in the manner of a seed phrase.
	"""

	length_in_bars: int = 2
	seed: typing.Optional[int] = None
	root: str = "C"
	scale_name: str = "minor"
	keep_scale: bool = True
	density: float = 0.6
	steps_per_bar: int = 16

	def validate (self) -> None:

		if isinstance(self.length_in_bars, bool) or not isinstance(self.length_in_bars, int):
			raise melodyseq.exceptions.ValidationError(f"length_in_bars must be an integer, got {self.length_in_bars!r}")

		if not 1 <= self.length_in_bars <= melodyseq.constants.MAX_BARS:
			raise melodyseq.exceptions.ValidationError(f"length_in_bars must be between 1 and {melodyseq.constants.MAX_BARS}, got {self.length_in_bars}")

		if isinstance(self.steps_per_bar, bool) or not isinstance(self.steps_per_bar, int) or not 1 <= self.steps_per_bar <= MAX_STEPS_PER_BAR:
			raise melodyseq.exceptions.ValidationError(f"steps_per_bar must be an integer between 1 and {MAX_STEPS_PER_BAR}, got {self.steps_per_bar!r}")

		melodyseq.parameters.check_unit_interval(self.density, "density")

		if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
			raise melodyseq.exceptions.ValidationError(f"seed must be an integer, got {self.seed!r}")

		melodyseq.scales.key_name_to_pc(self.root)


def inspire_sequence (
	sequence: melodyseq.pattern.NoteSequence,
	options: InspirationOptions,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> melodyseq.pattern.NoteSequence:

	"""Write a new phrase in the manner of a seed phrase.

	Two order-2 Markov models are learned from the seed: one over the
	intervals between consecutive pitches, one over note durations. The
	output opens with the seed's first two notes back to back, then a
	cursor walks forward by sampled durations until it reaches
	``length_in_bars`` bars. At each position a pitch (last pitch plus a
	sampled interval, folded by octaves into 0–127) is emitted only if
	the Euclidean mask has a pulse on the cursor's step; the walk
	continues through rests either way.

	Parameters:
		sequence: Seed phrase, in ticks. Notes are read in onset order.
		options: Length, density, scale and seed.
		registry: Scale registry for quantizing to user scales.

	Returns:
		A new sequence with the seed's timing resolution and tempo. Emitted
		notes have velocity 101 and pitches inside 0–127.

	Raises:
		InputError: If the seed has fewer than four notes.
		ValidationError: If the options are invalid.
	"""

	options.validate()

	source = melodyseq.pattern.sort_notes(sequence.notes)

	if len(source) < MIN_SEED_NOTES:
		raise melodyseq.exceptions.InputError(f"Need at least {MIN_SEED_NOTES} notes to learn a phrase, got {len(source)}")

	ticks_per_beat = sequence.ticks_per_beat
	sixteenth = max(1, ticks_per_beat // 4)

	pitches = [note.note_number for note in source]
	intervals = [b - a for a, b in zip(pitches, pitches[1:])]
	durations = [int(round(note.duration)) for note in source]

	interval_model = melodyseq.markov_chain.MarkovModel.build(intervals, order=MARKOV_ORDER)
	duration_model = melodyseq.markov_chain.MarkovModel.build(durations, order=MARKOV_ORDER)

	total_steps = options.length_in_bars * options.steps_per_bar
	mask = melodyseq.sequence_utils.generate_euclidean_sequence(total_steps, int(round(total_steps * options.density)))
	total_ticks = options.length_in_bars * 4 * ticks_per_beat
	ticks_per_step = 4 * ticks_per_beat / options.steps_per_bar

	rng = melodyseq.seeded_random.create(options.seed)
	notes: typing.List[melodyseq.pattern.NoteEvent] = []
	cursor = 0

	for note, duration in zip(source[:MARKOV_ORDER], durations[:MARKOV_ORDER]):
		duration = duration if duration > 0 else sixteenth
		notes.append(melodyseq.pattern.NoteEvent(position=cursor, pitch=note.note_number, velocity=note.velocity, duration=duration))
		cursor += duration

	recent_intervals = [pitches[1] - pitches[0]]
	recent_durations = durations[:MARKOV_ORDER]
	pitch = pitches[1]

	while cursor < total_ticks:

		interval = interval_model.sample(recent_intervals[-MARKOV_ORDER:], rng)
		duration = duration_model.sample(recent_durations[-MARKOV_ORDER:], rng)

		pitch = _fold_into_midi_range(pitch + interval)
		recent_intervals.append(interval)
		recent_durations.append(duration)

		if duration <= 0:
			duration = sixteenth

		step = int(math.floor(cursor / ticks_per_step))

		if mask[step % total_steps]:

			emitted = pitch

			if options.keep_scale:
				emitted = _fold_into_midi_range(melodyseq.scales.quantize_to_scale(emitted, options.root, options.scale_name, registry))

			notes.append(melodyseq.pattern.NoteEvent(
				position = cursor,
				pitch = emitted,
				velocity = melodyseq.constants.velocity.INSPIRATION_VELOCITY,
				duration = duration
			))

		cursor += duration

	logger.debug(f"Inspired {len(notes)} notes over {options.length_in_bars} bars from {len(source)} seed notes")

	return melodyseq.pattern.NoteSequence(notes=tuple(notes), ticks_per_beat=ticks_per_beat, bpm=sequence.bpm)


def inspire (
	source: bytes,
	options: InspirationOptions,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> bytes:

	"""
	Decode a seed phrase, write a new one in its manner and encode the result.
	"""

	options.validate()
	sequence = melodyseq.midi_codec.decode(source)

	return melodyseq.midi_codec.encode(inspire_sequence(sequence, options, registry))
