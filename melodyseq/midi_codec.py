"""
Conversion between editor grids, flat note sequences and MIDI bytes.

The byte format is a single-track Standard MIDI File: a header chunk, one
track with a tempo meta event, note-on/note-off pairs and an end-of-track
meta event. Accent and slide are signalled with control changes on CC 16
and CC 17: the controller goes to 127 right before the note-on and back to
0 right after the note-off.

Encoding is canonical (notes are sorted, every status byte is written), so
``encode(decode(data)) == data`` for anything ``encode`` produced.
"""

import io
import logging
import math
import os
import struct
import typing

import mido

import melodyseq.constants
import melodyseq.constants.pulses
import melodyseq.constants.velocity
import melodyseq.exceptions
import melodyseq.pattern
import melodyseq.scales


logger = logging.getLogger(__name__)

CC_ON_THRESHOLD = 64


def ticks_per_step (note_length: str = melodyseq.constants.pulses.DEFAULT_NOTE_LENGTH, ticks_per_beat: int = melodyseq.constants.TICKS_PER_BEAT) -> int:

	"""Ticks between grid steps for a subdivision such as ``"16n"``.

	Unknown subdivisions fall back to sixteenths.
	"""

	ticks = melodyseq.constants.pulses.STEP_TICKS.get(note_length)

	if ticks is None:
		logger.warning(f"Unknown note length {note_length!r}, using {melodyseq.constants.pulses.DEFAULT_NOTE_LENGTH}")
		ticks = melodyseq.constants.pulses.STEP_TICKS[melodyseq.constants.pulses.DEFAULT_NOTE_LENGTH]

	return ticks * ticks_per_beat // melodyseq.constants.pulses.TICKS_PER_BEAT


def grid_to_sequence (
	grid: melodyseq.pattern.Grid,
	note_length: str = melodyseq.constants.pulses.DEFAULT_NOTE_LENGTH,
	bpm: float = melodyseq.constants.DEFAULT_BPM,
	gate: float = melodyseq.constants.pulses.DEFAULT_GATE,
	accent_boost: bool = True
) -> melodyseq.pattern.NoteSequence:

	"""Flatten an editor grid into a tick-timed sequence.

	Each active cell becomes a note starting at ``step * ticks_per_step``
	and lasting ``gate`` of a step. Accented cells are played 20% louder
	(capped at 127) unless ``accent_boost`` is False.
	"""

	step_ticks = ticks_per_step(note_length)
	duration = max(1, int(round(step_ticks * gate)))
	notes: typing.List[melodyseq.pattern.NoteEvent] = []

	for name, cells in grid.items():

		for step, cell in enumerate(cells):

			if cell is None or not cell.on:
				continue

			velocity = cell.velocity

			if cell.accent and accent_boost:
				velocity = velocity * melodyseq.constants.velocity.ACCENT_BOOST

			notes.append(melodyseq.pattern.NoteEvent(
				position = step * step_ticks,
				pitch = melodyseq.scales.note_name_to_midi(name),
				velocity = melodyseq.pattern.clamp_velocity(velocity),
				duration = duration,
				accent = cell.accent,
				slide = cell.slide
			))

	return melodyseq.pattern.NoteSequence(notes=tuple(melodyseq.pattern.sort_notes(notes)), bpm=bpm)


def steps_to_sequence (
	notes: typing.Iterable[melodyseq.pattern.NoteEvent],
	note_length: str = melodyseq.constants.pulses.DEFAULT_NOTE_LENGTH,
	bpm: float = melodyseq.constants.DEFAULT_BPM,
	gate: float = melodyseq.constants.pulses.DEFAULT_GATE
) -> melodyseq.pattern.NoteSequence:

	"""Convert step-positioned notes (as ``generate()`` returns them) to ticks.

	A note held for several steps sounds through all but the gated tail of
	its last step. Accents get the same boost as in ``grid_to_sequence()``.
	"""

	step_ticks = ticks_per_step(note_length)
	converted: typing.List[melodyseq.pattern.NoteEvent] = []

	for note in notes:

		velocity = note.velocity

		if note.accent:
			velocity = velocity * melodyseq.constants.velocity.ACCENT_BOOST

		converted.append(note.with_changes(
			position = int(round(note.position * step_ticks)),
			pitch = note.note_number,
			velocity = melodyseq.pattern.clamp_velocity(velocity),
			duration = max(1, int(round(step_ticks * (note.duration - 1 + gate))))
		))

	return melodyseq.pattern.NoteSequence(notes=tuple(melodyseq.pattern.sort_notes(converted)), bpm=bpm)


def events_to_grid (
	notes: typing.Iterable[melodyseq.pattern.NoteEvent],
	step_count: int,
	note_names: typing.Optional[typing.Sequence[str]] = None
) -> melodyseq.pattern.Grid:

	"""Lay step-positioned notes out as an editor grid.

	A note fills every step it covers. Notes are written in order, so a
	later note overwrites an earlier one on the same cell. Rows listed in
	``note_names`` are always present, even when empty.

	Parameters:
		notes: Notes positioned in grid steps.
		step_count: Number of cells per row; notes beyond it are clipped.
		note_names: Optional row names to create up front (e.g. a built scale).
	"""

	grid: melodyseq.pattern.Grid = {}

	for name in note_names or []:
		grid[melodyseq.scales.midi_to_note_name(melodyseq.scales.note_name_to_midi(name))] = [None] * step_count

	for note in notes:

		name = melodyseq.scales.midi_to_note_name(note.note_number)
		row = grid.setdefault(name, [None] * step_count)
		start = int(note.position)
		stop = min(step_count, start + max(1, int(math.ceil(note.duration))))

		for step in range(start, stop):
			row[step] = melodyseq.pattern.GridCell(on=True, velocity=note.velocity, accent=note.accent, slide=note.slide)

	return grid


def sequence_to_grid (
	sequence: melodyseq.pattern.NoteSequence,
	note_length: str = melodyseq.constants.pulses.DEFAULT_NOTE_LENGTH,
	step_count: typing.Optional[int] = None
) -> melodyseq.pattern.Grid:

	"""Snap a tick-timed sequence onto the nearest grid steps.

	Every note occupies the single step its onset rounds to; velocities are
	copied as they are. ``step_count`` defaults to enough steps to hold the
	last onset.
	"""

	step_ticks = ticks_per_step(note_length, sequence.ticks_per_beat)

	steps = [
		melodyseq.pattern.NoteEvent(
			position = int(round(note.position / step_ticks)),
			pitch = note.note_number,
			velocity = note.velocity,
			duration = 1,
			accent = note.accent,
			slide = note.slide
		)
		for note in sequence.notes
	]

	if step_count is None:
		step_count = max((int(note.position) + 1 for note in steps), default=0)

	return events_to_grid(steps, step_count)


class MidiWriter:

	"""
	Assembles a single-track Standard MIDI File.

	Events must be appended in time order; each is written with a delta
	time relative to the previous event.
	"""

	def __init__ (self, ticks_per_beat: int = melodyseq.constants.TICKS_PER_BEAT) -> None:

		if not 0 < ticks_per_beat < 0x8000:
			raise melodyseq.exceptions.EncodingError(f"ticks_per_beat must be between 1 and 32767, got {ticks_per_beat}")

		self.ticks_per_beat = ticks_per_beat
		self._track = bytearray()
		self._last_tick = 0
		self._ended = False

	def append_variable_length_quantity (self, value: int) -> None:

		"""Write a variable-length quantity: 7 bits per byte, most significant group first, high bit set on all but the last byte."""

		if value < 0:
			raise melodyseq.exceptions.EncodingError(f"Variable-length quantity cannot be negative, got {value}")

		if value > 0x0FFFFFFF:
			raise melodyseq.exceptions.EncodingError(f"Variable-length quantity too large: {value}")

		groups = [value & 0x7F]
		value >>= 7

		while value:
			groups.append((value & 0x7F) | 0x80)
			value >>= 7

		self._track.extend(reversed(groups))

	def append_event (self, tick: int, message: typing.Union[mido.Message, mido.MetaMessage]) -> None:

		"""Write one message at an absolute tick."""

		if self._ended:
			raise melodyseq.exceptions.EncodingError("Cannot append events after end of track")

		if tick < self._last_tick:
			raise melodyseq.exceptions.EncodingError(f"Events out of order: tick {tick} after {self._last_tick}")

		self.append_variable_length_quantity(tick - self._last_tick)
		self._track.extend(message.bytes())
		self._last_tick = tick

		if message.type == "end_of_track":
			self._ended = True

	def to_bytes (self) -> bytes:

		"""Return the complete file, closing the track if needed."""

		if not self._ended:
			self.append_event(self._last_tick, mido.MetaMessage("end_of_track"))

		header = b"MThd" + struct.pack(">IHHH", 6, 0, 1, self.ticks_per_beat)
		track = b"MTrk" + struct.pack(">I", len(self._track)) + bytes(self._track)

		return header + track


def _note_events (index: int, note: melodyseq.pattern.NoteEvent, start: int, end: int) -> typing.List[typing.Tuple[typing.Tuple[int, int, int, int], typing.List[mido.Message]]]:

	"""Build the on and off message groups for one note, each with its sort key."""

	pitch = note.note_number

	if not 0 <= pitch <= 127:
		raise melodyseq.exceptions.EncodingError(f"Pitch {pitch} is outside the MIDI range")

	on: typing.List[mido.Message] = []
	off: typing.List[mido.Message] = [mido.Message("note_off", note=pitch, velocity=0)]

	if note.accent:
		on.append(mido.Message("control_change", control=melodyseq.constants.pulses.CC_ACCENT, value=127))
		off.append(mido.Message("control_change", control=melodyseq.constants.pulses.CC_ACCENT, value=0))

	if note.slide:
		on.append(mido.Message("control_change", control=melodyseq.constants.pulses.CC_SLIDE, value=127))
		off.append(mido.Message("control_change", control=melodyseq.constants.pulses.CC_SLIDE, value=0))

	on.append(mido.Message("note_on", note=pitch, velocity=note.velocity))

	# Note-offs sort before note-ons on the same tick so repeated pitches retrigger cleanly.
	return [
		((end, 0, pitch, index), off),
		((start, 1, pitch, index), on),
	]


def encode (sequence: melodyseq.pattern.NoteSequence) -> bytes:

	"""Encode a note sequence as Standard MIDI File bytes.

	Positions and durations are rounded to whole ticks (durations to at
	least one tick). When notes of the same pitch overlap, the earliest
	note-off closes the earliest onset, so an overlapping pair may come
	back from ``decode`` with its durations exchanged.

	Raises:
		EncodingError: If a pitch is outside 0–127.
	"""

	writer = MidiWriter(sequence.ticks_per_beat)
	writer.append_event(0, mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(sequence.bpm)))

	ordered = sorted(
		sequence.notes,
		key = lambda note: (round(note.position), note.note_number, round(note.duration), note.velocity, note.accent, note.slide)
	)

	starts = [int(round(note.position)) for note in ordered]
	ends = [start + max(1, int(round(note.duration))) for start, note in zip(starts, ordered)]

	# Overlapping notes of one pitch are released oldest first, which is how decode pairs them.
	by_pitch: typing.Dict[int, typing.List[int]] = {}

	for index, note in enumerate(ordered):
		by_pitch.setdefault(note.note_number, []).append(index)

	for indices in by_pitch.values():
		for index, end in zip(indices, sorted(ends[i] for i in indices)):
			ends[index] = end

	groups = []

	for index, note in enumerate(ordered):
		groups.extend(_note_events(index, note, starts[index], ends[index]))

	groups.sort(key=lambda group: group[0])

	for (tick, _, _, _), messages in groups:
		for message in messages:
			writer.append_event(tick, message)

	return writer.to_bytes()


def decode (data: bytes) -> melodyseq.pattern.NoteSequence:

	"""Decode Standard MIDI File bytes into a note sequence.

	All tracks and channels are merged. A CC 16 or CC 17 value of 64 or
	more marks the next note-on as accented or sliding. Note-offs close the
	oldest open note of the same pitch. A note left open at the end of the
	file gets a sixteenth-note duration and a warning is logged.

	Raises:
		EncodingError: If the bytes are not a readable MIDI file.
	"""

	if not data:
		raise melodyseq.exceptions.EncodingError("MIDI data is empty")

	try:
		midi_file = mido.MidiFile(file=io.BytesIO(bytes(data)))
	except (OSError, EOFError, ValueError, KeyError, IndexError, TypeError) as exc:
		raise melodyseq.exceptions.EncodingError(f"Cannot parse MIDI data: {exc}") from exc

	ticks_per_beat = midi_file.ticks_per_beat

	if not ticks_per_beat or ticks_per_beat <= 0:
		raise melodyseq.exceptions.EncodingError(f"Unsupported time division: {ticks_per_beat}")

	sixteenth = max(1, ticks_per_beat // 4)

	if not midi_file.tracks:
		raise melodyseq.exceptions.EncodingError("MIDI data has no tracks")

	tempo: typing.Optional[int] = None
	tick = 0
	pending_accent = False
	pending_slide = False
	open_notes: typing.Dict[int, typing.List[typing.Tuple[int, int, bool, bool]]] = {}
	records: typing.List[typing.Dict[str, typing.Any]] = []

	for message in mido.merge_tracks(midi_file.tracks):

		tick += message.time

		if message.type == "set_tempo" and tempo is None:
			tempo = message.tempo

		elif message.type == "control_change" and message.control == melodyseq.constants.pulses.CC_ACCENT:
			if message.value >= CC_ON_THRESHOLD:
				pending_accent = True

		elif message.type == "control_change" and message.control == melodyseq.constants.pulses.CC_SLIDE:
			if message.value >= CC_ON_THRESHOLD:
				pending_slide = True

		elif message.type == "note_on" and message.velocity > 0:
			open_notes.setdefault(message.note, []).append((tick, message.velocity, pending_accent, pending_slide))
			pending_accent = False
			pending_slide = False

		elif message.type == "note_off" or (message.type == "note_on" and message.velocity == 0):

			started = open_notes.get(message.note)

			if not started:
				logger.debug(f"Ignoring note-off without note-on (pitch {message.note} at tick {tick})")
				continue

			start, velocity, accent, slide = started.pop(0)
			records.append({"position": start, "pitch": message.note, "velocity": velocity, "duration": tick - start, "accent": accent, "slide": slide})

	for pitch, started in open_notes.items():
		for start, velocity, accent, slide in started:
			logger.warning(f"Note {pitch} at tick {start} has no note-off, using a sixteenth-note duration")
			records.append({"position": start, "pitch": pitch, "velocity": velocity, "duration": sixteenth, "accent": accent, "slide": slide})

	# Zero-length notes (note-on and note-off on the same tick) are given a sixteenth.
	notes = [melodyseq.pattern.note_from_mapping(record, index, default_duration=sixteenth) for index, record in enumerate(records)]

	bpm = mido.tempo2bpm(tempo) if tempo else melodyseq.constants.DEFAULT_BPM

	return melodyseq.pattern.NoteSequence(
		notes = tuple(melodyseq.pattern.sort_notes(notes)),
		ticks_per_beat = ticks_per_beat,
		bpm = bpm
	)


def write_file (path: typing.Union[str, os.PathLike], sequence: melodyseq.pattern.NoteSequence) -> None:

	"""Encode a sequence and save it as a ``.mid`` file."""

	data = encode(sequence)

	with open(path, "wb") as f:
		f.write(data)

	logger.info(f"Saved {len(sequence)} notes to {path}")


def read_file (path: typing.Union[str, os.PathLike]) -> melodyseq.pattern.NoteSequence:

	"""Load and decode a ``.mid`` file."""

	with open(path, "rb") as f:
		return decode(f.read())
