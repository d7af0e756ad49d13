import typing

import melodyseq.exceptions
import melodyseq.pattern


# Fraction of a sixteenth within which an onset still counts as sitting on it.
GRID_TOLERANCE = 1 / 12


def swing_ticks (swing_amount: float, ticks_per_beat: int) -> int:

	"""
	Delay applied to swung notes: half a beat at full swing.
	"""

	return int(round(ticks_per_beat * swing_amount * 0.5))


def is_offbeat_sixteenth (position: float, ticks_per_beat: int) -> bool:

	"""True if ``position`` falls on (or within a few ticks of) an odd sixteenth of the beat."""

	sixteenth = ticks_per_beat / 4
	step = round(position / sixteenth)

	return step % 2 == 1 and abs(position - step * sixteenth) <= sixteenth * GRID_TOLERANCE


def apply_swing (
	notes: typing.Iterable[melodyseq.pattern.NoteEvent],
	swing_amount: float,
	ticks_per_beat: int
) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Push the off-beat sixteenths of a tick-timed note list later.

	Every note on an odd sixteenth (the "e" and "a" of each beat) is delayed
	by ``swing_ticks(swing_amount, ticks_per_beat)``. Notes on even
	sixteenths are untouched. Order is preserved.

	Example:
		```python
		# 50% swing at 480 ticks per beat delays the second sixteenth by 120 ticks.
		apply_swing([NoteEvent(120, 60)], 0.5, 480)[0].position  # → 240
		```
	"""

	if not 0 <= swing_amount <= 1:
		raise melodyseq.exceptions.ValidationError(f"Swing amount must be between 0 and 1, got {swing_amount}")

	if ticks_per_beat <= 0:
		raise melodyseq.exceptions.ValidationError("Ticks per beat must be positive")

	delay = swing_ticks(swing_amount, ticks_per_beat)

	if delay == 0:
		return list(notes)

	return [
		note.with_changes(position=note.position + delay) if is_offbeat_sixteenth(note.position, ticks_per_beat) else note
		for note in notes
	]
