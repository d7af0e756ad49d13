import logging
import math
import typing

import melodyseq.constants.velocity
import melodyseq.parameters
import melodyseq.pattern
import melodyseq.seeded_random


logger = logging.getLogger(__name__)

DENSITY_RATIO = 0.3


def adjust_velocity (notes: typing.Iterable[melodyseq.pattern.NoteEvent], mood: typing.Union[melodyseq.parameters.Mood, str]) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Shift every note's velocity for a mood.

	``dark`` takes 30 off (never below 35), ``uplifting`` adds 15 (never above
	127). Other moods leave velocities unchanged. Returns new notes.

	Example:
		```python
		adjust_velocity([NoteEvent(0, "C3", velocity=100)], "dark")[0].velocity  # → 70
		```
	"""

	mood = melodyseq.parameters.Mood(mood)

	if mood is melodyseq.parameters.Mood.DARK:
		return [
			note.with_changes(velocity=max(melodyseq.constants.velocity.DARK_FLOOR, note.velocity + melodyseq.constants.velocity.DARK_OFFSET))
			for note in notes
		]

	if mood is melodyseq.parameters.Mood.UPLIFTING:
		return [
			note.with_changes(velocity=min(melodyseq.constants.velocity.MAX_VELOCITY, note.velocity + melodyseq.constants.velocity.UPLIFTING_OFFSET))
			for note in notes
		]

	return list(notes)


def add_density (
	notes: typing.List[melodyseq.pattern.NoteEvent],
	scale_notes: typing.Sequence[str],
	step_count: int,
	rng: melodyseq.seeded_random.SeededRandom
) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Scatter extra notes from the scale over the pattern.

	Makes ``floor(0.3 * step_count)`` attempts; each picks a pitch and a
	step and is skipped when that pair is already taken, so the number of
	added notes can be lower.
	"""

	if not scale_notes:
		return list(notes)

	result = list(notes)
	occupied = {(note.position, note.pitch) for note in result}
	attempts = math.floor(step_count * DENSITY_RATIO)

	for _ in range(attempts):

		pitch = scale_notes[rng.below(len(scale_notes))]
		step = rng.below(step_count)

		if (step, pitch) in occupied:
			continue

		velocity = math.floor(80 + rng.random() * 45)
		occupied.add((step, pitch))
		result.append(melodyseq.pattern.NoteEvent(position=step, pitch=pitch, velocity=min(melodyseq.constants.velocity.MAX_VELOCITY, velocity)))

	logger.debug(f"Density added {len(result) - len(notes)} of {attempts} notes")

	return result


def apply_mood (
	notes: typing.Iterable[melodyseq.pattern.NoteEvent],
	mood: typing.Union[melodyseq.parameters.Mood, str],
	scale_notes: typing.Sequence[str],
	step_count: int,
	rng: melodyseq.seeded_random.SeededRandom
) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Post-process a freshly generated pattern for its mood.

	Apply exactly once per generation: ``dense`` adds notes every time it
	runs, so a second pass would keep thickening the pattern.
	"""

	mood = melodyseq.parameters.Mood(mood)
	result = adjust_velocity(notes, mood)

	if mood is melodyseq.parameters.Mood.DENSE:
		result = add_density(result, scale_notes, step_count, rng)

	return result
