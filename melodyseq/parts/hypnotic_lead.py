import dataclasses
import math
import typing

import melodyseq.constants.velocity
import melodyseq.parameters
import melodyseq.parts
import melodyseq.pattern
import melodyseq.seeded_random
import melodyseq.sequence_utils


# Envelope: one slow swell per macro cycle with a faster ripple on top.
CYCLE_LENGTH = 32
MACRO_DEPTH = 0.2
RIPPLE_CYCLES = 3
RIPPLE_DEPTH = 0.1
ENVELOPE_CENTER = 0.7
VELOCITY_SPREAD = 15

DIRECTION_PERIOD = 16
DIRECTION_FLIP_PROBABILITY = 0.3
COUNTER_MOVE_PROBABILITY = 0.3


@dataclasses.dataclass
class WalkSettings:

	"""
	Per-call tuning of the hypnotic walk.
	"""

	jump_range: int = 3
	return_to_root: float = 0.3
	silence: float = 0.2
	base_velocity: int = 85


def walk_settings (style: melodyseq.parameters.Style, mood: melodyseq.parameters.Mood) -> WalkSettings:

	"""Derive walk settings from style first, then adjust for mood."""

	settings = WalkSettings()

	if style is melodyseq.parameters.Style.GOA:
		settings = WalkSettings(jump_range=4, return_to_root=0.4, silence=0.15, base_velocity=100)

	elif style is melodyseq.parameters.Style.PROG:
		settings = WalkSettings(jump_range=2, return_to_root=0.5, silence=0.3, base_velocity=75)

	if mood is melodyseq.parameters.Mood.DARK:
		settings.jump_range = max(1, settings.jump_range - 1)
		settings.silence += 0.1
		settings.base_velocity -= 15

	elif mood is melodyseq.parameters.Mood.UPLIFTING:
		settings.jump_range += 1
		settings.silence = max(0.1, settings.silence - 0.1)
		settings.base_velocity += 20

	return settings


def envelope (step: int) -> float:

	"""Intensity multiplier for a step: 0.7 plus two sine waves over a 32-step cycle."""

	position = (step % CYCLE_LENGTH) / CYCLE_LENGTH

	return (
		ENVELOPE_CENTER
		+ math.sin(position * math.pi * 2) * MACRO_DEPTH
		+ math.sin(position * math.pi * 2 * RIPPLE_CYCLES) * RIPPLE_DEPTH
	)


class HypnoticLead (melodyseq.parts.PartGenerator):

	"""Long evolving lead for trance-like builds.

	The line starts on a root in the middle of the range and drifts in one
	direction, which may flip every 16 steps. On each step it may rest, jump
	back to one of the roots, or move: goa jumps freely within its range,
	other styles step mostly in the current direction with the occasional
	counter move. Velocity follows a slow swell with a faster ripple.
	"""

	def generate (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom) -> typing.List[melodyseq.pattern.NoteEvent]:

		roots = context.root_indices()

		if not roots:
			return []

		settings = walk_settings(context.style, context.mood)
		current = roots[len(roots) // 2]
		direction = 1
		notes: typing.List[melodyseq.pattern.NoteEvent] = []

		for step in range(context.steps):

			if step > 0 and step % DIRECTION_PERIOD == 0 and rng.random() < DIRECTION_FLIP_PROBABILITY:
				direction = -direction

			if rng.random() < settings.silence:
				continue

			if rng.random() < settings.return_to_root:
				current = rng.choice(roots)

			elif context.style is melodyseq.parameters.Style.GOA:
				jump = math.floor(rng.random() * settings.jump_range * 2) - settings.jump_range
				current = context.clamp_index(current + jump)

			else:
				current = self._directed_move(context, rng, current, direction, settings.jump_range)

			velocity = melodyseq.sequence_utils.clamp(
				settings.base_velocity * envelope(step) + (rng.random() - 0.5) * VELOCITY_SPREAD,
				melodyseq.constants.velocity.ENVELOPE_FLOOR,
				melodyseq.constants.velocity.MAX_VELOCITY
			)

			notes.append(context.note(step, current, math.floor(velocity)))

		return notes

	def _directed_move (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom, current: int, direction: int, jump_range: int) -> int:

		candidates: typing.List[int] = []

		for distance in range(1, jump_range + 1):

			forward = current + distance * direction
			backward = current - distance * direction

			if 0 <= forward <= context.last_index:
				candidates.append(forward)

			if rng.random() < COUNTER_MOVE_PROBABILITY and 0 <= backward <= context.last_index:
				candidates.append(backward)

		if not candidates:
			return current

		return rng.choice(candidates)
