import math
import typing

import melodyseq.parameters
import melodyseq.parts
import melodyseq.pattern
import melodyseq.seeded_random
import melodyseq.sequence_utils


NEARBY_OFFSETS = [-3, -2, -1, 1, 2, 3]
TRIPLET_PROBABILITY = 0.25
HOOK_VELOCITY = 100


class Lead (melodyseq.parts.PartGenerator):

	"""Motif-based lead lines.

	A short motif is built by walking away from a root in the middle of the
	range, then tiled across the pattern. Goa uses an 8-step motif that
	rarely rests and leans on the tonic, the degree above it and the fifth
	(40/30/20/10 with the last tenth going to a nearby degree). Other styles
	use a 16-step motif with a plain random walk and frequent rests.

	Psy sometimes re-times the motif in threes (``(t * 3) % steps``), and
	prog adds fixed hook notes on top of the motif.
	"""

	def generate (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom) -> typing.List[melodyseq.pattern.NoteEvent]:

		roots = context.root_indices()

		if not roots:
			return []

		anchor = roots[len(roots) // 2]
		second = context.clamp_index(anchor + 1)
		fifth = context.clamp_index(anchor + 4)
		goa = context.style is melodyseq.parameters.Style.GOA

		motif_length = 8 if goa else 16
		base_velocity = 105 if goa else 95
		silence_probability = 0.05 if goa else 0.4

		motif: typing.List[typing.Optional[int]] = []
		current = anchor

		for i in range(motif_length):

			if i != 0 and rng.random() <= silence_probability:
				motif.append(None)
				continue

			if i != 0:
				if goa:
					current = self._weighted_next(context, rng, current, anchor, second, fifth)
				else:
					current = context.clamp_index(current + math.floor(rng.random() * 5) - 2)

			motif.append(current)

		triplet = context.style is melodyseq.parameters.Style.PSY and rng.random() < TRIPLET_PROBABILITY
		notes: typing.List[melodyseq.pattern.NoteEvent] = []

		for t in range(context.steps):

			position = (t * 3) % context.steps if triplet else t
			index = motif[position % motif_length]

			if index is not None:
				notes.append(context.note(t, index, math.floor(base_velocity + rng.random() * 25)))

		if context.style is melodyseq.parameters.Style.PROG:
			hooks = self._hooks(context, anchor, fifth)
			occupied = {(hook.position, hook.pitch) for hook in hooks}
			notes = [note for note in notes if (note.position, note.pitch) not in occupied] + hooks

		return notes

	def _weighted_next (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom, current: int, anchor: int, second: int, fifth: int) -> int:

		target = melodyseq.sequence_utils.weighted_choice([
			("tonic", 0.4),
			("second", 0.3),
			("fifth", 0.2),
			("nearby", 0.1),
		], rng)

		if target == "tonic":
			return anchor

		if target == "second":
			return second

		if target == "fifth":
			return fifth

		return context.clamp_index(current + rng.choice(NEARBY_OFFSETS))

	def _hooks (self, context: melodyseq.parts.GenerationContext, anchor: int, fifth: int) -> typing.List[melodyseq.pattern.NoteEvent]:

		hooks = [context.note(0, anchor, HOOK_VELOCITY)]

		if context.steps >= 32:
			hooks.append(context.note(16, anchor, HOOK_VELOCITY))

		hooks.append(context.note(context.steps // 2, fifth, HOOK_VELOCITY))

		return hooks
