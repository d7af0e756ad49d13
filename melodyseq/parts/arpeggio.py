import math
import typing

import melodyseq.parts
import melodyseq.pattern
import melodyseq.seeded_random


MOVES = [-2, -1, 1, 2]


class Arpeggio (melodyseq.parts.PartGenerator):

	"""
	One note per step, wandering up and down the scale by one or two degrees from the middle of the range.
	"""

	def generate (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom) -> typing.List[melodyseq.pattern.NoteEvent]:

		index = len(context.scale_notes) // 2
		notes: typing.List[melodyseq.pattern.NoteEvent] = []

		for t in range(context.steps):
			notes.append(context.note(t, index, math.floor(90 + rng.random() * 25)))
			index = context.clamp_index(index + rng.choice(MOVES))

		return notes
