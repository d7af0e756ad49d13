import math
import typing

import melodyseq.parameters
import melodyseq.parts
import melodyseq.pattern
import melodyseq.seeded_random


class Pad (melodyseq.parts.PartGenerator):

	"""
	Long held notes in the upper half of the range.

	A new note starts every 4 steps (8 for prog) and holds for 3 steps
	(7 for deep), cut short at the end of the pattern.
	"""

	def generate (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom) -> typing.List[melodyseq.pattern.NoteEvent]:

		upper = len(context.scale_notes) // 2
		interval = 8 if context.style is melodyseq.parameters.Style.PROG else 4
		hold = 7 if context.style is melodyseq.parameters.Style.DEEP else 3

		notes: typing.List[melodyseq.pattern.NoteEvent] = []

		for t in range(0, context.steps, interval):
			index = upper + rng.below(len(context.scale_notes) - upper)
			velocity = math.floor(60 + rng.random() * 25)
			notes.append(context.note(t, index, velocity, duration=min(hold, context.steps - t)))

		return notes
