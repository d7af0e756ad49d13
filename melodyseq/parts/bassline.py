import math
import typing

import melodyseq.parameters
import melodyseq.parts
import melodyseq.pattern
import melodyseq.seeded_random


MUTE_LAST_PROBABILITY = 0.1
VARY_PROBABILITY = 0.15
PROG_FIFTH_PROBABILITY = 0.2
FILL_PROBABILITY = 0.25


class Bassline (melodyseq.parts.PartGenerator):

	"""Root-anchored basslines.

	- **goa / psy**: the rolling off-beat bass. Every step except the kick
	  steps (multiples of 4) sounds, mostly on the root with an occasional
	  swap to the second, fifth or octave, in a narrow loud velocity band.
	  The very last step is sometimes dropped to leave a gap before the loop.
	- **prog**: sparse hits every fourth step (the third sixteenth of each
	  beat), on the root or, one time in five, the fifth.
	- **other styles**: root on every downbeat plus sparse fills from the
	  degree pool.
	"""

	def generate (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom) -> typing.List[melodyseq.pattern.NoteEvent]:

		roots = context.root_indices()

		if not roots:
			return []

		root = roots[0]
		second = context.clamp_index(root + 1)
		fifth = context.clamp_index(root + 4)
		degrees_per_octave = len(context.scale_notes) // (context.parameters.octave_max - context.parameters.octave_min + 1)
		octave = context.clamp_index(root + degrees_per_octave)
		pool = [root, fifth, second, octave]

		if context.style in melodyseq.parts.ENERGETIC_STYLES:
			return self._rolling(context, rng, root, pool)

		if context.style is melodyseq.parameters.Style.PROG:
			return self._sparse(context, rng, root, fifth)

		return self._downbeat(context, rng, root, pool)

	def _rolling (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom, root: int, pool: typing.List[int]) -> typing.List[melodyseq.pattern.NoteEvent]:

		notes: typing.List[melodyseq.pattern.NoteEvent] = []

		for i in range(context.steps):

			if i % 4 == 0:
				continue

			if i == context.steps - 1 and rng.random() < MUTE_LAST_PROBABILITY:
				continue

			index = rng.choice(pool) if rng.random() < VARY_PROBABILITY else root
			notes.append(context.note(i, index, math.floor(90 + rng.random() * 30)))

		return notes

	def _sparse (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom, root: int, fifth: int) -> typing.List[melodyseq.pattern.NoteEvent]:

		notes: typing.List[melodyseq.pattern.NoteEvent] = []

		for i in range(2, context.steps, 4):
			index = fifth if rng.random() < PROG_FIFTH_PROBABILITY else root
			notes.append(context.note(i, index, 115))

		return notes

	def _downbeat (self, context: melodyseq.parts.GenerationContext, rng: melodyseq.seeded_random.SeededRandom, root: int, pool: typing.List[int]) -> typing.List[melodyseq.pattern.NoteEvent]:

		notes: typing.List[melodyseq.pattern.NoteEvent] = []

		for i in range(context.steps):

			if i % 4 == 0:
				notes.append(context.note(i, root, math.floor(85 + rng.random() * 15)))

			elif rng.random() < FILL_PROBABILITY:
				index = rng.choice(pool)
				notes.append(context.note(i, index, math.floor(60 + rng.random() * 40)))

		return notes
