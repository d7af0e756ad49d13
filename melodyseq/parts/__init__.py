"""
Part generators: one strategy per structural role.

Each strategy draws its pitches from the scale built for the call, so no
strategy can emit a note outside the requested scale and octave range.
Positions and durations are grid steps.
"""

import abc
import dataclasses
import typing

import melodyseq.parameters
import melodyseq.pattern
import melodyseq.scales
import melodyseq.seeded_random
import melodyseq.sequence_utils


@dataclasses.dataclass (frozen=True)
class GenerationContext:

	"""
	Validated parameters plus the scale built from them.
	"""

	parameters: melodyseq.parameters.GenerationParameters
	scale_notes: typing.Tuple[str, ...]

	@property
	def steps (self) -> int:

		return self.parameters.step_count

	@property
	def style (self) -> melodyseq.parameters.Style:

		return typing.cast(melodyseq.parameters.Style, self.parameters.style)

	@property
	def mood (self) -> melodyseq.parameters.Mood:

		return typing.cast(melodyseq.parameters.Mood, self.parameters.mood)

	@property
	def last_index (self) -> int:

		return len(self.scale_notes) - 1

	def root_indices (self) -> typing.List[int]:

		return melodyseq.scales.root_indices(self.scale_notes, self.parameters.root)

	def clamp_index (self, index: int) -> int:

		return melodyseq.sequence_utils.clamp(index, 0, self.last_index)

	def note (self, step: int, index: int, velocity: float, duration: int = 1) -> melodyseq.pattern.NoteEvent:

		"""
		Build a note at a grid step from a scale index.
		"""

		return melodyseq.pattern.NoteEvent(
			position = step,
			pitch = self.scale_notes[index],
			velocity = melodyseq.pattern.clamp_velocity(velocity),
			duration = duration
		)


class PartGenerator (abc.ABC):

	"""Abstract base for part strategies."""

	@abc.abstractmethod
	def generate (self, context: GenerationContext, rng: melodyseq.seeded_random.SeededRandom) -> typing.List[melodyseq.pattern.NoteEvent]:

		"""Return the notes for this part. An empty list is a valid result."""

		...


# Styles that push the bass off the kick and play the lead with a tight motif.
ENERGETIC_STYLES = frozenset({melodyseq.parameters.Style.GOA, melodyseq.parameters.Style.PSY})
