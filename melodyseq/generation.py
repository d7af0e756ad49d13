import logging
import typing

import melodyseq.intervals
import melodyseq.midi_codec
import melodyseq.mood
import melodyseq.parameters
import melodyseq.parts
import melodyseq.parts.arpeggio
import melodyseq.parts.bassline
import melodyseq.parts.hypnotic_lead
import melodyseq.parts.lead
import melodyseq.parts.pad
import melodyseq.pattern
import melodyseq.scales
import melodyseq.seeded_random


logger = logging.getLogger(__name__)


PART_GENERATORS: typing.Dict[melodyseq.parameters.Part, melodyseq.parts.PartGenerator] = {
	melodyseq.parameters.Part.BASSLINE: melodyseq.parts.bassline.Bassline(),
	melodyseq.parameters.Part.LEAD: melodyseq.parts.lead.Lead(),
	melodyseq.parameters.Part.PAD: melodyseq.parts.pad.Pad(),
	melodyseq.parameters.Part.ARPEGGIO: melodyseq.parts.arpeggio.Arpeggio(),
	melodyseq.parameters.Part.HYPNOTIC_LEAD: melodyseq.parts.hypnotic_lead.HypnoticLead(),
}


def generate (
	parameters: melodyseq.parameters.GenerationParameters,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> typing.List[melodyseq.pattern.NoteEvent]:

	"""Generate a pattern for one part.

	Parameters are validated first; nothing is generated if they are out of
	range. The part strategy runs with a random stream created for this
	call only, then the mood post-processing runs exactly once.

	Parameters:
		parameters: What to generate.
		registry: Scale registry for user scales. Defaults to the built-in table.

	Returns:
		Notes positioned in grid steps, sorted by step then pitch. Every
		pitch is a note name from ``build_scale()`` for the same root, scale
		and octaves. The list may be empty; that is a valid outcome.

	Raises:
		ValidationError: If the parameters are invalid.

	Example:
		```python
		notes = generate(GenerationParameters(part="bassline", style="psy", root="C", scale_name="minor", step_count=16, seed=42))
		assert notes == generate(GenerationParameters(part="bassline", style="psy", root="C", scale_name="minor", step_count=16, seed=42))
		```
	"""

	parameters.validate()

	scale_notes = melodyseq.scales.build_scale(
		parameters.root,
		parameters.scale_name,
		parameters.octave_min,
		parameters.octave_max,
		registry = registry
	)

	rng = melodyseq.seeded_random.create(parameters.seed)
	context = melodyseq.parts.GenerationContext(parameters=parameters, scale_notes=tuple(scale_notes))
	part = typing.cast(melodyseq.parameters.Part, parameters.part)

	notes = PART_GENERATORS[part].generate(context, rng)
	notes = melodyseq.mood.apply_mood(notes, parameters.mood, scale_notes, parameters.step_count, rng)
	notes = melodyseq.pattern.sort_notes(notes)

	if not notes:
		logger.info(f"No notes generated for {part.value} ({parameters.root} {parameters.scale_name}, {parameters.step_count} steps)")

	else:
		logger.debug(f"Generated {len(notes)} notes for {part.value} with seed {rng.seed}")

	return notes


def generate_grid (
	parameters: melodyseq.parameters.GenerationParameters,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> melodyseq.pattern.Grid:

	"""
	Generate a pattern and lay it out as an editor grid covering the whole scale.
	"""

	notes = generate(parameters, registry=registry)

	scale_notes = melodyseq.scales.build_scale(
		parameters.root,
		parameters.scale_name,
		parameters.octave_min,
		parameters.octave_max,
		registry = registry
	)

	return melodyseq.midi_codec.events_to_grid(notes, parameters.step_count, note_names=scale_notes)
