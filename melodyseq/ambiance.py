import dataclasses
import logging
import math
import typing

import melodyseq.exceptions
import melodyseq.generation
import melodyseq.intervals
import melodyseq.parameters
import melodyseq.pattern
import melodyseq.scales
import melodyseq.seeded_random


logger = logging.getLogger(__name__)


@dataclasses.dataclass (frozen=True)
class AmbiancePreset:

	"""
	A named palette of scales, styles, moods and parts to pick from.
	"""

	name: str
	description: str
	scales: typing.Tuple[str, ...]
	styles: typing.Tuple[str, ...]
	moods: typing.Tuple[str, ...]
	parts: typing.Tuple[str, ...]
	tempo_range: typing.Tuple[int, int]
	density: float
	synth_presets: typing.Tuple[str, ...]


AMBIANCE_PRESETS: typing.Dict[str, AmbiancePreset] = {
	"nostalgique": AmbiancePreset(
		name = "Nostalgique",
		description = "Soft, melancholic melodies",
		scales = ("minor", "dorian", "harmonicMinor"),
		styles = ("deep", "prog"),
		moods = ("dark",),
		parts = ("pad", "lead"),
		tempo_range = (80, 110),
		density = 0.4,
		synth_presets = ("pad", "bell")
	),
	"energique": AmbiancePreset(
		name = "Énergique",
		description = "Driving, punchy patterns",
		scales = ("phrygian", "phrygianDominant", "minor"),
		styles = ("goa", "psy"),
		moods = ("uplifting",),
		parts = ("bassline", "lead", "arpeggio"),
		tempo_range = (130, 160),
		density = 0.7,
		synth_presets = ("acid", "pluck")
	),
	"mysterieux": AmbiancePreset(
		name = "Mystérieux",
		description = "Dark, enigmatic atmospheres",
		scales = ("phrygian", "hungarianMinor", "enigmatic"),
		styles = ("deep", "prog"),
		moods = ("dark",),
		parts = ("pad", "hypnoticLead"),
		tempo_range = (90, 120),
		density = 0.3,
		synth_presets = ("pad", "bell", "mono")
	),
	"tribal": AmbiancePreset(
		name = "Tribal",
		description = "Primal, trance-inducing rhythms",
		scales = ("minor", "phrygian", "japanese"),
		styles = ("goa", "psy"),
		moods = ("dense",),
		parts = ("bassline", "arpeggio"),
		tempo_range = (120, 140),
		density = 0.6,
		synth_presets = ("acid", "pluck")
	),
	"cosmique": AmbiancePreset(
		name = "Cosmique",
		description = "Spacious, ethereal textures",
		scales = ("major", "wholetone", "enigmatic"),
		styles = ("deep", "prog"),
		moods = ("uplifting",),
		parts = ("pad", "lead"),
		tempo_range = (100, 130),
		density = 0.5,
		synth_presets = ("pad", "bell")
	),
	"hypnotique": AmbiancePreset(
		name = "Hypnotique",
		description = "Repetitive, hypnotic patterns",
		scales = ("minor", "phrygian", "arabicMaqam"),
		styles = ("goa", "psy"),
		moods = ("dense",),
		parts = ("hypnoticLead", "arpeggio"),
		tempo_range = (125, 145),
		density = 0.8,
		synth_presets = ("acid", "mono")
	),
}


@dataclasses.dataclass (frozen=True)
class AmbianceResult:

	"""
	A generated pattern together with the choices that produced it and playback suggestions.
	"""

	notes: typing.List[melodyseq.pattern.NoteEvent]
	parameters: melodyseq.parameters.GenerationParameters
	name: str
	description: str
	suggested_tempo: int
	suggested_synth: str


def available_ambiances () -> typing.List[str]:

	return list(AMBIANCE_PRESETS)


def generate_ambiance (
	name: str,
	seed: typing.Optional[int] = None,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None,
	**overrides: typing.Any
) -> AmbianceResult:

	"""Generate a pattern from a named ambiance.

	Scale, style, mood and part are drawn from the preset's lists, then the
	root unless one is given, all from a stream seeded with ``seed``. The
	same seed is used for the pattern itself, so the whole result is
	reproducible.

	Parameters:
		name: Preset key, e.g. ``"tribal"``.
		seed: Seed for every random choice. Drawn from the OS when omitted.
		registry: Scale registry passed through to generation.
		**overrides: ``root``, ``step_count``, ``octave_min`` or ``octave_max``.

	Raises:
		ValidationError: If the name is unknown or an override is invalid.

	Example:
		```python
		result = generate_ambiance("tribal", seed=7)
		result.parameters.mood  # → Mood.DENSE
		```
	"""

	preset = AMBIANCE_PRESETS.get(name)

	if preset is None:
		raise melodyseq.exceptions.ValidationError(f"Unknown ambiance {name!r}. Expected one of {available_ambiances()}")

	allowed = {"root", "step_count", "octave_min", "octave_max"}
	unknown = set(overrides) - allowed

	if unknown:
		raise melodyseq.exceptions.ValidationError(f"Unsupported ambiance overrides: {sorted(unknown)}")

	rng = melodyseq.seeded_random.create(seed)

	scale_name = rng.choice(preset.scales)
	style = rng.choice(preset.styles)
	mood = rng.choice(preset.moods)
	part = rng.choice(preset.parts)
	root = overrides.get("root") or rng.choice(melodyseq.scales.NOTE_NAMES)

	parameters = melodyseq.parameters.GenerationParameters(
		root = root,
		scale_name = scale_name,
		style = style,
		mood = mood,
		part = part,
		step_count = overrides.get("step_count", 16),
		octave_min = overrides.get("octave_min", 2),
		octave_max = overrides.get("octave_max", 4),
		seed = rng.seed
	)

	notes = melodyseq.generation.generate(parameters, registry=registry)

	low, high = preset.tempo_range
	tempo = math.floor(rng.uniform(low, high))
	synth = rng.choice(preset.synth_presets)

	logger.info(f"Ambiance {preset.name}: {part} {style} in {root} {scale_name}, {len(notes)} notes at {tempo} BPM")

	return AmbianceResult(
		notes = notes,
		parameters = parameters,
		name = preset.name,
		description = preset.description,
		suggested_tempo = tempo,
		suggested_synth = synth
	)
