import re
import typing

import melodyseq.exceptions
import melodyseq.intervals


NOTE_NAMES: typing.List[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

_NOTE_PATTERN = re.compile(r"^([A-G][#b]?)(-?\d+)$")


def key_name_to_pc (key_name: str) -> int:

	"""Validate a note name and return its pitch class (0–11).

	Raises:
		ValidationError: If the name is not recognised.
	"""

	if key_name not in NOTE_NAME_TO_PC:
		raise melodyseq.exceptions.ValidationError(
			f"Unknown note name: {key_name!r}. Expected e.g. 'C', 'F#', 'Bb'."
		)

	return NOTE_NAME_TO_PC[key_name]


def note_name_to_midi (note: str) -> int:

	"""Convert a note name with octave to a MIDI note number.

	Octaves follow the C4 = 60 convention, so ``"C-1"`` is 0.

	Example:
		```python
		note_name_to_midi("C4")   # → 60
		note_name_to_midi("F#3")  # → 54
		```
	"""

	match = _NOTE_PATTERN.match(note)

	if match is None:
		raise melodyseq.exceptions.ValidationError(f"Cannot parse note name: {note!r}")

	name, octave = match.groups()

	return (int(octave) + 1) * 12 + key_name_to_pc(name)


def midi_to_note_name (pitch: int) -> str:

	"""Convert a MIDI note number to a sharp-spelled note name (60 → ``"C4"``)."""

	return f"{NOTE_NAMES[pitch % 12]}{pitch // 12 - 1}"


def to_midi (pitch: typing.Union[int, str]) -> int:

	"""Resolve a pitch given either as a MIDI number or a note name."""

	if isinstance(pitch, str):
		return note_name_to_midi(pitch)

	return int(pitch)


def build_scale (
	root: str,
	scale_name: str,
	octave_min: int,
	octave_max: int,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> typing.List[str]:

	"""Spell every note of a scale across a range of octaves.

	Notes ascend degree by degree through each octave, from ``octave_min``
	to ``octave_max`` inclusive. Each octave starts on the root, so degrees
	that pass B are spelled in the next octave up and the list is strictly
	ascending in pitch.

	Parameters:
		root: Root note name (e.g. ``"C"``, ``"F#"``).
		scale_name: Registry name. Unknown names fall back to natural minor.
		octave_min: Lowest octave.
		octave_max: Highest octave.
		registry: Scale registry. Defaults to the built-in table.

	Returns:
		List of note names such as ``["C3", "D3", "D#3", ...]``.

	Raises:
		ValidationError: If ``octave_min > octave_max`` or the root is unknown.

	Example:
		```python
		build_scale("A", "minor", 3, 3)
		# → ['A3', 'B3', 'C4', 'D4', 'E4', 'F4', 'G4']
		```
	"""

	if octave_min > octave_max:
		raise melodyseq.exceptions.ValidationError(f"octave_min ({octave_min}) must be <= octave_max ({octave_max})")

	root_pc = key_name_to_pc(root)
	formula = melodyseq.intervals.get_intervals(scale_name, registry)

	notes: typing.List[str] = []

	for octave in range(octave_min, octave_max + 1):
		for step in formula:
			semitone = root_pc + step
			notes.append(f"{NOTE_NAMES[semitone % 12]}{octave + semitone // 12}")

	return notes


def quantize_to_scale (
	pitch: int,
	root: str,
	scale_name: str,
	registry: typing.Optional[melodyseq.intervals.ScaleRegistry] = None
) -> int:

	"""Snap a MIDI pitch to the nearest degree of a scale.

	The pitch's offset above the root is compared against each degree of
	the formula; the closest one wins and the first degree in ascending
	order wins ties. The pitch is moved by the signed difference only, so
	the octave is preserved apart from that correction.

	Example:
		```python
		quantize_to_scale(61, "C", "major")  # C# → C (60)
		quantize_to_scale(66, "C", "major")  # F# → F (65), tie resolved downward
		```
	"""

	root_pc = key_name_to_pc(root)
	formula = melodyseq.intervals.get_intervals(scale_name, registry)
	offset = (pitch - root_pc) % 12

	best = formula[0]
	distance = 12

	for degree in formula:
		d = abs(degree - offset)
		if d < distance:
			distance = d
			best = degree

	return pitch + (best - offset)


def root_indices (notes: typing.Sequence[str], root: str) -> typing.List[int]:

	"""
	Return the indices of a built scale whose pitch class is the root's.
	"""

	root_pc = key_name_to_pc(root)

	return [i for i, note in enumerate(notes) if note_name_to_midi(note) % 12 == root_pc]
