import logging

import pytest

import melodyseq.exceptions
import melodyseq.pattern


def test_complete_record () -> None:

	note = melodyseq.pattern.note_from_mapping({"position": 240, "pitch": 62, "velocity": 90, "duration": 60, "accent": True})

	assert (note.position, note.note_number, note.velocity, note.duration, note.accent, note.slide) == (240, 62, 90, 60, True, False)


def test_missing_fields_use_defaults (caplog: pytest.LogCaptureFixture) -> None:

	"""Only the pitch is required; the rest default and each default is reported."""

	with caplog.at_level(logging.WARNING):
		note = melodyseq.pattern.note_from_mapping({"pitch": 60}, index=3)

	assert note.position == 0
	assert note.duration == 120
	assert note.velocity == 100
	assert caplog.text.count("Note 3: missing or invalid") == 3


@pytest.mark.parametrize("field, value, expected", [
	("position", float("nan"), 0),
	("position", float("inf"), 0),
	("duration", float("inf"), 120),
	("duration", "long", 120),
	("velocity", float("-inf"), 100),
	("velocity", None, 100),
	("velocity", True, 100),
])
def test_non_finite_fields_replaced (caplog: pytest.LogCaptureFixture, field: str, value: object, expected: float) -> None:

	record = {"position": 480, "pitch": 64, "velocity": 70, "duration": 240}
	record[field] = value

	with caplog.at_level(logging.WARNING):
		note = melodyseq.pattern.note_from_mapping(record)

	assert getattr(note, field) == expected
	assert f"invalid {field}" in caplog.text


def test_non_positive_duration_replaced (caplog: pytest.LogCaptureFixture) -> None:

	with caplog.at_level(logging.WARNING):
		note = melodyseq.pattern.note_from_mapping({"pitch": 60, "duration": 0}, default_duration=30)

	assert note.duration == 30
	assert "non-positive duration" in caplog.text


def test_velocity_clamped_and_negative_position_moved_to_zero () -> None:

	note = melodyseq.pattern.note_from_mapping({"pitch": 60, "position": -5, "velocity": 300})

	assert note.velocity == 127
	assert note.position == 0


def test_missing_pitch_raises () -> None:

	with pytest.raises(melodyseq.exceptions.InputError):
		melodyseq.pattern.note_from_mapping({"position": 0, "duration": 120})
