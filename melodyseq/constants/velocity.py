"""MIDI velocity constants.

Velocity is the MIDI attack strength. Note events always carry a velocity in
``[MIN_VELOCITY, MAX_VELOCITY]``; zero is reserved by MIDI for note-off.
"""

DEFAULT_VELOCITY = 100

# Velocity of notes written by the Markov phrase generator (about 0.8 of full scale).
INSPIRATION_VELOCITY = 101

# Accented grid notes are boosted by this factor on export.
ACCENT_BOOST = 1.2

# Mood adjustments
DARK_OFFSET = -30
DARK_FLOOR = 35
UPLIFTING_OFFSET = 15

# Hypnotic lead envelope bounds
ENVELOPE_FLOOR = 45

MIN_VELOCITY = 1
MAX_VELOCITY = 127
