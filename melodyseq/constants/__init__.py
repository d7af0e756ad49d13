"""Constants for melodyseq.

This package contains two sets of constants:

- ``melodyseq.constants.pulses`` - Tick-based MIDI timing for the interchange format
- ``melodyseq.constants.velocity`` - MIDI velocity constants

Pulse constants are re-exported here, so ``melodyseq.constants.TICKS_PER_BEAT``
works without importing the submodule.
"""

# These match the values in melodyseq.constants.pulses.

TICKS_PER_BEAT = 480
DEFAULT_BPM = 120.0

# Upper bounds checked before any generation work starts.
MAX_STEP_COUNT = 1024
MAX_BARS = 64
MIN_OCTAVE = -1
MAX_OCTAVE = 9
