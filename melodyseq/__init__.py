"""
Melodyseq - procedural melody and pattern generation for electronic music.

Give it a scale, a style, a mood and a part, and it writes a pattern. Give
it a MIDI phrase, and it writes variations of it, or a new phrase in its
manner. Everything is seeded, so the same inputs always give the same
notes, and everything is pure: no audio engine, no MIDI ports, no state
kept between calls.

What it does:

- **Part generators.** Basslines, leads, pads, arpeggios and long
  hypnotic leads, each shaped by a style (goa, psy, prog, downtempo,
  deep, ambient). Every pitch comes from the scale you asked for.
- **Moods.** ``dark`` and ``uplifting`` shift velocities, ``dense``
  scatters extra notes over the pattern.
- **Variations.** ``vary()`` transposes, mirrors, re-quantizes, swings,
  humanizes and reverses a phrase, in that fixed order, once per
  transposition.
- **Inspiration.** ``inspire()`` learns order-2 Markov models of a
  phrase's intervals and durations and writes a new phrase through a
  Euclidean rhythm mask.
- **Scales.** Nineteen built-in formulas plus your own through a
  ``ScaleRegistry`` backed by any key-value store.
- **Ambiances.** Named presets (``tribal``, ``cosmique``...) that pick a
  scale, style, mood and part for you.
- **MIDI files.** A small Standard MIDI File codec with accent and slide
  carried on CC 16 and CC 17.

Minimal example:

    ```python
    import melodyseq

    notes = melodyseq.generate(melodyseq.GenerationParameters(
        part="bassline", style="psy", root="C", scale_name="minor", step_count=16, seed=42
    ))

    variants = melodyseq.vary(midi_bytes, melodyseq.VariationOptions(transpositions=(0, 12), seed=1))
    ```

Package-level exports: ``generate``, ``vary``, ``inspire``,
``GenerationParameters``, ``VariationOptions``, ``InspirationOptions``,
``NoteEvent``, ``NoteSequence``, ``ScaleRegistry``.
"""

import melodyseq.generation
import melodyseq.inspiration
import melodyseq.intervals
import melodyseq.parameters
import melodyseq.pattern
import melodyseq.variation


generate = melodyseq.generation.generate
vary = melodyseq.variation.vary
inspire = melodyseq.inspiration.inspire
GenerationParameters = melodyseq.parameters.GenerationParameters
VariationOptions = melodyseq.variation.VariationOptions
InspirationOptions = melodyseq.inspiration.InspirationOptions
NoteEvent = melodyseq.pattern.NoteEvent
NoteSequence = melodyseq.pattern.NoteSequence
ScaleRegistry = melodyseq.intervals.ScaleRegistry
