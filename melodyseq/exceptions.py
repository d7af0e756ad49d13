"""
Exceptions raised by melodyseq.

Each class also derives from ``ValueError`` so callers that already guard
against bad values the usual Python way keep working.
"""


class MelodyseqError (Exception):

	"""Base class for all melodyseq errors."""


class ValidationError (MelodyseqError, ValueError):

	"""
	Parameters or options are out of range.

	Raised before any generation work begins.
	"""


class InputError (MelodyseqError, ValueError):

	"""
	A source phrase cannot be transformed (too few notes, unbounded timing).

	Raised before any output is produced.
	"""


class EncodingError (MelodyseqError, ValueError):

	"""
	A binary MIDI stream is malformed or truncated.
	"""
