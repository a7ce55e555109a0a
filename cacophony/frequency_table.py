"""Map note ratios onto MIDI note numbers.

MIDI assumes twelve equal notes per octave, but Dwarf Fortress scales can
have any number. The table keeps standard MIDI tuning wherever the scale
allows and re-tunes only the slots it needs, so a 12TET scale (or a subset of
one) gets ordinary MIDI notes, and a scale with more than twelve notes gets
a wider "octave" of MIDI notes.
"""

import logging
import typing

import cacophony.errors
import cacophony.octave_structure


logger = logging.getLogger(__name__)


MIDI_RANGE = range(0, 128)

# Middle A.
MIDI_TONIC = 69

MIDI_OCTAVE_NOTES = 12

# 12TET ratios of the notes in one MIDI octave.
STANDARD_MIDI_FREQUENCIES: typing.List[float] = [
	cacophony.octave_structure.OCTAVE_RATIO ** (index / MIDI_OCTAVE_NOTES)
	for index in range(MIDI_OCTAVE_NOTES)
]

# Relative difference below which two frequencies count as the same note,
# about a thirtieth of the smallest pitch difference people can hear.
FREQUENCY_FUDGE_FACTOR = 1 / 10000


class OutOfRangeError (cacophony.errors.CacophonyError):

	"""Raised when no MIDI note is tuned to a frequency we need to play."""

	def __init__ (self, frequency: float, table: typing.List[float]) -> None:

		self.frequency = frequency
		super().__init__(
			f"Not enough MIDI indices to represent {frequency:.2f} Hz. "
			f"Available range is {table[0]:.2f} Hz to {table[-1]:.2f} Hz"
		)


class FrequencyTable:

	"""
	The frequency of each of the 128 MIDI notes for one octave structure and tonic.

	Note 69 is always the tonic.
	"""

	def __init__ (self, octave_structure: cacophony.octave_structure.OctaveStructure, tonic: float) -> None:

		"""
		Parameters:
			octave_structure: Supplies the notes to fit into each octave.
			tonic: Frequency in Hertz of MIDI note 69 (ratio 1).
		"""

		self.tonic = tonic
		self.octave_breakdown = best_match_ratios(octave_structure.chromatic_scale().open().note_scalings)
		self.table = self._build_table()

		logger.debug(f"MIDI octave of {len(self.octave_breakdown)} notes")

	def index_for_ratio (self, ratio: float) -> int:

		"""
		Return the MIDI note number for a note ``ratio`` times the tonic.

		Raises:
			OutOfRangeError: No MIDI note has that frequency.
		"""

		frequency = self.tonic * ratio

		for index, candidate in enumerate(self.table):
			if abs(candidate - frequency) <= frequency * FREQUENCY_FUDGE_FACTOR:
				return index

		raise OutOfRangeError(frequency, self.table)

	def _build_table (self) -> typing.List[float]:

		table = []

		for index in MIDI_RANGE:
			octave_offset, note = divmod(index - MIDI_TONIC, len(self.octave_breakdown))
			bottom_of_octave = self.tonic * cacophony.octave_structure.OCTAVE_RATIO ** octave_offset
			table.append(bottom_of_octave * self.octave_breakdown[note])

		return table


def best_match_ratios (frequencies_to_cover: typing.Sequence[float]) -> typing.List[float]:

	"""
	Choose the ratio for each slot of the MIDI octave.

	Works through the scale's notes in order, padding with standard 12TET
	ratios while they are still flatter than the next scale note and there
	are enough slots left for the remaining notes. Greedy, not optimal; but a
	subset of 12TET comes out as plain MIDI tuning.

	Example:
		```python
		best_match_ratios([2 ** (index / 12) for index in range(12)])
		# the standard twelve ratios, unchanged
		```
	"""

	remaining = list(frequencies_to_cover)
	standard_octave = list(STANDARD_MIDI_FREQUENCIES)
	ratios: typing.List[float] = []

	while remaining:

		next_frequency = remaining.pop(0)

		while standard_octave:

			# The slot this standard ratio would fill goes to the scale note if we stop here.
			standard = standard_octave.pop(0)

			if not (sounds_flatter(standard, next_frequency) and len(standard_octave) > len(remaining)):
				break

			ratios.append(standard)

		ratios.append(next_frequency)

	return ratios


def sounds_flatter (a: float, b: float) -> bool:

	"""Like ``a < b``, but frequencies within ``FREQUENCY_FUDGE_FACTOR`` count as equal."""

	return a < b * (1 - FREQUENCY_FUDGE_FACTOR)
