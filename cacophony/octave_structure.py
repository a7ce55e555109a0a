"""Octave divisions, chords and scales from Dwarf Fortress scale descriptions.

Every pitch is a *scaling*: a multiple of the tonic frequency, so the tonic is
1 and the octave above it is ``OCTAVE_RATIO`` (2).
"""

import dataclasses
import logging
import re
import typing

import cacophony.errors
import cacophony.number_words
import cacophony.sectioned_text


logger = logging.getLogger(__name__)


# Frequency scaling for a difference of one whole octave.
OCTAVE_RATIO = 2

# Dwarf Fortress writes exact spacings in quartertones, so 24 steps per octave.
QUARTERTONES_PER_OCTAVE = 24

OCTAVE_STRUCTURE_SENTENCE = re.compile(r"Scales are (constructed|conceived)")
EVENLY_SPACED_STRUCTURE = re.compile(r"Scales are constructed from (?P<count>[-a-z ]+) notes spaced evenly throughout the octave")
EXACT_NOTES_STRUCTURE = re.compile(r"Scales are constructed from (?P<count>[-a-z ]+) notes dividing the octave")
SPACING_SENTENCE = re.compile(r"In quartertones, their spacing is roughly 1(?P<spacing>[-x]{23})0")

CHORD_SENTENCE = re.compile(r"The (?P<name>[^ ]+) [a-z]*chord is the (?P<degrees>.*) degrees of the .* scale")
CHORD_TOPIC = re.compile(r"The [^ ]+ [a-z]*chord is")
DEGREE_SEPARATOR = re.compile(r"(?:,| and) the")
COMPLETES_OCTAVE = "(completing the octave)"

SCALE_TOPIC = re.compile(r"The [^ ]+ [^ ]+ scale is")
SCALE_SENTENCE = re.compile(r"The (?P<name>[^ ]+) [a-z]+tonic scale is (?P<scale_type>thought of as .*|constructed by.*)")
CHORD_SCALE_TYPE = re.compile(r"thought of as ([a-z]+ )?(disjoint|joined) chords")
CHORD_NAMES_SENTENCE = re.compile(r"These chords are named (?P<names>[^.]+)\.?")


@dataclasses.dataclass
class NoteSequence:

	"""
	A sequence of notes from an octave, as scalings of the tonic.
	"""

	note_scalings: typing.List[float]

	def __len__ (self) -> int:

		return len(self.note_scalings)


@dataclasses.dataclass
class Chord (NoteSequence):
	pass


@dataclasses.dataclass
class Scale (NoteSequence):

	"""
	A scale, built by playing its chords one after another.
	"""

	chords: typing.List[Chord] = dataclasses.field(default_factory=list)

	@classmethod
	def from_chords (cls, chords: typing.List[Chord]) -> "Scale":

		return cls(
			note_scalings = [scaling for chord in chords for scaling in chord.note_scalings],
			chords = list(chords)
		)

	def open (self) -> "Scale":

		"""
		Return this scale without its final octave note, if it has one.

		Open scales are easier to concatenate or to play rising then falling.
		"""

		if self.note_scalings and self.note_scalings[-1] == OCTAVE_RATIO:
			return Scale(note_scalings=self.note_scalings[:-1], chords=self.chords)

		return self


class OctaveStructure:

	"""
	How a musical form divides the octave, and the chords and scales it names.

	Example:
		```python
		octave = OctaveStructure.parse(form_text)

		octave.chromatic_scale().note_scalings    # every note in the octave
		octave.scales["ani"].open().note_scalings
		```
	"""

	def __init__ (
		self,
		octave_divisions: typing.List[float],
		chords: typing.Optional[typing.Dict[str, Chord]] = None,
		scales: typing.Optional[typing.Dict[str, Scale]] = None,
	) -> None:

		"""
		Parameters:
			octave_divisions: Scalings of every note in one octave, starting
				with the tonic (1) and excluding the octave itself.
			chords: Named chords.
			scales: Named scales.
		"""

		self.octave_divisions = list(octave_divisions)
		self.chords: typing.Dict[str, Chord] = dict(chords or {})
		self.scales: typing.Dict[str, Scale] = dict(scales or {})

	@classmethod
	def parse (cls, scale_text: str) -> "OctaveStructure":

		"""
		Build an octave structure from a form description.

		Raises:
			FormSyntaxError: The octave structure is missing or not understood,
				or a scale refers to an unknown chord.
		"""

		description = cacophony.sectioned_text.SectionedText(scale_text)
		octave_paragraph = description.find_paragraph(OCTAVE_STRUCTURE_SENTENCE)

		if octave_paragraph is None:
			raise cacophony.errors.FormSyntaxError("No octave structure found in the form description")

		octave_divisions = _parse_octave_divisions(octave_paragraph)
		chords = _parse_chords(description, octave_divisions)
		scales = _parse_scales(description, chords)

		logger.debug(f"Octave of {len(octave_divisions)} notes, chords {list(chords)}, scales {list(scales)}")

		return cls(octave_divisions, chords, scales)

	@classmethod
	def evenly_spaced (cls, divisions: int) -> "OctaveStructure":

		"""
		Return an octave of ``divisions`` equally spaced notes and no named
		chords or scales; ``evenly_spaced(12)`` is ordinary 12TET.
		"""

		if divisions < 1:
			raise ValueError(f"An octave needs at least one note, got {divisions}")

		return cls([OCTAVE_RATIO ** (index / divisions) for index in range(divisions)])

	def chromatic_scale (self) -> Scale:

		"""Return a scale of every note in the octave, ending on the octave."""

		return Scale(note_scalings=[*self.octave_divisions, OCTAVE_RATIO])


def _parse_octave_divisions (octave_paragraph: cacophony.sectioned_text.SectionedText) -> typing.List[float]:

	sentence = octave_paragraph.find(OCTAVE_STRUCTURE_SENTENCE) or ""

	evenly_spaced = EVENLY_SPACED_STRUCTURE.search(sentence)
	if evenly_spaced:
		divisions = cacophony.number_words.number_from_word(evenly_spaced.group("count"))
		return OctaveStructure.evenly_spaced(divisions).octave_divisions

	if EXACT_NOTES_STRUCTURE.search(sentence):
		return _parse_exact_notes(octave_paragraph)

	raise cacophony.errors.FormSyntaxError(f"Don't know how a scale can be {sentence!r}")


def _parse_exact_notes (octave_paragraph: cacophony.sectioned_text.SectionedText) -> typing.List[float]:

	"""
	Read a quartertone spacing such as ``1-xxxxx-xxx-xxxxx-x-xxxx0``, where
	1 is the tonic, 0 is the octave and each ``x`` is a note.
	"""

	spacing_match = octave_paragraph.match(SPACING_SENTENCE)

	if spacing_match is None:
		raise cacophony.errors.FormSyntaxError("Cannot parse the octave's note spacing")

	step = OCTAVE_RATIO ** (1 / QUARTERTONES_PER_OCTAVE)

	return [1] + [
		step ** position
		for position, symbol in enumerate(spacing_match.group("spacing"), start=1)
		if symbol == "x"
	]


def _parse_chords (description: cacophony.sectioned_text.SectionedText, octave_divisions: typing.List[float]) -> typing.Dict[str, Chord]:

	chords: typing.Dict[str, Chord] = {}

	for paragraph in description.find_all_paragraphs(CHORD_TOPIC):

		match = paragraph.match(CHORD_SENTENCE)

		if match is None:
			continue

		degrees = DEGREE_SEPARATOR.split(match.group("degrees"))
		chords[match.group("name")] = Chord([_degree_scaling(degree, octave_divisions) for degree in degrees])

	return chords


def _degree_scaling (ordinal: str, octave_divisions: typing.List[float]) -> float:

	"""
	Convert an ordinal such as "4th" to the scaling of that note.

	The degree "completing the octave" is the tonic an octave up, which is
	not one of the octave's divisions.
	"""

	if COMPLETES_OCTAVE in ordinal:
		return OCTAVE_RATIO

	number = re.search(r"\d+", ordinal)

	if number is None or not 1 <= int(number.group(0)) <= len(octave_divisions):
		raise cacophony.errors.FormSyntaxError(f"Unknown chord degree {ordinal.strip()!r}")

	return octave_divisions[int(number.group(0)) - 1]


def _parse_scales (description: cacophony.sectioned_text.SectionedText, chords: typing.Dict[str, Chord]) -> typing.Dict[str, Scale]:

	scales: typing.Dict[str, Scale] = {}

	for paragraph in description.find_all_paragraphs(SCALE_TOPIC):

		match = paragraph.match(SCALE_SENTENCE)

		if match is None:
			continue

		if not CHORD_SCALE_TYPE.search(match.group("scale_type")):
			raise cacophony.errors.FormSyntaxError(f"Unknown scale type {match.group('scale_type')!r}")

		scales[match.group("name")] = _parse_chord_scale(paragraph, chords)

	return scales


def _parse_chord_scale (paragraph: cacophony.sectioned_text.SectionedText, chords: typing.Dict[str, Chord]) -> Scale:

	names_match = paragraph.match(CHORD_NAMES_SENTENCE)

	if names_match is None:
		raise cacophony.errors.FormSyntaxError("Scale does not name its chords")

	names = [name.strip() for name in re.split(r",|\band\b", names_match.group("names")) if name.strip()]
	missing = [name for name in names if name not in chords]

	if missing:
		raise cacophony.errors.FormSyntaxError(f"Scale uses unknown chords {missing}")

	return Scale.from_chords([chords[name] for name in names])
