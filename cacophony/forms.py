"""Read the rhythm and metadata parts of Dwarf Fortress musical form descriptions.

A form describes its rhythms in prose, each followed by a score::

	The nek rhythm is a single line with two beats.
	The beat is stressed as follows:

	| - x |

Composite rhythms name their components and which one is primary::

	The sluste rhythm is made from two patterns: the bepa
	(considered the primary) and the nek.
	The patterns are to be played over the same period of time, ...

Only polyrhythms ("over the same period of time") are supported; other ways
of combining patterns raise :class:`FormSyntaxError`.
"""

import dataclasses
import logging
import re
import typing
import xml.etree.ElementTree

import cacophony.errors
import cacophony.notation
import cacophony.polyrhythm
import cacophony.rhythm
import cacophony.sectioned_text


logger = logging.getLogger(__name__)


FormSyntaxError = cacophony.errors.FormSyntaxError

# Letters in any script - rhythm names are often not ASCII ("èle", "aríle").
_NAME = r"[^\W\d_]+"

SIMPLE_RHYTHM_SENTENCE = re.compile(
	rf"The (?P<name>{_NAME}) rhythm is a single line with [-a-z ]+ beats?( divided into [-a-z ]+ bars in a [-0-9]+ pattern)?(\.|$)"
)
COMPOSITE_RHYTHM_SENTENCE = re.compile(
	rf"The (?P<name>{_NAME}) rhythm is made from [-a-z ]+ patterns: (?P<patterns>[^.]+)(\.|$)"
)
THE_RHYTHM = re.compile(rf"the (?P<rhythm_name>{_NAME})( \((?P<comment>[^)]+)\))?")
IS_PRIMARY_COMMENT = "considered the primary"

COMBINATION_TYPE_SENTENCE = re.compile(r"The patterns are to be played (?P<type_summary>[^.,]+)(,[^.]*)?(\.|$)")
POLYRHYTHM_TYPE_SUMMARY = "over the same period of time"

NAME_SENTENCE = re.compile(r"\A(?P<name>[A-Za-z ]+) is a ([a-z]+ )?form of music")


class UnknownBaseRhythmError (FormSyntaxError):

	"""Raised when a composite rhythm names a component that the form never defines."""

	def __init__ (self, base: str) -> None:

		self.base = base
		super().__init__(f"Could not find base rhythm {base} for polyrhythm")


@dataclasses.dataclass(frozen=True)
class FormMetadata:

	"""Descriptive details of a musical form."""

	name: str


def parse_rhythms (form_text: str, max_ticks: int = cacophony.rhythm.DEFAULT_MAX_TICKS) -> typing.Dict[str, cacophony.rhythm.Rhythm]:

	"""
	Parse every named rhythm in a form description.

	Simple rhythms are parsed from their scores; composite rhythms are built
	from them with :func:`cacophony.polyrhythm.build_polyrhythm`.

	Parameters:
		form_text: The form description.
		max_ticks: Tick ceiling passed on to polyrhythm construction.

	Returns:
		Rhythms keyed by name, simple rhythms first.
	"""

	text = cacophony.sectioned_text.SectionedText(form_text)

	rhythms = _parse_simple_rhythms(text)
	rhythms.update(_parse_composite_rhythms(text, rhythms, max_ticks))

	logger.debug(f"Parsed rhythms: {list(rhythms)}")

	return rhythms


def first_rhythm (form_text: str, max_ticks: int = cacophony.rhythm.DEFAULT_MAX_TICKS) -> typing.Optional[cacophony.rhythm.Rhythm]:

	"""
	Pick the rhythm a form opens with.

	This is the named rhythm mentioned earliest in the text. Forms without
	named rhythms fall back to the first bare score in the text, so a lone
	``| x X x ! |`` works too. Returns ``None`` if there is no rhythm at all.
	"""

	rhythms = parse_rhythms(form_text, max_ticks)

	if rhythms:
		name = min(rhythms, key=lambda name: form_text.index(name))
		logger.debug(f"Using the {name} rhythm")
		return rhythms[name]

	rhythm_line = cacophony.notation.find_rhythm_line(form_text)

	if rhythm_line is None:
		return None

	return cacophony.notation.parse(rhythm_line)


def parse_metadata (form_text: str) -> FormMetadata:

	"""Extract the form's name from its opening sentence."""

	match = NAME_SENTENCE.match(form_text.strip())

	if not match:
		raise FormSyntaxError("Could not find the name of the musical form")

	return FormMetadata(name=match.group("name"))


def parse_legends (legends_xml: typing.Union[str, bytes]) -> typing.Dict[int, str]:

	"""
	Extract musical form descriptions from a Dwarf Fortress ``legends.xml`` export.

	Dwarf Fortress marks paragraph breaks with ``[B]``; these become blank
	lines, which is what the other parsers expect.

	Parameters:
		legends_xml: The XML text, or raw bytes in Dwarf Fortress's CP437 encoding.

	Returns:
		Form descriptions keyed by form ID.
	"""

	if isinstance(legends_xml, bytes):
		legends_xml = legends_xml.decode("cp437")

	root = xml.etree.ElementTree.fromstring(legends_xml)

	forms: typing.Dict[int, str] = {}

	for form in root.iterfind("./musical_forms/musical_form"):

		form_id = form.findtext("id")
		description = form.findtext("description")

		if form_id is None or description is None:
			raise FormSyntaxError("Musical form in legends is missing its id or description")

		forms[int(form_id)] = _unescape_newlines(description)

	logger.debug(f"Found {len(forms)} musical forms in legends")

	return forms


def _unescape_newlines (text: str) -> str:

	"""Turn ``[B]`` markers into paragraph breaks and trim the double spaces before them."""

	return "\n\n".join(section.removesuffix("  ") for section in text.split("[B]"))


def _parse_simple_rhythms (text: cacophony.sectioned_text.SectionedText) -> typing.Dict[str, cacophony.rhythm.Rhythm]:

	"""Find each rhythm description and parse the score in the paragraph after it."""

	rhythms: typing.Dict[str, cacophony.rhythm.Rhythm] = {}
	paragraphs = text.paragraphs

	for description, score in zip(paragraphs, paragraphs[1:]):

		match = SIMPLE_RHYTHM_SENTENCE.search(description)

		# Not every paragraph describes a rhythm.
		if not match:
			continue

		rhythms[match.group("name")] = cacophony.notation.parse(score)

	return rhythms


def _parse_composite_rhythms (
	text: cacophony.sectioned_text.SectionedText,
	base_rhythms: typing.Dict[str, cacophony.rhythm.Rhythm],
	max_ticks: int,
) -> typing.Dict[str, cacophony.rhythm.Rhythm]:

	composite_rhythms: typing.Dict[str, cacophony.rhythm.Rhythm] = {}

	for paragraph in text.find_all_paragraphs(COMPOSITE_RHYTHM_SENTENCE):

		intro = paragraph.match(COMPOSITE_RHYTHM_SENTENCE)
		combination = paragraph.match(COMBINATION_TYPE_SENTENCE)

		if intro is None:
			continue

		name = intro.group("name")

		if combination is None:
			raise FormSyntaxError(f"No combination type given for the {name} rhythm")

		combination_type = combination.group("type_summary").strip()

		if combination_type != POLYRHYTHM_TYPE_SUMMARY:
			raise FormSyntaxError(f"Unrecognised polyrhythm type {combination_type!r}")

		primary, secondaries = _parse_components(intro.group("patterns"), base_rhythms)
		composite_rhythms[name] = cacophony.polyrhythm.build_polyrhythm(primary, secondaries, max_ticks=max_ticks)

	return composite_rhythms


def _parse_components (
	reference_string: str,
	base_rhythms: typing.Dict[str, cacophony.rhythm.Rhythm],
) -> typing.Tuple[cacophony.rhythm.Rhythm, typing.List[cacophony.rhythm.Rhythm]]:

	"""
	Resolve a component list such as "the anto (considered the primary), the tak
	and the ule" into the primary rhythm and the secondaries, in order.
	"""

	primaries: typing.List[cacophony.rhythm.Rhythm] = []
	secondaries: typing.List[cacophony.rhythm.Rhythm] = []

	for match in THE_RHYTHM.finditer(reference_string):

		rhythm_name = match.group("rhythm_name")
		comment = match.group("comment")

		if rhythm_name not in base_rhythms:
			raise UnknownBaseRhythmError(rhythm_name)

		if comment is None:
			secondaries.append(base_rhythms[rhythm_name])
		elif comment == IS_PRIMARY_COMMENT:
			primaries.append(base_rhythms[rhythm_name])
		else:
			raise FormSyntaxError(f"Unrecognised rhythm comment {comment!r}")

	if len(primaries) != 1:
		raise FormSyntaxError(f"Expected exactly one primary rhythm in {reference_string!r}, found {len(primaries)}")

	return primaries[0], secondaries
