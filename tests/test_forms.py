"""Tests for reading rhythms, names and legends from musical form descriptions."""

import pytest

import cacophony.forms
import cacophony.rhythm


Beat = cacophony.rhythm.Beat
Rhythm = cacophony.rhythm.Rhythm


def _rhythm (amplitudes, timings=None) -> Rhythm:

	timings = timings or {}

	return Rhythm([Beat(amplitude, 1, timings.get(index, 0)) for index, amplitude in enumerate(amplitudes)])


X = 4 / 6
A = 4 / 9
B = 6 / 9

BEPA = _rhythm([
	X, 0, 0, 0,  X, 0, 0, 0,  0, 0, X, 0,  X, 0, X, 1,
	X, X, 0, 0,  X, 0, X, 0,  0, X, 0, 0,  X, 0, 0, X,
])

NEK = _rhythm([0, 1])

ELE = _rhythm([0, 0, 1])

ARILE = _rhythm(
	[0, 0, A,  A, B, A,  0, A, 0,  A, A, 1,  A, B, A,  A, 0, 0,  A, 0, A,  B, A, A],
	timings = {10: 1, 23: -1}
)

AMAMA = _rhythm(
	[1, X, X, X, 0, X, 0, X,  0, 0, 0, 0, X, 0, 0, 0],
	timings = {3: 1}
)


# ---------------------------------------------------------------------------
# Rhythms
# ---------------------------------------------------------------------------

def test_parses_simple_rhythms (sluste_form: str) -> None:

	rhythms = cacophony.forms.parse_rhythms(sluste_form)

	assert rhythms["bepa"] == BEPA
	assert rhythms["nek"] == NEK


def test_combines_composite_rhythm (sluste_form: str) -> None:

	rhythms = cacophony.forms.parse_rhythms(sluste_form)
	sluste = rhythms["sluste"]

	assert sluste.is_polyrhythm
	assert sluste.primary == BEPA
	assert sluste.secondaries == (NEK,)
	assert sluste.duration == 32


def test_non_ascii_rhythm_names (itho_form: str) -> None:

	rhythms = cacophony.forms.parse_rhythms(itho_form)

	assert rhythms["èle"] == ELE
	assert rhythms["aríle"] == ARILE
	assert rhythms["amama"] == AMAMA


def test_composite_with_several_secondaries (itho_form: str) -> None:

	itho = cacophony.forms.parse_rhythms(itho_form)["itho"]

	assert itho.primary == ELE
	assert itho.secondaries == (ARILE, AMAMA)
	assert itho.duration == 3


def test_first_rhythm_is_earliest_mentioned (sluste_form: str) -> None:

	"""The composite is described first, so it opens the piece."""

	rhythm = cacophony.forms.first_rhythm(sluste_form)

	assert rhythm is not None
	assert rhythm.primary == BEPA


def test_first_rhythm_falls_back_to_bare_score () -> None:

	rhythm = cacophony.forms.first_rhythm("Just play | x - X ! | over and over.")

	assert [beat.amplitude for beat in rhythm] == [4 / 9, 0, 6 / 9, 1]


def test_first_rhythm_none_without_any_rhythm () -> None:

	assert cacophony.forms.first_rhythm("It is performed in free rhythm.") is None


def test_unknown_component_rhythm () -> None:

	text = (
		"The tak rhythm is made from two patterns: the anto (considered the primary) and the nek. "
		"The patterns are to be played over the same period of time.\n\n"
		"The nek rhythm is a single line with two beats.\n\n"
		"| - x |\n"
	)

	with pytest.raises(cacophony.forms.UnknownBaseRhythmError) as excinfo:
		cacophony.forms.parse_rhythms(text)

	assert excinfo.value.base == "anto"


def test_unsupported_combination_type () -> None:

	text = (
		"The tak rhythm is made from two patterns: the nek (considered the primary) and the ule. "
		"The patterns are to be played one after another.\n\n"
		"The nek rhythm is a single line with two beats.\n\n"
		"| - x |\n\n"
		"The ule rhythm is a single line with one beat.\n\n"
		"| x |\n"
	)

	with pytest.raises(cacophony.forms.FormSyntaxError, match="one after another"):
		cacophony.forms.parse_rhythms(text)


def test_composite_needs_a_primary () -> None:

	text = (
		"The tak rhythm is made from two patterns: the nek and the ule. "
		"The patterns are to be played over the same period of time.\n\n"
		"The nek rhythm is a single line with two beats.\n\n"
		"| - x |\n\n"
		"The ule rhythm is a single line with one beat.\n\n"
		"| x |\n"
	)

	with pytest.raises(cacophony.forms.FormSyntaxError):
		cacophony.forms.parse_rhythms(text)


def test_tick_limit_applies_to_composites (itho_form: str) -> None:

	with pytest.raises(cacophony.rhythm.TickLimitError):
		cacophony.forms.parse_rhythms(itho_form, max_ticks=100)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

FATHER_OF_IDOLS = (
	"The Father of Idols is a devotional form of music directed toward the worship of Kadol originating in The Portals of Ticking.  "
	"The form guides musicians during improvised performances.  A singer recites any composition of The Scratches of Mastery.  "
	"The entire performance should be passionate.  The melody has long phrases throughout the form.  "
	"Only one pitch is ever played at a time.  It is performed without preference for a scale and in free rhythm.  "
	"Throughout, when possible, performers are to glide from note to note and play rapid runs."
)


def test_extracts_form_name () -> None:

	metadata = cacophony.forms.parse_metadata(FATHER_OF_IDOLS + "\nThe singer always does the main melody and plays staccato.\n")

	assert metadata.name == "The Father of Idols"


def test_missing_form_name () -> None:

	with pytest.raises(cacophony.forms.FormSyntaxError):
		cacophony.forms.parse_metadata("| x x x |")


# ---------------------------------------------------------------------------
# Legends
# ---------------------------------------------------------------------------

LEGENDS_XML = """<?xml version="1.0" encoding='CP437'?>
<df_world>
 <musical_forms>
  <musical_form>
    <id>0</id>
    <description>""" + FATHER_OF_IDOLS + """  [B]The singer always does the main melody and plays staccato.  [B]The verse is fast, and it is to be moderately soft.  The singer's voice ranges from the low register to the middle register.  </description>
  </musical_form>
  <musical_form>
    <id>1</id>
    <description>The other musical form</description>
  </musical_form>
 </musical_forms>
</df_world>
"""


def test_legends_extracts_forms_by_id () -> None:

	forms = cacophony.forms.parse_legends(LEGENDS_XML)

	assert len(forms) == 2
	assert forms[1] == "The other musical form"


def test_legends_converts_paragraph_markers () -> None:

	forms = cacophony.forms.parse_legends(LEGENDS_XML)

	assert forms[0] == "\n\n".join([
		FATHER_OF_IDOLS,
		"The singer always does the main melody and plays staccato.",
		"The verse is fast, and it is to be moderately soft.  The singer's voice ranges from the low register to the middle register.",
	])


def test_legends_accepts_cp437_bytes () -> None:

	xml = "<df_world><musical_forms><musical_form><id>3</id><description>The Ñeng Songs</description></musical_form></musical_forms></df_world>"

	forms = cacophony.forms.parse_legends(xml.encode("cp437"))

	assert forms == {3: "The Ñeng Songs"}


def test_legends_feed_form_parsers () -> None:

	"""A form pulled from legends parses like any other description."""

	forms = cacophony.forms.parse_legends(LEGENDS_XML)

	assert cacophony.forms.parse_metadata(forms[0]).name == "The Father of Idols"
