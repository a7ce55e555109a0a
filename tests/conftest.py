import textwrap

import pytest

import cacophony.octave_structure
import cacophony.rhythm


# Musical forms below are generated by Dwarf Fortress, copyright Bay 12 Games.

SLUSTE_FORM = textwrap.dedent("""\
	The sluste rhythm is made from two patterns: the bepa
	(considered the primary) and the nek.
	The patterns are to be played over the same period of time,
	concluding together regardless of beat number.

	The bepa rhythm is a single line with thirty-two beats divided into eight
	bars in a 4-4-4-4-4-4-4-4 pattern.
	The beats are named noloc (spoken no), kes (ke), suku (su) and rorec (ro).
	The beat is stressed as follows:

	| x - - - | x - - - | - - x - | x - x X | x x - - | x - x - | - x - - | x - - x |

	where X marks an accented beat, x is a beat, - is silent
	and | indicates a bar.

	The nek rhythm is a single line with two beats.
	The beat is stressed as follows:

	| - x |

	where x is a beat, - is silent, and | indicates a bar.
""")

ITHO_FORM = textwrap.dedent("""\
	The itho rhythm is made from three patterns: the èle
	(considered the primary), the aríle, and the amama. The patterns are to
	be played over the same period of time, concluding together regardless
	of beat number.

	The èle rhythm is a single line with three beats.
	The beats are named timafi (spoken ti), emu (wm), and úpe (úp).
	The beat is stressed as follows:

	| - - x |

	The aríle rhythm is a single line with twenty-four beats divided into
	eight bars in a 3-3-3-3-3-3-3-3 pattern. The beat is stressed as folows:

	| - - x | x X x | - x - | x x'! | x X x | x - - | x - x | X x`x |

	The amama rhythm is a single line with sixteen beats divided into two bars
	in a 8-8 pattern. The beat is stressed as follows:

	| X x x x'- x - x | - - - - x - - - |
""")

TWELVE_NOTE_OCTAVE = textwrap.dedent("""\
	Scales are constructed from twelve notes spaced evenly throughout the octave.
	The tonic note is fixed only at the time of performance.
	Every note is named.
	The names are shato (spoken sha), almef (al), oñod (oñ), umo (um), rostfen (ro), hiñer (hi), ohe (oh), nazweng (na), tod (to), and zomuth (zo).

	The ani pentatonic scale is thought of as two disjoint chords spanning a perfect fifth and a major third. These chords are named ilpi and dik.

	The ilpi trichord is the 1st, the 3rd, and the 8th degrees of the semitone octave scale.

	The dik trichord is the 9th, the 10th, and the 13th (completing the octave) degrees of the semitone octave scale.
""")

SEVEN_NOTE_OCTAVE = textwrap.dedent("""\
	Scales are constructed from seven notes spaced evenly throughout the octave.
	(This guarantees our notes don't line up with 12TET)

	The test hexatonic scale is thought of as two disjoint chords spanning no
	particular interval.
	These chords are named alpha and beta.

	The alpha trichord is the 1st, the 2nd, and the 4th degrees of the
	seven-note octave scale.

	The beta trichord is the 5th, the 6th, and the 8th (completing the octave)
	degrees of the seven-note octave scale.
""")


@pytest.fixture
def sluste_form () -> str:

	"""A form with a two-part polyrhythm whose components are defined after it."""

	return SLUSTE_FORM


@pytest.fixture
def itho_form () -> str:

	"""A form with non-ASCII rhythm names and early and late beats."""

	return ITHO_FORM


@pytest.fixture
def twelve_note_octave () -> cacophony.octave_structure.OctaveStructure:

	return cacophony.octave_structure.OctaveStructure.parse(TWELVE_NOTE_OCTAVE)


@pytest.fixture
def seven_note_octave () -> cacophony.octave_structure.OctaveStructure:

	return cacophony.octave_structure.OctaveStructure.parse(SEVEN_NOTE_OCTAVE)


@pytest.fixture
def four_beats () -> cacophony.rhythm.Rhythm:

	return cacophony.rhythm.Rhythm([cacophony.rhythm.Beat(1, 1, 0)] * 4)


@pytest.fixture
def three_beats () -> cacophony.rhythm.Rhythm:

	return cacophony.rhythm.Rhythm([cacophony.rhythm.Beat(1, 1, 0)] * 3)
