"""Tests for octave divisions, chords and scales."""

import textwrap

import pytest

import cacophony.errors
import cacophony.octave_structure


OctaveStructure = cacophony.octave_structure.OctaveStructure


# ---------------------------------------------------------------------------
# Even spacing
# ---------------------------------------------------------------------------

def test_chromatic_scale_starts_at_tonic (twelve_note_octave: OctaveStructure) -> None:

	assert twelve_note_octave.chromatic_scale().note_scalings[0] == 1


def test_chromatic_scale_rises_in_semitones (twelve_note_octave: OctaveStructure) -> None:

	scalings = twelve_note_octave.chromatic_scale().note_scalings

	assert len(scalings) == 13

	for last, current in zip(scalings, scalings[1:]):
		assert current / last == pytest.approx(2 ** (1 / 12), abs=0.0001)


def test_chromatic_scale_ends_on_octave (twelve_note_octave: OctaveStructure) -> None:

	assert twelve_note_octave.chromatic_scale().note_scalings[-1] == pytest.approx(2)


def test_chords_use_degrees_of_the_octave (twelve_note_octave: OctaveStructure) -> None:

	"""Degrees count from 1, so the 1st degree is the tonic itself."""

	assert twelve_note_octave.chords["ilpi"].note_scalings == [1, 2 ** (2 / 12), 2 ** (7 / 12)]
	assert twelve_note_octave.chords["dik"].note_scalings == [2 ** (8 / 12), 2 ** (9 / 12), 2]


def test_scale_is_made_of_its_chords (twelve_note_octave: OctaveStructure) -> None:

	ani = twelve_note_octave.scales["ani"]

	assert ani.note_scalings == [1, 2 ** (2 / 12), 2 ** (7 / 12), 2 ** (8 / 12), 2 ** (9 / 12), 2]
	assert ani.chords == [twelve_note_octave.chords["ilpi"], twelve_note_octave.chords["dik"]]
	assert len(ani) == 6


def test_open_scale_drops_the_octave (twelve_note_octave: OctaveStructure) -> None:

	ani = twelve_note_octave.scales["ani"]

	assert ani.open().note_scalings[-1] == 2 ** (9 / 12)
	assert ani.open().open() == ani.open()


def test_sentences_can_wrap_across_lines (seven_note_octave: OctaveStructure) -> None:

	assert len(seven_note_octave.octave_divisions) == 7
	assert seven_note_octave.chords["alpha"].note_scalings == [1, 2 ** (1 / 7), 2 ** (3 / 7)]
	assert seven_note_octave.chords["beta"].note_scalings == [2 ** (4 / 7), 2 ** (5 / 7), 2]
	assert list(seven_note_octave.scales) == ["test"]


def test_evenly_spaced () -> None:

	octave = OctaveStructure.evenly_spaced(12)

	assert len(octave.octave_divisions) == 12
	assert octave.chords == {}
	assert octave.scales == {}


# ---------------------------------------------------------------------------
# Exact spacing
# ---------------------------------------------------------------------------

EXACT_OCTAVE = textwrap.dedent("""\
	Scales are constructed from nineteen notes dividing the octave.
	In quartertones, their spacing is roughly 1-xxxxx-xxx-xxxxx-x-xxxx0,
	where 1 is the tonic, 0 marks the octave, and x marks other notes.
	The tonic note is fixed only at the time of performance.
""")


def test_exact_spacing_in_quartertones () -> None:

	octave = OctaveStructure.parse(EXACT_OCTAVE)

	quartertones = [0, 2, 3, 4, 5, 6, 8, 9, 10, 12, 13, 14, 15, 16, 18, 20, 21, 22, 23]

	assert octave.octave_divisions == pytest.approx([2 ** (steps / 24) for steps in quartertones], abs=0.0001)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_missing_octave_description () -> None:

	with pytest.raises(cacophony.errors.FormSyntaxError):
		OctaveStructure.parse("The melody has long phrases throughout the form.")


def test_unparseable_spacing () -> None:

	with pytest.raises(cacophony.errors.FormSyntaxError):
		OctaveStructure.parse("Scales are constructed from three notes dividing the octave. Nobody knows how.")


def test_scale_with_unknown_chord () -> None:

	text = textwrap.dedent("""\
		Scales are constructed from twelve notes spaced evenly throughout the octave.

		The odd tritonic scale is thought of as two joined chords. These chords are named zor and fex.

		The zor dichord is the 1st and the 5th degrees of the semitone octave scale.
	""")

	with pytest.raises(cacophony.errors.FormSyntaxError, match="fex"):
		OctaveStructure.parse(text)


def test_unknown_scale_type () -> None:

	text = textwrap.dedent("""\
		Scales are constructed from twelve notes spaced evenly throughout the octave.

		The odd tritonic scale is constructed by starting at the tonic and adding random notes.
	""")

	with pytest.raises(cacophony.errors.FormSyntaxError):
		OctaveStructure.parse(text)
