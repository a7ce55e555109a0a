import fractions

import pytest

import cacophony.phrase
import cacophony.rhythm


Beat = cacophony.rhythm.Beat
Note = cacophony.phrase.Note
Phrase = cacophony.phrase.Phrase


def test_note_delegates_timing_to_its_beat () -> None:

	note = Note(1.5, Beat(0.5, 2, -1))

	assert note.amplitude == 0.5
	assert note.duration == 2
	assert note.start_delay == 0
	assert note.after_delay == fractions.Fraction(6, 5)
	assert note.sounding_time == fractions.Fraction(4, 5)


def test_rest_keeps_duration_and_timing () -> None:

	beat = Beat(1, 3, 1)
	rest = Note.rest(beat)

	assert rest.amplitude == 0
	assert rest.ratio == 1
	assert rest.duration == 3
	assert rest.start_delay == beat.start_delay


def test_phrase_length_and_seconds () -> None:

	beat = Beat(1, 1, 0)
	phrase = Phrase((Note(1, beat) for _ in range(4)), tempo=120)

	assert len(phrase) == 4
	assert list(phrase) == phrase.notes
	assert phrase.seconds == pytest.approx(2.0)


def test_phrase_seconds_use_every_duration () -> None:

	phrase = Phrase([Note(1, Beat(1, 1)), Note(2, Beat(1, "1/2"))], tempo=90)

	assert phrase.seconds == pytest.approx(1.0)


@pytest.mark.parametrize("tempo", [0, -60])
def test_phrase_rejects_non_positive_tempo (tempo: float) -> None:

	with pytest.raises(ValueError):
		Phrase([], tempo=tempo)
