"""Play every musical form found in a Dwarf Fortress legends export.

Usage:
    python examples/legends.py region1-legends.xml
"""

import logging
import pathlib
import random
import sys

import cacophony.errors
import cacophony.forms
import cacophony.octave_structure
import cacophony.phrase
import cacophony.tone_generator

logging.basicConfig(level=logging.INFO)

TEMPO = 120
TONIC = 261.63

rng = random.Random(1)


def play_form (form_id: int, text: str) -> None:

	"""Write one tune per form; forms we can't read are skipped."""

	try:
		name = cacophony.forms.parse_metadata(text).name
		rhythm = cacophony.forms.first_rhythm(text)
		octave = cacophony.octave_structure.OctaveStructure.parse(text)
	except cacophony.errors.CacophonyError as e:
		logging.warning(f"Skipping form {form_id}: {e}")
		return

	if rhythm is None or not octave.chords:
		logging.warning(f"Skipping {name}: needs both a rhythm and chords")
		return

	chord = rng.choice(list(octave.chords.values()))
	notes = [
		cacophony.phrase.Note(chord.note_scalings[index % len(chord)], beat)
		for index, beat in enumerate(rhythm)
	]

	tone = cacophony.tone_generator.ToneGenerator(TONIC)
	tone.add_phrase(cacophony.phrase.Phrase(notes, tempo=TEMPO))

	with open(f"form_{form_id}.wav", "wb") as f:
		tone.write(f)

	logging.info(f"Played {name}")


if __name__ == "__main__":

	forms = cacophony.forms.parse_legends(pathlib.Path(sys.argv[1]).read_bytes())

	for form_id, text in forms.items():
		play_form(form_id, text)
