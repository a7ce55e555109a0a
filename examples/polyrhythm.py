import logging

import cacophony.midi_generator
import cacophony.octave_structure
import cacophony.phrase
import cacophony.polyrhythm

logging.basicConfig(level=logging.INFO)

TEMPO = 90
REPEATS = 4

# Seven beats against eleven, with the seven setting the pulse.
rhythm = cacophony.polyrhythm.polyrhythm_from_ratio("7:11")

for beat in rhythm:
	logging.info(f"{float(beat.duration):.3f} beats at amplitude {beat.amplitude}")

# Beats where both parts land together sound on the tonic, the rest an octave up.
notes = []

for _ in range(REPEATS):
	for beat in rhythm:
		ratio = 1 if beat.amplitude > 1 else 2
		notes.append(cacophony.phrase.Note(ratio, beat))

midi = cacophony.midi_generator.MidiGenerator(
	cacophony.octave_structure.OctaveStructure.evenly_spaced(12),
	tonic = 220,
	name = "7:11 polyrhythm"
)

midi.add_phrase(cacophony.phrase.Phrase(notes, tempo=TEMPO))

if __name__ == "__main__":

	with open("polyrhythm.mid", "wb") as f:
		midi.write(f)
