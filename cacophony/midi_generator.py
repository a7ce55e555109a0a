"""Render phrases to a Standard MIDI File with mido."""

import logging
import math
import typing

import mido

import cacophony.frequency_table
import cacophony.octave_structure
import cacophony.phrase


logger = logging.getLogger(__name__)


TICKS_PER_BEAT = 480

MIDI_CHANNEL = 0

# General MIDI "Acoustic Guitar (nylon)".
MIDI_PROGRAM = 24

MAX_VELOCITY = 127

TRACK_NAME = "Cacophony"


def beats_to_ticks (beats: typing.Any) -> int:

	"""Convert a length in beat units (one beat is one quarter note) to MIDI ticks."""

	return round(beats * TICKS_PER_BEAT)


def velocity_for (amplitude: typing.Any) -> int:

	"""
	Map an amplitude (1.0 is full volume) to a MIDI velocity.

	Rounds up so quiet beats stay audible, and clamps stacked polyrhythm
	amplitudes to the MIDI maximum.
	"""

	return max(0, min(MAX_VELOCITY, math.ceil(amplitude * MAX_VELOCITY)))


class MidiGenerator:

	"""
	Collect phrases and write them as a two-track MIDI file.

	Track 0 holds the tempo and sequence name, track 1 the notes. The octave
	structure decides which MIDI note numbers carry which frequencies, see
	:class:`cacophony.frequency_table.FrequencyTable`.

	Example:
		```python
		midi = MidiGenerator(octave, tonic=440)
		midi.add_phrase(phrase)

		with open("out.mid", "wb") as f:
			midi.write(f)
		```
	"""

	def __init__ (
		self,
		octave_structure: cacophony.octave_structure.OctaveStructure,
		tonic: float,
		name: str = "Inevitable Cacophony",
	) -> None:

		self.frequency_table = cacophony.frequency_table.FrequencyTable(octave_structure, tonic)
		self.name = name
		self.phrases: typing.List[cacophony.phrase.Phrase] = []

	def add_phrase (self, phrase: cacophony.phrase.Phrase) -> None:

		self.phrases.append(phrase)

	def meta_track (self) -> mido.MidiTrack:

		if not self.phrases:
			raise ValueError("Cannot build a MIDI file without any phrases")

		track = mido.MidiTrack()
		track.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(self.phrases[0].tempo)))
		track.append(mido.MetaMessage('track_name', name=self.name))

		return track

	def notes_track (self) -> mido.MidiTrack:

		"""
		Build the track of note messages for every phrase added so far.

		Each note-on waits for the note's start delay plus the previous note's
		after delay; each note-off follows its note-on by the sounding time.

		Raises:
			OutOfRangeError: A note's frequency has no MIDI note number.
		"""

		track = mido.MidiTrack()
		track.append(mido.MetaMessage('track_name', name=TRACK_NAME))
		track.append(mido.Message('program_change', channel=MIDI_CHANNEL, program=MIDI_PROGRAM))

		# Silence left over from the end of the previous note.
		leftover_delay = 0

		for phrase in self.phrases:
			for note in phrase.notes:
				track.extend(self._messages_for_note(note, leftover_delay))
				leftover_delay = beats_to_ticks(note.after_delay)

		return track

	def midi_file (self) -> mido.MidiFile:

		mid = mido.MidiFile(type=1)
		mid.ticks_per_beat = TICKS_PER_BEAT
		mid.tracks.append(self.meta_track())
		mid.tracks.append(self.notes_track())

		return mid

	def write (self, output: typing.BinaryIO) -> None:

		"""Write the MIDI file to a binary stream."""

		mid = self.midi_file()
		mid.save(file=output)

		logger.info(f"Wrote {sum(len(phrase) for phrase in self.phrases)} notes of MIDI")

	def _messages_for_note (self, note: cacophony.phrase.Note, delay_before: int) -> typing.List[mido.Message]:

		midi_note = self.frequency_table.index_for_ratio(note.ratio)

		return [
			mido.Message(
				'note_on',
				channel = MIDI_CHANNEL,
				note = midi_note,
				velocity = velocity_for(note.amplitude),
				time = beats_to_ticks(note.start_delay) + delay_before
			),
			mido.Message(
				'note_off',
				channel = MIDI_CHANNEL,
				note = midi_note,
				time = beats_to_ticks(note.sounding_time)
			),
		]
