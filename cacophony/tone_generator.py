"""Render phrases as sine tones and write them out as WAV audio."""

import io
import logging
import math
import struct
import typing
import wave

import cacophony.phrase


logger = logging.getLogger(__name__)


SAMPLE_RATE = 44100

# One full cycle of a sine wave.
TAU = math.pi * 2

# 16-bit signed PCM.
SAMPLE_WIDTH = 2
MAX_SAMPLE_VALUE = 32767


class ToneGenerator:

	"""
	Turn phrases into a single mono audio stream of sine tones.

	Example:
		```python
		tone = ToneGenerator(tonic=440)
		tone.add_phrase(phrase)

		with open("out.wav", "wb") as f:
			tone.write(f)
		```
	"""

	def __init__ (self, tonic: float, sample_rate: int = SAMPLE_RATE) -> None:

		"""
		Parameters:
			tonic: Frequency in Hertz of a note with ratio 1.
			sample_rate: Samples per second of the rendered audio.
		"""

		if tonic <= 0:
			raise ValueError(f"tonic must be positive, got {tonic}")

		self.tonic = tonic
		self.sample_rate = sample_rate
		self.samples: typing.List[float] = []

	def phrase_samples (self, phrase: cacophony.phrase.Phrase) -> typing.List[float]:

		"""Render a phrase as floating point samples between -1.0 and 1.0."""

		samples: typing.List[float] = []

		for note in phrase.notes:
			samples.extend(self.note_samples(note, phrase.tempo))

		return samples

	def note_samples (self, note: cacophony.phrase.Note, tempo: float) -> typing.List[float]:

		"""
		Render one note: silence for its start delay, a sine wave while it
		sounds, then silence for its after delay.
		"""

		samples_per_wave = self.sample_rate / (note.ratio * self.tonic)
		samples_per_beat = (60 / tempo) * self.sample_rate

		start_delay = float(note.start_delay) * samples_per_beat
		after_delay = float(note.after_delay) * samples_per_beat
		note_length = (float(note.duration) * samples_per_beat) - start_delay - after_delay

		amplitude = float(note.amplitude)

		tone = [
			amplitude * math.sin((index / samples_per_wave) * TAU)
			for index in range(int(note_length))
		]

		return [0.0] * int(start_delay) + tone + [0.0] * int(after_delay)

	def add_phrase (self, phrase: cacophony.phrase.Phrase) -> None:

		self.samples.extend(self.phrase_samples(phrase))

	def write (self, output: typing.BinaryIO) -> None:

		"""
		Write everything added so far as a 16-bit mono WAV file.

		The file is built in memory first, so ``output`` need not be seekable
		(stdout works). Samples outside -1.0 to 1.0 are clipped.
		"""

		frames = b"".join(
			struct.pack("<h", int(max(-1.0, min(1.0, sample)) * MAX_SAMPLE_VALUE))
			for sample in self.samples
		)

		buffer = io.BytesIO()

		with wave.open(buffer, "wb") as wav:
			wav.setnchannels(1)
			wav.setsampwidth(SAMPLE_WIDTH)
			wav.setframerate(self.sample_rate)
			wav.writeframes(frames)

		output.write(buffer.getvalue())

		logger.info(f"Wrote {len(self.samples)} samples ({len(self.samples) / self.sample_rate:.2f}s) of audio")
