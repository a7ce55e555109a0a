"""Notes and phrases - pitched beats, grouped under one tempo."""

import dataclasses
import fractions
import typing

import cacophony.rhythm


@dataclasses.dataclass(frozen=True)
class Note:

	"""
	A beat played at a pitch.

	``ratio`` is the pitch as a multiple of the tonic, so 1 is the tonic
	itself and 2 the octave above. A rest is a note with zero amplitude.
	"""

	ratio: float
	beat: cacophony.rhythm.Beat

	@classmethod
	def rest (cls, beat: cacophony.rhythm.Beat) -> "Note":

		"""Return a silent note lasting as long as ``beat``."""

		return cls(1, dataclasses.replace(beat, amplitude=0))

	@property
	def amplitude (self) -> cacophony.rhythm.Amplitude:

		return self.beat.amplitude

	@property
	def duration (self) -> fractions.Fraction:

		return self.beat.duration

	@property
	def start_delay (self) -> fractions.Fraction:

		return self.beat.start_delay

	@property
	def after_delay (self) -> fractions.Fraction:

		return self.beat.after_delay

	@property
	def sounding_time (self) -> fractions.Fraction:

		return self.beat.sounding_time


@dataclasses.dataclass
class Phrase:

	"""
	A sequence of notes sharing performance instructions.

	Attributes:
		notes: The notes to play, in order.
		tempo: Beats per minute.
	"""

	notes: typing.List[Note]
	tempo: float

	def __post_init__ (self) -> None:

		self.notes = list(self.notes)

		if self.tempo <= 0:
			raise ValueError(f"tempo must be positive, got {self.tempo}")

	def __iter__ (self) -> typing.Iterator[Note]:

		return iter(self.notes)

	def __len__ (self) -> int:

		return len(self.notes)

	@property
	def seconds (self) -> float:

		"""How long the phrase lasts at its tempo."""

		return float(sum(note.duration for note in self.notes)) * 60 / self.tempo
