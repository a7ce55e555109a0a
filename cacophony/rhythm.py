"""Beats and rhythms - the timed, accented building blocks of every tune.

A :class:`Beat` is a loudness, a duration (in abstract beat units, not
seconds) and a timing bias from -1 (as early as possible) to +1 (as late as
possible). A :class:`Rhythm` is an immutable sequence of beats.

Timing is modelled as silence: by default ``START_DELAY`` of each beat's
duration is silent before the note sounds and ``AFTER_DELAY`` is silent after
it. Early and late beats redistribute that silence without changing the
beat's total duration.

:meth:`Rhythm.canonical` places every beat onto an exact integer tick grid so
rhythms with different timings can be compared and combined (see
:mod:`cacophony.polyrhythm`). Grid sizes come from exact rational arithmetic;
floating point would not reduce to small denominators.
"""

import dataclasses
import fractions
import functools
import logging
import math
import numbers
import typing

import cacophony.errors


logger = logging.getLogger(__name__)


# Fraction of a beat's duration that is silent before the note, by default.
START_DELAY = fractions.Fraction(3, 10)

# Fraction of a beat's duration that is silent after the note, by default.
AFTER_DELAY = fractions.Fraction(3, 10)

# Largest denominator used when rationalising float durations and timings.
MAX_DENOMINATOR = 10 ** 6

# Default ceiling on the length of a canonical tick grid.
DEFAULT_MAX_TICKS = 2 ** 20


Amplitude = typing.Union[int, float, fractions.Fraction]


class RhythmError (cacophony.errors.CacophonyError):
	pass


class NonIntegerDurationError (RhythmError):

	"""Raised when canonicalising a rhythm whose total duration is not a whole number."""

	def __init__ (self, duration: fractions.Fraction) -> None:

		self.duration = duration
		super().__init__(f"Cannot canonicalise a rhythm with non-integer length {duration}")


class AlignmentError (RhythmError):

	"""Raised when a canonical grid does not divide evenly into the shared grid length."""

	pass


class TickLimitError (RhythmError):

	"""Raised when a tick grid would grow beyond the configured ceiling."""

	def __init__ (self, ticks: int, max_ticks: int) -> None:

		self.ticks = ticks
		self.max_ticks = max_ticks
		super().__init__(f"Tick grid of {ticks} ticks exceeds the limit of {max_ticks}")


def as_fraction (value: typing.Union[numbers.Real, str]) -> fractions.Fraction:

	"""
	Convert a number to an exact fraction.

	Integers, fractions and strings such as ``"3/10"`` are converted exactly.
	Floats are rationalised to the simplest nearby fraction, so ``0.3`` becomes
	``3/10`` rather than the binary approximation of 0.3.
	"""

	if isinstance(value, fractions.Fraction):
		return value

	if isinstance(value, (numbers.Rational, str)):
		return fractions.Fraction(value)

	return fractions.Fraction(value).limit_denominator(MAX_DENOMINATOR)


@dataclasses.dataclass(frozen=True)
class Beat:

	"""
	A single timed event in a rhythm.

	Attributes:
		amplitude: Loudness, normally 0.0 to 1.0. Zero is an audible rest -
			it marks the end of the previous note, which "no event" does not.
			Polyrhythms may stack amplitudes above 1.0.
		duration: Length in beat units (think metronome ticks), stored exactly.
		timing: -1 (as early as possible) through 0 (centred) to +1 (as late
			as possible), stored exactly.

	Example:
		```python
		beat = Beat(amplitude=1, duration=2, timing=-1)
		beat.start_delay    # Fraction(0, 1)
		beat.after_delay    # Fraction(6, 5)
		```
	"""

	amplitude: Amplitude
	duration: fractions.Fraction
	timing: fractions.Fraction = fractions.Fraction(0)

	def __post_init__ (self) -> None:

		# Frozen, so coerce through object.__setattr__.
		object.__setattr__(self, "duration", as_fraction(self.duration))
		object.__setattr__(self, "timing", as_fraction(self.timing))

		if self.amplitude < 0:
			raise ValueError(f"amplitude must not be negative, got {self.amplitude}")
		if self.duration <= 0:
			raise ValueError(f"duration must be positive, got {self.duration}")
		if not -1 <= self.timing <= 1:
			raise ValueError(f"timing must be between -1 and 1, got {self.timing}")

	@property
	def start_delay (self) -> fractions.Fraction:

		"""Silence before the note sounds, in beat units."""

		return self._delay_fractions[0] * self.duration

	@property
	def after_delay (self) -> fractions.Fraction:

		"""Silence after the note, before the next beat's time slice."""

		return self._delay_fractions[1] * self.duration

	@property
	def sounding_time (self) -> fractions.Fraction:

		"""How long the note actually sounds, excluding both delays."""

		return self.duration - self.start_delay - self.after_delay

	@property
	def start_offset (self) -> fractions.Fraction:

		"""
		How much later (positive) or earlier (negative) than a centred beat
		this beat starts, in beat units.
		"""

		return self.start_delay - (START_DELAY * self.duration)

	@property
	def _delay_fractions (self) -> typing.Tuple[fractions.Fraction, fractions.Fraction]:

		"""
		Return the (before, after) silence as fractions of the duration.

		Late beats move the after-silence to the front; early beats move the
		start-silence to the back. The two always sum to
		``START_DELAY + AFTER_DELAY``.
		"""

		start_bias = max(fractions.Fraction(0), -self.timing)
		end_bias = max(fractions.Fraction(0), self.timing)

		before = ((1 - start_bias) * START_DELAY) + (end_bias * AFTER_DELAY)
		after = (start_bias * START_DELAY) + ((1 - end_bias) * AFTER_DELAY)

		return before, after


@dataclasses.dataclass(frozen=True)
class Rhythm:

	"""
	An ordered, immutable sequence of beats.

	Plain rhythms come from the notation parser. Rhythms built by
	:func:`cacophony.polyrhythm.build_polyrhythm` also remember the rhythms
	they were made from (``primary`` and ``secondaries``) for inspection; those
	take no part in equality, which compares beats only.
	"""

	beats: typing.Tuple[Beat, ...]
	primary: typing.Optional["Rhythm"] = dataclasses.field(default=None, compare=False, repr=False)
	secondaries: typing.Tuple["Rhythm", ...] = dataclasses.field(default=(), compare=False, repr=False)

	def __post_init__ (self) -> None:

		object.__setattr__(self, "beats", tuple(self.beats))
		object.__setattr__(self, "secondaries", tuple(self.secondaries))

	def __iter__ (self) -> typing.Iterator[Beat]:

		return iter(self.beats)

	def __len__ (self) -> int:

		return len(self.beats)

	@property
	def duration (self) -> fractions.Fraction:

		"""Total duration of all beats."""

		return sum((beat.duration for beat in self.beats), fractions.Fraction(0))

	@property
	def components (self) -> typing.List["Rhythm"]:

		"""The rhythms this one was combined from, primary first (empty for plain rhythms)."""

		if self.primary is None:
			return []

		return [self.primary, *self.secondaries]

	@property
	def is_polyrhythm (self) -> bool:

		return self.primary is not None

	def stretch (self, new_duration: typing.Union[numbers.Real, str]) -> "Rhythm":

		"""
		Return this rhythm rescaled to take ``new_duration`` beat units in total.

		Amplitudes and timings are unchanged; every duration is multiplied by
		the same exact factor.
		"""

		scale = as_fraction(new_duration) / self.duration

		return dataclasses.replace(
			self,
			beats = tuple(dataclasses.replace(beat, duration=beat.duration * scale) for beat in self.beats)
		)

	def canonical (self, max_ticks: int = DEFAULT_MAX_TICKS) -> typing.List[typing.Optional[Amplitude]]:

		"""
		Place every beat on an exact integer tick grid.

		Each beat's exact start is its elapsed time (the durations of the beats
		before it) plus its ``start_offset``. The grid is scaled by ``D``, the
		least common multiple of the denominators of all those starts, so every
		start lands on a whole tick. For unit-length beats the start is simply
		``index + start_offset``.

		Parameters:
			max_ticks: Refuse to build a grid longer than this.

		Returns:
			A list of ``duration * D`` slots. A slot holds the amplitude of the
			beat starting there, or ``None`` if nothing starts on that tick.
			Starts before tick 0 wrap to the end, since rhythms are cyclic. That
			catches an early first beat, but also a long early beat just after a
			very short one, which then lands after the beats that follow it.

		Raises:
			NonIntegerDurationError: The total duration is not a whole number.
			TickLimitError: The grid would exceed ``max_ticks``.
		"""

		duration = self.duration

		if duration.denominator != 1:
			raise NonIntegerDurationError(duration)

		starts: typing.List[fractions.Fraction] = []
		elapsed = fractions.Fraction(0)

		for beat in self.beats:
			starts.append(elapsed + beat.start_offset)
			elapsed += beat.duration

		denominator = functools.reduce(math.lcm, (start.denominator for start in starts), 1)
		length = int(duration) * denominator

		if length > max_ticks:
			raise TickLimitError(length, max_ticks)

		logger.debug(f"Canonical grid: {length} ticks ({denominator} per beat unit) for {len(self.beats)} beats")

		grid: typing.List[typing.Optional[Amplitude]] = [None] * length

		for beat, start in zip(self.beats, starts):
			grid[round(start * denominator) % length] = beat.amplitude

		return grid
