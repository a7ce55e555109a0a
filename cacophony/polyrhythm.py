"""Combine several rhythms into one polyrhythm.

The combination works on canonical tick grids (see
:meth:`cacophony.rhythm.Rhythm.canonical`):

1. **Align** - every component's grid is stretched to the least common
   multiple of all grid lengths, by padding each slot with empty ticks.
2. **Merge** - the aligned ticks are folded left to right, tracking which
   components are still sounding. A new attack in any component interrupts
   everything else and sums every value on that tick; a rest (``0``) only
   silences its own component, and the merged rhythm only falls silent once
   nothing is sounding.
3. **Re-beat** - each non-empty merged tick starts a new centred beat that
   lasts until the next one.
4. **Rescale** - the result is stretched to the primary rhythm's duration.

The primary rhythm gets no extra weight in the merge; it only sets the
duration of the result.

Grid sizes grow with the LCM of the component lengths, so awkwardly coprime
components (7 against 11 against 13...) get large quickly. ``max_ticks``
caps this.
"""

import dataclasses
import functools
import itertools
import logging
import math
import typing

import cacophony.rhythm


logger = logging.getLogger(__name__)


Tick = typing.Optional[cacophony.rhythm.Amplitude]


@dataclasses.dataclass(frozen=True)
class MergeState:

	"""
	Accumulator threaded through the tick merge.

	Attributes:
		sounding: Indices of the components currently producing sound.
		output: The merged value for the most recent tick.
	"""

	sounding: typing.FrozenSet[int] = frozenset()
	output: Tick = None


def align (grids: typing.Sequence[typing.Sequence[Tick]], max_ticks: int = cacophony.rhythm.DEFAULT_MAX_TICKS) -> typing.List[typing.List[Tick]]:

	"""
	Stretch canonical grids to a shared length so equal indices mean equal times.

	This is not interpolation: each original slot keeps its value and is
	followed by ``(length / original_length) - 1`` empty ticks.

	Raises:
		TickLimitError: The shared length would exceed ``max_ticks``.
		AlignmentError: A grid length does not divide the shared length.
	"""

	if any(len(grid) == 0 for grid in grids):
		raise ValueError("Cannot align a rhythm with zero duration")

	common_length = functools.reduce(math.lcm, (len(grid) for grid in grids), 1)

	if common_length > max_ticks:
		raise cacophony.rhythm.TickLimitError(common_length, max_ticks)

	aligned: typing.List[typing.List[Tick]] = []

	for grid in grids:

		stretch_factor, remainder = divmod(common_length, len(grid))

		if remainder:
			raise cacophony.rhythm.AlignmentError(
				f"Grid of {len(grid)} ticks does not divide the common length {common_length}"
			)

		padding = [None] * (stretch_factor - 1)
		aligned.append([tick for value in grid for tick in [value, *padding]])

	return aligned


def merge_tick (state: MergeState, values: typing.Sequence[Tick]) -> MergeState:

	"""
	Merge one aligned tick (one value per component) into the running state.

	- Any positive value is a new attack: the attacking components become the
	  only ones sounding, and the output is the sum of every non-empty value
	  on the tick (so simultaneous attacks stack).
	- Otherwise, components with an explicit ``0`` stop sounding. If that
	  leaves nothing sounding the output is ``0`` (silence); if not, the
	  output is ``None`` and whatever was playing holds.
	"""

	attacks = frozenset(index for index, value in enumerate(values) if value is not None and value > 0)

	if attacks:
		return MergeState(
			sounding = attacks,
			output = sum(value for value in values if value is not None)
		)

	finished = frozenset(index for index, value in enumerate(values) if value is not None and value == 0)
	sounding = state.sounding - finished

	if finished and not sounding:
		return MergeState(sounding=sounding, output=0)

	return MergeState(sounding=sounding, output=None)


def merge (aligned: typing.Sequence[typing.Sequence[Tick]]) -> typing.List[Tick]:

	"""
	Fold the aligned component grids into a single merged grid.
	"""

	states = itertools.accumulate(zip(*aligned), merge_tick, initial=MergeState())

	# Skip the initial state, which belongs to no tick.
	return [state.output for state in itertools.islice(states, 1, None)]


def beats_from_ticks (ticks: typing.Sequence[Tick]) -> typing.List[cacophony.rhythm.Beat]:

	"""
	Turn a merged tick grid back into centred beats, one tick per duration unit.

	Each non-empty tick starts a beat that runs until the next non-empty tick.
	The first beat always starts at tick 0, as a rest if that tick is empty.
	"""

	if not ticks:
		return []

	beats: typing.List[cacophony.rhythm.Beat] = []
	amplitude = ticks[0] if ticks[0] is not None else 0
	length = 1

	for tick in ticks[1:]:

		if tick is None:
			length += 1
			continue

		beats.append(cacophony.rhythm.Beat(amplitude, length, 0))
		amplitude = tick
		length = 1

	beats.append(cacophony.rhythm.Beat(amplitude, length, 0))

	return beats


def build_polyrhythm (
	primary: cacophony.rhythm.Rhythm,
	secondaries: typing.Iterable[cacophony.rhythm.Rhythm] = (),
	max_ticks: int = cacophony.rhythm.DEFAULT_MAX_TICKS,
) -> cacophony.rhythm.Rhythm:

	"""
	Combine a primary rhythm with any number of secondary rhythms.

	All components are played over the same period of time; the result lasts
	as long as the primary. A polyrhythm is an ordinary :class:`Rhythm`, so it
	can itself be a component of another polyrhythm.

	Parameters:
		primary: Sets the duration of the combined rhythm.
		secondaries: The other layered rhythms.
		max_ticks: Refuse to align on a grid longer than this.

	Returns:
		A rhythm whose ``primary`` and ``secondaries`` are the inputs.

	Raises:
		NonIntegerDurationError: A component's duration is not a whole number.
		TickLimitError: A grid would exceed ``max_ticks``.

	Example:
		```python
		four = Rhythm([Beat(1, 1, 0)] * 4)
		three = Rhythm([Beat(1, 1, 0)] * 3)

		poly = build_polyrhythm(four, [three])
		[beat.duration for beat in poly]    # 1, 1/3, 2/3, 2/3, 1/3, 1
		[beat.amplitude for beat in poly]   # 2, 1, 1, 1, 1, 1
		```
	"""

	secondaries = tuple(secondaries)
	components = (primary, *secondaries)

	aligned = align([component.canonical(max_ticks=max_ticks) for component in components], max_ticks=max_ticks)
	merged = merge(aligned)

	logger.debug(f"Merged {len(components)} rhythms on a grid of {len(merged)} ticks")

	unscaled = cacophony.rhythm.Rhythm(beats_from_ticks(merged))
	scaled = unscaled.stretch(primary.duration)

	return cacophony.rhythm.Rhythm(scaled.beats, primary=primary, secondaries=secondaries)


def polyrhythm_from_ratio (ratio: str, max_ticks: int = cacophony.rhythm.DEFAULT_MAX_TICKS) -> cacophony.rhythm.Rhythm:

	"""
	Build a polyrhythm of plain, equal beats from a ratio such as ``"7:11"``.

	Each number becomes a rhythm with that many unit beats. The first number
	is the primary and sets the tempo.
	"""

	try:
		lengths = [int(part) for part in ratio.split(":")]
	except ValueError:
		raise ValueError(f"Polyrhythm ratio must be whole numbers separated by ':', got {ratio!r}") from None

	if len(lengths) < 2 or any(length < 1 for length in lengths):
		raise ValueError(f"Polyrhythm ratio needs at least two positive numbers, got {ratio!r}")

	primary, *secondaries = [
		cacophony.rhythm.Rhythm([cacophony.rhythm.Beat(1, 1, 0)] * length)
		for length in lengths
	]

	return build_polyrhythm(primary, secondaries, max_ticks=max_ticks)
