"""Parse Dwarf Fortress rhythm lines such as ``| x x'X - |`` into rhythms."""

import re
import typing

import cacophony.errors
import cacophony.rhythm


# Relative loudness of each beat symbol. The loudest symbol used in a
# particular line becomes amplitude 1.0.
BEAT_VALUES: typing.Dict[str, int] = {
	"-": 0,		# silence
	"x": 4,		# regular beat
	"X": 6,		# accented beat
	"!": 9,		# primary accent
}

# -1 plays a beat as early as possible, +1 as late as possible.
TIMING_VALUES: typing.Dict[str, int] = {
	"": 0,
	"`": -1,
	"'": 1,
}

BAR_LINE = "|"

# Early marks come before their beat and late marks after it, so split
# before a backtick and after an apostrophe as well as on spaces.
_BEAT_SEPARATOR = re.compile(r" |(?=`)|(?<=')")

# A bare rhythm score anywhere in free text.
_RHYTHM_LINE = re.compile(r"(\|( |`)((-|x|X|!)( |`|'))+)+\|")


class NotationError (cacophony.errors.CacophonyError):
	pass


class UnknownBeatSymbolError (NotationError):

	def __init__ (self, symbol: str) -> None:

		self.symbol = symbol
		super().__init__(f"Unknown beat symbol {symbol!r}")


class UnknownTimingSymbolError (NotationError):

	def __init__ (self, symbol: str) -> None:

		self.symbol = symbol
		super().__init__(f"Unknown timing symbol {symbol!r}")


def parse (rhythm_line: str) -> cacophony.rhythm.Rhythm:

	"""
	Parse a rhythm line in the notation Dwarf Fortress produces.

	**Syntax:**
	- `-`, `x`, `X`, `!`: rest, beat, accented beat, primary accent.
	- `` `x ``: an early beat (the mark precedes the beat).
	- `x'`: a late beat (the mark follows the beat).
	- `|`: a bar line, ignored.

	Every beat lasts one unit. Amplitudes are scaled so the loudest symbol in
	the line is 1.0.

	Example:
		```python
		rhythm = parse("| x X x ! |")
		[beat.amplitude for beat in rhythm]   # 4/9, 2/3, 4/9, 1.0
		```

	Raises:
		UnknownBeatSymbolError: A beat symbol is not one of ``- x X !``.
		UnknownTimingSymbolError: A timing mark is not `` ` `` or ``'``.
		NotationError: The line contains no beats.
	"""

	raw_beats = [_parse_beat(token) for token in _tokenize(rhythm_line)]

	if not raw_beats:
		raise NotationError(f"No beats found in rhythm line {rhythm_line!r}")

	loudest = max(value for value, _ in raw_beats)

	return cacophony.rhythm.Rhythm([
		cacophony.rhythm.Beat(value / loudest if loudest else 0.0, 1, timing)
		for value, timing in raw_beats
	])


def find_rhythm_line (text: str) -> typing.Optional[str]:

	"""Return the first bare rhythm score in ``text``, or ``None``."""

	match = _RHYTHM_LINE.search(text)

	return match.group(0) if match else None


def _tokenize (rhythm_line: str) -> typing.List[str]:

	"""
	Split a rhythm line into beat tokens, dropping bar lines.
	"|x x'X|" -> ["x", "x'", "X"]
	"""

	spaced = rhythm_line.strip().replace(BAR_LINE, f" {BAR_LINE} ")

	return [
		token
		for token in _BEAT_SEPARATOR.split(spaced)
		if token and token != BAR_LINE and not token.isspace()
	]


def _parse_beat (token: str) -> typing.Tuple[int, int]:

	"""Return the (raw loudness, timing) of a single beat token."""

	timing_symbol = "".join(char for char in token if not _is_beat_char(char))

	if timing_symbol not in TIMING_VALUES:
		raise UnknownTimingSymbolError(timing_symbol)

	accent_symbol = "".join(char for char in token if _is_beat_char(char))

	if accent_symbol not in BEAT_VALUES:
		raise UnknownBeatSymbolError(accent_symbol)

	return BEAT_VALUES[accent_symbol], TIMING_VALUES[timing_symbol]


def _is_beat_char (char: str) -> bool:

	# Letters and digits are (possibly unknown) beats; other punctuation is a timing mark.
	return char in BEAT_VALUES or char.isalnum()
