import typing

import cacophony.errors


WORDS_TO_NUMBERS: typing.Dict[str, int] = {
	"one": 1,
	"two": 2,
	"three": 3,
	"four": 4,
	"five": 5,
	"six": 6,
	"seven": 7,
	"eight": 8,
	"nine": 9,
	"ten": 10,
	"eleven": 11,
	"twelve": 12,
	"thirteen": 13,
	"fourteen": 14,
	"fifteen": 15,
	"sixteen": 16,
	"seventeen": 17,
	"eighteen": 18,
	"nineteen": 19,
}


def number_from_word (word: str) -> int:

	"""
	Convert a number word such as ``"nineteen"`` or ``"twenty-four"`` to an integer.

	Only the numbers Dwarf Fortress uses for note counts are supported (1-29).
	"""

	word = word.strip().lower()

	if word in WORDS_TO_NUMBERS:
		return WORDS_TO_NUMBERS[word]

	if word == "twenty":
		return 20

	if word.startswith("twenty-") and word.removeprefix("twenty-") in WORDS_TO_NUMBERS:
		units = WORDS_TO_NUMBERS[word.removeprefix("twenty-")]
		if units < 10:
			return 20 + units

	raise cacophony.errors.FormSyntaxError(f"Unsupported number name {word!r}")
