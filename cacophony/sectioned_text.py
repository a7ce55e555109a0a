import re
import typing


PARAGRAPH_DELIMITER = re.compile(r"\n\s*\n")
SENTENCE_DELIMITER = re.compile(r"\.\s+")

_WHITESPACE = re.compile(r"\s+")

Pattern = typing.Union[str, re.Pattern[str]]


class SectionedText:

	"""
	Split a description into paragraphs (or sentences) and find the ones you want.

	Used to pick apart Dwarf Fortress prose without handling every kind of
	paragraph, and without failing when an optional paragraph is missing.
	"""

	def __init__ (self, description: str, delimiter: Pattern = PARAGRAPH_DELIMITER) -> None:

		"""
		Split ``description`` on ``delimiter`` (blank lines by default).
		"""

		if isinstance(delimiter, str):
			pieces = description.split(delimiter)
		else:
			pieces = delimiter.split(description)

		self.sections: typing.List[str] = [piece.strip() for piece in pieces if piece.strip()]

	def __repr__ (self) -> str:

		return f"<SectionedText: {self.sections!r}>"

	@property
	def paragraphs (self) -> typing.List[str]:

		"""The sections with all internal whitespace collapsed to single spaces."""

		return [_WHITESPACE.sub(" ", section) for section in self.sections]

	def find (self, key: Pattern) -> typing.Optional[str]:

		"""Return the first section matching ``key``, or ``None``."""

		return next(iter(self.find_all(key)), None)

	def find_all (self, key: Pattern, context: typing.Optional[typing.List[str]] = None) -> typing.List[str]:

		"""Return every section (or every item of ``context``) matching ``key``."""

		if context is None:
			context = self.sections

		return [section for section in context if re.search(key, section)]

	def match (self, key: Pattern) -> typing.Optional[re.Match[str]]:

		"""As :meth:`find`, but return the regular expression match."""

		return next(iter(self.match_all(key)), None)

	def match_all (self, key: Pattern, context: typing.Optional[typing.List[str]] = None) -> typing.List[re.Match[str]]:

		if context is None:
			context = self.sections

		matches = (re.search(key, section) for section in context)

		return [match for match in matches if match]

	def find_paragraph (self, key: Pattern) -> typing.Optional["SectionedText"]:

		"""Find the first paragraph matching ``key``, split into sentences."""

		return next(iter(self.find_all_paragraphs(key)), None)

	def find_all_paragraphs (self, key: Pattern) -> typing.List["SectionedText"]:

		"""Find every paragraph matching ``key``, each split into sentences."""

		return [
			SectionedText(paragraph, SENTENCE_DELIMITER)
			for paragraph in self.find_all(key, self.paragraphs)
		]
