class CacophonyError (Exception):

	"""
	Base class for every error raised while turning a musical form into sound.
	"""

	pass


class FormSyntaxError (CacophonyError):

	"""
	Raised when a musical form description cannot be understood.
	"""

	pass
