import dataclasses
import logging
import numbers
import os
import typing

import yaml

import cacophony.rhythm


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "cacophony.yaml"


@dataclasses.dataclass
class Config:

	"""
	Performance settings, loaded from YAML and overridden by command-line flags.

	Example ``cacophony.yaml``:
		```yaml
		tempo: 90
		tonic: 261.63
		seed: 42
		max_ticks: 65536
		```
	"""

	tempo: float = 120
	tonic: float = 440
	seed: typing.Optional[int] = None
	repeats: int = 3
	sample_rate: int = 44100
	max_ticks: int = cacophony.rhythm.DEFAULT_MAX_TICKS
	log_level: str = "INFO"

	def __post_init__ (self) -> None:

		for name in ("tempo", "tonic"):
			if not _is_number(getattr(self, name)):
				raise ValueError(f"{name} must be a number, got {getattr(self, name)!r}")

		for name in ("repeats", "sample_rate", "max_ticks"):
			if not _is_number(getattr(self, name), integral=True):
				raise ValueError(f"{name} must be a whole number, got {getattr(self, name)!r}")

		if self.seed is not None and not _is_number(self.seed, integral=True):
			raise ValueError(f"seed must be a whole number, got {self.seed!r}")

		# Unknown names come back as "Level NAME" rather than a number.
		if not isinstance(self.log_level, str) or not isinstance(logging.getLevelName(self.log_level), int):
			raise ValueError(f"log_level must be a logging level name such as INFO, got {self.log_level!r}")

		if self.tempo <= 0:
			raise ValueError(f"tempo must be positive, got {self.tempo}")

		if self.tonic <= 0:
			raise ValueError(f"tonic must be positive, got {self.tonic}")

		if self.repeats < 1:
			raise ValueError(f"repeats must be at least 1, got {self.repeats}")

		if self.max_ticks < 1:
			raise ValueError(f"max_ticks must be at least 1, got {self.max_ticks}")

	@classmethod
	def from_dict (cls, values: typing.Dict[str, typing.Any]) -> "Config":

		"""Build a config from a mapping, ignoring (with a warning) keys it doesn't know."""

		known = {field.name for field in dataclasses.fields(cls)}
		unknown = sorted(set(values) - known)

		if unknown:
			logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

		return cls(**{key: value for key, value in values.items() if key in known})

	def updated (self, **overrides: typing.Any) -> "Config":

		"""Return a copy with every override that is not ``None`` applied."""

		return dataclasses.replace(self, **{key: value for key, value in overrides.items() if value is not None})


def _is_number (value: typing.Any, integral: bool = False) -> bool:

	# bool is an int subclass, but "tempo: yes" is a mistake.
	if isinstance(value, bool):
		return False

	return isinstance(value, numbers.Integral if integral else numbers.Real)


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> Config:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return Config()

	with open(config_path, 'r') as f:
		try:
			values = yaml.safe_load(f) or {}
		except yaml.YAMLError as e:
			raise ValueError(f"Config file {config_path} is not valid YAML: {e}") from e

	if not isinstance(values, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping")

	return Config.from_dict(values)
