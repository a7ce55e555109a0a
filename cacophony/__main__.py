"""Command-line interface: turn a Dwarf Fortress musical form into audio.

```
cacophony < form.txt > tune.wav
cacophony --beat --eval "| x X x ! |" > beat.wav
cacophony --beat --polyrhythm 4:3 --midi --output poly.mid
```
"""

import argparse
import functools
import io
import logging
import os
import random
import re
import sys
import typing

import cacophony.config
import cacophony.errors
import cacophony.forms
import cacophony.midi_generator
import cacophony.octave_structure
import cacophony.phrase
import cacophony.polyrhythm
import cacophony.rhythm
import cacophony.tone_generator


logger = logging.getLogger(__name__)


_RATIO = re.compile(r"^\d+(:\d+)+$")


class FormSource:

	"""The form description, read from stdin only if something needs it."""

	def __init__ (self, text: typing.Optional[str]) -> None:

		self._text = text

	@functools.cached_property
	def text (self) -> str:

		if self._text is not None:
			return self._text

		return sys.stdin.read()


def polyrhythm_ratio (text: str) -> str:

	"""argparse type for ratios such as ``7:11`` or ``2:3:4``."""

	if not _RATIO.match(text) or any(int(part) < 1 for part in text.split(":")):
		raise argparse.ArgumentTypeError(f"expected positive whole numbers separated by ':', got {text!r}")

	return text


def build_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(
		prog = "cacophony",
		description = "Play music from Dwarf Fortress musical form descriptions."
	)

	modes = parser.add_mutually_exclusive_group()
	modes.add_argument("-b", "--beat", dest="mode", action="store_const", const="beat", help="play a beat in the form's rhythm")
	modes.add_argument("-s", "--scale", dest="mode", action="store_const", const="scale", help="play a scale in the form's style")

	parser.add_argument("form", nargs="?", help="form description text (default: read stdin)")
	parser.add_argument("-e", "--eval", dest="form_text", metavar="FORM", help="parse FORM rather than reading a form description from stdin")
	parser.add_argument(
		"-p", "--polyrhythm",
		metavar = "RATIO",
		type = polyrhythm_ratio,
		help = "use a polyrhythm in the given ratio (e.g. 7:11, 2:3:4) instead of the form's rhythm; the first number is primary and sets the tempo"
	)
	parser.add_argument("--chromatic", action="store_true", help="use every note in the octave rather than the form's named scales")
	parser.add_argument("-t", "--tempo", type=float, help="tempo in beats per minute")
	parser.add_argument("-S", "--seed", type=int, help="random seed, for repeatable melodies")
	parser.add_argument("--tonic", type=float, help="tonic frequency in Hertz")
	parser.add_argument("--max-ticks", type=int, help="largest tick grid to build when combining rhythms")
	parser.add_argument("-c", "--config", help=f"YAML config file (default: {cacophony.config.DEFAULT_CONFIG_PATH} if present)")
	parser.add_argument("-m", "--midi", action="store_true", help="write a MIDI file instead of WAV audio")
	parser.add_argument("-o", "--output", help="output file (default: stdout)")
	parser.add_argument("-v", "--verbose", action="store_true", help="log debugging detail")

	parser.set_defaults(mode="chords")

	return parser


def resolve_config (args: argparse.Namespace) -> cacophony.config.Config:

	"""Load the config file, if any, and apply command-line overrides."""

	if args.config is not None:
		config = cacophony.config.load_config(args.config)
	elif os.path.exists(cacophony.config.DEFAULT_CONFIG_PATH):
		config = cacophony.config.load_config(cacophony.config.DEFAULT_CONFIG_PATH)
	else:
		config = cacophony.config.Config()

	return config.updated(
		tempo = args.tempo,
		seed = args.seed,
		tonic = args.tonic,
		max_ticks = args.max_ticks,
	)


def choose_rhythm (args: argparse.Namespace, form: FormSource, config: cacophony.config.Config) -> cacophony.rhythm.Rhythm:

	if args.polyrhythm:
		return cacophony.polyrhythm.polyrhythm_from_ratio(args.polyrhythm, max_ticks=config.max_ticks)

	rhythm = cacophony.forms.first_rhythm(form.text, max_ticks=config.max_ticks)

	if rhythm is None:
		raise cacophony.errors.FormSyntaxError("No rhythm found in the form description")

	return rhythm


def chord_notes (
	rhythm: cacophony.rhythm.Rhythm,
	octave: cacophony.octave_structure.OctaveStructure,
	repeats: int,
	rng: random.Random,
) -> typing.List[cacophony.phrase.Note]:

	"""
	Play the rhythm ``repeats`` times, walking through the notes of a randomly
	chosen chord and picking another whenever one runs out.
	"""

	chords = list(octave.chords.values())

	if not chords:
		raise cacophony.errors.FormSyntaxError("The form describes no chords to play")

	notes = []
	remaining: typing.List[float] = []

	for _ in range(repeats):
		for beat in rhythm:

			if not remaining:
				remaining = list(rng.choice(chords).note_scalings)

			notes.append(cacophony.phrase.Note(remaining.pop(0), beat))

	return notes


def beat_notes (rhythm: cacophony.rhythm.Rhythm, repeats: int) -> typing.List[cacophony.phrase.Note]:

	"""Play the rhythm ``repeats`` times on the tonic."""

	return [cacophony.phrase.Note(1, beat) for _ in range(repeats) for beat in rhythm]


def scale_notes (octave: cacophony.octave_structure.OctaveStructure, chromatic: bool) -> typing.List[cacophony.phrase.Note]:

	"""Play a scale up to the octave and back down, one even beat per note."""

	if chromatic:
		scale = octave.chromatic_scale()
	elif octave.scales:
		scale = next(iter(octave.scales.values()))
	else:
		raise cacophony.errors.FormSyntaxError("The form describes no scales; try --chromatic")

	rising_and_falling = scale.open().note_scalings + list(reversed(scale.note_scalings))
	beat = cacophony.rhythm.Beat(1, 1, 0)

	return [cacophony.phrase.Note(ratio, beat) for ratio in rising_and_falling]


def form_name (form: FormSource) -> str:

	try:
		return cacophony.forms.parse_metadata(form.text).name
	except cacophony.errors.FormSyntaxError:
		return "Inevitable Cacophony"


def perform (args: argparse.Namespace, form: FormSource, config: cacophony.config.Config, output: typing.BinaryIO) -> None:

	"""Build the requested phrase and write it as WAV or MIDI."""

	rng = random.Random(config.seed)
	octave: typing.Optional[cacophony.octave_structure.OctaveStructure] = None

	if args.mode == "beat":
		notes = beat_notes(choose_rhythm(args, form, config), config.repeats)
	elif args.mode == "scale":
		octave = cacophony.octave_structure.OctaveStructure.parse(form.text)
		notes = scale_notes(octave, args.chromatic)
	else:
		octave = cacophony.octave_structure.OctaveStructure.parse(form.text)
		notes = chord_notes(choose_rhythm(args, form, config), octave, config.repeats, rng)

	phrase = cacophony.phrase.Phrase(notes, tempo=config.tempo)

	logger.debug(f"Playing {len(phrase)} notes over {phrase.seconds:.2f}s")

	if args.midi:
		# A beat is all tonic, so any octave will do.
		if octave is None:
			octave = cacophony.octave_structure.OctaveStructure.evenly_spaced(12)

		if args.mode == "beat" and args.polyrhythm:
			name = f"{args.polyrhythm} polyrhythm"
		else:
			name = form_name(form)

		midi = cacophony.midi_generator.MidiGenerator(octave, config.tonic, name=name)
		midi.add_phrase(phrase)
		midi.write(output)

	else:
		tone = cacophony.tone_generator.ToneGenerator(config.tonic, sample_rate=config.sample_rate)
		tone.add_phrase(phrase)
		tone.write(output)


def main (argv: typing.Optional[typing.List[str]] = None) -> None:

	"""
	Main entry point for the cacophony command.
	"""

	args = build_parser().parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	try:
		config = resolve_config(args)

		if not args.verbose:
			logging.getLogger().setLevel(config.log_level)

	except (OSError, ValueError) as e:
		logger.error(f"Bad configuration: {e}")
		sys.exit(1)

	form = FormSource(args.form_text if args.form_text is not None else args.form)

	# Render fully before writing anything, so a failure leaves no partial output.
	buffer = io.BytesIO()

	try:
		perform(args, form, config, buffer)
	except cacophony.errors.CacophonyError as e:
		logger.error(str(e))
		sys.exit(1)

	if args.output:
		with open(args.output, "wb") as output:
			output.write(buffer.getvalue())
		logger.info(f"Saved {args.output}")
	else:
		sys.stdout.buffer.write(buffer.getvalue())
		sys.stdout.flush()


if __name__ == "__main__":
	main()
