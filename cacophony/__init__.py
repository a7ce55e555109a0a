"""
Inevitable Cacophony - play the music described in Dwarf Fortress musical forms.

Dwarf Fortress invents musical forms and describes them in prose: how the
octave is divided, which chords and scales exist, and the rhythms, written
in a small score notation such as ``| x X x'! |``. Cacophony reads those
descriptions and performs them as WAV audio or MIDI.

The core is the rhythm engine:

- **Beats and rhythms.** A ``Beat`` is a loudness, an exact duration and a
  timing bias (early or late). A ``Rhythm`` is an immutable sequence of
  beats that can be placed onto an exact integer tick grid.
- **Polyrhythms.** ``build_polyrhythm()`` plays several rhythms over the
  same period of time and merges them into one ordinary ``Rhythm``, which
  can itself be combined again.
- **Form parsing.** ``parse_rhythms()`` and ``OctaveStructure.parse()`` read
  rhythms, octave divisions, chords and scales from form descriptions or a
  ``legends.xml`` export.
- **Rendering.** ``ToneGenerator`` renders sine tones to WAV;
  ``MidiGenerator`` writes Standard MIDI Files, re-tuning the MIDI octave
  for scales that are not 12TET.

Minimal example:

```python
import cacophony

four = cacophony.Rhythm([cacophony.Beat(1, 1, 0)] * 4)
three = cacophony.Rhythm([cacophony.Beat(1, 1, 0)] * 3)

poly = cacophony.build_polyrhythm(four, [three])
[beat.duration for beat in poly]    # 1, 1/3, 2/3, 2/3, 1/3, 1
```

Command line: ``cacophony < form.txt > tune.wav`` (see ``cacophony --help``).

Package-level exports: ``Beat``, ``Rhythm``, ``build_polyrhythm``,
``parse_rhythms``, ``OctaveStructure``, ``CacophonyError``.
"""

import cacophony.errors
import cacophony.forms
import cacophony.octave_structure
import cacophony.polyrhythm
import cacophony.rhythm


Beat = cacophony.rhythm.Beat
Rhythm = cacophony.rhythm.Rhythm
build_polyrhythm = cacophony.polyrhythm.build_polyrhythm
parse_rhythms = cacophony.forms.parse_rhythms
OctaveStructure = cacophony.octave_structure.OctaveStructure
CacophonyError = cacophony.errors.CacophonyError
