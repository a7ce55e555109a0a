import pytest

import cacophony.frequency_table
import cacophony.octave_structure


FrequencyTable = cacophony.frequency_table.FrequencyTable
OctaveStructure = cacophony.octave_structure.OctaveStructure


def test_twelve_tone_scale_is_standard_midi () -> None:

	table = FrequencyTable(OctaveStructure.evenly_spaced(12), 440)

	assert table.octave_breakdown == pytest.approx(cacophony.frequency_table.STANDARD_MIDI_FREQUENCIES)
	assert table.table[69] == pytest.approx(440)
	assert table.table[57] == pytest.approx(220)
	assert table.table[60] == pytest.approx(261.63, abs=0.01)


@pytest.mark.parametrize("semitones", [-12, -5, 0, 3, 11, 24])
def test_twelve_tone_ratios_map_to_semitones (semitones: int) -> None:

	table = FrequencyTable(OctaveStructure.evenly_spaced(12), 440)

	assert table.index_for_ratio(2 ** (semitones / 12)) == 69 + semitones


def test_seven_note_octave_pads_with_standard_notes (seven_note_octave: OctaveStructure) -> None:

	"""Seven notes fit in a twelve-slot MIDI octave, with 12TET notes in between."""

	table = FrequencyTable(seven_note_octave, 440)
	seven = [2 ** (index / 7) for index in range(7)]

	assert len(table.octave_breakdown) == 12
	assert table.octave_breakdown[0] == seven[0]
	assert table.octave_breakdown[1] == pytest.approx(2 ** (1 / 12))
	assert table.octave_breakdown[2] == pytest.approx(seven[1])
	assert [table.index_for_ratio(ratio) for ratio in seven] == [69, 71, 73, 75, 76, 78, 80]


def test_wide_octave_uses_more_midi_notes () -> None:

	"""A twenty-one note octave spans twenty-one MIDI notes per octave."""

	table = FrequencyTable(OctaveStructure.evenly_spaced(21), 440)

	assert len(table.octave_breakdown) == 21
	assert table.index_for_ratio(1 / 4) == 27
	assert table.index_for_ratio(4) == 111


def test_close_enough_frequencies_match () -> None:

	table = FrequencyTable(OctaveStructure.evenly_spaced(12), 440)

	assert table.index_for_ratio(1.00005) == 69


@pytest.mark.parametrize("ratio", [1 / 64, 64])
def test_out_of_range (ratio: float) -> None:

	table = FrequencyTable(OctaveStructure.evenly_spaced(12), 440)

	with pytest.raises(cacophony.frequency_table.OutOfRangeError) as excinfo:
		table.index_for_ratio(ratio)

	assert excinfo.value.frequency == pytest.approx(440 * ratio)


def test_unmatched_frequency_is_out_of_range () -> None:

	"""A quartertone has no slot in a 12TET table."""

	table = FrequencyTable(OctaveStructure.evenly_spaced(12), 440)

	with pytest.raises(cacophony.frequency_table.OutOfRangeError):
		table.index_for_ratio(2 ** (1 / 24))


def test_sounds_flatter () -> None:

	assert cacophony.frequency_table.sounds_flatter(1.0, 1.1)
	assert not cacophony.frequency_table.sounds_flatter(1.0, 1.00005)
	assert not cacophony.frequency_table.sounds_flatter(1.1, 1.0)
