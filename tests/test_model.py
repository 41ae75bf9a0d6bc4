import pytest

from notes.model import (
    Interval,
    NOTE_NAMES,
    Note,
    interval_from,
    name_of,
    octave_index_of,
    pitch_class_of,
)


class TestPitch:
    def test_pitch_class_and_octave(self):
        assert pitch_class_of(60) == 0
        assert pitch_class_of(70) == 10
        assert octave_index_of(60) == 5
        assert octave_index_of(11) == 0
        assert octave_index_of(12) == 1

    def test_names(self):
        assert name_of(60) == "C5"
        assert name_of(70) == "Bb5"
        assert name_of(24) == "C2"
        assert name_of(112) == "E9"

    def test_twelve_names_in_cyclic_order(self):
        assert len(NOTE_NAMES) == 12
        assert [name_of(48 + i)[:-1] for i in range(12)] == list(NOTE_NAMES)


class TestInterval:
    @pytest.mark.parametrize("base", range(12))
    def test_unison(self, base):
        assert interval_from(base, base) is Interval.UNISON

    def test_range_over_all_pairs(self):
        for base in range(12):
            for arrival in range(12):
                iv = interval_from(base, arrival)
                assert 0 <= iv <= 11
                assert (base + iv) % 12 == arrival

    def test_is_ascending_not_shortest(self):
        # B -> C is a minor second up, C -> B a major seventh up
        assert interval_from(11, 0) is Interval.MINOR_SECOND
        assert interval_from(0, 11) is Interval.MAJOR_SEVENTH
        assert interval_from(9, 2) is Interval.FOURTH

    def test_labels(self):
        assert [i.label for i in Interval] == [
            "unison", "minor-second", "major-second", "minor-third", "major-third", "fourth",
            "diminished-fifth", "fifth", "minor-sixth", "sixth", "minor-seventh", "major-seventh",
        ]


class TestNote:
    def test_derived_fields(self):
        n = Note(58)
        assert n.pitch_class == 10
        assert n.octave == 4
        assert n.name == "Bb4"
        assert str(n) == "Bb4"

    def test_same_note_by_name(self):
        assert Note(60).same_note(Note(60))
        assert not Note(60).same_note(Note(72))
        assert not Note(60).same_note(Note(61))
