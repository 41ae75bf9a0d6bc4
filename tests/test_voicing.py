import logging

import pytest

from notes.chords import ChordQuality, TargetChord, all_chords
from notes.model import Note
from notes.voicing import (
    EXPECTED_KEYS,
    VoicingStyle,
    expected_key,
    interval_key,
    matches,
)

C7 = TargetChord(0, ChordQuality.DOMINANT7)
STD = VoicingStyle.STANDARD
ROOTLESS = VoicingStyle.ROOTLESS


def notes(*pitches):
    return [Note(p) for p in pitches]


# pitch 36 = C3, 60 = C5 (octave index = pitch // 12)
D3, E3, G3, A3, Bb3 = 38, 40, 43, 45, 46


class TestTable:
    def test_every_quality_and_style_has_a_key(self):
        for q in ChordQuality:
            for s in VoicingStyle:
                assert expected_key(q, s)

    def test_literal_keys(self):
        assert expected_key(ChordQuality.MINOR7, STD) == "major-second,minor-third,fifth,minor-seventh"
        assert expected_key(ChordQuality.DOMINANT7, STD) == "major-second,major-third,fifth,minor-seventh"
        assert expected_key(ChordQuality.DOMINANT7, ROOTLESS) == "major-second,major-third,sixth,minor-seventh"
        assert expected_key(ChordQuality.MAJOR7, STD) == "major-second,major-third,fifth,major-seventh"
        assert expected_key(ChordQuality.MAJOR7, ROOTLESS) == "major-second,major-third,fifth,sixth"

    def test_minor_rootless_is_standard(self):
        assert EXPECTED_KEYS[(ChordQuality.MINOR7, ROOTLESS)] == EXPECTED_KEYS[(ChordQuality.MINOR7, STD)]


class TestIntervalKey:
    def test_sorted_by_degree_value(self):
        assert interval_key(0, notes(70, 62, 67, 64)) == "major-second,major-third,fifth,minor-seventh"

    def test_duplicates_kept(self):
        assert interval_key(0, notes(60, 72)) == "unison,unison"


class TestMatches:
    def test_dominant_standard(self):
        assert matches(C7, STD, notes(D3, E3, G3, Bb3))

    def test_octave_insensitive(self):
        assert matches(C7, STD, notes(D3, E3, G3, Bb3))
        assert matches(C7, STD, notes(62, 28, 55, 22))   # D5 E2 G4 Bb1

    def test_root_position_never_matches(self):
        for style in VoicingStyle:
            assert not matches(C7, style, notes(36, E3, G3, Bb3))

    def test_dominant_rootless(self):
        assert not matches(C7, ROOTLESS, notes(D3, E3, G3, Bb3))
        assert matches(C7, ROOTLESS, notes(D3, E3, A3, Bb3))

    def test_major_seventh(self):
        cmaj7 = TargetChord(0, ChordQuality.MAJOR7)
        assert matches(cmaj7, STD, notes(D3, E3, G3, 47))
        assert matches(cmaj7, ROOTLESS, notes(D3, E3, G3, A3))
        assert not matches(cmaj7, STD, notes(D3, E3, G3, A3))

    def test_transposed_root(self):
        # Eb-7: F Gb Bb Db
        ebm7 = TargetChord(3, ChordQuality.MINOR7)
        assert matches(ebm7, STD, notes(53, 54, 58, 61))

    def test_minor_same_under_both_styles(self):
        cm7 = TargetChord(0, ChordQuality.MINOR7)
        held = notes(D3, 39, G3, Bb3)
        assert matches(cm7, STD, held)
        assert matches(cm7, ROOTLESS, held)
        for chord in all_chords():
            if chord.quality is ChordQuality.MINOR7:
                for trial in (held, notes(D3, E3, G3, Bb3)):
                    assert matches(chord, STD, trial) == matches(chord, ROOTLESS, trial)

    @pytest.mark.parametrize("count", [0, 1, 2, 3, 5])
    def test_needs_exactly_four(self, count):
        pool = [D3, E3, G3, Bb3, 50]
        for chord in all_chords():
            for style in VoicingStyle:
                assert not matches(chord, style, notes(*pool[:count]))

    def test_triad_subset_never_matches(self):
        for style in VoicingStyle:
            assert not matches(C7, style, notes(E3, G3, Bb3))

    def test_repeated_pitch_class_fails(self):
        assert not matches(C7, STD, notes(D3, 50, G3, Bb3))

    def test_unknown_quality_is_no_match(self, monkeypatch, caplog):
        monkeypatch.delitem(EXPECTED_KEYS, (ChordQuality.DOMINANT7, STD))
        with caplog.at_level(logging.WARNING):
            assert not matches(C7, STD, notes(D3, E3, G3, Bb3))
        assert "No voicing entry" in caplog.text


class TestStyle:
    def test_cycle(self):
        assert STD.cycle() is ROOTLESS
        assert ROOTLESS.cycle() is STD

    def test_from_name(self):
        assert VoicingStyle.from_name("rootless") is ROOTLESS
        assert VoicingStyle.from_name("Standard") is STD
        assert VoicingStyle.from_name("Bill Evans (Rootless)") is ROOTLESS
        with pytest.raises(ValueError):
            VoicingStyle.from_name("drop2")
