import random

from notes.chords import (
    CHORD_QUALITIES,
    PITCH_CLASSES,
    ChordQuality,
    TargetChord,
    all_chords,
    chord_label,
    next_distinct_chord,
    random_chord,
)


class TestCatalog:
    def test_variant_arrays(self):
        assert PITCH_CLASSES == tuple(range(12))
        assert set(CHORD_QUALITIES) == set(ChordQuality)
        assert len(all_chords()) == 36
        assert len(set(all_chords())) == 36

    def test_random_chord_in_domain(self):
        rng = random.Random(1)
        seen = {random_chord(rng) for _ in range(2000)}
        # 36 choices, 2000 draws: every chord shows up
        assert seen == set(all_chords())

    def test_next_distinct_never_repeats(self):
        rng = random.Random(7)
        for chord in all_chords():
            for _ in range(30):
                assert next_distinct_chord(chord, rng) != chord

    def test_next_distinct_thousand_chain(self):
        rng = random.Random(42)
        cur = random_chord(rng)
        for _ in range(1000):
            nxt = next_distinct_chord(cur, rng)
            assert nxt != cur
            cur = nxt

    def test_same_root_other_quality_counts_as_distinct(self):
        class Scripted:
            def __init__(self, values):
                self.values = list(values)

            def randrange(self, n):
                return self.values.pop(0)

        cur = TargetChord(0, ChordQuality.MINOR7)
        # first draw repeats C-7, second gives C7
        rng = Scripted([0, 0, 0, 1])
        assert next_distinct_chord(cur, rng) == TargetChord(0, ChordQuality.DOMINANT7)


class TestLabel:
    def test_suffixes(self):
        assert chord_label(TargetChord(0, ChordQuality.DOMINANT7)) == "C7"
        assert chord_label(TargetChord(3, ChordQuality.MINOR7)) == "Eb-7"
        assert chord_label(TargetChord(5, ChordQuality.MAJOR7)) == "F Maj7"
        assert TargetChord(10, ChordQuality.MAJOR7).label == "Bb Maj7"
