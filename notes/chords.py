# notes/chords.py
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from notes.model import NOTE_NAMES


class ChordQuality(Enum):
    MINOR7 = "minor7"
    DOMINANT7 = "dominant7"
    MAJOR7 = "major7"


# 固定陣列取代列舉反射
PITCH_CLASSES = tuple(range(12))
CHORD_QUALITIES = (ChordQuality.MINOR7, ChordQuality.DOMINANT7, ChordQuality.MAJOR7)

QUALITY_SUFFIX = {
    ChordQuality.MINOR7: "-7",
    ChordQuality.DOMINANT7: "7",
    ChordQuality.MAJOR7: " Maj7",
}


@dataclass(frozen=True)
class TargetChord:
    base_note: int          # pitch class 0..11
    quality: ChordQuality

    @property
    def label(self) -> str:
        return chord_label(self)


def chord_label(chord: TargetChord) -> str:
    return f"{NOTE_NAMES[chord.base_note]}{QUALITY_SUFFIX.get(chord.quality, '')}"


def all_chords() -> List[TargetChord]:
    return [TargetChord(pc, q) for pc in PITCH_CLASSES for q in CHORD_QUALITIES]


def random_chord(rng: Optional[random.Random] = None) -> TargetChord:
    rng = rng or random
    base = PITCH_CLASSES[rng.randrange(len(PITCH_CLASSES))]
    quality = CHORD_QUALITIES[rng.randrange(len(CHORD_QUALITIES))]
    return TargetChord(base, quality)


def next_distinct_chord(current: TargetChord, rng: Optional[random.Random] = None) -> TargetChord:
    """Draw random chords until one differs from `current` in root or quality."""
    while True:
        chord = random_chord(rng)
        if chord != current:
            return chord
