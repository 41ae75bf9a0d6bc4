# notes/model.py
from dataclasses import dataclass
from enum import IntEnum

NOTE_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")
SEMITONES = 12


class Interval(IntEnum):
    """Ascending distance in semitones from a base pitch class (0..11)."""
    UNISON = 0
    MINOR_SECOND = 1
    MAJOR_SECOND = 2
    MINOR_THIRD = 3
    MAJOR_THIRD = 4
    FOURTH = 5
    DIMINISHED_FIFTH = 6
    FIFTH = 7
    MINOR_SIXTH = 8
    SIXTH = 9
    MINOR_SEVENTH = 10
    MAJOR_SEVENTH = 11

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


def pitch_class_of(pitch: int) -> int:
    return pitch % SEMITONES


def octave_index_of(pitch: int) -> int:
    return pitch // SEMITONES


def name_of(pitch: int) -> str:
    # 60 -> "C5"
    return f"{NOTE_NAMES[pitch_class_of(pitch)]}{octave_index_of(pitch)}"


def interval_from(base: int, arrival: int) -> Interval:
    # 只量上行距離，不取較短方向
    if arrival >= base:
        return Interval(arrival - base)
    return Interval(arrival + SEMITONES - base)


@dataclass(frozen=True)
class Note:
    pitch: int      # MIDI note number

    @property
    def pitch_class(self) -> int:
        return pitch_class_of(self.pitch)

    @property
    def octave(self) -> int:
        return octave_index_of(self.pitch)

    @property
    def name(self) -> str:
        return name_of(self.pitch)

    def same_note(self, other: "Note") -> bool:
        return self.name == other.name

    def __str__(self) -> str:
        return self.name
