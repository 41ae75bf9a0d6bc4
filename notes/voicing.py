# ========================= notes/voicing.py =========================
import logging
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from notes.chords import ChordQuality, TargetChord
from notes.model import Interval, Note, interval_from

CHORD_SIZE = 4


class VoicingStyle(Enum):
    STANDARD = "Standard"
    ROOTLESS = "Bill Evans (Rootless)"

    def cycle(self) -> "VoicingStyle":
        styles = list(VoicingStyle)
        return styles[(styles.index(self) + 1) % len(styles)]

    @classmethod
    def from_name(cls, name: str) -> "VoicingStyle":
        """Accept 'standard' / 'rootless' (CLI) as well as the display value."""
        for s in cls:
            if name.lower() in (s.name.lower(), s.value.lower()):
                return s
        raise ValueError(f"Unknown voicing style: {name}")


def _key(*degrees: Interval) -> str:
    return ",".join(d.label for d in degrees)


# (quality, style) -> 期望的音程字串；minor7 兩種 style 相同
EXPECTED_KEYS: Dict[Tuple[ChordQuality, VoicingStyle], str] = {
    (ChordQuality.MINOR7, VoicingStyle.STANDARD):
        _key(Interval.MAJOR_SECOND, Interval.MINOR_THIRD, Interval.FIFTH, Interval.MINOR_SEVENTH),
    (ChordQuality.MINOR7, VoicingStyle.ROOTLESS):
        _key(Interval.MAJOR_SECOND, Interval.MINOR_THIRD, Interval.FIFTH, Interval.MINOR_SEVENTH),
    (ChordQuality.DOMINANT7, VoicingStyle.STANDARD):
        _key(Interval.MAJOR_SECOND, Interval.MAJOR_THIRD, Interval.FIFTH, Interval.MINOR_SEVENTH),
    (ChordQuality.DOMINANT7, VoicingStyle.ROOTLESS):
        _key(Interval.MAJOR_SECOND, Interval.MAJOR_THIRD, Interval.SIXTH, Interval.MINOR_SEVENTH),
    (ChordQuality.MAJOR7, VoicingStyle.STANDARD):
        _key(Interval.MAJOR_SECOND, Interval.MAJOR_THIRD, Interval.FIFTH, Interval.MAJOR_SEVENTH),
    (ChordQuality.MAJOR7, VoicingStyle.ROOTLESS):
        _key(Interval.MAJOR_SECOND, Interval.MAJOR_THIRD, Interval.FIFTH, Interval.SIXTH),
}


def interval_key(base_note: int, notes: Iterable[Note]) -> str:
    degrees = sorted(interval_from(base_note, n.pitch_class) for n in notes)
    return _key(*degrees)


def expected_key(quality: ChordQuality, style: VoicingStyle) -> Optional[str]:
    return EXPECTED_KEYS.get((quality, style))


def matches(target: TargetChord, style: VoicingStyle, held: Iterable[Note]) -> bool:
    """True iff exactly four held notes spell the target under `style`.

    No subset matching: three notes never match and a fifth note spoils it.
    Octaves are irrelevant, every note is reduced to its pitch class.
    """
    held = list(held)
    if len(held) != CHORD_SIZE:
        return False

    want = expected_key(target.quality, style)
    if want is None:
        logging.warning("No voicing entry for %r / %r, treating as no match", target.quality, style)
        return False

    got = interval_key(target.base_note, held)
    logging.debug("judge %s (%s): got=%s want=%s", target.label, style.value, got, want)
    return got == want
