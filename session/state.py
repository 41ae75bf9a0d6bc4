# ========================= session/state.py =========================
import logging
import random
from enum import Enum
from typing import Callable, List, Optional, Tuple

from notes.chords import TargetChord, next_distinct_chord, random_chord
from notes.model import Note
from notes.voicing import CHORD_SIZE, VoicingStyle, matches
from timeline.scheduler import Scheduler


class NoteEventKind(Enum):
    PRESS = "press"
    RELEASE = "release"


NoteSink = Callable[[NoteEventKind, int, int], None]


class Session:
    """
    練習狀態機：
    - 收 note 事件 -> 更新按住的音 -> 新按下的音讓總數剛好四個時判定
    - 判定結果以 correct / wrong 旗標閃一下（feedback_s 後自動清除）
    - 答對後換一個和上一題不同的和弦
    Every pulse carries a generation token so an old timer never clears a
    flag raised by a newer judgment.
    """
    def __init__(self, scheduler: Scheduler, output: Optional[NoteSink] = None,
                 feedback_s: float = 0.5, style: VoicingStyle = VoicingStyle.STANDARD,
                 target: Optional[TargetChord] = None, rng: Optional[random.Random] = None):
        self.scheduler = scheduler
        self.output = output
        self.feedback_s = feedback_s
        self.rng = rng or random.Random()

        # 狀態
        self._target: TargetChord = target or random_chord(self.rng)
        self._style = style
        self._held: List[Note] = []
        self._last_event: Optional[NoteEventKind] = None
        self._correct = False
        self._wrong = False
        self._pulse = 0

    # ---------- Read-only state ----------
    @property
    def target(self) -> TargetChord:
        return self._target

    @property
    def target_label(self) -> str:
        return self._target.label

    @property
    def voicing_style(self) -> VoicingStyle:
        return self._style

    @property
    def held_notes(self) -> Tuple[Note, ...]:
        return tuple(self._held)

    @property
    def held_pitches(self) -> frozenset:
        return frozenset(n.pitch for n in self._held)

    @property
    def last_event(self) -> Optional[NoteEventKind]:
        return self._last_event

    @property
    def correct(self) -> bool:
        return self._correct

    @property
    def wrong(self) -> bool:
        return self._wrong

    # ---------- Commands ----------
    def set_voicing_style(self, style: VoicingStyle):
        if style is not self._style:
            logging.info("Voicing style -> %s", style.value)
        self._style = style

    def ingest_note_event(self, kind: NoteEventKind, pitch: int, velocity: int):
        self._route(kind, pitch, velocity)

        note = Note(int(pitch))
        changed = False
        if kind is NoteEventKind.PRESS:
            if not any(n.same_note(note) for n in self._held):
                self._held.append(note)
                changed = True
        else:
            self._held = [n for n in self._held if not n.same_note(note)]
        self._last_event = kind

        # 重複按同一個音不重新判定
        if kind is NoteEventKind.PRESS and changed and len(self._held) == CHORD_SIZE:
            self._judge()

    def reset_held_notes(self) -> int:
        """Release every held note through the normal path; returns how many."""
        held = list(self._held)
        for n in held:
            self.ingest_note_event(NoteEventKind.RELEASE, n.pitch, 0)
        return len(held)

    # ---------- Internals ----------
    def _route(self, kind: NoteEventKind, pitch: int, velocity: int):
        if self.output is None:
            return
        try:
            self.output(kind, pitch, velocity)
        except Exception:
            # 音源失敗不可影響判定
            logging.exception("Note output failed for %s %d", kind.value, pitch)

    def _judge(self):
        judged = self._target
        ok = matches(judged, self._style, self._held)
        self._pulse += 1
        token = self._pulse
        if ok:
            logging.info("Correct: %s [%s]", judged.label, " ".join(map(str, self._held)))
            self._correct, self._wrong = True, False
            self.scheduler.call_later(self.feedback_s, lambda: self._finish_correct(token, judged))
        else:
            logging.info("Wrong: %s [%s]", judged.label, " ".join(map(str, self._held)))
            self._wrong, self._correct = True, False
            self.scheduler.call_later(self.feedback_s, lambda: self._finish_wrong(token))

    def _finish_correct(self, token: int, judged: TargetChord):
        if token == self._pulse:
            self._correct = False
        # 同一題只換一次
        if self._target is judged:
            self._target = next_distinct_chord(judged, self.rng)
            logging.info("Next chord: %s", self._target.label)

    def _finish_wrong(self, token: int):
        if token == self._pulse:
            self._wrong = False
