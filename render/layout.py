# render/layout.py
from typing import Dict, List, Optional, Tuple

WHITE_SET = {0, 2, 4, 5, 7, 9, 11}
BLACK_W_RATIO = 0.6     # 黑鍵寬 / 白鍵寬
BLACK_X_RATIO = 0.7     # 黑鍵左緣相對左側白鍵
BLACK_H_RATIO = 0.6

KEY_RANGES = {
    "89": (24, 112),
    "88": (21, 108),
    "61": (36, 96),
}


def key_range(mode: str) -> Tuple[int, int]:
    return KEY_RANGES.get(str(mode), KEY_RANGES["89"])


def is_black(pitch: int) -> bool:
    return (pitch % 12) not in WHITE_SET


class KeyboardLayout:
    """Horizontal key geometry for [first_midi, last_midi] over `width` pixels.
    Rects are (x, w) pairs; the vertical extent is up to the renderer.
    """
    def __init__(self, first_midi: int, last_midi: int, width: float):
        self.first_midi = first_midi
        self.last_midi = last_midi
        self.width = float(width)
        self.whites: List[int] = [p for p in range(first_midi, last_midi + 1) if not is_black(p)]
        self.total_white = len(self.whites) or 1
        self.white_w = self.width / self.total_white

        self.xw_by_pitch: Dict[int, Tuple[float, float]] = {}
        for i, p in enumerate(self.whites):
            self.xw_by_pitch[p] = (i * self.white_w, self.white_w)
        for p in range(first_midi, last_midi + 1):
            if is_black(p) and (p - 1) in self.xw_by_pitch:
                left, _ = self.xw_by_pitch[p - 1]
                self.xw_by_pitch[p] = (left + self.white_w * BLACK_X_RATIO, self.white_w * BLACK_W_RATIO)

    @property
    def blacks(self) -> List[int]:
        return [p for p in self.xw_by_pitch if is_black(p)]

    def key_rect(self, pitch: int) -> Optional[Tuple[float, float]]:
        return self.xw_by_pitch.get(pitch)

    def pitch_at(self, x: float, y: float, top: float, height: float) -> Optional[int]:
        """Hit-test a point against the keyboard; black keys sit on top."""
        if not (top <= y <= top + height):
            return None
        if y <= top + height * BLACK_H_RATIO:
            for p in self.blacks:
                bx, bw = self.xw_by_pitch[p]
                if bx <= x < bx + bw:
                    return p
        idx = int(x // self.white_w)
        if 0 <= x and 0 <= idx < len(self.whites):
            return self.whites[idx]
        return None
