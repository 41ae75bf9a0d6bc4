# audio/synth.py
import logging
import pygame.midi

from session.state import NoteEventKind

DRUM_CH = 9  # GM: ch10(索引9)為打擊，避免使用


class Synth:
    """
    系統 MIDI 音源，當作判定流程的輸出端：
    - handle(kind, pitch, vel) 由 Session 對每個事件呼叫
    - 沒有裝置或任何錯誤都只記 log，不丟例外
    - 同一 pitch 多次觸發以 token 堆疊，note_off 關最後一發
    """
    def __init__(self, cfg):
        self.cfg = cfg
        self.midi_out = None
        self.use_midi_out = False

        self.channels = [ch for ch in range(16) if ch != DRUM_CH]
        self._rr_index = 0
        self._next_token = 1
        self._token_map = {}              # token -> (ch, pitch)
        self._active_stack_by_pitch = {}  # pitch -> [token1, token2, ...]

        try:
            pygame.midi.init()
            dev = cfg.output_device
            if dev is None:
                dev = pygame.midi.get_default_output_id()
            if dev != -1:
                self.midi_out = pygame.midi.Output(dev)
                for ch in self.channels:
                    self.midi_out.set_instrument(cfg.instrument, ch)
                self.use_midi_out = True
                logging.info("[Synth] Using system MIDI out (device %s)", dev)
            else:
                logging.warning("[Synth] No MIDI output device found; running silent")
        except Exception as e:
            logging.warning("[Synth] MIDI init failed: %s", e)

    @property
    def available(self) -> bool:
        return bool(self.use_midi_out and self.midi_out)

    def handle(self, kind: NoteEventKind, pitch: int, vel: int):
        if kind is NoteEventKind.PRESS:
            self.note_on(pitch, vel)
        else:
            self.note_off(pitch)

    def close(self):
        try:
            if self.midi_out:
                self.all_notes_off()
                self.midi_out.close()
        except Exception:
            logging.debug("[Synth] close failed", exc_info=True)
        try:
            pygame.midi.quit()
        except Exception:
            logging.debug("[Synth] pygame.midi.quit failed", exc_info=True)
        self.midi_out = None
        self.use_midi_out = False

    def _alloc_channel(self) -> int:
        ch = self.channels[self._rr_index % len(self.channels)]
        self._rr_index += 1
        return ch

    def _new_token(self, ch: int, pitch: int) -> int:
        t = self._next_token; self._next_token += 1
        self._token_map[t] = (ch, pitch)
        self._active_stack_by_pitch.setdefault(pitch, []).append(t)
        return t

    def note_on(self, pitch: int, vel: int = 100):
        if not self.available: return None
        try:
            ch = self._alloc_channel()
            v = max(1, min(int(vel), 127))
            self.midi_out.note_on(int(pitch), v, ch)
            return self._new_token(ch, int(pitch))
        except Exception:
            logging.warning("[Synth] note_on %s failed", pitch, exc_info=True)
            return None

    def note_off(self, pitch: int):
        """Stop every voice stacked on `pitch`; with none on record, send note_off on all channels."""
        if not self.available: return
        stack = self._active_stack_by_pitch.pop(int(pitch), None)
        if stack:
            for t in stack:
                ch, p = self._token_map.pop(t, (None, None))
                if ch is None: continue
                try: self.midi_out.note_off(p, 0, ch)
                except Exception: logging.warning("[Synth] note_off %s ch=%d failed", p, ch, exc_info=True)
            return
        for ch in self.channels:
            try: self.midi_out.note_off(int(pitch), 0, ch)
            except Exception: logging.debug("[Synth] note_off %s ch=%d failed", pitch, ch, exc_info=True)

    def all_notes_off(self):
        if not self.available: return
        for ch in self.channels:
            try:
                self.midi_out.write_short(0xB0 | ch, 123, 0)  # CC123 All Notes Off
            except Exception:
                logging.debug("[Synth] all notes off ch=%d failed", ch, exc_info=True)
        self._token_map.clear()
        self._active_stack_by_pitch.clear()
