# app.py
import logging
import random
import pygame
from typing import Dict, Optional

from config import AppConfig
from render.renderer import Renderer
from audio.synth import Synth
from input.keymap import DEFAULT_KEYMAP, load_keymap_file
from midi.transport import MidiInput
from notes.voicing import VoicingStyle
from session.state import NoteEventKind, Session
from timeline.scheduler import Scheduler
from utils.crashlog import log_exception

TAP_VELOCITY = 127
KEY_VELOCITY = 110
RANGE_CYCLE = ["89", "88", "61"]


class App:
    def __init__(self, cfg: AppConfig):
        self.cfg = cfg
        self.renderer = Renderer(cfg.render)
        self.synth = Synth(cfg.audio)
        self.midi_in = MidiInput(cfg.midi.input_device)
        self.scheduler = Scheduler()

        rng = random.Random(cfg.session.seed)
        self.session = Session(
            self.scheduler,
            output=self.synth.handle,
            feedback_s=cfg.session.feedback_ms / 1000.0,
            style=VoicingStyle.from_name(cfg.session.voicing),
            rng=rng,
        )

        self.keymap: Dict[int, int] = dict(DEFAULT_KEYMAP)
        if cfg.keymap_path:
            try:
                self.keymap = load_keymap_file(cfg.keymap_path)
                logging.info("Loaded keymap %s (%d keys)", cfg.keymap_path, len(self.keymap))
            except Exception as e:
                log_exception("load_keymap_file", e)
                logging.warning("Keymap %s unusable, using default: %s", cfg.keymap_path, e)

        # UI 訊息（toast）
        self._msg = ""
        self._msg_time = 0.0
        if not self.midi_in.available:
            self._toast("No MIDI input - use mouse or keyboard", 6.0)

    # ---------- UI 訊息 ----------
    def _toast(self, msg: str, secs: float = 4.0):
        self._msg = msg
        self._msg_time = max(self._msg_time, secs)

    # ---------- Actions ----------
    def tap_key(self, pitch: int):
        """On-screen key: press now, release after tap_release_ms."""
        self.session.ingest_note_event(NoteEventKind.PRESS, pitch, TAP_VELOCITY)
        self.scheduler.call_later(
            self.cfg.session.tap_release_ms / 1000.0,
            lambda: self.session.ingest_note_event(NoteEventKind.RELEASE, pitch, TAP_VELOCITY),
        )

    def cycle_voicing(self):
        style = self.session.voicing_style.cycle()
        self.session.set_voicing_style(style)
        self._toast(f"Voicing: {style.value}", 2.0)

    def reset_notes(self):
        n = self.session.reset_held_notes()
        if n:
            self._toast(f"Released {n} note(s)", 2.0)

    def cycle_key_range(self):
        cur = self.renderer.cfg.key_range
        nxt = RANGE_CYCLE[(RANGE_CYCLE.index(cur) + 1) % len(RANGE_CYCLE)] if cur in RANGE_CYCLE else RANGE_CYCLE[0]
        self.renderer.set_key_range(nxt)

    def _on_button(self, label: Optional[str]) -> bool:
        """Returns False when the app should quit."""
        if label == "VOICING": self.cycle_voicing()
        elif label == "RESET": self.reset_notes()
        elif label == "KEY RANGE": self.cycle_key_range()
        elif label == "QUIT": return False
        return True

    def _shutdown(self):
        self.scheduler.clear()
        self.session.reset_held_notes()
        # 先關輸入，synth.close 會呼叫 pygame.midi.quit
        self.midi_in.close()
        self.synth.close()

    # ---------- Main loop ----------
    def run(self):
        running = True
        while running:
            dt = self.renderer.tick(60)

            for ev in self.midi_in.poll():
                self.session.ingest_note_event(ev.kind, ev.pitch, ev.velocity)

            for e in pygame.event.get():
                if e.type == pygame.QUIT:
                    running = False; break

                if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    label = self.renderer.button_at(e.pos)
                    if label:
                        if not self._on_button(label):
                            running = False; break
                        continue
                    pitch = self.renderer.pitch_at(e.pos)
                    if pitch is not None:
                        self.tap_key(pitch)

                if e.type == pygame.KEYDOWN:
                    if e.key == pygame.K_F1:
                        self.cycle_voicing(); continue
                    if e.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
                        self.reset_notes(); continue
                    # 演奏鍵
                    if e.key in self.keymap:
                        self.session.ingest_note_event(NoteEventKind.PRESS, self.keymap[e.key], KEY_VELOCITY)

                if e.type == pygame.KEYUP and e.key in self.keymap:
                    self.session.ingest_note_event(NoteEventKind.RELEASE, self.keymap[e.key], 0)

            if not running: break

            self.scheduler.step(dt)

            # ===== 訊息倒數（toast） =====
            if self._msg_time > 0:
                self._msg_time -= dt
                if self._msg_time <= 0:
                    self._msg_time = 0
                    self._msg = ""

            # ----- Render -----
            s = self.session
            self.renderer.begin_frame(correct=s.correct, wrong=s.wrong)
            right_fields = [
                f"VOICING: {s.voicing_style.value}",
                f"MIDI IN: {self.midi_in.device_name or 'OFF'}",
                f"SOUND: {'ON' if self.synth.available else 'OFF'}",
                f"RANGE: {self.renderer.cfg.key_range}",
            ]
            if self._msg: right_fields.append(self._msg)
            self.renderer.draw_status_bar(right_info_text="  |  ".join(right_fields))
            self.renderer.draw_target(s.target_label, s.correct, s.wrong, [n.name for n in s.held_notes])
            self.renderer.draw_keyboard(highlight=set(s.held_pitches))
            self.renderer.end_frame()

        self._shutdown()
        pygame.quit()
