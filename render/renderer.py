# render/renderer.py
import logging
import pygame
from typing import Iterable, Optional

from config import RenderConfig
from render.layout import BLACK_H_RATIO, KeyboardLayout, key_range

STATUS_H = 36
BTN_PAD_X = 12
BTN_GAP = 10
BUTTONS = ["VOICING", "RESET", "KEY RANGE", "QUIT"]

BG = (12, 12, 14)
CORRECT_BG = (24, 70, 40)
WRONG_BG = (80, 26, 30)


class Renderer:
    def __init__(self, cfg: RenderConfig):
        pygame.init()
        self.cfg = cfg
        self.screen = pygame.display.set_mode((cfg.window_w, cfg.window_h))
        pygame.display.set_caption("Seventh Chord Trainer")
        self.font = pygame.font.SysFont("consolas", 18)
        self.font_small = pygame.font.SysFont("consolas", 14)
        self.font_chord = pygame.font.SysFont("consolas", 96, bold=True)
        self.clock = pygame.time.Clock()
        self.button_rects = {}
        self.layout: KeyboardLayout
        self.set_key_range(self.cfg.key_range)

    @property
    def first_midi(self) -> int:
        return self.layout.first_midi

    @property
    def last_midi(self) -> int:
        return self.layout.last_midi

    @property
    def piano_top(self) -> int:
        return self.cfg.window_h - self.cfg.piano_h

    def set_key_range(self, mode: str):
        first, last = key_range(mode)
        self.cfg.key_range = str(mode)
        self.layout = KeyboardLayout(first, last, self.cfg.window_w)
        logging.debug("Keyboard layout rebuilt: range=[%d,%d], total_white=%d, white_w=%.3f",
                      first, last, self.layout.total_white, self.layout.white_w)

    def pitch_at(self, pos) -> Optional[int]:
        x, y = pos
        return self.layout.pitch_at(x, y, self.piano_top, self.cfg.piano_h)

    def button_at(self, pos) -> Optional[str]:
        for label, rect in self.button_rects.items():
            if rect.collidepoint(pos):
                return label
        return None

    def tick(self, fps=60) -> float:
        return self.clock.tick(fps) / 1000.0

    def begin_frame(self, correct: bool = False, wrong: bool = False):
        self.screen.fill(CORRECT_BG if correct else WRONG_BG if wrong else BG)

    def end_frame(self):
        pygame.display.flip()

    def draw_status_bar(self, right_info_text: str = ""):
        pygame.draw.rect(self.screen, (24, 24, 28), (0, 0, self.cfg.window_w, STATUS_H))
        pygame.draw.line(self.screen, (60, 60, 66), (0, STATUS_H), (self.cfg.window_w, STATUS_H), 1)

        x = 10; self.button_rects.clear()
        for label in BUTTONS:
            surf = self.font_small.render(label, True, (220, 220, 230))
            rect = surf.get_rect(); rect.topleft = (x + BTN_PAD_X, (STATUS_H - rect.height)//2)
            box = pygame.Rect(x, 4, rect.width + BTN_PAD_X*2, STATUS_H - 8)
            pygame.draw.rect(self.screen, (40, 40, 46), box, border_radius=6)
            pygame.draw.rect(self.screen, (75, 75, 85), box, 1, border_radius=6)
            self.screen.blit(surf, rect)
            self.button_rects[label] = box
            x += box.width + BTN_GAP

        if right_info_text:
            right = self.font_small.render(right_info_text, True, (180, 180, 190))
            self.screen.blit(right, (self.cfg.window_w - right.get_width() - 10,
                                     (STATUS_H - right.get_height())//2))

    # ------- chord / feedback -------
    def draw_target(self, label: str, correct: bool, wrong: bool, held_names: Iterable[str]):
        area_h = self.piano_top - STATUS_H
        cx = self.cfg.window_w // 2

        color = (120, 230, 150) if correct else (255, 120, 120) if wrong else (235, 235, 240)
        surf = self.font_chord.render(label, True, color)
        self.screen.blit(surf, (cx - surf.get_width() // 2, STATUS_H + area_h // 2 - surf.get_height()))

        if correct or wrong:
            verdict = self.font.render("CORRECT" if correct else "WRONG", True, color)
            self.screen.blit(verdict, (cx - verdict.get_width() // 2, STATUS_H + area_h // 2 + 8))

        names = "  ".join(held_names)
        if names:
            held = self.font.render(names, True, (200, 200, 210))
            self.screen.blit(held, (cx - held.get_width() // 2, self.piano_top - held.get_height() - 14))

    # ------- piano -------
    def draw_keyboard(self, highlight: set[int] | None = None):
        highlight = highlight or set()
        top, ph = self.piano_top, self.cfg.piano_h
        pygame.draw.rect(self.screen, (28, 28, 32), (0, top, self.cfg.window_w, ph))

        for p in self.layout.whites:
            x, w = self.layout.key_rect(p)
            fill = (230, 230, 230) if p not in highlight else (255, 240, 170)
            pygame.draw.rect(self.screen, fill, (x, top, w - 1, ph))
            pygame.draw.rect(self.screen, (60, 60, 66), (x, top, w - 1, ph), 1)

        bh = ph * BLACK_H_RATIO
        for p in self.layout.blacks:
            x, w = self.layout.key_rect(p)
            fill = (18, 18, 20) if p not in highlight else (255, 200, 120)
            pygame.draw.rect(self.screen, fill, (x, top, w, bh))
            pygame.draw.rect(self.screen, (60, 60, 66), (x, top, w, bh), 1)

        # C 鍵標示八度
        for p in self.layout.whites:
            if p % 12 == 0:
                x, w = self.layout.key_rect(p)
                t = self.font_small.render(str(p // 12), True, (110, 110, 120))
                self.screen.blit(t, (x + (w - t.get_width()) / 2, top + ph - t.get_height() - 4))
