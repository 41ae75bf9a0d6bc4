# ========================= input/keymap.py =========================
import json
import pygame
from typing import Dict

# 電腦鍵盤當琴鍵：z..m 白黑鍵交錯，C5(60)..C6(72)，八度 = pitch // 12
DEFAULT_KEYMAP: Dict[int, int] = {
    pygame.K_z: 60,
    pygame.K_s: 61,
    pygame.K_x: 62,
    pygame.K_d: 63,
    pygame.K_c: 64,
    pygame.K_v: 65,
    pygame.K_g: 66,
    pygame.K_b: 67,
    pygame.K_h: 68,
    pygame.K_n: 69,
    pygame.K_j: 70,
    pygame.K_m: 71,
    pygame.K_COMMA: 72,
}

def name_to_keycode(name: str) -> int:
    """把 'z', 'comma' 等名稱轉回 pygame 的 keycode。"""
    try:
        return pygame.key.key_code(name)
    except Exception:
        # 允許純數字 keycode
        try:
            return int(name)
        except Exception:
            raise ValueError(f"Unknown key name: {name}")

def deserialize_keymap(obj: dict) -> Dict[int, int]:
    """從名稱->pitch 的 JSON 還原為 keycode->pitch；pitch 必須在 0..127。"""
    out: Dict[int, int] = {}
    for kname, pitch in obj.items():
        kc = name_to_keycode(str(kname))
        p = int(pitch)
        if not 0 <= p <= 127:
            raise ValueError(f"Pitch out of range for key {kname!r}: {p}")
        out[kc] = p
    return out

def load_keymap_file(path: str) -> Dict[int, int]:
    with open(path, "r", encoding="utf-8") as f:
        return deserialize_keymap(json.load(f))
