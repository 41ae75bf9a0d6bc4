# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class RenderConfig:
    window_w: int = 1600
    window_h: int = 600
    piano_h: int = 160
    key_range: str = "89"   # 89: 24..112, 88: 21..108, 61: 36..96

@dataclass
class SessionConfig:
    feedback_ms: int = 500       # correct / wrong 閃爍時間
    tap_release_ms: int = 500    # 滑鼠點鍵後自動放開
    voicing: str = "standard"
    seed: Optional[int] = None

@dataclass
class AudioConfig:
    instrument: int = 0          # GM Acoustic Grand
    output_device: Optional[int] = None

@dataclass
class MidiConfig:
    input_device: Optional[int] = None

@dataclass
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    midi: MidiConfig = field(default_factory=MidiConfig)
    keymap_path: Optional[str] = None
