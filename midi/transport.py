# midi/transport.py
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import mido

from session.state import NoteEventKind


@dataclass(frozen=True)
class NoteEvent:
    kind: NoteEventKind
    pitch: int
    velocity: int


def decode_message(data: Sequence[int]) -> Optional[NoteEvent]:
    """Decode a raw (status, pitch, velocity) triple.

    note_on with velocity > 0 is a press, note_on with velocity 0 and
    note_off are releases. Everything else, or bytes mido refuses, is None.
    """
    try:
        msg = mido.Message.from_bytes(list(data))
    except (ValueError, TypeError, KeyError, IndexError) as e:
        logging.debug("Dropped malformed MIDI data %r: %s", data, e)
        return None

    if msg.type == 'note_on' and msg.velocity > 0:
        return NoteEvent(NoteEventKind.PRESS, msg.note, msg.velocity)
    if msg.type == 'note_off' or (msg.type == 'note_on' and msg.velocity == 0):
        return NoteEvent(NoteEventKind.RELEASE, msg.note, msg.velocity)
    return None


class MidiInput:
    """
    系統 MIDI 輸入（鍵盤控制器）：
    - 找不到裝置或初始化失敗只記 log，available=False，poll() 回空 list
    - poll() 每幀呼叫，把待處理封包解成 NoteEvent
    """
    def __init__(self, device_id: Optional[int] = None, buffer_size: int = 64):
        self.device_id = device_id
        self.buffer_size = buffer_size
        self.midi_in = None
        self.device_name = ""
        self._midi = None

        try:
            import pygame.midi
            self._midi = pygame.midi
            pygame.midi.init()
            dev = device_id if device_id is not None else self._first_input()
            if dev is None or dev < 0:
                logging.warning("[MidiInput] No MIDI input device found; on-screen keys only")
                return
            info = pygame.midi.get_device_info(dev)
            if not info or not info[2]:
                logging.warning("[MidiInput] Device %r is not an input", dev)
                return
            self.midi_in = pygame.midi.Input(dev, buffer_size)
            self.device_id = dev
            self.device_name = _decode_name(info[1])
            logging.info("[MidiInput] Listening on device %d (%s)", dev, self.device_name)
        except Exception as e:
            logging.warning("[MidiInput] MIDI input init failed: %s", e)
            self.midi_in = None

    @property
    def available(self) -> bool:
        return self.midi_in is not None

    def _first_input(self) -> Optional[int]:
        dev = self._midi.get_default_input_id()
        if dev != -1:
            return dev
        for i in range(self._midi.get_count()):
            info = self._midi.get_device_info(i)
            if info and info[2]:
                return i
        return None

    def poll(self) -> List[NoteEvent]:
        if not self.midi_in:
            return []
        out: List[NoteEvent] = []
        try:
            while self.midi_in.poll():
                for packet, _ts in self.midi_in.read(self.buffer_size):
                    ev = decode_message(packet[:3])
                    if ev is not None:
                        out.append(ev)
        except Exception:
            logging.exception("[MidiInput] read failed, closing device")
            self.close()
        return out

    def close(self):
        if self.midi_in is not None:
            try:
                self.midi_in.close()
            except Exception:
                pass
        self.midi_in = None


def _decode_name(raw) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return str(raw)
