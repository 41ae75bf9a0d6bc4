# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

from utils.crashlog import setup_crashlog, log_exception, log_dir
setup_crashlog()

import argparse
from config import AppConfig, RenderConfig, SessionConfig, AudioConfig, MidiConfig
import logging, traceback

def _init_logging():
    logs = log_dir()
    log_path = os.path.join(logs, "app.log")

    if logging.getLogger().handlers:
        return

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        encoding="utf-8"
    )
    try:
        from logging.handlers import RotatingFileHandler
        fh = RotatingFileHandler(log_path, maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logging.getLogger().addHandler(fh)
    except OSError as e:
        logging.warning("無法寫入 %s：%s", log_path, e)

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Seventh chord keyboard trainer")
    ap.add_argument('--voicing', default='standard', choices=['standard', 'rootless'])
    ap.add_argument('--feedback-ms', type=int, default=500)
    ap.add_argument('--tap-ms', type=int, default=500)
    ap.add_argument('--midi-in', type=int, default=None, help="MIDI input device id")
    ap.add_argument('--midi-out', type=int, default=None, help="MIDI output device id")
    ap.add_argument('--key-range', default='89', choices=['89', '88', '61'])
    ap.add_argument('--keymap', default=None, help="JSON keymap (key name -> pitch)")
    ap.add_argument('--seed', type=int, default=None)
    return ap

def config_from_args(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        render=RenderConfig(key_range=args.key_range),
        session=SessionConfig(
            feedback_ms=args.feedback_ms,
            tap_release_ms=args.tap_ms,
            voicing=args.voicing,
            seed=args.seed,
        ),
        audio=AudioConfig(output_device=args.midi_out),
        midi=MidiConfig(input_device=args.midi_in),
        keymap_path=args.keymap,
    )

def main(argv=None):
    _init_logging()
    logging.info("應用程式啟動")

    cfg = config_from_args(build_parser().parse_args(argv))

    from app import App
    App(cfg).run()

if __name__ == '__main__':
    try:
        main()
    except Exception as e:
        try:
            log_exception("Top-level exception", e)
        except Exception:
            pass
        logging.error("未捕捉的例外：%s", e, exc_info=True)
        print("程式發生錯誤，請到 logs/ 資料夾看 app.log 與 error-*.txt")
        traceback.print_exc()
