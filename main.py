# main.py
import os, sys
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

from utils.crashlog import setup_crashlog, log_exception, log_dir
setup_crashlog()

import argparse, asyncio, logging, traceback
from logging.handlers import RotatingFileHandler
from config import (AppConfig, KeyboardConfig, TransportConfig, SchedulerConfig,
                    ModelConfig, AudioConfig, HistoryConfig)
from piano.keys import InvalidConfiguration

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def _init_logging(level=logging.DEBUG):
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=level, format=LOG_FORMAT, encoding="utf-8")
    fh = RotatingFileHandler(os.path.join(log_dir(), "app.log"),
                             maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(fh)

def build_config(argv=None) -> AppConfig:
    ap = argparse.ArgumentParser(description="Virtual piano that plays along with a note model")
    ap.add_argument('--octaves', type=int, default=3, help='full octaves on the keyboard (1-7)')
    ap.add_argument('--width', type=int, default=1280)
    ap.add_argument('--height', type=int, default=480)
    ap.add_argument('--bpm', type=float, default=120.0)
    ap.add_argument('--interval', type=float, default=2.0, help='seconds between model calls')
    ap.add_argument('--lookback', type=float, default=4.0, help='beats of history sent to the model')
    ap.add_argument('--buffer', type=float, default=2.0, help='beats of lookahead before generated notes')
    ap.add_argument('--model', default='echo', choices=['echo', 'random_walk'])
    ap.add_argument('--latency', type=float, default=0.0, help='simulated model latency in seconds')
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--transpose', type=int, default=0)
    ap.add_argument('--note-seconds', type=float, default=0.25)
    ap.add_argument('--seed-midi', default=None, help='MIDI file used as initial history')
    ap.add_argument('--record-midi', default=None, help='write the note history here on exit')
    ap.add_argument('--quiet', action='store_true')
    args = ap.parse_args(argv)

    cfg = AppConfig(
        keyboard=KeyboardConfig(octaves=args.octaves, window_w=args.width, window_h=args.height),
        transport=TransportConfig(bpm=args.bpm),
        scheduler=SchedulerConfig(interval_seconds=args.interval, lookback_beats=args.lookback,
                                  buffer_beats=args.buffer),
        model=ModelConfig(mode=args.model, latency_seconds=args.latency, seed=args.seed,
                          transpose=args.transpose),
        audio=AudioConfig(note_seconds=args.note_seconds),
        history=HistoryConfig(seed_midi=args.seed_midi, record_midi=args.record_midi),
        log_level="INFO" if args.quiet else "DEBUG",
    )
    return cfg

def main(argv=None) -> int:
    cfg = build_config(argv)
    _init_logging(getattr(logging, cfg.log_level))
    logging.info("應用程式啟動")

    from app import App
    try:
        app = App(cfg)
    except InvalidConfiguration as e:
        logging.error("Invalid configuration: %s", e)
        return 2
    asyncio.run(app.run())
    return 0

if __name__ == '__main__':
    try:
        sys.exit(main())
    except Exception as e:
        log_exception("Top-level exception", e)
        logging.error("未捕捉的例外：%s", e, exc_info=True)
        print("程式發生錯誤，請到 logs/ 資料夾看 app.log 與 error-*.txt")
        traceback.print_exc()
        sys.exit(1)
