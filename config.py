# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class KeyboardConfig:
    octaves: int = 3               # 完整八度數量 (1..7)
    window_w: int = 1280
    window_h: int = 480
    keyboard_ratio: float = 1 / 8  # keyboard height = width * ratio

@dataclass
class TransportConfig:
    bpm: float = 120.0
    ppq: int = 192                 # ticks per quarter note

@dataclass
class SchedulerConfig:
    interval_seconds: float = 2.0
    lookback_beats: float = 4.0
    buffer_beats: float = 2.0

@dataclass
class ModelConfig:
    mode: str = "echo"             # or "random_walk"
    latency_seconds: float = 0.0
    seed: Optional[int] = None
    notes_per_call: int = 8
    transpose: int = 0

@dataclass
class AudioConfig:
    note_seconds: float = 0.25
    velocity: int = 100
    program: int = 0               # GM Acoustic Grand

@dataclass
class HistoryConfig:
    maxlen: Optional[int] = 4096
    seed_midi: Optional[str] = None
    record_midi: Optional[str] = None

@dataclass
class AppConfig:
    keyboard: KeyboardConfig = field(default_factory=KeyboardConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    log_level: str = "DEBUG"
