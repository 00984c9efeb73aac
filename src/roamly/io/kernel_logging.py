# roamly/io/kernel_logging.py
import json
import logging
import sys
from dataclasses import asdict, is_dataclass

from roamly.io.recorder import Recorder
from roamly.sim.hooks import NoopHooks


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(name: str = "roamly", level: str = "INFO", stream=None) -> logging.Logger:
    """Attach one JSON line handler to the package logger (idempotent)."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(stream or sys.stderr)
        h.setFormatter(JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class KernelLogging(NoopHooks):
    """
    One place to shape and emit structured logs for both engine and journey events.
    """

    BUSINESS = {
        "SettleTimeout",
        "StartMoving",
        "RevealDetails",
        "CameraSettled",
        "AnimationFinished",
    }

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1000,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or configure_logging("roamly.kernel", level=level)
        self._processed = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _shape_event(self, ev, want_name: bool = False):
        name = type(ev).__name__
        base = {"t": getattr(ev, "t", None)}
        for f in ("generation", "run_id", "fit_id"):
            if hasattr(ev, f):
                base[f] = getattr(ev, f)
        if is_dataclass(ev):
            evd = asdict(ev)
            for k in list(base.keys()):
                evd.pop(k, None)
            if evd:
                base["data"] = evd
        return (name, base) if want_name else base

    # --------------------------------------------------------

    # engine lifecycle

    def run_start(self, *, until: float | None, max_events: int | None, qsize: int | None):
        self._emit("DEBUG", "run_start", until=until, max_events=max_events, qsize=qsize)

    def run_end(self, *, processed: int, **extra):
        self._emit("DEBUG", "run_end", processed=processed, **extra)

    def schedule(self, ev, *, now: float, qsize: int):
        if self.debug and (qsize % self.sample_every) == 0:
            self._emit("DEBUG", "schedule", **self._shape_event(ev), now=now, qsize=qsize)

    def cancel(self, ev, *, now: float, qsize: int):
        if self.debug:
            self._emit("DEBUG", "cancel", **self._shape_event(ev), now=now, qsize=qsize)

    def dispatch_start(self, ev, *, seq: int, qsize: int, handlers: int):
        self._processed += 1
        name, extra = self._shape_event(ev, want_name=True)
        if name in self.BUSINESS:
            self._emit("INFO", name, **extra, seq=seq, qsize=qsize, handlers=handlers)
        elif self.debug and (self._processed % self.sample_every) == 0:
            self._emit("DEBUG", name, **extra, seq=seq, qsize=qsize, handlers=handlers)

    def dispatch_end(self, ev, *, produced: int, qsize: int, **extra):
        if self.debug and (qsize % self.sample_every) == 0:
            self._emit("DEBUG", "dispatch_done", produced=produced, qsize=qsize, **extra)

    def error(self, ev, *, reason: str, **extra):
        name, shaped = self._shape_event(ev, want_name=True)
        self._emit("ERROR", "kernel_error", event=name, reason=reason, **{**shaped, **extra})

    # ------------- Business Event Reporting --------------------------

    def biz(self, ev):
        self._emit("INFO", ev.name, **{k: v for k, v in asdict(ev).items() if k != "name"})
        if self.recorder:
            self.recorder.emit(ev)
