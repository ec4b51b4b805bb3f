from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TextIO


class PipelineLogger:
    """Run logger for CLI invocations.

    - console : lines at or above ``min_level`` (off for ``--json`` runs)
    - log_file: the same lines, appended to a file

    Stdlib ``logging`` records from library modules are forwarded through
    :meth:`install_stdlib_bridge`.
    """

    LEVELS: dict[str, int] = {
        "DEBUG":  0,
        "INFO":   1,
        "METRIC": 1,
        "WARN":   2,
        "ERROR":  3,
    }

    def __init__(
        self,
        log_file: str | Path | None = None,
        console: bool = True,
        min_level: str = "INFO",
    ) -> None:
        self.console = console
        self.min_level = self.LEVELS.get(min_level.upper(), 1)
        self.log_path: Path | None = None
        self._file: TextIO | None = None
        self._metrics: dict[str, Any] = {}
        self._start = time.perf_counter()

        if log_file:
            self.log_path = Path(log_file)
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.log_path, "a", encoding="utf-8", buffering=1)
            self._raw("=" * 80)
            self._raw(f"defcite run {time.strftime('%Y-%m-%d %H:%M:%S')}")
            self._raw("=" * 80)

    def _raw(self, line: str) -> None:
        if self._file:
            self._file.write(line + "\n")

    def _emit(self, level: str, msg: str) -> None:
        if self.LEVELS.get(level, 1) < self.min_level:
            return
        elapsed = time.perf_counter() - self._start
        line = f"[{time.strftime('%H:%M:%S')}] [{elapsed:6.2f}s] {level:6} | {msg}"
        if self.console:
            print(line, flush=True)
        self._raw(line)

    def debug(self, msg: str) -> None:
        self._emit("DEBUG", msg)

    def info(self, msg: str) -> None:
        self._emit("INFO", msg)

    def warn(self, msg: str) -> None:
        self._emit("WARN", msg)

    def error(self, msg: str) -> None:
        self._emit("ERROR", msg)

    def section(self, title: str) -> None:
        sep = "=" * 60
        for line in (sep, f"  {title}", sep):
            if self.console:
                print(line, flush=True)
            self._raw(line)

    def metric(self, name: str, value: Any, unit: str = "") -> None:
        self._metrics[name] = value
        vstr = f"{value:.3f}" if isinstance(value, float) else str(value)
        if unit:
            vstr += f" {unit}"
        self._emit("METRIC", f"{name} = {vstr}")

    @property
    def metrics(self) -> dict[str, Any]:
        return dict(self._metrics)

    @contextmanager
    def timer(self, name: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.metric(f"timer:{name}", time.perf_counter() - start, "s")

    def install_stdlib_bridge(self, root_logger: str = "defcite", level: int = logging.INFO) -> None:
        handler = _BridgeHandler(self)
        handler.setLevel(level)
        root = logging.getLogger(root_logger)
        root.setLevel(level)
        # one bridge per logger tree; a new run replaces the previous one
        for existing in [h for h in root.handlers if isinstance(h, _BridgeHandler)]:
            root.removeHandler(existing)
        root.addHandler(handler)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None

    def __enter__(self) -> "PipelineLogger":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


class _BridgeHandler(logging.Handler):
    _MAP = {
        logging.DEBUG:    "debug",
        logging.INFO:     "info",
        logging.WARNING:  "warn",
        logging.ERROR:    "error",
        logging.CRITICAL: "error",
    }

    def __init__(self, logger: PipelineLogger) -> None:
        super().__init__()
        self._run_logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            getattr(self._run_logger, self._MAP.get(record.levelno, "info"))(
                f"[{record.name}] {msg}"
            )
        except Exception:
            self.handleError(record)
