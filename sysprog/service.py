"""A minimal init.d service manager and signal-driven settings."""

from __future__ import annotations

import logging
import os
import queue
import re
import signal
import subprocess
import sys
import time
from contextlib import suppress
from pathlib import Path
from typing import TextIO

log = logging.getLogger(__name__)

INITD_FILE = "/etc/init.d/mydaemon"
VAR_DIR = "/var/mydaemon/"
PID_FILE = "mydaemon.pid"
OUT_FILE = "mydaemon.log"
ERR_FILE = "mydaemon.err"
INITD_CONTENT = """#!/bin/sh

### BEGIN INIT INFO
# Provides:          mydaemon
# Required-Start:    $remote_fs $syslog
# Required-Stop:     $remote_fs $syslog
# Default-Start:     2 3 4 5
# Default-Stop:      0 1 6
# Short-Description: Custom daemon
# Description:       Enable service provided by daemon.
### END INIT INFO

"%s" $1
"""

SIGHUP = getattr(signal, "SIGHUP", 1)
SIGINT = signal.SIGINT
SIGQUIT = getattr(signal, "SIGQUIT", 3)
SIGUSR1 = getattr(signal, "SIGUSR1", 0xA)
SIGUSR2 = getattr(signal, "SIGUSR2", 0xC)
SIGALRM = getattr(signal, "SIGALRM", 14)
_SIGKILL = getattr(signal, "SIGKILL", signal.SIGTERM)

_PID_RE = re.compile(r"[+-]?[0-9]+")


class ServiceError(Exception):
    """A service command failed."""


class ServiceManager:
    """Installs, starts, stops and reports on the daemon."""

    def __init__(
        self,
        bin: str | None = None,
        initd_file: str | os.PathLike[str] = INITD_FILE,
        var_dir: str | os.PathLike[str] = VAR_DIR,
        command: str = "",
        out: TextIO | None = None,
    ) -> None:
        self.bin = bin if bin is not None else os.path.abspath(sys.argv[0])
        self.initd_file = Path(initd_file)
        self.var_dir = Path(var_dir)
        self.command = command
        self.out = out if out is not None else sys.stdout
        self.process: subprocess.Popen[bytes] | None = None

    @property
    def pid_path(self) -> Path:
        return self.var_dir / PID_FILE

    def _sudo(self) -> ServiceError:
        return ServiceError(f"try `sudo {self.bin} {self.command}`")

    def _say(self, *parts: object) -> None:
        print(*parts, file=self.out)

    def install(self) -> None:
        """Write the init.d script; ServiceError if already there."""
        if self.initd_file.exists():
            raise ServiceError("Already installed")
        try:
            fd = os.open(self.initd_file, os.O_CREAT | os.O_WRONLY, 0o755)
        except PermissionError:
            raise self._sudo() from None
        with open(fd, "w", encoding="utf-8") as handle:
            handle.write(INITD_CONTENT % self.bin)
        self._say("Daemon", self.bin, "installed")

    def uninstall(self) -> None:
        """Remove the init.d script; ServiceError if it is not there."""
        if not self.initd_file.exists():
            raise ServiceError("not installed")
        try:
            os.remove(self.initd_file)
        except PermissionError:
            raise self._sudo() from None
        self._say("Daemon", self.bin, "removed")

    def status(self) -> int:
        """Return the running daemon's pid, or 0 when it is not active."""
        pid = 0
        try:
            try:
                pid = self.get_pid()
            except FileNotFoundError:
                return 0
            try:
                os.kill(pid, 0)
            except OSError:
                self._say(pid, "not found - removing PID file...")
                with suppress(OSError):
                    os.remove(self.pid_path)
                pid = 0
            return pid
        finally:
            if pid == 0:
                self._say("status: not active")
            else:
                self._say("status: active - pid", pid)

    def start(self) -> int:
        """Start the daemon in the background and record its pid."""
        try:
            os.makedirs(self.var_dir, 0o755, exist_ok=True)
        except PermissionError:
            raise self._sudo() from None
        flags = os.O_CREAT | os.O_APPEND | os.O_WRONLY
        out_fd = os.open(self.var_dir / OUT_FILE, flags, 0o644)
        with open(out_fd, "ab") as out:
            err_fd = os.open(self.var_dir / ERR_FILE, flags, 0o644)
            with open(err_fd, "ab") as err:
                proc = subprocess.Popen(
                    [self.bin, "run"], stdout=out, stderr=err, cwd="/"
                )
        self.process = proc
        try:
            self.write_pid(proc.pid)
        except OSError:
            try:
                proc.kill()
            except OSError as exc:
                self._say("Cannot kill process", proc.pid, exc)
            raise
        self._say("Started with PID", proc.pid)
        return proc.pid

    def stop(self) -> int | None:
        """Kill the daemon and remove its pid file; None if none is recorded."""
        try:
            pid = self.get_pid()
        except FileNotFoundError:
            return None
        os.kill(pid, _SIGKILL)
        os.remove(self.pid_path)
        self._say("Stopped PID", pid)
        return pid

    def get_pid(self) -> int:
        """Read the pid file; FileNotFoundError if missing."""
        text = self.pid_path.read_bytes().decode("utf-8", "replace")
        if not _PID_RE.fullmatch(text):
            raise ServiceError(f"Invalid PID value: {text}")
        return int(text)

    def write_pid(self, pid: int) -> None:
        fd = os.open(self.pid_path, os.O_CREAT | os.O_WRONLY, 0o644)
        with open(fd, "w", encoding="ascii") as handle:
            handle.write(str(pid))

    def run(self) -> None:
        self._say("RUN")
        self.out.flush()
        while True:
            time.sleep(1)

    def help(self) -> None:
        self._say("usage:", self.bin, "run|install|uninstall|status|start|stop|signals")


_UNITS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}
_COMPONENT_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]+)")
_INT64_MAX = (1 << 63) - 1


def _parse_ns(text: str) -> int:
    original = text
    invalid = ValueError(f'time: invalid duration "{original}"')
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return 0
    if not text:
        raise invalid
    total = 0
    pos = 0
    while pos < len(text):
        match = _COMPONENT_RE.match(text, pos)
        if match is None:
            raise invalid
        whole, frac, unit_text = match.group(1), match.group(2), match.group(3)
        if not whole and not frac:
            raise invalid
        unit = _UNITS.get(unit_text)
        if unit is None:
            raise ValueError(f'time: unknown unit "{unit_text}" in duration "{original}"')
        value = int(whole or "0") * unit
        if frac:
            value += int(frac) * unit // 10 ** len(frac)
        total += value
        if total > _INT64_MAX:
            raise invalid
        pos = match.end()
    return -total if negative else total


def parse_duration(text: str) -> float:
    """Parse a duration such as ``1h30m`` or ``1.5s`` into seconds."""
    return _parse_ns(text) / 1e9


def _frac(value: int, digits: int) -> str:
    whole, frac = divmod(value, 10**digits)
    text = str(whole)
    if frac:
        text += "." + f"{frac:0{digits}d}".rstrip("0")
    return text


def _format_ns(ns: int) -> str:
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    u = abs(ns)
    if u < 1_000:
        return f"{sign}{u}ns"
    if u < 1_000_000:
        return f"{sign}{_frac(u, 3)}\u00b5s"
    if u < 1_000_000_000:
        return f"{sign}{_frac(u, 6)}ms"
    secs = _frac(u % 60_000_000_000, 9) + "s"
    minutes_total = u // 60_000_000_000
    hours, minutes = divmod(minutes_total, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}"
    if minutes:
        return f"{sign}{minutes}m{secs}"
    return f"{sign}{secs}"


def format_duration(seconds: float) -> str:
    """Format seconds as a duration string such as ``1m30s``."""
    return _format_ns(round(seconds * 1e9))


class Settings:
    """A delay that can be loaded, saved and changed by signals."""

    def __init__(
        self, path: str | os.PathLike[str] | None = None, delay: float = 1.0
    ) -> None:
        self.path = Path(path) if path is not None else Path.home() / ".multi"
        self.nanoseconds = round(delay * 1e9)

    @property
    def delay(self) -> float:
        return self.nanoseconds / 1e9

    def _change(self, nanoseconds: int) -> None:
        self.nanoseconds = nanoseconds
        log.info("Changed %s", _format_ns(nanoseconds))

    def load(self) -> None:
        """Read the delay from the settings file."""
        text = self.path.read_text(encoding="utf-8")
        self.nanoseconds = _parse_ns(text)
        log.info("Loaded %s", _format_ns(self.nanoseconds))

    def save(self) -> None:
        """Write the delay to the settings file."""
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
        with open(fd, "w", encoding="utf-8") as handle:
            handle.write(_format_ns(self.nanoseconds))
        log.info("Saved %s", _format_ns(self.nanoseconds))

    def double(self) -> None:
        self._change(self.nanoseconds * 2)

    def halve(self) -> None:
        self._change(self.nanoseconds // 2)

    def handle_signal(self, signum: int) -> None:
        """React to a signal; SIGINT and SIGQUIT raise SystemExit."""
        if signum == SIGHUP:
            self.load()
        elif signum == SIGALRM:
            self.save()
        elif signum == SIGINT:
            try:
                self.save()
            except OSError as exc:
                log.error("Cannot save: %s", exc)
                raise SystemExit(1) from exc
            raise SystemExit(0)
        elif signum == SIGQUIT:
            raise SystemExit(0)
        elif signum == SIGUSR1:
            self.double()
        elif signum == SIGUSR2:
            self.halve()


def _run_signal_loop(settings: Settings) -> None:
    received: queue.Queue[int] = queue.Queue()
    for name in ("SIGHUP", "SIGINT", "SIGQUIT", "SIGUSR1", "SIGUSR2", "SIGALRM"):
        signum = getattr(signal, name, None)
        if signum is not None:
            signal.signal(signum, lambda s, _frame: received.put(s))
    try:
        settings.handle_signal(SIGHUP)
    except FileNotFoundError:
        pass
    while True:
        try:
            signum = received.get_nowait()
        except queue.Empty:
            time.sleep(settings.delay)
            log.info("After %s Executing action!", _format_ns(settings.nanoseconds))
            continue
        try:
            settings.handle_signal(signum)
        except (OSError, ValueError) as exc:
            log.error("Error handling %s: %s", signum, exc)


def main(argv: list[str] | None = None) -> int:
    """Run a service command: run, install, uninstall, status, start, stop, signals."""
    args = sys.argv[1:] if argv is None else argv
    command = args[0] if args else ""
    manager = ServiceManager(command=command)
    actions = {
        "run": manager.run,
        "install": manager.install,
        "uninstall": manager.uninstall,
        "status": manager.status,
        "start": manager.start,
        "stop": manager.stop,
    }
    if command == "signals":
        logging.basicConfig(level=logging.INFO)
        _run_signal_loop(Settings())
        return 0
    action = actions.get(command)
    if action is None:
        manager.help()
        return 0
    try:
        action()
    except (OSError, ServiceError) as exc:
        print(command, "error:", exc)
        return 1
    return 0