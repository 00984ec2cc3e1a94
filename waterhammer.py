#!/usr/bin/env python3
"""
waterhammer.py - run a test command until it fails

Repeats the test command round after round to reproduce flaky tests.
Each round runs under a bounded deadline. Both output streams are drained
concurrently into a swap file, which is renamed onto the canonical log once
the round's output is fully accounted for. The loop stops at the first round
that fails, times out or cannot be set up.
Optional configuration is loaded from waterhammer.toml.
"""

import argparse
import os
import selectors
import shlex
import signal
import subprocess
import sys
import threading
import time
import tomllib
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import BinaryIO, NoReturn, Optional, Protocol, TextIO


CONFIG_FILE = "waterhammer.toml"
DEFAULT_TEST_COMMAND = "go test -v -run {pattern}"
DEFAULT_LOG_PATH = "/tmp/test.log"
ROUND_TIMEOUT_S = 30.0
KILL_GRACE_S = 5.0
POLL_INTERVAL_S = 0.1
READ_CHUNK_SIZE = 65536
MAX_LINE_BYTES = 65536


# ============================================================================
# ANSI Color Codes (stdlib-only terminal styling)
# ============================================================================
class Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20


# Colors for echoed test lines, keyed by marker label
MARKER_COLORS: dict[str, tuple[str, ...]] = {
    "fail": (Colors.BRIGHT_RED, Colors.BOLD),
    "pass": (Colors.GREEN,),
    "no-tests": (Colors.BRIGHT_YELLOW, Colors.BOLD),
}


class Logger:
    """Leveled terminal output shared by every round component.

    Drainer threads print concurrently, so each line is written under a lock.
    """

    def __init__(self, level: LogLevel = LogLevel.INFO, stream: Optional[TextIO] = None):
        self.level = level
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        # Resolved per call so a replaced sys.stdout is honored.
        return self._stream if self._stream is not None else sys.stdout

    @property
    def verbose(self) -> bool:
        return self.level <= LogLevel.DEBUG

    def color(self, text: str, *codes: str) -> str:
        """Wrap text with ANSI color codes."""
        isatty = getattr(self.stream, "isatty", None)
        if not codes or isatty is None or not isatty():
            return text  # No colors if not a terminal
        return "".join(codes) + text + Colors.RESET

    def _emit(self, text: str) -> None:
        with self._lock:
            print(text, file=self.stream, flush=True)

    def banner(self, text: str, char: str = "=", width: int = 60) -> None:
        """Print a prominent banner."""
        line = char * width
        self._emit(self.color(line, Colors.BRIGHT_CYAN, Colors.BOLD))
        self._emit(self.color(text.center(width), Colors.BRIGHT_CYAN, Colors.BOLD))
        self._emit(self.color(line, Colors.BRIGHT_CYAN, Colors.BOLD))

    def debug(self, msg: str) -> None:
        """Print a harness trace line, only at LogLevel.DEBUG."""
        if self.verbose:
            self._emit(f"{self.color('·', Colors.DIM)} {self.color(msg, Colors.DIM)}")

    def info(self, msg: str) -> None:
        self._emit(f"{self.color('▸', Colors.CYAN)} {msg}")

    def success(self, msg: str) -> None:
        self._emit(
            f"{self.color('✓', Colors.BRIGHT_GREEN, Colors.BOLD)} {self.color(msg, Colors.GREEN)}"
        )

    def warning(self, msg: str) -> None:
        self._emit(
            f"{self.color('⚠', Colors.BRIGHT_YELLOW, Colors.BOLD)} {self.color(msg, Colors.YELLOW)}"
        )

    def error(self, msg: str) -> None:
        self._emit(
            f"{self.color('✗', Colors.BRIGHT_RED, Colors.BOLD)} {self.color(msg, Colors.RED)}"
        )

    def test_line(self, text: str, source: str, label: Optional[str] = None) -> None:
        """Echo one interesting line of test output.

        stdout lines are printed as-is, stderr lines carry a source prefix.
        """
        text = self.color(text, *MARKER_COLORS.get(label or "", ()))
        if source == "stdout":
            self._emit(text)
        else:
            self._emit(f"{self.color('▸', Colors.CYAN)} ({source}) {text}")


# ============================================================================
# Errors
# ============================================================================


class WaterhammerError(Exception):
    """Base class for all errors that end the round loop."""


class UsageError(WaterhammerError):
    """Wrong command-line usage. No round is attempted."""


class SetupError(WaterhammerError):
    """A round could not be prepared (log file, pipes, process start)."""


class LaunchError(SetupError):
    """The test process could not be started."""


class StreamError(WaterhammerError):
    """Reading one of the test process's output streams failed."""


class ProcessFailure(WaterhammerError):
    """The test process exited with a non-success status."""

    def __init__(self, returncode: int):
        super().__init__(f"test failed: {describe_exit(returncode)}")
        self.returncode = returncode


class RoundTimeoutError(WaterhammerError, TimeoutError):
    """The round's deadline fired before it completed."""


def describe_exit(returncode: Optional[int]) -> str:
    """Render a Popen returncode the way a shell user would read it."""
    if returncode is None:
        return "still running"
    if returncode < 0:
        try:
            return f"terminated by {signal.Signals(-returncode).name}"
        except ValueError:
            return f"terminated by signal {-returncode}"
    return f"exit status {returncode}"


# ============================================================================
# Line Classification
# ============================================================================


@dataclass(frozen=True)
class LineMarker:
    """A labelled substring that makes an output line worth printing."""

    label: str
    contains: str
    message: Optional[str] = None  # printed instead of the line when set

    def matches(self, line: str) -> bool:
        return self.contains in line


DEFAULT_MARKERS: tuple[LineMarker, ...] = (
    LineMarker("no-tests", "testing: warning: no tests to run", "NO TESTS RUN"),
    LineMarker("run", "=== RUN"),
    LineMarker("fail", "--- FAIL"),
    LineMarker("pass", "--- PASS"),
    LineMarker("source", "_test.go"),
)


def classify_line(line: str, markers: tuple[LineMarker, ...] | list[LineMarker]) -> Optional[LineMarker]:
    """Return the first marker matching the line, or None."""
    for marker in markers:
        if marker.matches(line):
            return marker
    return None


# ============================================================================
# Configuration
# ============================================================================


@dataclass
class Config:
    """Settings for the round loop. Every field has a working default."""

    test_command: str = DEFAULT_TEST_COMMAND
    log_path: str = DEFAULT_LOG_PATH
    round_timeout_s: float = ROUND_TIMEOUT_S
    kill_grace_s: float = KILL_GRACE_S
    poll_interval_s: float = POLL_INTERVAL_S
    verbose: bool = False
    markers: list[LineMarker] = field(default_factory=lambda: list(DEFAULT_MARKERS))


class ConfigManager:
    """Loads waterhammer.toml into a Config."""

    _file_path: str = CONFIG_FILE
    _number_keys = ("round_timeout_s", "kill_grace_s", "poll_interval_s")
    _known_keys = {"test_command", "log_path", "verbose", "markers", *_number_keys}

    @classmethod
    def load(cls, path: Optional[str] = None) -> Config:
        """
        Load configuration from waterhammer.toml.

        Expected structure (every key optional):
            test_command = "go test -v -run {pattern}"
            log_path = "/tmp/test.log"
            round_timeout_s = 30
            kill_grace_s = 5
            poll_interval_s = 0.1
            verbose = false

            [[markers]]
            label = "fail"
            contains = "--- FAIL"

        A missing default file yields the defaults. A missing file that was
        asked for explicitly is an error.

        Returns:
            The validated Config
        """
        logger = Logger()
        config_path = Path(path or cls._file_path)

        if not config_path.exists():
            if path is None:
                return Config()
            logger.error(f"{config_path} not found")
            sys.exit(1)

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            logger.error(f"{config_path} is not valid TOML: {e}")
            sys.exit(1)

        return cls.from_dict(data, str(config_path), logger)

    @classmethod
    def from_dict(cls, data: dict, source: str = CONFIG_FILE, logger: Optional[Logger] = None) -> Config:
        """Validate a parsed config table. Exits with an error if it is invalid."""
        logger = logger or Logger()
        errors: list[str] = []
        config = Config()

        for key in sorted(set(data) - cls._known_keys):
            logger.warning(f"{source}: unknown key '{key}' ignored")

        if "test_command" in data:
            command = data["test_command"]
            if not isinstance(command, str) or not shlex.split(command):
                errors.append("test_command must be a non-empty string")
            else:
                config.test_command = command
                if "{pattern}" not in command:
                    logger.warning(f"{source}: test_command has no {{pattern}} placeholder")

        if "log_path" in data:
            if not isinstance(data["log_path"], str) or not data["log_path"]:
                errors.append("log_path must be a non-empty string")
            else:
                config.log_path = data["log_path"]

        for key in cls._number_keys:
            if key not in data:
                continue
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                errors.append(f"{key} must be a positive number")
            else:
                setattr(config, key, float(value))

        if "verbose" in data:
            if not isinstance(data["verbose"], bool):
                errors.append("verbose must be true or false")
            else:
                config.verbose = data["verbose"]

        if "markers" in data:
            config.markers = []
            entries = data["markers"] if isinstance(data["markers"], list) else [None]
            for i, entry in enumerate(entries):
                if not isinstance(entry, dict):
                    errors.append("markers must be an array of tables ([[markers]])")
                    continue
                missing = [k for k in ("label", "contains") if not isinstance(entry.get(k), str)]
                if missing:
                    errors.append(f"Marker {i+1} missing required keys: {', '.join(missing)}")
                    continue
                if not isinstance(entry.get("message", ""), str):
                    errors.append(f"Marker {i+1} message must be a string")
                    continue
                config.markers.append(
                    LineMarker(entry["label"], entry["contains"], entry.get("message"))
                )

        if errors:
            for message in errors:
                logger.error(f"{source}: {message}")
            sys.exit(1)

        return config


# ============================================================================
# Process Launcher
# ============================================================================


def anchor_filter(filter_: str) -> str:
    """Anchor a test-name filter as a full-string match. Empty matches all."""
    return f"^{filter_ or '.*'}$"


def build_command(template: str, filter_: str) -> list[str]:
    """
    Build the test invocation for a filter.

    The template is split into argv first, so a filter containing spaces or
    shell metacharacters always lands in a single argument.
    """
    pattern = anchor_filter(filter_)
    return [part.replace("{pattern}", pattern) for part in shlex.split(template)]


def terminate_process_group(process: subprocess.Popen, grace_s: float) -> None:
    """SIGTERM the process group, then SIGKILL whatever is left after grace_s."""
    try:
        os.killpg(process.pid, signal.SIGTERM)
    except ProcessLookupError:
        return
    try:
        process.wait(timeout=grace_s)
    except subprocess.TimeoutExpired:
        pass
    # Helpers forked by the test tool may outlive the leader.
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class ProcessLauncher:
    """Starts the test command in its own process group."""

    def __init__(self, test_command: str, logger: Logger):
        self.test_command = test_command
        self.logger = logger

    def launch(self, filter_: str) -> subprocess.Popen:
        """
        Start the test command for a filter.

        Returns:
            The running process, with binary stdout/stderr pipes

        Raises:
            LaunchError: if the process or its pipes could not be created
        """
        cmd = build_command(self.test_command, filter_)
        if not cmd:
            raise LaunchError("test command is empty")

        self.logger.debug(f"cmd start: {shlex.join(cmd)}")
        try:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                process_group=0,
            )
        except (OSError, ValueError) as e:
            raise LaunchError(f"could not start {cmd[0]}: {e}") from e
        return process


# ============================================================================
# Log Persister
# ============================================================================


class LogPersister:
    """
    Tees a round's combined output into a swap file and publishes it.

    The canonical log is only ever replaced by a rename, so readers see
    either the previous round's log or the complete new one.
    """

    def __init__(self, log_path: str | Path, logger: Logger):
        self.log_path = Path(log_path)
        self.swap_path = self.log_path.with_name(self.log_path.name + ".swp")
        self.logger = logger
        self.bytes_written = 0
        self._file: Optional[BinaryIO] = None
        self._lock = threading.Lock()

    def open(self) -> None:
        """Create a fresh, empty swap file."""
        try:
            self._file = open(self.swap_path, "wb")
        except OSError as e:
            raise SetupError(f"error creating test log file: {e}") from e
        self.bytes_written = 0

    def write(self, data: bytes) -> None:
        """Append bytes and flush them straight to the swap file."""
        with self._lock:
            if self._file is None:
                raise ValueError("test log file is not open")
            self._file.write(data)
            self._file.flush()
            self.bytes_written += len(data)

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def publish(self) -> bool:
        """
        Atomically replace the canonical log with the swap file.

        A failed rename leaves the previous log in place and is only warned
        about.

        Returns:
            True if the canonical log now holds this round's output
        """
        self.close()
        try:
            os.replace(self.swap_path, self.log_path)
        except OSError as e:
            self.logger.warning(f"could not publish {self.log_path}: {e}")
            return False
        return True

    def discard(self) -> None:
        """Drop the swap file without touching the canonical log."""
        self.close()
        try:
            self.swap_path.unlink()
        except FileNotFoundError:
            pass


# ============================================================================
# Stream Drainer
# ============================================================================


class StreamDrainer:
    """
    Drains one output pipe of the test process on its own thread.

    Raw chunks are written to the persister as soon as they are read; line
    splitting only feeds classification. Reads go through a selector so that
    setting the cancel event stops the drainer even when some orphaned
    process still holds the pipe's write end.
    """

    def __init__(
        self,
        name: str,
        stream: BinaryIO,
        persister: LogPersister,
        logger: Logger,
        markers: tuple[LineMarker, ...] | list[LineMarker],
        cancel: threading.Event,
        poll_interval_s: float = POLL_INTERVAL_S,
    ):
        self.name = name
        self.stream = stream
        self.persister = persister
        self.logger = logger
        self.markers = markers
        self.cancel = cancel
        self.poll_interval_s = poll_interval_s

        self.done = threading.Event()
        self.error: Optional[Exception] = None
        self.cancelled = False
        self.line_count = 0
        self._pending = b""
        self._thread = threading.Thread(target=self.run, name=f"drain-{name}", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for completion. Returns False if the timeout ran out first."""
        if not self.done.wait(timeout):
            return False
        self._thread.join()
        return True

    def run(self) -> None:
        self.logger.debug(f"({self.name}) scanner start")
        try:
            self._drain()
        except (OSError, ValueError) as e:
            self.error = e
            self.logger.error(f"({self.name}) scanner error: {e}")
        finally:
            try:
                self._flush_pending()
            except (OSError, ValueError) as e:
                self.error = self.error or e
            if self.cancelled:
                self.logger.debug(f"({self.name}) scanner aborted")
            else:
                self.logger.debug(f"({self.name}) scanner complete")
            self.done.set()

    def _drain(self) -> None:
        fd = self.stream.fileno()
        with selectors.DefaultSelector() as selector:
            selector.register(fd, selectors.EVENT_READ)
            while True:
                if self.cancel.is_set():
                    self.cancelled = True
                    return
                if not selector.select(timeout=self.poll_interval_s):
                    continue
                chunk = os.read(fd, READ_CHUNK_SIZE)
                if not chunk:
                    return
                self.persister.write(chunk)
                self._pending += chunk
                *lines, self._pending = self._pending.split(b"\n")
                for line in lines:
                    self._classify(line)
                if len(self._pending) > MAX_LINE_BYTES:
                    # Overlong line: classify what we have and move on
                    self._flush_pending()

    def _flush_pending(self) -> None:
        # Final line without a trailing newline
        if self._pending:
            pending, self._pending = self._pending, b""
            self._classify(pending)

    def _classify(self, raw: bytes) -> None:
        self.line_count += 1
        text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        marker = classify_line(text, self.markers)
        if marker is not None:
            self.logger.test_line(marker.message or text, self.name, marker.label)


# ============================================================================
# Round Executor
# ============================================================================


@dataclass(frozen=True)
class Round:
    """One bounded attempt. The deadline is a time.monotonic() value."""

    index: int
    filter: str
    deadline: float

    def remaining(self) -> float:
        return max(0.0, self.deadline - time.monotonic())

    def expired(self) -> bool:
        return time.monotonic() >= self.deadline


class RoundState(Enum):
    LAUNCHING = "launching"
    DRAINING = "draining"
    AWAITING_EXIT = "awaiting_exit"
    RECONCILING = "reconciling"
    DONE = "done"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class RoundResult:
    """Outcome of a round that passed."""

    index: int
    returncode: int
    elapsed_s: float
    log_published: bool
    lines: int


class RoundExecutor:
    """
    Runs one round: launch, drain both streams, reap, reconcile.

    Draining must finish before the exit status is collected. Waiting on the
    process first could leave it blocked on a full pipe buffer.
    """

    def __init__(self, config: Config, logger: Logger, launcher: Optional[ProcessLauncher] = None):
        self.config = config
        self.logger = logger
        self.launcher = launcher or ProcessLauncher(config.test_command, logger)
        self.state: Optional[RoundState] = None

    def _enter(self, state: RoundState) -> None:
        self.state = state
        self.logger.debug(f"state: {state.value}")

    def execute(self, round_: Round) -> RoundResult:
        """
        Run one round to completion.

        Returns:
            RoundResult when the test command exited cleanly in time

        Raises:
            SetupError: the log file or the process could not be created
            RoundTimeoutError: the deadline fired
            ProcessFailure: the test command exited non-zero
            StreamError: an output stream could not be read to the end
        """
        started = time.monotonic()
        persister = LogPersister(self.config.log_path, self.logger)

        self._enter(RoundState.LAUNCHING)
        try:
            persister.open()
            process = self.launcher.launch(round_.filter)
        except SetupError:
            self._enter(RoundState.FAILED)
            persister.discard()
            raise

        try:
            return self._supervise(round_, process, persister, started)
        finally:
            persister.close()
            if process.poll() is None:
                terminate_process_group(process, self.config.kill_grace_s)
            for pipe in (process.stdout, process.stderr):
                if pipe is not None:
                    pipe.close()

    def _supervise(
        self,
        round_: Round,
        process: subprocess.Popen,
        persister: LogPersister,
        started: float,
    ) -> RoundResult:
        cancel = threading.Event()
        drainers = [
            StreamDrainer(name, stream, persister, self.logger, self.config.markers,
                          cancel, self.config.poll_interval_s)
            for name, stream in (("stdout", process.stdout), ("stderr", process.stderr))
        ]

        self._enter(RoundState.DRAINING)
        for drainer in drainers:
            drainer.start()

        timed_out = not self._join_all(drainers, round_.deadline)
        if timed_out:
            self.logger.debug("deadline reached while draining, terminating process group")
            terminate_process_group(process, self.config.kill_grace_s)
            if not self._join_all(drainers, time.monotonic() + self.config.kill_grace_s):
                # Something outside the group still holds a pipe open
                cancel.set()
                self._join_all(drainers, None)

        published = False
        if any(drainer.cancelled or drainer.error is not None for drainer in drainers):
            persister.close()
            self.logger.warning(
                f"round {round_.index} output is incomplete, left in {persister.swap_path}"
            )
        else:
            self.logger.debug("moving log file")
            published = persister.publish()

        self._enter(RoundState.AWAITING_EXIT)
        self.logger.debug("cmd wait")
        try:
            returncode = process.wait(timeout=round_.remaining())
        except subprocess.TimeoutExpired:
            timed_out = True
            terminate_process_group(process, self.config.kill_grace_s)
            returncode = process.wait()

        self._enter(RoundState.RECONCILING)
        if timed_out or round_.expired():
            self.logger.info(f"cmd done & canceled: {describe_exit(returncode)}")
            self._enter(RoundState.TIMED_OUT)
            raise RoundTimeoutError(
                f"deadline exceeded after {self.config.round_timeout_s:g}s"
            )
        if returncode != 0:
            self._enter(RoundState.FAILED)
            raise ProcessFailure(returncode)
        errors = [f"{d.name}: {d.error}" for d in drainers if d.error is not None]
        if errors:
            self._enter(RoundState.FAILED)
            raise StreamError(f"output incomplete ({'; '.join(errors)})")

        self._enter(RoundState.DONE)
        self.logger.debug("cmd done")
        return RoundResult(
            index=round_.index,
            returncode=returncode,
            elapsed_s=time.monotonic() - started,
            log_published=published,
            lines=sum(drainer.line_count for drainer in drainers),
        )

    @staticmethod
    def _join_all(drainers: list[StreamDrainer], deadline: Optional[float]) -> bool:
        for drainer in drainers:
            timeout = None if deadline is None else max(0.0, deadline - time.monotonic())
            if not drainer.join(timeout):
                return False
        return True


# ============================================================================
# Round Driver
# ============================================================================


class Executor(Protocol):
    def execute(self, round_: Round) -> RoundResult: ...


class RoundDriver:
    """Runs rounds back to back until one of them fails."""

    def __init__(self, executor: Executor, logger: Logger, round_timeout_s: float = ROUND_TIMEOUT_S):
        self.executor = executor
        self.logger = logger
        self.round_timeout_s = round_timeout_s

    def run(self, filter_: str) -> NoReturn:
        """Loop forever. The first failing round's error is re-raised."""
        index = 0
        while True:
            self.logger.info(f"round {index}")
            round_ = Round(index, filter_, time.monotonic() + self.round_timeout_s)
            try:
                self.executor.execute(round_)
            except WaterhammerError as e:
                self.logger.error(f"round {index} -> Error: {e}")
                raise
            self.logger.success(f"round {index} -> OK")
            index += 1


# ============================================================================
# CLI
# ============================================================================


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments. At most one filter is accepted."""
    parser = argparse.ArgumentParser(
        description="Run a test command until it fails - for reproducing flaky tests"
    )
    parser.add_argument(
        "filter",
        nargs="*",
        help="Regular expression matched against full test names (default: all tests)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help=f"Configuration file (default: {CONFIG_FILE} if present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show harness trace output",
    )
    args = parser.parse_args(argv)
    if len(args.filter) > 1:
        raise UsageError("too many arguments")
    args.filter = args.filter[0] if args.filter else ""
    return args


def main(argv: Optional[list[str]] = None) -> int:
    """Run rounds until one fails. Returns the process exit code."""
    try:
        args = parse_args(argv)
    except UsageError as e:
        Logger().error(f"Error: {e}")
        return 1

    config = ConfigManager.load(args.config)
    level = LogLevel.DEBUG if args.verbose or config.verbose else LogLevel.INFO
    logger = Logger(level)

    logger.banner("WATERHAMMER - run tests until they fail")
    logger.debug("start")
    if args.filter:
        logger.info(f'filter: "{args.filter}"')
    else:
        logger.info("filter: all tests")
    logger.debug(f"log: {config.log_path}, round timeout: {config.round_timeout_s:g}s")

    driver = RoundDriver(RoundExecutor(config, logger), logger, config.round_timeout_s)
    try:
        driver.run(args.filter)
    except WaterhammerError as e:
        logger.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
