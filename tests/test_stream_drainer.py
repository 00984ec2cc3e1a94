"""Tests for draining one output pipe."""
import os
import threading
import time

import pytest


@pytest.fixture
def persister(logger, log_path):
    import waterhammer

    persister = waterhammer.LogPersister(log_path, logger)
    persister.open()
    yield persister
    persister.close()


@pytest.fixture
def pipe():
    """A pipe as (binary reader, write fd)."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    state = {"write_fd": write_fd}
    yield reader, state
    reader.close()
    if state["write_fd"] is not None:
        os.close(state["write_fd"])


def close_writer(state):
    os.close(state["write_fd"])
    state["write_fd"] = None


def make_drainer(name, reader, persister, logger, cancel=None):
    import waterhammer

    return waterhammer.StreamDrainer(
        name,
        reader,
        persister,
        logger,
        waterhammer.DEFAULT_MARKERS,
        cancel or threading.Event(),
        poll_interval_s=0.02,
    )


class TestStreamDrainer:
    """Tests for StreamDrainer."""

    def test_tees_bytes_faithfully(self, pipe, persister, logger):
        """Every byte, including a final unterminated line, reaches the log."""
        reader, state = pipe
        payload = b"=== RUN   TestA\nnoise \xff\xfe\r\n--- PASS: TestA (0.00s)\nPASS"
        os.write(state["write_fd"], payload)
        close_writer(state)

        drainer = make_drainer("stdout", reader, persister, logger)
        drainer.start()

        assert drainer.join(5)
        persister.close()
        assert persister.swap_path.read_bytes() == payload
        assert drainer.line_count == 4
        assert drainer.error is None
        assert not drainer.cancelled

    def test_echoes_only_interesting_lines(self, pipe, persister, logger, output):
        """Marker lines are printed, other lines are not."""
        reader, state = pipe
        os.write(state["write_fd"], b"=== RUN   TestA\nchatty output\n--- FAIL: TestA (0.00s)\nFAIL\n")
        close_writer(state)

        drainer = make_drainer("stdout", reader, persister, logger)
        drainer.start()
        drainer.join(5)

        printed = output.getvalue().splitlines()
        assert printed == ["=== RUN   TestA", "--- FAIL: TestA (0.00s)"]

    def test_no_tests_message(self, pipe, persister, logger, output):
        """The no-tests warning is summarised."""
        reader, state = pipe
        os.write(state["write_fd"], b"testing: warning: no tests to run\n")
        close_writer(state)

        drainer = make_drainer("stdout", reader, persister, logger)
        drainer.start()
        drainer.join(5)

        assert output.getvalue() == "NO TESTS RUN\n"

    def test_stderr_lines_are_prefixed(self, pipe, persister, logger, output):
        """Echoed stderr lines name their source."""
        reader, state = pipe
        os.write(state["write_fd"], b"    foo_test.go:3: bad\n")
        close_writer(state)

        drainer = make_drainer("stderr", reader, persister, logger)
        drainer.start()
        drainer.join(5)

        assert "(stderr)     foo_test.go:3: bad" in output.getvalue()

    def test_join_times_out_while_pipe_open(self, pipe, persister, logger):
        """join() reports False while the writer keeps the pipe open."""
        reader, state = pipe
        cancel = threading.Event()
        drainer = make_drainer("stdout", reader, persister, logger, cancel)
        drainer.start()

        assert drainer.join(0.2) is False
        cancel.set()
        assert drainer.join(5) is True

    def test_cancel_aborts_blocked_read(self, pipe, persister, logger):
        """Setting the cancel event stops a drainer whose pipe never closes."""
        reader, state = pipe
        os.write(state["write_fd"], b"=== RUN   TestA\npartial")
        cancel = threading.Event()
        drainer = make_drainer("stdout", reader, persister, logger, cancel)
        drainer.start()
        for _ in range(250):
            if drainer.line_count:
                break
            time.sleep(0.02)

        cancel.set()

        assert drainer.join(5)
        assert drainer.cancelled
        assert drainer.done.is_set()
        persister.close()
        assert persister.swap_path.read_bytes().startswith(b"=== RUN   TestA\n")

    def test_partial_line_reaches_log_immediately(self, pipe, persister, logger):
        """Bytes without a trailing newline are on disk while the pipe is open."""
        reader, state = pipe
        os.write(state["write_fd"], b"ok 10%... 20%... 30%")
        cancel = threading.Event()
        drainer = make_drainer("stdout", reader, persister, logger, cancel)
        drainer.start()

        for _ in range(250):
            if persister.swap_path.read_bytes():
                break
            time.sleep(0.02)

        assert persister.swap_path.read_bytes() == b"ok 10%... 20%... 30%"
        assert drainer.line_count == 0
        cancel.set()
        assert drainer.join(5)

    def test_overlong_line_is_not_buffered_forever(self, pipe, persister, logger, output):
        """Newline-free output past the line limit is classified in pieces."""
        import waterhammer

        reader, state = pipe
        payload = b"--- FAIL" + b"x" * (waterhammer.MAX_LINE_BYTES + 10)
        drainer = make_drainer("stdout", reader, persister, logger)
        drainer.start()
        # Larger than a pipe buffer, so the drainer must already be reading
        with os.fdopen(state["write_fd"], "wb") as writer:
            state["write_fd"] = None
            writer.write(payload)

        assert drainer.join(5)
        persister.close()
        assert persister.swap_path.read_bytes() == payload
        assert drainer._pending == b""
        assert "--- FAIL" in output.getvalue()

    def test_read_error_is_recorded_not_raised(self, pipe, persister, logger, output):
        """A read failure is logged and completion is still signalled."""
        reader, state = pipe
        close_writer(state)
        reader.close()

        drainer = make_drainer("stdout", reader, persister, logger)
        drainer.start()

        assert drainer.join(5)
        assert drainer.error is not None
        assert "scanner error" in output.getvalue()

    def test_two_drainers_share_one_log(self, persister, logger):
        """stdout and stderr drainers append to the same swap file."""
        pipes = [os.pipe(), os.pipe()]
        readers = [os.fdopen(r, "rb") for r, _ in pipes]
        drainers = [
            make_drainer(name, reader, persister, logger)
            for name, reader in zip(("stdout", "stderr"), readers)
        ]
        for drainer in drainers:
            drainer.start()
        for i, (_, write_fd) in enumerate(pipes):
            os.write(write_fd, b"".join(b"s%d line %d\n" % (i, n) for n in range(200)))
            os.close(write_fd)

        assert all(drainer.join(5) for drainer in drainers)
        for reader in readers:
            reader.close()
        persister.close()

        lines = persister.swap_path.read_bytes().splitlines()
        assert len(lines) == 400
        assert [l for l in lines if l.startswith(b"s0")] == [b"s0 line %d" % n for n in range(200)]
        assert [l for l in lines if l.startswith(b"s1")] == [b"s1 line %d" % n for n in range(200)]
