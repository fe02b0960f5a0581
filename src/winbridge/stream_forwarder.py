"""
Stream forwarding between the caller and a piped child

Three independent forwarders run for the lifetime of a piped child:
    caller stdin  → child stdin   (stopped when the child exits)
    child stdout  → caller stdout (joined after the child exits)
    child stderr  → caller stderr (joined after the child exits)

Chunks are forwarded as soon as they are readable and the sink is flushed
after every chunk, so output reaches the caller while the child is still
running and a child that fills a pipe buffer before reading input never
blocks on the bridge. The forwarders share nothing but the child's pipes.

INPUT FORWARDING:
The caller's stdin outlives the child, so the stdin forwarder never blocks
in read(): it waits for the source to become readable (select, with a poll
interval) and checks for stop() before every read. Input that arrives after
the child exited stays unread for whoever reads the caller's stdin next.
"""
import logging
import select
import threading
from typing import BinaryIO, Optional

from . import constants


class StreamForwarder(threading.Thread):
    """Copy bytes from source to sink until EOF or stop()"""

    def __init__(self, name: str, source: BinaryIO, sink: BinaryIO,
                 close_sink: bool = False, daemon: bool = False,
                 chunk_size: int = constants.FORWARD_CHUNK_SIZE,
                 poll_interval: Optional[float] = None,
                 logger: logging.Logger = None):
        """
        Args:
            name: stream name (stdin/stdout/stderr)
            close_sink: close the sink when forwarding ends
            poll_interval: wait for readability in steps of this many
                seconds instead of blocking in read() (stoppable source)
        """
        super().__init__(name=f"winbridge-{name}", daemon=daemon)
        self.stream_name = name
        self.source = source
        self.sink = sink
        self.close_sink = close_sink
        self.chunk_size = chunk_size
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger('StreamForwarder')
        self.bytes_forwarded = 0
        self.error: Optional[BaseException] = None
        self._stop_requested = threading.Event()

    def stop(self):
        """Forward nothing more: takes effect before the next read"""
        self._stop_requested.set()

    @property
    def stopped(self) -> bool:
        return self._stop_requested.is_set()

    def run(self):
        # read1 returns whatever is available instead of waiting for a full chunk
        read = getattr(self.source, 'read1', None) or self.source.read
        try:
            while self._wait_readable():
                chunk = read(self.chunk_size)
                if not chunk:
                    break
                self.sink.write(chunk)
                self.sink.flush()
                self.bytes_forwarded += len(chunk)
        except (OSError, ValueError) as e:
            # Peer went away (child closed stdin, caller closed stdout)
            self.error = e
            self.logger.debug(f"{self.name} stopped: {e}")
        finally:
            if self.close_sink:
                self._close_sink()
        self.logger.debug(f"{self.name} forwarded {self.bytes_forwarded} bytes")

    def _wait_readable(self) -> bool:
        """
        Returns:
            True when a read may proceed, False once stop() was called
        """
        if self.poll_interval is None:
            return not self.stopped
        try:
            fd = self.source.fileno()
        except (OSError, ValueError):
            # In-memory source: read() never blocks
            return not self.stopped

        while not self.stopped:
            readable, _, _ = select.select([fd], [], [], self.poll_interval)
            if readable:
                return not self.stopped
        return False

    def _close_sink(self):
        try:
            self.sink.close()
        except OSError as e:
            self.logger.debug(f"{self.name} close failed: {e}")
