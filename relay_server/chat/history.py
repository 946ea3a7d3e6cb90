"""
Chat history sinks.

Append-only logs of every delivered chat line and every join/leave
announcement. The broadcast engine calls ``append`` while holding the
registry lock, so call order is file order.
"""

from collections import deque
from pathlib import Path
from typing import List, Optional, TextIO

from relay_common.constants import MAX_MEMORY_HISTORY
from relay_server.chat.errors import HistoryWriteError


class HistorySink:
    """Interface of a history log."""

    def append(self, line: str):
        raise NotImplementedError

    def close(self):
        pass


class FileHistorySink(HistorySink):
    """
    History kept in a UTF-8 text file, one line per event.

    The file is opened in append mode on the first write and kept open;
    every line is flushed before ``append`` returns. ``close`` releases the
    handle, and a later ``append`` reopens the file.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._file: Optional[TextIO] = None

    def append(self, line: str):
        try:
            if self._file is None:
                self._file = open(self.path, 'a', encoding='utf-8')
            self._file.write(line + '\n')
            self._file.flush()
        except OSError as e:
            raise HistoryWriteError(f"Failed to write to history file {self.path}: {e}") from e

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None


class MemoryHistorySink(HistorySink):
    """History kept in memory, limited to the most recent lines."""

    def __init__(self, maxlen: int = MAX_MEMORY_HISTORY):
        self._lines = deque(maxlen=maxlen)

    def append(self, line: str):
        self._lines.append(line)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)
