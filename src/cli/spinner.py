"""Terminal spinner shown while the AI extraction call runs."""

import sys
import threading


class Spinner:
    """
    Context manager that animates a status line on stderr.

    Does nothing when stderr is not a terminal, so piped output and
    captured test output stay clean.

    Usage:
        with Spinner("Extracting"):
            result = parser.parse(text)
    """

    FRAMES = [".", "..", "...", "   "]
    INTERVAL = 0.4

    def __init__(self, message: str = "Extracting", stream=None):
        self.message = message
        self.stream = stream or sys.stderr
        self.enabled = bool(getattr(self.stream, "isatty", lambda: False)())
        self._stop = threading.Event()
        self._thread = None

    def _spin(self):
        idx = 0
        while not self._stop.is_set():
            frame = self.FRAMES[idx % len(self.FRAMES)]
            self.stream.write(f"\r  {self.message}{frame}   ")
            self.stream.flush()
            idx += 1
            self._stop.wait(self.INTERVAL)
        self.stream.write(f"\r{' ' * (len(self.message) + 12)}\r")
        self.stream.flush()

    def __enter__(self):
        if self.enabled:
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
