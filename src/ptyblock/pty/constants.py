"""Shared constants for pty capture."""

# Bytes requested from the controller per read.
DEFAULT_CHUNK_SIZE = 1024

# Seconds the poll drain waits for more bytes before deciding the stream is done.
DEFAULT_IDLE_TIMEOUT = 0.05

# Seconds the select drain waits for readiness before giving up on end-of-stream.
DEFAULT_SELECT_TIMEOUT = 5.0

# Seconds to wait for injected input to reach the device's line discipline.
INPUT_SETTLE_TIMEOUT = 1.0
