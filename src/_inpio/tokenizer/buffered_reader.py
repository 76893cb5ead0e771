from dataclasses import dataclass

from _inpio.tokenizer.errors import EndOfInput, NoProgressError

DEFAULT_BUFFER_SIZE = 10240
DEFAULT_MAX_EMPTY_READS = 100


@dataclass
class Span:
    """
    A half-open range [start, end) of bytes in the buffer of a
    BufferedReader.
    """

    start: int = 0
    end: int = 0

    def __len__(self):
        return max(0, self.end - self.start)

    def reset(self, position):
        self.start = position
        self.end = position

    def rebase(self, offset):
        self.start -= offset
        self.end -= offset


def read_at_least_one_byte(stream, size, max_empty_reads):
    """
    Read up to size bytes from stream, retrying reads which return None
    (no data available yet).

    :returns: The bytes read, b"" at end of stream.
    :raises NoProgressError: If max_empty_reads reads in succession
        returned None.
    """
    for _ in range(max_empty_reads):
        chunk = stream.read(size)
        if chunk is not None:
            return chunk
    raise NoProgressError(
        f"Stream returned no data {max_empty_reads} times in succession"
    )


class BufferedReader:
    """
    Delivers single bytes from a stream to a tokenizer, reading the stream in
    chunks into a reusable buffer.

    buf[raw.start:raw.end] holds the raw bytes of the token currently being
    scanned and buf[raw.end:] the buffered input not yet consumed. When the
    buffered input is exhausted, the bytes before raw.start are discarded and
    every tracked span is moved accordingly, so spans stay valid for as long
    as they lie within the current token.

    >>> reader = BufferedReader(io.BytesIO(b"*Node"))
    >>> reader.read_byte()
    42
    >>> reader.raw
    Span(start=0, end=1)

    """

    def __init__(
        self,
        stream,
        buffer_size=DEFAULT_BUFFER_SIZE,
        encoding="utf-8",
        errors="surrogateescape",
        max_empty_reads=DEFAULT_MAX_EMPTY_READS,
    ):
        """
        :param stream: Any object with a read(size) method returning bytes
            (or str, which is encoded with the given encoding). b"" signals end
            of stream and None that no data is available yet.
        :param buffer_size: The initial capacity of the buffer. The buffer
            grows if a single token needs more than half of it.
        :param encoding: Encoding used for text streams.
        :param errors: Error handler used when encoding text streams.
        :param max_empty_reads: Number of successive reads returning None
            before giving up with NoProgressError.
        """
        if buffer_size < 1:
            raise ValueError(f"buffer_size has to be positive, got {buffer_size}")
        if max_empty_reads < 1:
            raise ValueError(
                f"max_empty_reads has to be positive, got {max_empty_reads}"
            )
        self.stream = stream
        self.encoding = encoding
        self.errors = errors
        self.max_empty_reads = max_empty_reads
        self.capacity = buffer_size
        self.raw = Span()
        # The error that ended reading from stream, either EndOfInput or
        # whatever stream.read raised. Only surfaced once buffered bytes
        # are used up.
        self.read_err = None
        self._buf = bytearray()
        self._tracked = []
        self._discarded = 0

    def track(self, *spans):
        """
        Register spans that should be moved along with the buffer contents.
        """
        self._tracked.extend(spans)

    def tell(self):
        """
        :returns: The position of raw.end in the stream.
        """
        return self._discarded + self.raw.end

    def read_byte(self):
        """
        :returns: The next byte as an int and advances raw.end, or None if the
            stream is exhausted or failed, see read_err.
        """
        if self.raw.end >= len(self._buf) and not self._fill():
            return None
        value = self._buf[self.raw.end]
        self.raw.end += 1
        return value

    def unread(self, count=1):
        self.raw.end -= count

    def value(self, span):
        return bytes(self._buf[span.start : span.end])

    def _compact(self):
        discard = self.raw.start
        live = len(self._buf) - discard
        if 2 * live > self.capacity:
            self.capacity *= 2
        if discard:
            del self._buf[:discard]
            self._discarded += discard
            self.raw.rebase(discard)
            for span in self._tracked:
                span.rebase(discard)

    def _fill(self):
        if self.read_err is not None:
            return False
        self._compact()
        room = max(1, self.capacity - len(self._buf))
        try:
            chunk = read_at_least_one_byte(self.stream, room, self.max_empty_reads)
            if isinstance(chunk, str):
                chunk = chunk.encode(self.encoding, self.errors)
        except Exception as err:
            # Whatever the stream raised is handed on unchanged
            self.read_err = err
            return False
        if not chunk:
            self.read_err = EndOfInput(f"End of input at byte {self.tell()}")
            return False
        self._buf.extend(chunk)
        return True
