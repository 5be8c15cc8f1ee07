from abc import ABC, abstractmethod
from typing import IO, Any

from mypy_extensions import mypyc_attr

from .config import DEFAULT_PROTOCOL
from .http.model import HeadersAlreadySent
from .utils.io import EOL, HEADER_ENCODING

# --
# == Transports
#
# A transport is the host's sink for one response: it takes a status, header
# lines and body bytes, and commits them to the client. The emitter only
# talks to the transport through the `Transport` interface, so that the same
# emission logic works on top of a socket, a CGI-like standard output or an
# in-memory buffer.


@mypyc_attr(allow_interpreted_subclasses=True)
class Transport(ABC):
	"""The primitives the emitter needs from the host."""

	@abstractmethod
	def hasSentHeaders(self) -> bool:
		"""Tells if the status and headers have already been committed."""

	@abstractmethod
	def hasPendingOutput(self) -> bool:
		"""Tells if some output is waiting in the transport's buffer."""

	@abstractmethod
	def setStatus(self, status: int, line: str) -> None: ...

	@abstractmethod
	def addHeader(self, name: str, value: str) -> None:
		"""Adds a header line. Adding the same name twice produces two lines."""

	@abstractmethod
	def write(self, data: bytes) -> None: ...

	@abstractmethod
	def flush(self) -> None: ...


class BufferedTransport(Transport):
	"""A transport that works like an output buffer: writes are held until
	the next flush, and the first flush commits the status and headers.

	This one keeps everything in memory, which makes it suitable for
	capturing a response."""

	def __init__(self, pending: bytes = b"", headersSent: bool = False) -> None:
		self.status: int | None = None
		self.statusLine: str | None = None
		self.headers: list[tuple[str, str]] = []
		# Output written before the response, as a host output buffer would hold
		self.buffer: bytearray = bytearray(pending)
		self.sent: bytearray = bytearray()
		self.headersSent: bool = headersSent
		self.flushes: int = 0

	def hasSentHeaders(self) -> bool:
		return self.headersSent

	def hasPendingOutput(self) -> bool:
		return len(self.buffer) > 0

	def setStatus(self, status: int, line: str) -> None:
		if self.headersSent:
			raise HeadersAlreadySent()
		self.status = status
		self.statusLine = line

	def addHeader(self, name: str, value: str) -> None:
		if self.headersSent:
			raise HeadersAlreadySent()
		self.headers.append((name, value))

	def write(self, data: bytes) -> None:
		self.buffer += data

	def flush(self) -> None:
		self.flushes += 1
		if not self.headersSent:
			self.headersSent = True
			self.commit()
		data: bytes = bytes(self.buffer)
		self.buffer.clear()
		self.send(data)

	def end(self) -> None:
		"""Ends the response, committing the head if nothing else did."""
		if self.buffer or not self.headersSent:
			self.flush()

	def commit(self) -> None:
		"""Called once, when the status and headers are committed."""

	def send(self, data: bytes) -> None:
		self.sent += data

	@property
	def output(self) -> bytes:
		"""The body bytes flushed so far."""
		return bytes(self.sent)

	def headersList(self) -> list[str]:
		return [f"{k}: {v}" for k, v in self.headers]

	def head(self) -> bytes:
		"""Serializes the status line and headers."""
		lines: list[str] = self.headersList()
		lines.insert(0, self.statusLine or f"HTTP/{DEFAULT_PROTOCOL} 200 OK")
		lines.append("")
		lines.append("")
		return EOL.join(_.encode(HEADER_ENCODING) for _ in lines)

	def __enter__(self) -> "BufferedTransport":
		return self

	def __exit__(self, kind: Any, *args: Any) -> None:
		# A failed emission leaves the transport as it is
		if kind is None:
			self.end()


class StreamTransport(BufferedTransport):
	"""Writes the response as an HTTP/1.x message onto a binary writer,
	such as a socket file or `sys.stdout.buffer`."""

	def __init__(self, writer: IO[bytes], pending: bytes = b""):
		super().__init__(pending)
		self.writer: IO[bytes] = writer

	def commit(self) -> None:
		self.writer.write(self.head())

	def send(self, data: bytes) -> None:
		if data:
			self.writer.write(data)
		self.writer.flush()


# EOF
