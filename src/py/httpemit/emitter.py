from .config import EMIT_CHUNK_SIZE, LOG_EMISSION
from .http.body import ResponseBody
from .http.model import (
	HTTPResponse,
	HeadersAlreadySent,
	InvalidChunkSize,
	OutputAlreadySent,
	headername,
)
from .http.range import ContentRange
from .http.status import NoBodyStatus
from .transport import Transport
from .utils.logging import debug, warning

# --
# == Response emitter
#
# Emits an `HTTPResponse` onto a `Transport`, once: status, then headers,
# then the body streamed in chunks of at most `chunkSize` bytes, flushing
# after each chunk. Partial responses with a `Content-Range` header only emit
# the slice of the body covered by the range.


class ResponseEmitter:
	__slots__ = ["transport", "chunkSize"]

	def __init__(self, transport: Transport, chunkSize: int | None = EMIT_CHUNK_SIZE):
		# A `None` chunk size reads the whole body (or range) at once.
		if chunkSize is not None and chunkSize < 1:
			raise InvalidChunkSize(self.__class__.__name__, chunkSize)
		self.transport: Transport = transport
		self.chunkSize: int | None = chunkSize

	def emit(self, response: HTTPResponse, body: bool = True) -> None:
		"""Emits the response onto the transport, raising `HeadersAlreadySent`
		or `OutputAlreadySent` if the transport is not pristine. Responses
		with a `1xx`, `204` or `304` status never get a body."""
		self.validate()
		self.emitStatusLine(response)
		self.emitHeaders(response)
		if body and not NoBodyStatus.Has(response.status):
			self.emitBody(response)

	def validate(self) -> None:
		if self.transport.hasSentHeaders():
			raise HeadersAlreadySent()
		if self.transport.hasPendingOutput():
			raise OutputAlreadySent()

	def emitStatusLine(self, response: HTTPResponse) -> None:
		self.transport.setStatus(response.status, str(response.statusLine))

	def emitHeaders(self, response: HTTPResponse) -> None:
		for name, values in response.headers.items():
			name = headername(name)
			# Cookie attributes may contain commas (`Expires`), so each cookie
			# needs its own line.
			if name == "Set-Cookie":
				for value in values:
					self.transport.addHeader(name, value)
			else:
				self.transport.addHeader(name, ", ".join(values))

	def emitBody(self, response: HTTPResponse) -> None:
		body: ResponseBody | None = response.body
		if body is None or not body.isReadable():
			if LOG_EMISSION and body is not None:
				debug("Response body is not readable, skipping it", Body=str(body))
			return
		header: str | None = response.headers.line("Content-Range")
		content_range = ContentRange.Parse(header) if header else None
		if content_range:
			self.emitBodyRange(body, content_range.first, content_range.last)
			return
		elif header and LOG_EMISSION:
			# NOTE: The header is still emitted as-is, only the body is sent
			# in full.
			warning("Unparsable Content-Range, sending the full body", Header=header)
		self.stream(body)

	def emitBodyRange(self, body: ResponseBody, first: int, last: int) -> None:
		if body.isSeekable():
			body.seek(first)
		self.stream(body, last - first + 1)

	def stream(self, body: ResponseBody, remaining: int | None = None) -> None:
		"""Streams the body from its current position, up to `remaining`
		bytes when given."""
		while not body.eof() and (remaining is None or remaining > 0):
			size: int
			if self.chunkSize is None:
				size = -1 if remaining is None else remaining
			elif remaining is None:
				size = self.chunkSize
			else:
				size = min(self.chunkSize, remaining)
			chunk: bytes = body.read(size)
			if chunk:
				self.transport.write(chunk)
				if remaining is not None:
					remaining -= len(chunk)
			self.transport.flush()


# EOF
