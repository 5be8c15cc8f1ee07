import io

import pytest

from httpemit import (
	BufferedTransport,
	HTTPResponse,
	HeadersAlreadySent,
	InvalidChunkSize,
	IteratorBody,
	OutputAlreadySent,
	ResponseBody,
	ResponseEmitter,
	StreamBody,
)


class ChunkRecorder(BufferedTransport):
	"""Records the payload of each flush, so that chunking can be checked."""

	def __init__(self) -> None:
		super().__init__()
		self.chunks: list[bytes] = []

	def send(self, data: bytes) -> None:
		super().send(data)
		self.chunks.append(data)


class EmptySeekableBody(ResponseBody):
	"""A body that claims to have data once, but reads nothing."""

	def __init__(self) -> None:
		self.checks: list[bool] = [False, True]
		self.seeks: list[int] = []

	def isReadable(self) -> bool:
		return True

	def isSeekable(self) -> bool:
		return True

	def eof(self) -> bool:
		return self.checks.pop(0) if len(self.checks) > 1 else self.checks[0]

	def read(self, size: int = -1) -> bytes:
		return b""

	def seek(self, offset: int) -> None:
		self.seeks.append(offset)


class UnreadableBody(EmptySeekableBody):
	def isReadable(self) -> bool:
		return False

	def read(self, size: int = -1) -> bytes:
		raise AssertionError("An unreadable body must not be read")


def emit(response: HTTPResponse, chunkSize: int | None = 8192, body: bool = True):
	transport = ChunkRecorder()
	ResponseEmitter(transport, chunkSize).emit(response, body)
	return transport


# -----------------------------------------------------------------------------
# STATUS
# -----------------------------------------------------------------------------


def test_default_response():
	t = emit(HTTPResponse.Create())
	assert t.status == 200
	assert t.statusLine == "HTTP/1.1 200 OK"
	assert t.headersList() == []
	assert t.output == b""
	assert t.flushes == 0


@pytest.mark.parametrize(
	"status,message,expected",
	[
		(599, "I'm a teapot", "HTTP/1.1 599 I'm a teapot"),
		(599, "", "HTTP/1.1 599"),
		(200, "OK", "HTTP/1.1 200 OK"),
		(404, "Not Found", "HTTP/1.1 404 Not Found"),
		(599, " ", "HTTP/1.1 599  "),
	],
)
def test_status_line(status, message, expected):
	t = emit(HTTPResponse.Create(status=status, message=message))
	assert t.status == status
	assert t.statusLine == expected


def test_custom_status_and_headers():
	t = emit(
		HTTPResponse.Create(
			"Page not found", headers={"X-Test": "test"}, status=404, protocol="2"
		),
		2,
	)
	assert t.status == 404
	assert t.statusLine == "HTTP/2 404 Not Found"
	assert t.headersList() == ["X-Test: test"]
	assert t.output == b"Page not found"


# -----------------------------------------------------------------------------
# HEADERS
# -----------------------------------------------------------------------------


def test_normalized_header_names():
	t = emit(
		HTTPResponse.Create(
			headers={"CONTENT-Type": "text/plain", "X-Custom-HEADER": "value"}
		)
	)
	assert t.headersList() == ["Content-Type: text/plain", "X-Custom-Header: value"]


def test_multiple_set_cookie():
	t = emit(
		HTTPResponse.Create(headers={"Set-Cookie": ["cookie1=value1", "cookie2=value2"]})
	)
	assert t.headersList() == [
		"Set-Cookie: cookie1=value1",
		"Set-Cookie: cookie2=value2",
	]


def test_set_cookie_with_comma_is_not_joined():
	cookies = [
		"a=1; Expires=Wed, 21 Oct 2026 07:28:00 GMT",
		"b=2; Expires=Thu, 22 Oct 2026 07:28:00 GMT",
		"c=3",
	]
	t = emit(HTTPResponse.Create(headers={"set-COOKIE": cookies}))
	assert t.headersList() == [f"Set-Cookie: {_}" for _ in cookies]


def test_headers_and_cookies_preserved():
	response = (
		HTTPResponse.Create("Contents", headers={"X-Test": ["test-1"]})
		.withAddedHeader("Set-Cookie", "key-1=value-1")
		.withAddedHeader("Set-Cookie", "key-2=value-2")
	)
	t = emit(response)
	assert t.headersList() == [
		"X-Test: test-1",
		"Set-Cookie: key-1=value-1",
		"Set-Cookie: key-2=value-2",
	]
	assert t.output == b"Contents"


def test_multiple_header_types():
	response = (
		HTTPResponse.Create(headers={"Content-Type": ["text/plain"]})
		.withAddedHeader("Set-Cookie", "key-1=value-1")
		.withAddedHeader("X-Custom", "value1")
		.withAddedHeader("x-custom", "value2")
	)
	assert emit(response).headersList() == [
		"Content-Type: text/plain",
		"Set-Cookie: key-1=value-1",
		"X-Custom: value1, value2",
	]


# -----------------------------------------------------------------------------
# BODY
# -----------------------------------------------------------------------------


@pytest.mark.parametrize(
	"status,message",
	[
		(100, "Continue"),
		(101, "Switching Protocols"),
		(102, "Processing"),
		(103, "Early Hints"),
		(204, "No Content"),
		(304, "Not Modified"),
	],
)
def test_no_body_status(status, message):
	response = HTTPResponse.Create(
		"This content should not be emitted",
		headers={"Content-Type": ["text/plain"]},
		status=status,
		message=message,
	)
	for body in (True, False):
		t = emit(response, body=body)
		assert t.status == status
		assert t.statusLine == f"HTTP/1.1 {status} {message}"
		assert t.headersList() == ["Content-Type: text/plain"]
		assert t.output == b""
		assert t.flushes == 0


def test_suppressed_body():
	t = emit(
		HTTPResponse.Create(
			"Page not found", headers={"X-Test": "test"}, status=404, protocol="2"
		),
		body=False,
	)
	assert t.statusLine == "HTTP/2 404 Not Found"
	assert t.headersList() == ["X-Test: test"]
	assert t.output == b""


def test_suppressed_body_with_range():
	t = emit(
		HTTPResponse.Create("Contents", headers={"Content-Range": "bytes 0-3/8"}),
		1,
		body=False,
	)
	assert t.headersList() == ["Content-Range: bytes 0-3/8"]
	assert t.output == b""


def test_range_with_small_buffer():
	t = emit(
		HTTPResponse.Create("Contents", headers={"Content-Range": "bytes 0-3/8"}), 1
	)
	assert t.status == 200
	assert t.statusLine == "HTTP/1.1 200 OK"
	assert t.headersList() == ["Content-Range: bytes 0-3/8"]
	assert t.output == b"Cont"
	assert t.chunks == [b"C", b"o", b"n", b"t"]


@pytest.mark.parametrize(
	"expected,chunkSize,first,last",
	[
		([b"C", b"o", b"n", b"t", b"e", b"n", b"t", b"s"], 1, 0, 8),
		([b"C", b"o", b"n", b"t", b"e", b"n", b"t", b"s"], 1, None, None),
		([b"Co", b"nt", b"en", b"ts"], 2, None, None),
		([b"Co", b"nt"], 2, 0, 3),
		([b"Con", b"ten", b"ts"], 3, None, None),
		([b"Con"], 8192, 0, 2),
		([b"Content", b"s"], 7, 0, 7),
		([b"Content", b"s"], 7, None, None),
		([b"Contents"], 8192, 0, 8),
		([b"Contents"], 8192, None, None),
		([b"Contents"], None, None, None),
		([b"Cont"], None, 0, 3),
		([b"nte", b"nt"], 3, 2, 6),
		([b"ts"], 2, 6, 8),
	],
)
def test_body_chunks(expected, chunkSize, first, last):
	headers = {} if first is None else {"Content-Range": f"bytes {first}-{last}/*"}
	t = emit(HTTPResponse.Create("Contents", headers=headers), chunkSize)
	assert t.chunks == expected
	assert t.output == b"".join(expected)
	assert t.headersList() == [f"{k}: {v}" for k, v in headers.items()]


def test_empty_body():
	t = emit(HTTPResponse.Create(b""))
	assert t.output == b""
	assert t.flushes == 0


def test_range_without_body():
	t = emit(HTTPResponse.Create(headers={"Content-Range": "bytes 0-3/8"}))
	assert t.headersList() == ["Content-Range: bytes 0-3/8"]
	assert t.output == b""


def test_empty_seekable_stream_flushes_once():
	body = EmptySeekableBody()
	t = emit(HTTPResponse.Create(body, headers={"Content-Range": "bytes 0-3/8"}))
	assert body.seeks == [0]
	assert t.output == b""
	assert t.flushes == 1


def test_range_seeks_to_first():
	body = StreamBody.FromBytes(b"Contents")
	body.read(5)
	t = emit(HTTPResponse.Create(body, headers={"Content-Range": "bytes 1-2/8"}))
	assert t.output == b"on"


def test_full_body_from_current_position():
	body = StreamBody.FromBytes(b"Contents")
	body.read(4)
	assert emit(HTTPResponse.Create(body), 3).output == b"ents"


def test_range_on_unseekable_body():
	# Without seeking, the range is taken from the current position
	body = IteratorBody([b"Con", b"tents"])
	t = emit(HTTPResponse.Create(body, headers={"Content-Range": "bytes 2-6/*"}), 2)
	assert t.chunks == [b"Co", b"nt", b"e"]


def test_iterator_body():
	t = emit(HTTPResponse.Create(_ for _ in [b"Con", "ten", b"ts"]), 5)
	assert t.chunks == [b"Conte", b"nts"]


def test_invalid_range_streams_full_body():
	t = emit(
		HTTPResponse.Create("Contents", headers={"Content-Range": "bytes 5-2/8"}), 3
	)
	assert t.headersList() == ["Content-Range: bytes 5-2/8"]
	assert t.output == b"Contents"


def test_non_readable_body(tmp_path):
	with open(tmp_path / "out.bin", "wb") as f:
		response = HTTPResponse.Create(f)
		assert response.body is not None and not response.body.isReadable()
		for chunkSize in (None, 8192):
			assert emit(response, chunkSize).output == b""
		t = emit(response.withHeader("Content-Range", "bytes 0-3/8"))
		assert t.headersList() == ["Content-Range: bytes 0-3/8"]
		assert t.output == b""


def test_unreadable_body_is_never_read():
	body = UnreadableBody()
	t = emit(HTTPResponse.Create(body, headers={"Content-Range": "bytes 0-3/8"}))
	assert body.seeks == []
	assert t.flushes == 0


def test_body_is_not_closed():
	stream = io.BytesIO(b"Contents")
	emit(HTTPResponse.Create(stream))
	assert not stream.closed


# -----------------------------------------------------------------------------
# PRECONDITIONS
# -----------------------------------------------------------------------------


@pytest.mark.parametrize("chunkSize", [0, -1])
def test_invalid_chunk_size(chunkSize):
	with pytest.raises(InvalidChunkSize) as e:
		ResponseEmitter(BufferedTransport(), chunkSize)
	assert str(e.value) == (
		f"Buffer length for `ResponseEmitter` must be greater than zero; received `{chunkSize}`."
	)
	assert isinstance(e.value, ValueError)


def test_headers_already_sent():
	transport = BufferedTransport()
	transport.flush()
	with pytest.raises(HeadersAlreadySent) as e:
		ResponseEmitter(transport).emit(HTTPResponse.Create("Contents"))
	assert str(e.value) == "Unable to emit response; headers already sent."
	assert transport.statusLine is None
	assert transport.output == b""


def test_output_already_sent():
	transport = BufferedTransport()
	transport.write(b"buffer content")
	with pytest.raises(OutputAlreadySent) as e:
		ResponseEmitter(transport).emit(HTTPResponse.Create("Contents"))
	assert (
		str(e.value) == "Unable to emit response; output has been emitted previously."
	)
	assert transport.statusLine is None
	assert transport.headers == []


def test_headers_checked_before_output():
	transport = BufferedTransport()
	transport.flush()
	transport.write(b"buffer content")
	with pytest.raises(HeadersAlreadySent):
		ResponseEmitter(transport).emit(HTTPResponse.Create())


def test_empty_pending_output():
	transport = BufferedTransport()
	transport.write(b"")
	ResponseEmitter(transport).emit(HTTPResponse.Create("Contents"))
	assert transport.output == b"Contents"


def test_emit_twice():
	transport = BufferedTransport()
	emitter = ResponseEmitter(transport)
	emitter.emit(HTTPResponse.Create("Contents"))
	with pytest.raises(HeadersAlreadySent):
		emitter.emit(HTTPResponse.Create("Contents"))
	assert transport.output == b"Contents"


# EOF
