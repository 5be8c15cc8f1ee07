import inspect
import io
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, NamedTuple, Sequence, TypeAlias

from ..config import DEFAULT_PROTOCOL
from .body import IteratorBody, ResponseBody, StreamBody
from .status import HTTP_STATUS

# A header value is either a single value, or a sequence of values for
# repeated fields.
THeaderValue: TypeAlias = str | int | Sequence[str]

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


def headername(name: str, *, headers: dict[str, str] = {}) -> str:
	"""Normalizes the header name as `Kebab-Case`, so that `CONTENT-type`
	becomes `Content-Type`."""
	if name in headers:
		return headers[name]
	normalized: str = "-".join(_.capitalize() for _ in name.lower().split("-"))
	headers[name] = normalized
	return normalized


def headervalues(value: THeaderValue) -> tuple[str, ...]:
	"""Normalizes a header value to a non-empty tuple of strings."""
	if isinstance(value, str):
		return (value,)
	elif isinstance(value, int):
		return (str(value),)
	else:
		values = tuple(str(_) for _ in value)
		if not values:
			raise ValueError("Header value must have at least one value")
		return values


# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class Message(Enum):
	"""Error message templates."""

	BufferLengthInvalid = (
		"Buffer length for `{0}` must be greater than zero; received `{1}`."
	)
	HeadersAlreadySent = "Unable to emit response; headers already sent."
	OutputAlreadySent = "Unable to emit response; output has been emitted previously."

	def format(self, *args: Any) -> str:
		return self.value.format(*args)


class EmitterError(Exception):
	"""Base class for the errors raised by the emitter."""


class HeadersAlreadySent(EmitterError):
	"""The transport has already committed its status and headers."""

	def __init__(self, message: str = Message.HeadersAlreadySent.value):
		super().__init__(message)


class OutputAlreadySent(EmitterError):
	"""The transport already holds output that was not produced by the emitter."""

	def __init__(self, message: str = Message.OutputAlreadySent.value):
		super().__init__(message)


class InvalidChunkSize(EmitterError, ValueError):
	def __init__(self, owner: str, size: int):
		super().__init__(Message.BufferLengthInvalid.format(owner, size))
		self.size: int = size


# -----------------------------------------------------------------------------
#
# HEADERS
#
# -----------------------------------------------------------------------------


class HTTPHeaders:
	"""An immutable, ordered collection of multi-valued headers. Lookups
	are case insensitive, and a name keeps the position of its first
	occurrence."""

	__slots__ = ["_items"]

	@staticmethod
	def Create(
		headers: (
			"HTTPHeaders | Mapping[str, THeaderValue] | Iterable[tuple[str, THeaderValue]] | None"
		) = None,
	) -> "HTTPHeaders":
		if headers is None:
			return HTTPHeaders()
		elif isinstance(headers, HTTPHeaders):
			return headers
		res = HTTPHeaders()
		for name, value in (
			headers.items() if isinstance(headers, Mapping) else headers
		):
			res = res.add(name, value)
		return res

	def __init__(self, items: tuple[tuple[str, tuple[str, ...]], ...] = ()):
		self._items: tuple[tuple[str, tuple[str, ...]], ...] = items

	def _index(self, name: str) -> int:
		key: str = name.lower()
		for i, (k, _) in enumerate(self._items):
			if k.lower() == key:
				return i
		return -1

	def get(self, name: str) -> tuple[str, ...]:
		"""Returns the values for the given header, empty when absent."""
		i = self._index(name)
		return () if i < 0 else self._items[i][1]

	def line(self, name: str) -> str | None:
		"""Returns the values for the given header joined as a single line."""
		i = self._index(name)
		return None if i < 0 else ", ".join(self._items[i][1])

	def has(self, name: str) -> bool:
		return self._index(name) >= 0

	def set(self, name: str, value: THeaderValue) -> "HTTPHeaders":
		"""Returns a copy where the header's values are replaced."""
		values = headervalues(value)
		i = self._index(name)
		if i < 0:
			return HTTPHeaders(self._items + ((name, values),))
		else:
			return HTTPHeaders(
				self._items[:i] + ((name, values),) + self._items[i + 1 :]
			)

	def add(self, name: str, value: THeaderValue) -> "HTTPHeaders":
		"""Returns a copy where the values are appended to the header's."""
		values = headervalues(value)
		i = self._index(name)
		if i < 0:
			return HTTPHeaders(self._items + ((name, values),))
		else:
			k, existing = self._items[i]
			return HTTPHeaders(
				self._items[:i] + ((k, existing + values),) + self._items[i + 1 :]
			)

	def remove(self, name: str) -> "HTTPHeaders":
		i = self._index(name)
		return (
			self if i < 0 else HTTPHeaders(self._items[:i] + self._items[i + 1 :])
		)

	def items(self) -> Iterator[tuple[str, tuple[str, ...]]]:
		yield from self._items

	def __contains__(self, name: object) -> bool:
		return isinstance(name, str) and self.has(name)

	def __iter__(self) -> Iterator[str]:
		return (k for k, _ in self._items)

	def __len__(self) -> int:
		return len(self._items)

	def __eq__(self, other: object) -> bool:
		return isinstance(other, HTTPHeaders) and self._items == other._items

	def __hash__(self) -> int:
		return hash(self._items)

	def __repr__(self) -> str:
		return f"HTTPHeaders({dict(self._items)})"


# -----------------------------------------------------------------------------
#
# RESPONSE
#
# -----------------------------------------------------------------------------


class HTTPStatusLine(NamedTuple):
	"""Represents a response status line"""

	protocol: str
	status: int
	message: str

	def __str__(self) -> str:
		# An empty reason phrase is left out, along with its separator
		return (
			f"HTTP/{self.protocol} {self.status} {self.message}"
			if self.message
			else f"HTTP/{self.protocol} {self.status}"
		)


def asBody(content: Any) -> ResponseBody | None:
	"""Wraps the given content in the matching response body."""
	if content is None or isinstance(content, ResponseBody):
		return content
	elif isinstance(content, str) or isinstance(content, bytes):
		return StreamBody.FromBytes(content)
	elif isinstance(content, Path):
		return StreamBody.FromPath(content)
	elif isinstance(content, io.TextIOBase):
		# Bodies are bytes
		raise ValueError(
			f"Unsupported text stream {content}, open it in binary mode"
		)
	elif hasattr(content, "read") and hasattr(content, "readable"):
		return StreamBody(content)
	elif inspect.isgenerator(content) or isinstance(content, Iterable):
		return IteratorBody(content)
	else:
		raise ValueError(f"Unsupported content {type(content)}:{content}")


class HTTPResponse(NamedTuple):
	"""An immutable HTTP response, as consumed by the emitter."""

	status: int
	message: str
	headers: HTTPHeaders
	body: ResponseBody | None = None
	protocol: str = DEFAULT_PROTOCOL

	@staticmethod
	def Create(
		content: Any = None,
		contentType: str | None = None,
		headers: (
			HTTPHeaders | Mapping[str, THeaderValue] | Iterable[tuple[str, THeaderValue]] | None
		) = None,
		status: int = 200,
		message: str | None = None,
		protocol: str = DEFAULT_PROTOCOL,
	) -> "HTTPResponse":
		"""Factory method to create HTTP response objects."""
		h: HTTPHeaders = HTTPHeaders.Create(headers)
		if contentType is not None and h.line("Content-Type") != contentType:
			h = h.set("Content-Type", contentType)
		return HTTPResponse(
			status=status,
			message=HTTP_STATUS.get(status, "") if message is None else message,
			headers=h,
			body=asBody(content),
			protocol=protocol,
		)

	@property
	def statusLine(self) -> HTTPStatusLine:
		return HTTPStatusLine(self.protocol, self.status, self.message)

	def header(self, name: str) -> str | None:
		return self.headers.line(name)

	def withStatus(self, status: int, message: str | None = None) -> "HTTPResponse":
		return self._replace(
			status=status,
			message=HTTP_STATUS.get(status, "") if message is None else message,
		)

	def withHeader(self, name: str, value: THeaderValue) -> "HTTPResponse":
		return self._replace(headers=self.headers.set(name, value))

	def withAddedHeader(self, name: str, value: THeaderValue) -> "HTTPResponse":
		return self._replace(headers=self.headers.add(name, value))

	def withoutHeader(self, name: str) -> "HTTPResponse":
		return self._replace(headers=self.headers.remove(name))

	def withBody(self, content: Any) -> "HTTPResponse":
		return self._replace(body=asBody(content))

	def __str__(self) -> str:
		return f"Response({self.statusLine} {self.headers} {self.body})"


# EOF
