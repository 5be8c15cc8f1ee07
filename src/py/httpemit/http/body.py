import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Iterable, Iterator

from mypy_extensions import mypyc_attr

from ..utils.io import asBytes

# -----------------------------------------------------------------------------
#
# BODY
#
# -----------------------------------------------------------------------------
# A response body is a handle on a byte stream. The emitter only ever reads
# and repositions it, it never closes it: that's the job of whoever created
# the response.


@mypyc_attr(allow_interpreted_subclasses=True)
class ResponseBody(ABC):
	"""Capabilities of a response body, as seen by the emitter."""

	@abstractmethod
	def isReadable(self) -> bool: ...

	@abstractmethod
	def isSeekable(self) -> bool: ...

	@abstractmethod
	def eof(self) -> bool:
		"""Tells if the end of the data has been reached."""

	@abstractmethod
	def read(self, size: int = -1) -> bytes:
		"""Reads at most `size` bytes, or everything left when `size` is negative."""

	@abstractmethod
	def seek(self, offset: int) -> None:
		"""Moves to the given absolute offset."""

	@property
	def size(self) -> int | None:
		"""The total length of the body, when known."""
		return None

	def close(self) -> None:
		pass


class StreamBody(ResponseBody):
	"""A body backed by a binary file-like object."""

	__slots__ = ["stream", "_ended"]

	@staticmethod
	def FromBytes(data: bytes | str) -> "StreamBody":
		return StreamBody(io.BytesIO(asBytes(data)))

	@staticmethod
	def FromPath(path: Path | str) -> "StreamBody":
		return StreamBody(open(path, "rb"))

	def __init__(self, stream: IO[bytes]):
		self.stream: IO[bytes] = stream
		# Set once a read comes back empty, which is the only end marker
		# we get from non seekable streams.
		self._ended: bool = False

	def isReadable(self) -> bool:
		return not self.stream.closed and self.stream.readable()

	def isSeekable(self) -> bool:
		return not self.stream.closed and self.stream.seekable()

	@property
	def size(self) -> int | None:
		if not self.isSeekable():
			return None
		position: int = self.stream.tell()
		end: int = self.stream.seek(0, io.SEEK_END)
		self.stream.seek(position)
		return end

	def eof(self) -> bool:
		if self._ended or self.stream.closed:
			return True
		elif self.stream.seekable():
			size = self.size
			return size is not None and self.stream.tell() >= size
		else:
			return False

	def read(self, size: int = -1) -> bytes:
		data: bytes = self.stream.read(size)
		if not data and size != 0:
			self._ended = True
		return data

	def seek(self, offset: int) -> None:
		self.stream.seek(offset)
		self._ended = False

	def close(self) -> None:
		self.stream.close()

	def __str__(self) -> str:
		return f"StreamBody({self.stream})"


class IteratorBody(ResponseBody):
	"""A body produced by an iterable of chunks, typically a generator. It
	can only be read forward, once."""

	__slots__ = ["chunks", "buffer", "_ended"]

	def __init__(self, chunks: Iterable[bytes | str]):
		self.chunks: Iterator[bytes | str] = iter(chunks)
		self.buffer: bytearray = bytearray()
		self._ended: bool = False

	def _pull(self) -> bool:
		"""Pulls the next non-empty chunk into the buffer, returning `False`
		once the iterator is exhausted."""
		while not self._ended:
			try:
				chunk = next(self.chunks)
			except StopIteration:
				self._ended = True
				return False
			if chunk:
				self.buffer += asBytes(chunk)
				return True
		return False

	def isReadable(self) -> bool:
		return True

	def isSeekable(self) -> bool:
		return False

	def eof(self) -> bool:
		return not self.buffer and not self._pull()

	def read(self, size: int = -1) -> bytes:
		while (size < 0 or len(self.buffer) < size) and self._pull():
			pass
		n: int = len(self.buffer) if size < 0 else min(size, len(self.buffer))
		data = bytes(self.buffer[:n])
		del self.buffer[:n]
		return data

	def seek(self, offset: int) -> None:
		raise io.UnsupportedOperation("IteratorBody does not support seeking")

	def close(self) -> None:
		close = getattr(self.chunks, "close", None)
		if close:
			close()
		self._ended = True
		self.buffer.clear()


# EOF
