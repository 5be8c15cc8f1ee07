import argparse
import mimetypes
import sys
from pathlib import Path

from .config import EMIT_CHUNK_SIZE
from .emitter import ResponseEmitter
from .http.body import StreamBody
from .http.model import HTTPResponse
from .http.range import ContentRange
from .transport import StreamTransport
from .utils.logging import error, info, warning


def parseHeader(line: str) -> tuple[str, str]:
	name, sep, value = line.partition(":")
	if not sep or not name.strip():
		raise argparse.ArgumentTypeError(f"Expected 'Name: value', got: {line!r}")
	return name.strip(), value.strip()


def positiveInt(value: str) -> int:
	try:
		result = int(value)
	except ValueError:
		raise argparse.ArgumentTypeError(f"Expected an integer, got: {value!r}") from None
	if result < 1:
		raise argparse.ArgumentTypeError(f"Expected a positive integer, got: {result}")
	return result


def main(args: list[str] | None = None) -> int:
	"""Emits a file as an HTTP response on the standard output."""
	parser = argparse.ArgumentParser(
		prog="httpemit",
		description="Writes a file as an HTTP/1.1 response on stdout",
	)
	parser.add_argument("path", type=Path, help="File to use as the body")
	parser.add_argument("-s", "--status", type=int, default=None)
	parser.add_argument("-m", "--message", default=None, help="Reason phrase")
	parser.add_argument("-p", "--protocol", default="1.1")
	parser.add_argument(
		"-r", "--range", default=None, help="Content-Range, like 'bytes 0-99/*'"
	)
	parser.add_argument("-t", "--content-type", default=None)
	parser.add_argument(
		"-H", "--header", action="append", type=parseHeader, default=[]
	)
	parser.add_argument(
		"-c", "--chunk-size", type=positiveInt, default=EMIT_CHUNK_SIZE
	)
	parser.add_argument(
		"--head", action="store_true", help="Only emits the status and headers"
	)
	parser.add_argument("-v", "--verbose", action="store_true")
	options = parser.parse_args(args)

	path: Path = options.path
	if not path.is_file():
		error("File not found", 404, Path=str(path))
		return 1

	length: int = path.stat().st_size
	status: int = 200
	headers: list[tuple[str, str]] = [
		(
			"Content-Type",
			options.content_type
			or mimetypes.guess_type(path.name)[0]
			or "application/octet-stream",
		)
	]
	if options.range:
		content_range = ContentRange.Parse(options.range)
		if content_range:
			status = 206
			length = max(0, min(content_range.last + 1, length) - content_range.first)
		else:
			warning("Content-Range is not valid, the full file is sent", Range=options.range)
		headers.append(("Content-Range", options.range))
	headers.append(("Content-Length", str(length)))
	headers += options.header

	body = StreamBody.FromPath(path)
	try:
		response = HTTPResponse.Create(
			body,
			headers=headers,
			status=status if options.status is None else options.status,
			message=options.message,
			protocol=options.protocol,
		)
		if options.verbose:
			info("Emitting response", Status=response.status, Path=str(path))
		with StreamTransport(sys.stdout.buffer) as transport:
			ResponseEmitter(transport, options.chunk_size).emit(
				response, body=not options.head
			)
	finally:
		body.close()
	return 0


if __name__ == "__main__":
	sys.exit(main())

# EOF
