"""
Range-aware File Server Example

Serves files from the current directory, answering `Range: bytes=a-b`
requests with `206 Partial Content` responses. The request handling is done
by the standard library's `http.server`, the response is emitted by
`httpemit` directly onto the connection.

Usage:
    python fileserver.py

Test with:
    curl -i http://localhost:8000/README.md
    curl -i -H "Range: bytes=0-99" http://localhost:8000/README.md
"""

import mimetypes
import re
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from httpemit import HTTPResponse, ResponseEmitter, StreamBody, StreamTransport
from httpemit.utils.logging import info

PORT: int = 8000
RE_RANGE = re.compile(r"^bytes=(\d+)-(\d*)$")


class FileHandler(BaseHTTPRequestHandler):
	root: Path = Path(".").absolute()

	def do_GET(self) -> None:
		self.respond(True)

	def do_HEAD(self) -> None:
		self.respond(False)

	def respond(self, body: bool) -> None:
		path = (self.root / self.path.split("?", 1)[0].lstrip("/")).resolve()
		if not path.is_file() or self.root not in path.parents:
			self.emit(HTTPResponse.Create("Not Found", "text/plain", status=404), body)
			return
		size: int = path.stat().st_size
		headers: dict[str, str] = {
			"Content-Type": mimetypes.guess_type(path.name)[0]
			or "application/octet-stream",
			"Accept-Ranges": "bytes",
		}
		status: int = 200
		match = RE_RANGE.match(self.headers.get("Range") or "")
		if match and size:
			first = int(match.group(1))
			last = min(int(match.group(2) or size - 1), size - 1)
			if first <= last:
				status = 206
				headers["Content-Range"] = f"bytes {first}-{last}/{size}"
				size = last - first + 1
		headers["Content-Length"] = str(size)
		content = StreamBody.FromPath(path)
		try:
			self.emit(HTTPResponse.Create(content, headers=headers, status=status), body)
		finally:
			content.close()

	def emit(self, response: HTTPResponse, body: bool) -> None:
		info("Serving", Path=self.path, Status=response.status)
		with StreamTransport(self.wfile) as transport:
			ResponseEmitter(transport).emit(response, body)


if __name__ == "__main__":
	info("Starting range-aware file server", Port=PORT)
	ThreadingHTTPServer(("127.0.0.1", PORT), FileHandler).serve_forever()

# EOF
