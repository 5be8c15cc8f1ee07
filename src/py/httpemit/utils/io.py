DEFAULT_ENCODING: str = "utf8"
# Header lines go out as latin-1, which is what HTTP/1.1 allows on the wire.
HEADER_ENCODING: str = "latin-1"
EOL: bytes = b"\r\n"


def asBytes(value: str | bytes | bytearray | None) -> bytes:
	if isinstance(value, bytes):
		return value
	elif isinstance(value, bytearray):
		return bytes(value)
	elif isinstance(value, str):
		return bytes(value, DEFAULT_ENCODING)
	elif value is None:
		return b""
	else:
		raise ValueError(f"Expected bytes or str, got: {value}")


# EOF
