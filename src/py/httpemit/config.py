from os import getenv
from .utils.io import DEFAULT_ENCODING  # NOQA: F401

# Number of bytes read from a body per streaming iteration, this is also the
# upper bound of what the emitter holds in memory.
EMIT_CHUNK_SIZE: int = int(getenv("HTTPEMIT_CHUNK_SIZE", 8192))

LOG_EMISSION: bool = getenv("HTTPEMIT_LOG", "1") == "1"

DEFAULT_PROTOCOL: str = "1.1"

# EOF
