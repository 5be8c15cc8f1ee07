from .http.model import (
	HTTPResponse,
	HTTPHeaders,
	HTTPStatusLine,
	EmitterError,
	HeadersAlreadySent,
	OutputAlreadySent,
	InvalidChunkSize,
)  # NOQA: F401
from .http.body import ResponseBody, StreamBody, IteratorBody  # NOQA: F401
from .http.range import ContentRange, ContentRangeUnit  # NOQA: F401
from .transport import Transport, BufferedTransport, StreamTransport  # NOQA: F401
from .emitter import ResponseEmitter  # NOQA: F401


# EOF
