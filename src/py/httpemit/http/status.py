from enum import Enum
from http import HTTPStatus

# Standard reason phrases, indexed by status code.
HTTP_STATUS: dict[int, str] = {_.value: _.phrase for _ in HTTPStatus}


class NoBodyStatus(Enum):
	"""Status codes for which a response must not carry a message body."""

	Continue = 100
	SwitchingProtocols = 101
	Processing = 102
	EarlyHints = 103
	NoContent = 204
	NotModified = 304

	@staticmethod
	def Has(status: int) -> bool:
		"""Tells if the given status forbids a body. Any informational (`1xx`)
		status does, including the ones not listed above."""
		return 100 <= status < 200 or status in NO_BODY_STATUSES


NO_BODY_STATUSES: frozenset[int] = frozenset(_.value for _ in NoBodyStatus)


# EOF
