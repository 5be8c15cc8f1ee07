import re
from enum import Enum
from typing import Literal, NamedTuple

# --
# == Content-Range
#
# Value type for the `Content-Range` header of partial (`206`) responses,
# in its single range form: `<unit> <first>-<last>/<length>`, where the
# length may be `*` when the size of the resource is unknown.
#
# SEE: https://httpwg.org/specs/rfc9110.html#field.content-range

RE_CONTENT_RANGE = re.compile(
	r"^(?P<unit>\w+)\s+(?P<first>\d+)-(?P<last>\d+)/(?P<length>\d+|\*)$",
	re.ASCII,
)

UNKNOWN_LENGTH: Literal["*"] = "*"


class ContentRangeUnit(Enum):
	Bytes = "bytes"


class ContentRange(NamedTuple):
	"""A parsed `Content-Range` value, `last` is inclusive."""

	unit: ContentRangeUnit
	first: int
	last: int
	length: int | Literal["*"]

	@staticmethod
	def Parse(header: str | None) -> "ContentRange | None":
		"""Parses the given header value, returning `None` when it is not
		a well formed, single `bytes` range."""
		if not header:
			return None
		match = RE_CONTENT_RANGE.match(header.strip())
		if not match:
			return None
		first: int = int(match.group("first"))
		last: int = int(match.group("last"))
		if first > last:
			return None
		try:
			unit = ContentRangeUnit(match.group("unit"))
		except ValueError:
			return None
		length: str = match.group("length")
		if length == UNKNOWN_LENGTH:
			return ContentRange(unit, first, last, UNKNOWN_LENGTH)
		elif (n := int(length)) > 0:
			return ContentRange(unit, first, last, n)
		else:
			return None

	@staticmethod
	def Create(
		first: int,
		last: int,
		length: int | Literal["*"] = UNKNOWN_LENGTH,
		unit: ContentRangeUnit = ContentRangeUnit.Bytes,
	) -> "ContentRange":
		"""Creates a range, validating its bounds."""
		if first < 0:
			raise ValueError(f"Range start must be positive, got: {first}")
		if first > last:
			raise ValueError(f"Range start {first} is after range end {last}")
		if length != UNKNOWN_LENGTH and not (isinstance(length, int) and length > 0):
			raise ValueError(
				f"Range length must be a positive integer or '*', got: {length}"
			)
		return ContentRange(unit, first, last, length)

	@property
	def size(self) -> int:
		"""The number of bytes covered by the range."""
		return self.last - self.first + 1

	def __str__(self) -> str:
		return f"{self.unit.value} {self.first}-{self.last}/{self.length}"


# EOF
