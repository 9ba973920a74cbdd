import pytest

from photo_edge.services.query import parse_int


@pytest.mark.parametrize(
	"raw,expected",
	[("5", 5), ("2.5", 2), ("7abc", 7), ("  12 ", 12), ("-3", -3), ("+4", 4), ("abc", 9), ("", 9), (None, 9), (".5", 9)],
)
def test_parse_int_reads_leading_integer(raw, expected):
	assert parse_int(raw, 9) == expected
