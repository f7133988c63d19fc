import pytest

from blueprint.render import format_number


@pytest.mark.parametrize(
    "value, expected",
    [
        (10.0, "10"),
        (0.0, "0"),
        (-0.0, "0"),
        (-4.0, "-4"),
        (10.5, "10.5"),
        (0.1, "0.1"),
        (-2.25, "-2.25"),
        (1e16, "10000000000000000"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


@pytest.mark.parametrize("value", [0.1 + 0.2, 1 / 3, 1e-7, 123456.789])
def test_format_number_reads_back(value):
    assert float(format_number(value)) == value


def test_large_integral_values_are_written_out_in_full():
    text = format_number(1e300)
    assert "e" not in text and "." not in text
    assert len(text) == 301
    assert float(text) == 1e300
