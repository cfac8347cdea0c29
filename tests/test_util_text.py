import pytest

from ratacat.util_text import format_gas_compact, format_near_compact

TERA = 1_000_000_000_000
GIGA = 1_000_000_000
MEGA = 1_000_000
NEAR = 1_000_000_000_000_000_000_000_000


def test_gas_zero():
    assert format_gas_compact(0) == "0"


def test_gas_tera_truncates():
    assert format_gas_compact(30 * TERA) == "30T"
    assert format_gas_compact(30 * TERA + TERA - 1) == "30T"


def test_gas_giga():
    assert format_gas_compact(5 * GIGA) == "5G"


def test_gas_mega_suffix():
    result = format_gas_compact(7 * MEGA + 5)
    assert result.endswith("M")
    assert int(result[:-1]) == 7


def test_gas_below_mega_is_raw():
    assert format_gas_compact(MEGA - 1) == str(MEGA - 1)


def test_gas_negative_rejected():
    with pytest.raises(ValueError):
        format_gas_compact(-1)


def test_near_zero():
    assert format_near_compact(0) == "0Ⓝ"


def test_near_whole():
    assert format_near_compact(NEAR) == "1Ⓝ"


def test_near_fraction():
    assert format_near_compact(NEAR + NEAR // 2) == "1.5Ⓝ"


def test_near_fraction_is_truncated_not_rounded():
    assert format_near_compact(NEAR + NEAR // 20) == "1.0Ⓝ"


def test_sub_near_is_yocto():
    amount = NEAR - 1
    assert format_near_compact(amount) == f"{amount}y"


def test_near_negative_rejected():
    with pytest.raises(ValueError):
        format_near_compact(-5)