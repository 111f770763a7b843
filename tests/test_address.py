"""Address validation and encoding helpers."""
from __future__ import annotations

import pytest

from app.errors import InvalidAddress
from app.utils.address import (abi_encode_address, display_address, normalize_address,
                               tron_base58_to_hex, tron_hex_to_base58, validate_address)

from conftest import USDT, USDT_HEX


class TestValidateAddress:
    def test_accepts_real_address(self) -> None:
        assert validate_address(USDT) == USDT

    def test_strips_whitespace(self) -> None:
        assert validate_address(f"  {USDT}\n") == USDT

    @pytest.mark.parametrize("bad", [
        "short",
        "",
        "   ",
        None,
        123,
        "AR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t",   # wrong prefix
        "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6tXXXX",  # too long
        "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj0t",   # '0' is not base58
    ])
    def test_rejects_malformed(self, bad) -> None:
        with pytest.raises(InvalidAddress):
            validate_address(bad)

    def test_rejects_bad_checksum(self) -> None:
        # last char swapped: still matches the pattern, checksum fails
        with pytest.raises(InvalidAddress, match="checksum"):
            validate_address(USDT[:-1] + "u")


class TestEncoding:
    def test_base58_to_hex(self) -> None:
        assert tron_base58_to_hex(USDT) == USDT_HEX

    def test_hex_to_base58_roundtrip_forms(self) -> None:
        assert tron_hex_to_base58(USDT_HEX) == USDT
        assert tron_hex_to_base58("0x" + USDT_HEX[2:]) == USDT

    def test_abi_word_is_left_padded_20_bytes(self) -> None:
        word = abi_encode_address(USDT)
        assert len(word) == 64
        assert word[:24] == "0" * 24
        assert word[24:] == USDT_HEX[2:]

    def test_normalize_matches_across_encodings(self) -> None:
        assert normalize_address(USDT) == USDT_HEX
        assert normalize_address(USDT_HEX.upper()) == USDT_HEX
        assert normalize_address("0x" + USDT_HEX[2:]) == USDT_HEX

    def test_normalize_leaves_undecodable_strings(self) -> None:
        assert normalize_address("  Tnot-an-address ") == "Tnot-an-address"
        assert normalize_address(None) == ""

    @pytest.mark.parametrize("value", [USDT_HEX, USDT_HEX.upper(), "0x" + USDT_HEX[2:], f" {USDT} "])
    def test_display_address_renders_base58(self, value) -> None:
        assert display_address(value) == USDT

    @pytest.mark.parametrize("value,expected", [(None, ""), ("41zz", "41zz"), ("41" + "g" * 40, "41" + "g" * 40)])
    def test_display_address_passes_through_unknown(self, value, expected) -> None:
        assert display_address(value) == expected
