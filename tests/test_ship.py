"""Tests for ship name parsing and classification."""

from __future__ import annotations

import pytest

from urbit_channel.errors import (
    InvalidGroupingError,
    InvalidPartCountError,
    InvalidPartLengthError,
    InvalidSyllableError,
    ShipValidationError,
    ValidationReason,
)
from urbit_channel.ship import ShipClass, is_valid_ship, parse_ship

COMET = "dasres-ragnep-lislyt-ribpyl--mosnyx-bisdem-nidful-marzod"
MOON = "doznec-salfun-tagfun-fossep"


class TestShipClasses:
    """Class and short form per part layout."""

    def test_galaxy(self) -> None:
        ship = parse_ship("zod")
        assert ship.ship_class is ShipClass.GALAXY
        assert ship.short_name == "zod"
        assert ship.parts == ("zod",)

    def test_star(self) -> None:
        ship = parse_ship("marzod")
        assert ship.ship_class is ShipClass.STAR
        assert ship.short_name == "marzod"

    def test_planet(self) -> None:
        ship = parse_ship("tagfun-fossep")
        assert ship.ship_class is ShipClass.PLANET
        assert ship.short_name == "tagfun-fossep"
        assert ship.parts == ("tagfun", "fossep")

    def test_moon(self) -> None:
        ship = parse_ship(MOON)
        assert ship.ship_class is ShipClass.MOON
        assert ship.short_name == "tagfun^fossep"

    def test_comet(self) -> None:
        ship = parse_ship(COMET)
        assert ship.ship_class is ShipClass.COMET
        assert ship.short_name == "dasres_marzod"
        assert len(ship.parts) == 8

    @pytest.mark.parametrize(
        "address",
        [
            "doznec-marbud-binwes",
            "doznec-marbud-binwes-samlup--litnec",
            "doznec-marbud-binwes-samlup--litnec-dasres-ragnep-lislyt--ribpyl",
        ],
    )
    def test_anon_part_counts(self, address: str) -> None:
        ship = parse_ship(address)
        assert ship.ship_class is ShipClass.ANON
        assert ship.short_name == "anonymous"
        assert not ship.ship_class.is_addressable

    def test_addressable_classes(self) -> None:
        for ship_class in ShipClass:
            assert ship_class.is_addressable is (ship_class is not ShipClass.ANON)


class TestShipNames:
    """Canonical name and tilde handling."""

    def test_leading_tilde_is_optional(self) -> None:
        assert parse_ship("~tagfun-fossep") == parse_ship("tagfun-fossep")

    def test_str_has_tilde(self) -> None:
        assert str(parse_ship("marzod")) == "~marzod"

    def test_canonical_comet_name_keeps_grouping(self) -> None:
        assert parse_ship(COMET).name == COMET

    def test_parse_is_deterministic_and_idempotent(self) -> None:
        for address in ("zod", "marzod", "tagfun-fossep", MOON, COMET):
            first = parse_ship(address)
            assert parse_ship(address) == first
            assert parse_ship(str(first)) == first


class TestShipValidation:
    """Rejected names and their reasons."""

    def test_seven_characters_is_invalid_length(self) -> None:
        with pytest.raises(InvalidPartLengthError) as exc_info:
            parse_ship("abcdefg")
        assert exc_info.value.reason is ValidationReason.INVALID_PART_LENGTH
        assert exc_info.value.address == "abcdefg"

    def test_short_part_in_multi_part_name(self) -> None:
        with pytest.raises(InvalidPartLengthError):
            parse_ship("zod-marzod")

    def test_unknown_prefix(self) -> None:
        with pytest.raises(InvalidSyllableError):
            parse_ship("zodmar")

    def test_syllable_straddling_table_entries(self) -> None:
        # "ozm" occurs inside "dozmar" but is not itself a prefix.
        with pytest.raises(InvalidSyllableError):
            parse_ship("ozmnec")
        with pytest.raises(InvalidSyllableError):
            parse_ship("marodn")

    @pytest.mark.parametrize(
        "address",
        [
            "-zod",
            "marzod-",
            "tagfun--fossep",
            "doznec-salfun-tagfun-fossep-dasres-ragnep-lislyt-ribpyl",
            "doznec-salfun-tagfun-fossep---dasres",
        ],
    )
    def test_bad_grouping(self, address: str) -> None:
        with pytest.raises(InvalidGroupingError) as exc_info:
            parse_ship(address)
        assert exc_info.value.reason is ValidationReason.INVALID_GROUPING

    @pytest.mark.parametrize(
        "address",
        [
            "",
            "~",
            "doznec-salfun-tagfun-fossep--dasres-ragnep",
            "doznec-salfun-tagfun-fossep--dasres-ragnep-lislyt",
        ],
    )
    def test_bad_part_count(self, address: str) -> None:
        with pytest.raises(InvalidPartCountError):
            parse_ship(address)

    def test_errors_share_base_class(self) -> None:
        with pytest.raises(ShipValidationError):
            parse_ship("abcdefg")

    def test_is_valid_ship(self) -> None:
        assert is_valid_ship("~zod")
        assert is_valid_ship(COMET)
        assert not is_valid_ship("abcdefg")
        assert not is_valid_ship("tagfun--fossep")
