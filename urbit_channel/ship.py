"""Ship name parsing and classification.

Urbit ship names are built from 3-letter syllables. A 6-letter part is a
prefix syllable followed by a suffix syllable; multi-part names join parts
with ``-`` and separate every group of four parts with ``--``:

    ~zod                                   galaxy
    ~marzod                                star
    ~tagfun-fossep                         planet
    ~doznec-salfun-tagfun-fossep           moon
    ~dasres-ragnep-lislyt-ribpyl--mosnyx-bisdem-nidful-marzod   comet

Key invariants:
- Pure: no I/O, same input -> same ShipAddress
- Class is derived from the part layout only
- Comet parentage is not checked
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import (
    InvalidGroupingError,
    InvalidPartCountError,
    InvalidPartLengthError,
    InvalidSyllableError,
    ShipValidationError,
)

# --------------------------------------------------------------------------
# Syllable tables
# --------------------------------------------------------------------------

PREFIXES = (
    "dozmarbinwansamlitsighidfidlissogdirwacsabwissibrigsoldopmodfoglidhopdardorlorhodfolrintogsilmirholpaslacrovlivdalsatlibtabhanticpidtorbolfosdotlosdilforpilramtirwintadbicdifrocwidbisdasmidloprilnardapmolsanlocnovsitnidtipsicropwitnatpanminritpodmottamtolsavposnapnopsomfinfonbanmorworsipronnorbotwicsocwatdolmagpicdavbidbaltimtasmalligsivtagpadsaldivdactansidfabtarmonranniswolmispallasdismaprabtobrollatlonnodnavfignomnibpagsopralbilhaddocridmocpacravripfaltodtiltinhapmicfanpattaclabmogsimsonpinlomrictapfirhasbosbatpochactidhavsaplindibhosdabbitbarracparloddosbortochilmactomdigfilfasmithobharmighinradmashalraglagfadtopmophabnilnosmilfopfamdatnoldinhatnacrisfotribhocnimlarfitwalrapsarnalmoslandondanladdovrivbacpollaptalpitnambonrostonfodponsovnocsorlavmatmipfip"
)

SUFFIXES = (
    "zodnecbudwessevpersutletfulpensytdurwepserwylsunrypsyxdyrnuphebpeglupdepdysputlughecryttyvsydnexlunmeplutseppesdelsulpedtemledtulmetwenbynhexfebpyldulhetmevruttylwydtepbesdexsefwycburderneppurrysrebdennutsubpetrulsynregtydsupsemwynrecmegnetsecmulnymtevwebsummutnyxrextebfushepbenmuswyxsymselrucdecwexsyrwetdylmynmesdetbetbeltuxtugmyrpelsyptermebsetdutdegtexsurfeltudnuxruxrenwytnubmedlytdusnebrumtynseglyxpunresredfunrevrefmectedrusbexlebduxrynnumpyxrygryxfeptyrtustyclegnemfermertenlusnussyltecmexpubrymtucfyllepdebbermughuttunbylsudpemdevlurdefbusbeprunmelpexdytbyttyplevmylwedducfurfexnulluclennerlexrupnedlecrydlydfenwelnydhusrelrudneshesfetdesretdunlernyrsebhulrylludremlysfynwerrycsugnysnyllyndyndemluxfedsedbecmunlyrtesmudnytbyrsenwegfyrmurtelreptegpecnelnevfes"
)

SYLLABLE_LENGTH = 3
GROUP_SIZE = 4

ANONYMOUS = "anonymous"


def _in_table(syllable: str, table: str) -> bool:
    """Return True when syllable sits on a 3-character boundary of table.

    A plain substring test would accept fragments that straddle two
    syllables (``ozm`` from ``dozmar``).
    """
    if len(syllable) != SYLLABLE_LENGTH:
        return False
    start = table.find(syllable)
    while start != -1:
        if start % SYLLABLE_LENGTH == 0:
            return True
        start = table.find(syllable, start + 1)
    return False


# --------------------------------------------------------------------------
# Data Types
# --------------------------------------------------------------------------


class ShipClass(Enum):
    """Identity class derived from a ship name's layout."""

    GALAXY = "galaxy"
    STAR = "star"
    PLANET = "planet"
    MOON = "moon"
    COMET = "comet"
    ANON = "anon"

    @property
    def is_addressable(self) -> bool:
        """Anonymous identities cannot be targeted by pokes or subscriptions."""
        return self is not ShipClass.ANON


_CLASS_BY_PART_COUNT: dict[int, ShipClass] = {
    2: ShipClass.PLANET,
    3: ShipClass.ANON,
    4: ShipClass.MOON,
    5: ShipClass.ANON,
    8: ShipClass.COMET,
    9: ShipClass.ANON,
}


@dataclass(frozen=True)
class ShipAddress:
    """A validated, classified ship name.

    Attributes:
        parts: Syllable parts in order, each 3 or 6 characters.
        name: Canonical name without the leading ``~``.
        ship_class: Identity class.
        short_name: Abbreviated display form.
    """

    parts: tuple[str, ...]
    name: str
    ship_class: ShipClass
    short_name: str

    def __str__(self) -> str:
        return f"~{self.name}"


# --------------------------------------------------------------------------
# Parsing
# --------------------------------------------------------------------------


def _split_parts(address: str, tokens: list[str]) -> list[str]:
    """Drop separators, enforcing ``--`` between every group of four parts."""
    parts: list[str] = []
    expect_separator = False
    for index, token in enumerate(tokens):
        if token == "":
            if not expect_separator or index == len(tokens) - 1:
                raise InvalidGroupingError(
                    address, f"Unexpected separator at position {index} in {address!r}"
                )
            expect_separator = False
            continue
        if expect_separator:
            raise InvalidGroupingError(
                address, f"Missing '--' after part {len(parts)} in {address!r}"
            )
        parts.append(token)
        expect_separator = len(parts) % GROUP_SIZE == 0
    return parts


def _check_syllables(address: str, part: str) -> None:
    prefix, suffix = part[:SYLLABLE_LENGTH], part[SYLLABLE_LENGTH:]
    if not _in_table(prefix, PREFIXES):
        raise InvalidSyllableError(
            address, f"{prefix!r} is not a prefix syllable in {address!r}"
        )
    if not _in_table(suffix, SUFFIXES):
        raise InvalidSyllableError(
            address, f"{suffix!r} is not a suffix syllable in {address!r}"
        )


def _classify(address: str, parts: list[str]) -> ShipClass:
    if len(parts) == 1:
        return ShipClass.GALAXY if len(parts[0]) == SYLLABLE_LENGTH else ShipClass.STAR

    for part in parts:
        if len(part) != 2 * SYLLABLE_LENGTH:
            raise InvalidPartLengthError(
                address,
                f"Multi-part names need 6-character parts, got {part!r} in {address!r}",
            )

    ship_class = _CLASS_BY_PART_COUNT.get(len(parts))
    if ship_class is None:
        raise InvalidPartCountError(
            address, f"{len(parts)} parts do not form a ship name: {address!r}"
        )
    return ship_class


def _short_name(parts: tuple[str, ...], ship_class: ShipClass) -> str:
    if ship_class is ShipClass.COMET:
        return f"{parts[0]}_{parts[-1]}"
    if ship_class is ShipClass.MOON:
        return f"{parts[-2]}^{parts[-1]}"
    if ship_class is ShipClass.PLANET:
        return f"{parts[0]}-{parts[-1]}"
    if ship_class is ShipClass.ANON:
        return ANONYMOUS
    return parts[0]


def _canonical_name(parts: tuple[str, ...]) -> str:
    groups = [
        "-".join(parts[start : start + GROUP_SIZE])
        for start in range(0, len(parts), GROUP_SIZE)
    ]
    return "--".join(groups)


def parse_ship(address: str) -> ShipAddress:
    """Parse and classify a ship name.

    Args:
        address: Ship name, with or without a leading ``~``.

    Returns:
        The validated ShipAddress.

    Raises:
        InvalidGroupingError: Separators are misplaced.
        InvalidPartLengthError: A part is not 3 or 6 characters.
        InvalidSyllableError: A 6-character part has an unknown syllable.
        InvalidPartCountError: The part count maps to no ship class.
    """
    body = address[1:] if address.startswith("~") else address
    if not body:
        raise InvalidPartCountError(address, "Ship name is empty")

    parts = _split_parts(address, body.split("-"))

    for part in parts:
        if len(part) not in (SYLLABLE_LENGTH, 2 * SYLLABLE_LENGTH):
            raise InvalidPartLengthError(
                address, f"Part {part!r} must be 3 or 6 characters in {address!r}"
            )
        if len(part) == 2 * SYLLABLE_LENGTH:
            _check_syllables(address, part)

    ship_class = _classify(address, parts)
    frozen_parts = tuple(parts)
    return ShipAddress(
        parts=frozen_parts,
        name=_canonical_name(frozen_parts),
        ship_class=ship_class,
        short_name=_short_name(frozen_parts, ship_class),
    )


def is_valid_ship(address: str) -> bool:
    """Return True when address parses as a ship name."""
    try:
        parse_ship(address)
    except ShipValidationError:
        return False
    return True
