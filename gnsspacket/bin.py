"""
Bit-level helpers for binary packets.

Bit numbering is LSB-first: bit 0 is the least significant bit of the
source word. A multi-bit sub-field is described by its upper bit b1 and
lower bit b0, both inclusive, matching the way the UBX interface description
lists them (for instance "bits 4..2" is b1=4, b0=2).

Enumerated sub-fields are decoded against a small ordered table of
(bit pattern, symbol) pairs. A pattern which is not in the table is not an
error, it just leaves the symbol unset. Several UBX fields have reserved
codes (the pattern 11 for carrier solution or health for instance) and those
are reported with their raw bits and no name.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


def get_bits(value:int, b1:int, b0:int)->int:
    """
    Extract a bitfield from an integer

    :param value: source word
    :param b1: upper bit of the field, inclusive
    :param b0: lower bit of the field, inclusive. Bit 0 is the LSB.
    :return: unsigned value of the field, shifted down so its LSB is bit 0
    """
    if b1<b0:
        raise ValueError(f"Upper bit {b1} is below lower bit {b0}")
    width=b1-b0+1
    mask=(1<<width)-1
    return (value>>b0) & mask


def signed(value:int, nbits:int)->int:
    """
    Interpret the lower nbits of value as a two's-complement signed number
    """
    value&=(1<<nbits)-1
    if value & (1<<(nbits-1)):
        value-=1<<nbits
    return value


def bit_string(value:int, width:int)->str:
    """
    Render a raw field as a string of bits, most significant first.

    >>> bit_string(2,3)
    '010'
    """
    return format(value, f"0{width}b")


def bit_table(enum_cls:type[Enum], width:int)->tuple[tuple[str,str],...]:
    """
    Build the ordered (pattern, symbol) table for an enumeration. The order
    is the declaration order of the Enum, and only declared members appear,
    so gaps in the Enum stay gaps in the table.
    """
    return tuple((bit_string(member.value,width),member.name) for member in enum_cls)


def lookup_symbol(table:Iterable[tuple[str,str]], pattern:str)->Optional[str]:
    """
    Find the symbol for a bit pattern

    :return: symbol name, or None if the pattern is not listed
    """
    for table_pattern,symbol in table:
        if table_pattern==pattern:
            return symbol
    return None


@dataclass(frozen=True)
class EnumField:
    """
    A decoded enumerated sub-field.

    * bits  - raw bit pattern, most significant bit first
    * value - raw bit pattern as an unsigned integer
    * name  - symbolic name, or None if the pattern has no assigned meaning
    """
    bits :str
    value:int
    name :Optional[str]=None
    @classmethod
    def decode(cls, value:int, width:int, table:Iterable[tuple[str,str]])->"EnumField":
        bits=bit_string(value,width)
        return cls(bits=bits,value=value,name=lookup_symbol(table,bits))
    def __str__(self):
        return self.name if self.name is not None else f"0b{self.bits}"
