"""

"""
from enum import Enum

import pytest

from gnsspacket.bin import get_bits, signed, bit_string, bit_table, lookup_symbol, EnumField


class THREE(Enum):
    ZERO=0
    ONE=1
    TWO=2


@pytest.mark.parametrize(
    "value,b1,b0,expected",
    [
        (0b10110100, 4, 2, 0b101),
        (0b11000000, 7, 6, 0b11),
        (0b10000000, 7, 7, 1),
        (0b01111111, 7, 7, 0),
        (0x12345678,31,28, 0x1),
        (0x12345678,11, 4, 0x67),
    ]
)
def test_get_bits(value,b1,b0,expected):
    assert get_bits(value,b1=b1,b0=b0)==expected


def test_get_bits_reversed():
    with pytest.raises(ValueError):
        get_bits(0xff,b1=0,b0=1)


@pytest.mark.parametrize(
    "value,nbits,expected",
    [
        (0xff,   8,  -1),
        (0x7f,   8, 127),
        (0x80,   8,-128),
        (0b101,  3,  -3),
        (0xfff0,16, -16),
    ]
)
def test_signed(value,nbits,expected):
    assert signed(value,nbits)==expected


def test_bit_string():
    assert bit_string(2,3)=='010'
    assert bit_string(0,2)=='00'


def test_bit_table_keeps_gaps():
    table=bit_table(THREE,2)
    assert table==(('00','ZERO'),('01','ONE'),('10','TWO'))
    assert lookup_symbol(table,'10')=='TWO'
    assert lookup_symbol(table,'11') is None


@pytest.mark.parametrize(
    "value,bits,name,text",
    [
        (0,'00','ZERO','ZERO'),
        (2,'10','TWO' ,'TWO'),
        (3,'11',None  ,'0b11'),
    ]
)
def test_enum_field(value,bits,name,text):
    decoded=EnumField.decode(value,width=2,table=bit_table(THREE,2))
    assert decoded.bits==bits
    assert decoded.value==value
    assert decoded.name==name
    assert str(decoded)==text
