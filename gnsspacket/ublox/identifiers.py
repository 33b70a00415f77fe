"""
Identifier tables for the UBX protocol: message class/id names, GNSS
identifiers and signal identifiers. These are built once at import and never
modified.
"""
from enum import Enum
from types import MappingProxyType
from typing import Optional

packet_names={0x01:("NAV",{0x01:"POSECEF",
                           0x02:"POSLLH",
                           0x03:"STATUS",
                           0x04:"DOP",
                           0x05:"ATT",
                           0x07:"PVT",
                           0x09:"ODO",
                           0x11:"VELECEF",
                           0x12:"VELNED",
                           0x13:"HPPOSECEF",
                           0x14:"HPPOSLLH",
                           0x20:"TIMEGPS",
                           0x21:"TIMEUTC",
                           0x22:"CLOCK",
                           0x23:"TIMEGLO",
                           0x24:"TIMEBDS",
                           0x25:"TIMEGAL",
                           0x26:"TIMELS",
                           0x32:"SBAS",
                           0x34:"ORB",
                           0x35:"SAT",
                           0x36:"COV",
                           0x39:"GEOFENCE",
                           0x3c:"RELPOSNED",
                           0x43:"SIG",
                           0x61:"EOE"}),
              0x02:("RXM",{0x13:"SFRBX",
                           0x14:"MEASX",
                           0x15:"RAWX",
                           0x32:"RTCM"}),
              0x04:("INF",{0x00:"ERROR",
                           0x01:"WARNING",
                           0x02:"NOTICE",
                           0x03:"TEST",
                           0x04:"DEBUG"}),
              0x05:("ACK",{0x01:"ACK",
                           0x00:"NAK"}),
              0x06:("CFG",{0x8a:"VALSET",
                           0x8b:"VALGET",
                           0x8c:"VALDEL"}),
              0x0a:("MON",{0x04:"VER",
                           0x09:"HW",
                           0x0b:"HW2",
                           0x31:"SPAN",
                           0x36:"COMMS",
                           0x38:"RF",
                           }),
              0x0d:("TIM",{0x01:"TP",
                           0x03:"TM2"}),
              0x10:("ESF",{0x02:"MEAS",
                           0x10:"STATUS",
                           0x14:"ALG",
                           0x15:"INS"}),
              0x13:("MGA",{0x00:"GPS",
                           0x02:"GAL",
                           0x03:"BDS",
                           0x06:"GLO"}),
              0x27:("SEC",{0x03:"UNIQID"}),
              }


def _invert_packet_names():
    result={}
    for cls,(clsname,ids) in packet_names.items():
        for id,idname in ids.items():
            result[f"{clsname}-{idname}"]=(cls,id)
    return MappingProxyType(result)
packet_ids=_invert_packet_names()


def packet_name(cls:int, id:int)->Optional[str]:
    """
    Symbolic name of a message, like "NAV-PVT"

    :return: name, or None if this class/id pair is not in the table
    """
    if cls not in packet_names:
        return None
    clsname,ids=packet_names[cls]
    if id not in ids:
        return None
    return f"{clsname}-{ids[id]}"


def packet_id(name:str)->Optional[tuple[int,int]]:
    """
    (cls,id) pair of a message given its symbolic name, or None if unknown
    """
    return packet_ids.get(name)


class GNSSID(Enum):
    GPS=0
    SBAS=1
    Galileo=2
    BeiDou=3
    IMES=4
    QZSS=5
    GLONASS=6
    NavIC=7


# Signal identifiers are only unique within one constellation
signal_names={GNSSID.GPS    :{0:"GPS_L1CA",
                              3:"GPS_L2CL",
                              4:"GPS_L2CM",
                              6:"GPS_L5I",
                              7:"GPS_L5Q"},
              GNSSID.SBAS   :{0:"SBAS_L1CA"},
              GNSSID.Galileo:{0:"Galileo_E1C",
                              1:"Galileo_E1B",
                              3:"Galileo_E5aI",
                              4:"Galileo_E5aQ",
                              5:"Galileo_E5bI",
                              6:"Galileo_E5bQ"},
              GNSSID.BeiDou :{0:"BeiDou_B1ID1",
                              1:"BeiDou_B1ID2",
                              2:"BeiDou_B2ID1",
                              3:"BeiDou_B2ID2",
                              5:"BeiDou_B1C",
                              7:"BeiDou_B2a"},
              GNSSID.QZSS   :{0:"QZSS_L1CA",
                              1:"QZSS_L1S",
                              4:"QZSS_L2CM",
                              5:"QZSS_L2CL",
                              8:"QZSS_L5I",
                              9:"QZSS_L5Q"},
              GNSSID.GLONASS:{0:"GLONASS_L1OF",
                              2:"GLONASS_L2OF"},
              GNSSID.NavIC  :{0:"NavIC_L5A"}}


def gnss_name(gnssId:int)->Optional[str]:
    """Constellation name for a GNSS identifier, or None if the identifier is not assigned"""
    try:
        return GNSSID(gnssId).name
    except ValueError:
        return None


def signal_name(gnssId:int, sigId:int)->Optional[str]:
    """
    Name of a signal, like "GPS_L1CA". Returns None if either the
    constellation or the signal within it is not in the table.
    """
    if gnss_name(gnssId) is None:
        return None
    return signal_names.get(GNSSID(gnssId),{}).get(sigId)
