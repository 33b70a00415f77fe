"""
Decoding of binary GNSS receiver packets into typed records.

The unit of input is a Frame: message class, message id and payload of one
packet, already located in the byte stream and checksum-verified by a framer
(see gnsspacket.ublox.frame for one). Frames go through
gnsspacket.ublox.decode_frame(), which either returns a decoded packet or
reports an UnknownPacket through a callback.
"""
from collections import namedtuple
from typing import Optional

Frame=namedtuple("Frame","cls id payload")
Frame.__doc__="""One complete, integrity-checked packet: message class, message id and payload bytes"""

UnknownPacket=namedtuple("UnknownPacket","frame key name")
UnknownPacket.__doc__="""
Notification for a frame with no registered decoder.

* frame - the original frame, untouched
* key   - (cls,id) tuple used for the lookup
* name  - symbolic name like "NAV-ORB" if the key is a known packet type, otherwise None
"""


class DecodeError(ValueError):
    """
    A single frame could not be decoded, because the payload is too short for
    a field, declares more repeats than it carries, or flags as valid a UTC
    date and time that is out of range. Only that frame is affected.
    """
    def __init__(self,packet_type:str,message:str,*,offset:Optional[int]=None,field:Optional[str]=None):
        self.packet_type=packet_type
        self.offset=offset
        self.field=field
        where=""
        if field is not None:
            where+=f" field {field}"
        if offset is not None:
            where+=f" at offset {offset}"
        super().__init__(f"{packet_type}{where}: {message}")


class UnknownPacketWarning(UserWarning):
    """Issued for a frame that has no registered decoder"""


class BadPacketWarning(UserWarning):
    """Issued when a frame is skipped because it could not be decoded"""


class BadFrameWarning(UserWarning):
    """Issued by the framer when it discards bytes from the input stream"""
