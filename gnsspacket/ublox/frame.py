"""
Find UBX frames in a byte stream.

A frame on the wire is:

* sync chars 0xB5 0x62
* message class, U1
* message id, U1
* payload length, U2 little-endian
* payload
* checksum CK_A, CK_B: 8-bit Fletcher over class, id, length and payload

Anything between frames (NMEA sentences, RTCM, line noise) is skipped.
"""
import warnings
from struct import unpack_from
from typing import BinaryIO, Iterator

from gnsspacket import BadFrameWarning, Frame

SYNC=b'\xb5\x62'
CHUNK=65536


def fletcher8(buf:bytes)->bytes:
    """
    Calculate the 8-bit Fletcher checksum according to the algorithm in
    section 3.4 of the interface description
    :param buf: Combined header and payload, not including the sync chars
    :return: two-byte buffer with ck_a as element 0 and ck_b as element 1.
             This can be directly compared with the checksum as-read.
    """
    ck_a=0
    ck_b=0
    for byte in buf:
        ck_a=(ck_a+byte) & 0xFF
        ck_b=(ck_b+ck_a) & 0xFF
    return bytes((ck_a,ck_b))


def read_frames(inf:BinaryIO,verify_checksum:bool=True)->Iterator[Frame]:
    """
    Read UBX frames from a binary stream

    :param inf: binary stream open for reading
    :param verify_checksum: If true, frames with a bad checksum are dropped with a
                            BadFrameWarning, and the search for the next frame
                            starts one byte past the bad frame's sync chars.
    :return: Iterator of Frame. Iteration ends at end of stream. A frame which runs
             past the end of the stream is dropped with a BadFrameWarning, and the
             search for frames resumes one byte past its sync chars.
    """
    buf=bytearray()
    eof=False
    while True:
        start=buf.find(SYNC)
        if start<0:
            # Keep the last byte, it might be the first sync char
            del buf[:-1]
        else:
            del buf[:start]
            if len(buf)>=6:
                length=unpack_from('<H',buf,4)[0]
                end=6+length+2
                if len(buf)>=end:
                    if verify_checksum:
                        calc_ck=fletcher8(buf[2:6+length])
                        read_ck=bytes(buf[6+length:end])
                        if calc_ck!=read_ck:
                            warnings.warn(f"Checksum doesn't match for cls=0x{buf[2]:02x}, id=0x{buf[3]:02x}: "
                                          f"Calculated {calc_ck[0]:02x}{calc_ck[1]:02x}, "
                                          f"read {read_ck[0]:02x}{read_ck[1]:02x}",BadFrameWarning)
                            del buf[:1]
                            continue
                    frame=Frame(cls=buf[2],id=buf[3],payload=bytes(buf[6:6+length]))
                    del buf[:end]
                    yield frame
                    continue
        if eof:
            if start<0:
                return
            # Either a truncated last frame or a false sync whose length runs past
            # the end. Look for another sync after it.
            warnings.warn(f"Dropping incomplete frame of {len(buf)} bytes at end of stream",BadFrameWarning)
            del buf[:1]
            continue
        chunk=inf.read(CHUNK)
        if len(chunk)<1:
            eof=True
        buf+=chunk
