"""
Count the UBX packets in one or more recordings, by message type.
"""
import bz2
import gzip
import traceback
from argparse import ArgumentParser
from os.path import basename

from gnsspacket import DecodeError, UnknownPacket
from gnsspacket.ublox import decode_frame
from gnsspacket.ublox.frame import read_frames
from gnsspacket.ublox.identifiers import packet_names


def smart_open(fn,mode:str=None):
    if ".bz2" in fn:
        return bz2.open(fn,mode)
    elif ".gz" in fn:
        return gzip.open(fn,mode)
    else:
        return open(fn,mode)


def clsid_name(cls:int,id:int)->str:
    if cls in packet_names:
        clsname=packet_names[cls][0]
    else:
        clsname=f"0x{cls:02x}"
    if cls in packet_names and id in packet_names[cls][1]:
        idname=packet_names[cls][1][id]
    else:
        idname=f"0x{id:02x}"
    return f"{clsname}-{idname}"


def count_file(infn:str,seen_clsids:dict,*,dump:bool=False,verify_checksum:bool=True)->None:
    """
    Decode one file, adding to the count of each (cls,id) seen.

    :param seen_clsids: dictionary keyed by (cls,id). Each value is a list of
                        [handled,count], where handled is True if there is a decoder
                        for this type.
    """
    def on_unknown(unknown:UnknownPacket):
        if unknown.key not in seen_clsids:
            print(f"Unhandled packet {unknown.name or 'UNKNOWN'} cls=0x{unknown.key[0]:02x}, id=0x{unknown.key[1]:02x}, {basename(infn)}")
            seen_clsids[unknown.key]=[False,0]
        seen_clsids[unknown.key][1]+=1
    with smart_open(infn,"rb") as inf:
        for frame in read_frames(inf,verify_checksum=verify_checksum):
            try:
                packet=decode_frame(frame,on_unknown=on_unknown)
            except DecodeError:
                print(f"{basename(infn)} cls=0x{frame.cls:02x}, id=0x{frame.id:02x}")
                traceback.print_exc()
                continue
            if packet is None:
                continue
            clsid=(packet.cls,packet.id)
            if clsid not in seen_clsids:
                print(f"First time seeing {packet.type} cls=0x{packet.cls:02x}, id=0x{packet.id:02x}")
                seen_clsids[clsid]=[True,0]
            seen_clsids[clsid][1]+=1
            if dump:
                print(packet.as_dict())


def main(argv=None):
    parser=ArgumentParser(description="Count UBX packets by type")
    parser.add_argument("infns",metavar="FILE",nargs="+",help="UBX recording, optionally compressed with .gz or .bz2")
    parser.add_argument("--dump",action="store_true",help="print each decoded packet")
    parser.add_argument("--no-checksum",dest="verify_checksum",action="store_false",help="don't verify frame checksums")
    args=parser.parse_args(argv)
    seen_clsids={}
    for infn in args.infns:
        print(infn)
        count_file(infn,seen_clsids,dump=args.dump,verify_checksum=args.verify_checksum)
    for cls,id in sorted(seen_clsids.keys()):
        handled,n=seen_clsids[(cls,id)]
        print(f"{clsid_name(cls,id)} (0x{cls:02x},0x{id:02x}): {n}{'' if handled else ' (unhandled)'}")


if __name__=="__main__":
    main()
