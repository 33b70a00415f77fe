"""
Packet descriptions for UBLOX binary packets.

Each UBX message is described by a dataclass whose fields are listed in the
order they appear in the payload, each annotated with bin_field() metadata
giving its raw type, scale, unit and so on. The ublox_packet() decorator
compiles the description into byte offsets once, at import time, and registers
the class so decode_frame() can find it by message class and id.

To use:

```
from gnsspacket import Frame
from gnsspacket.ublox import decode_frame

packet=decode_frame(Frame(cls=0x01,id=0x07,payload=payload))
print(packet.type,packet.iTOW,packet.timestamp,packet.data)
```

Decoders for the supported messages live in gnsspacket.ublox.protocol, which
is imported (and so registered) at the bottom of this module.
"""
import warnings
from collections import namedtuple
from dataclasses import dataclass, fields
from functools import partial
from struct import unpack_from
from typing import Callable, Iterable, Iterator, Optional

from gnsspacket import DecodeError, Frame, UnknownPacket, UnknownPacketWarning, BadPacketWarning
from gnsspacket.bin import get_bits, bit_table, EnumField
from gnsspacket.gpstime import Clock, itow_to_datetime, utcnow
from gnsspacket.ublox.identifiers import packet_name

size_dict={"U1":("B",1),
           "U2":("H",2),
           "U4":("I",4),
           "I1":("b",1),
           "I2":("h",2),
           "I4":("i",4),
           "X1":("B",1),
           "X2":("H",2),
           "X4":("I",4),
           "R4":("f",4),
           "R8":("d",8)}


def bin_field(raw_type, **kwargs):
    """
    Annotate a field with the necessary data to extract it from a binary packet. Raw type is required, any
    other named parameter will be included in the resulting metadata dictionary. Any value may be provided,
    but parameters below have special meaning to other parts of the code.

    :param raw_type: type of raw data in UBX form (UBX manual 3.3.5) field type in the binary packet data
              U1 - unsigned 8-bit int (B)
              I1 - signed 8-bit int (b)
              X1 - 8-bit bitfield, treat as unsigned to make bit-manipulation easier (B)
              U2 - unsigned 16-bit int (<H)
              I2 - signed 16-bit int (<h)
              X2 - 16-bit bitfield (<H)
              U4 - unsigned 32-bit int (<I)
              I4 - signed 32-bit int (<i)
              X4 - 32-bit bitfield (<I)
              R4 - IEEE-754 32-bit floating point (<f)
              R8 - IEEE-754 64-bit floating point (<d)
              CHnn - nn-byte string, padded with trailing nulls
              U[nn] - nn reserved bytes. These take up space but are never read.
              None - field is not in the payload, but is calculated by fixup()
              A class decorated with ublox_block - each element of a list field is one of these
    :param scale: either a number or a callable. If a number, the raw value in the binary data
               is multiplied by this value to get the scaled value. If a callable, it must
               take a single parameter and will be passed the raw binary data.
    :param enum: Enum class. The raw bits are decoded into an EnumField, named after the
               Enum member with the same value, or left unnamed if there is no such member.
    :param unit: Unit of the final scaled value
    :param b1: If a bitfield, this is the upper bit
    :param b0: declares the value as a bitfield. All consecutive fields with the same type
               and increasing bit numbers are considered to be the same bitfield.
               This is the lower bit (LSB is bit 0).
    :param group: Name of the sub-object of the decoded data this field is reported in
    :param record: If False, the field is not reported in the decoded data
    :param count: For list fields, name of the earlier field holding the number of repeats.
               If not given, the rest of the payload is divided into repeats.
    :param comment: Description of the field
    :return: A dictionary appropriate for passing to field(metadata=)
    """
    kwargs['type']=raw_type
    return kwargs


FieldDesc=namedtuple("FieldDesc","name fmt ofs size b1 b0 scale")
FieldDesc.__doc__="""Compiled form of one field. fmt is None for padding and for calculated fields."""

packet_desc=namedtuple("packet_desc","b fields records has_itow block")
packet_desc.__doc__="""
Compiled form of a packet or block description

* b: number of bytes in the fixed part (the header, for a packet with a repeating block)
* fields: FieldDesc for each field in the fixed part which is read from the payload
* records: (name,group) of each field reported in the decoded data, in order
* has_itow: True if the fixed part has an iTOW field
* block: block_desc of the repeating part, or None
"""

block_desc=namedtuple("block_desc","name m count element")
block_desc.__doc__="""
Compiled form of a repeating block

* name: name of the list field
* m: number of bytes in one repeat
* count: name of the header field holding the number of repeats, or None to use the remaining length
* element: ublox_block class, or a FieldDesc for a list of plain values
"""


def make_scale(scale):
    if scale is None:
        return None
    elif callable(scale):
        return scale
    else:
        return partial(lambda s, x: s * x, scale)


def decode_string(raw:bytes)->str:
    return str(raw,encoding='cp437').rstrip('\0')


def compile_field(field_name:str,metadata:dict,ofs:int)->FieldDesc:
    """
    Compile one payload field at a known offset
    """
    ublox_type=metadata['type']
    if ublox_type[0:2]=="CH":
        size=int(ublox_type[2:])
        return FieldDesc(field_name,f"{size}s",ofs,size,None,None,make_scale(metadata.get('scale',decode_string)))
    if ublox_type[1]=="[":
        return FieldDesc(field_name,None,ofs,int(ublox_type[2:-1]),None,None,None)
    fmt,size=size_dict[ublox_type]
    b0=metadata.get('b0',None)
    b1=metadata.get('b1',b0)
    if 'enum' in metadata:
        width=size*8 if b0 is None else b1-b0+1
        scale=partial(EnumField.decode,width=width,table=bit_table(metadata['enum'],width))
    else:
        scale=make_scale(metadata.get('scale',None))
    return FieldDesc(field_name,fmt,ofs,size,b1,b0,scale)


def compile_ublox(pktcls)->packet_desc:
    """
    Compile the field list of a packet or block dataclass into a form more
    usable at runtime.

    Offsets are assigned in declaration order. A bitfield (a field with b0)
    shares the word of the field before it if that field is a bitfield of the
    same type and this field starts above the previous one's upper bit.
    Otherwise it starts a new word. This matches the way the interface
    description lists several named bits out of one X1/X2/X4 field.
    """
    ofs=0
    last_x=None
    last_b1=None
    last_ofs=0
    payload_fields=[]
    records=[]
    block=None
    for field in fields(pktcls):
        metadata=field.metadata
        if 'type' not in metadata:
            continue
        if block is not None:
            raise TypeError(f"{pktcls.__name__}.{field.name}: fields after the repeating block are not supported")
        ublox_type=metadata['type']
        if metadata.get('record',True) and not (isinstance(ublox_type,str) and ublox_type[1]=="["):
            records.append((field.name,metadata.get('group',None)))
        if str(field.type)[0:4]=='list':
            if hasattr(ublox_type,'compiled_form'):
                block=block_desc(field.name,ublox_type.compiled_form.b,metadata.get('count',None),ublox_type)
            else:
                element=compile_field(field.name,metadata,0)
                block=block_desc(field.name,element.size,metadata.get('count',None),element)
            continue
        if ublox_type is None:
            continue
        if 'b0' in metadata and ublox_type==last_x and last_b1 is not None and metadata['b0']>last_b1:
            desc=compile_field(field.name,metadata,last_ofs)
        else:
            desc=compile_field(field.name,metadata,ofs)
            last_ofs=ofs
            ofs+=desc.size
        if 'b0' in metadata:
            last_x=ublox_type
            last_b1=desc.b1
        else:
            last_x=None
            last_b1=None
        if desc.fmt is not None:
            payload_fields.append(desc)
    has_itow=any(desc.name=='iTOW' for desc in payload_fields)
    return packet_desc(ofs,payload_fields,records,has_itow,block)


def unpack_field(payload:bytes,base:int,desc:FieldDesc,packet_type:str):
    """
    Read one field from the payload, after making sure it is all there

    :param base: offset of the start of the packet header or block in the payload
    """
    ofs=base+desc.ofs
    if ofs+desc.size>len(payload):
        raise DecodeError(packet_type,f"payload is {len(payload)} bytes, field needs {ofs+desc.size}",offset=ofs,field=desc.name)
    value=unpack_from("<"+desc.fmt,payload,ofs)[0]
    if desc.b0 is not None:
        value=get_bits(value,b1=desc.b1,b0=desc.b0)
    if desc.scale is not None:
        value=desc.scale(value)
    return value


def record_data(obj,compiled_form:packet_desc)->dict:
    """
    Collect the reported fields of a packet or block into a dictionary, with
    grouped fields nested in a sub-dictionary named after their group.
    """
    result={}
    for field_name,group in compiled_form.records:
        value=getattr(obj,field_name)
        if isinstance(value,list):
            value=[x.data if isinstance(x,UBloxBlock) else x for x in value]
        if group is None:
            result[field_name]=value
        else:
            result.setdefault(group,{})[field_name]=value
    return result


class UBloxBlock:
    """
    One repeat of the repeating block of a packet, for instance one satellite
    of UBX-NAV-SAT. Subclasses are dataclasses decorated with ublox_block().
    """
    def __init__(self,payload:bytes,base:int,packet_type:str):
        for field in fields(self):
            setattr(self,field.name,None)
        for desc in self.compiled_form.fields:
            setattr(self,desc.name,unpack_field(payload,base,desc,packet_type))
        self.fixup()
    def fixup(self)->None:
        """
        Once a block has been read, run this to calculate some fields from other fields
        """
        pass
    @property
    def data(self)->dict:
        return record_data(self,self.compiled_form)


class UBloxPacket:
    """
    Subclasses should be dataclasses. Each field in the packet is represented by a
    field in the dataclass. The type of the field is the type of the *scaled* value.
    If the type is a list, then this is the repeating section of a packet, and
    there can only be one.

    Decoded packets carry:

    * type      - symbolic name, like "NAV-PVT"
    * iTOW      - receiver time of week in milliseconds, for packets which have one
    * timestamp - absolute time derived from iTOW (see gnsspacket.gpstime for its limits),
                  or None for packets with no iTOW
    * data      - dictionary of all reported fields
    """
    def parse_payload(self,payload:bytes)->None:
        """
        Parse a ublox packet

        :param payload: bytes array containing payload of packet, not including header or checksum
        :return: None, but sets fields of self as appropriate
        :raises DecodeError: if the payload is too short for its fields or repeats
        """
        compiled_form=self.compiled_form
        for field in fields(self):
            setattr(self,field.name,None)
        for desc in compiled_form.fields:
            setattr(self,desc.name,unpack_field(payload,0,desc,self.type))
        block=compiled_form.block
        if block is not None:
            b=compiled_form.b
            if block.count is None:
                remaining=max(len(payload)-b,0)
                if remaining%block.m!=0:
                    raise DecodeError(self.type,f"{remaining} bytes after the header is not a whole number "
                                                f"of {block.m}-byte repeats",offset=b,field=block.name)
                n_rows=remaining//block.m
            else:
                n_rows=getattr(self,block.count)
                if n_rows>0 and b+n_rows*block.m>len(payload):
                    raise DecodeError(self.type,f"{block.count}={n_rows} needs {b+n_rows*block.m} bytes, "
                                                f"payload is {len(payload)}",offset=b,field=block.name)
            rows=[]
            for i_row in range(n_rows):
                row0=b+i_row*block.m
                if isinstance(block.element,FieldDesc):
                    rows.append(unpack_field(payload,row0,block.element,self.type))
                else:
                    rows.append(block.element(payload,row0,self.type))
            setattr(self,block.name,rows)
        self.fixup()
        if compiled_form.has_itow:
            self.timestamp=itow_to_datetime(self.iTOW,self.clock)
    def fixup(self)->None:
        """
        Once a packet has been read, run this to calculate some fields from other fields
        """
        pass
    @property
    def type(self)->str:
        return packet_name(self.cls,self.id)
    @property
    def data(self)->dict:
        return record_data(self,self.compiled_form)
    def as_dict(self)->dict:
        """
        Full decoded record: type, and for navigation packets iTOW and
        timestamp, then the data dictionary
        """
        result={"type":self.type}
        if self.compiled_form.has_itow:
            result["iTOW"]=self.iTOW
            result["timestamp"]=self.timestamp
        result["data"]=self.data
        return result
    def __init__(self,cls:int,id:int,payload:bytes,*,clock:Clock=utcnow):
        self.cls = cls
        self.id = id
        self.payload = payload
        self.clock = clock
        self.timestamp = None
        if hasattr(self,'compiled_form'):
            self.parse_payload(payload)


def register_ublox(cls:int,id:int,pktcls)->None:
    decode_frame.classes[(cls,id)]=pktcls


def ublox_packet(cls:int,id:int):
    """
    Class decorator which turns a packet description into a decoder and
    registers it under its message class and id
    """
    def inner(pktcls):
        pktcls=dataclass(pktcls,init=False)
        pktcls.compiled_form=compile_ublox(pktcls)
        register_ublox(cls,id,pktcls)
        return pktcls
    return inner


def ublox_block(blkcls):
    """
    Class decorator for the description of one repeat of a repeating block
    """
    blkcls=dataclass(blkcls,init=False)
    blkcls.compiled_form=compile_ublox(blkcls)
    if blkcls.compiled_form.block is not None:
        raise TypeError(f"{blkcls.__name__}: nested repeating blocks are not supported")
    return blkcls


def warn_unknown(unknown:UnknownPacket)->None:
    """Default handler for frames with no decoder"""
    cls,id=unknown.key
    warnings.warn(f"Unhandled packet {unknown.name or 'UNKNOWN'} cls=0x{cls:02x}, id=0x{id:02x}",UnknownPacketWarning)


def decode_frame(frame:Frame,*,clock:Clock=utcnow,
                 on_unknown:Callable[[UnknownPacket],None]=warn_unknown)->Optional[UBloxPacket]:
    """
    Decode one frame. This is a factory function, which figures out which packet
    this is, then calls the __init__ for the correct dataclass.

    :param frame: frame to decode. It is not modified.
    :param clock: callable returning the current time, used to pick the GPS week
                  for the timestamp of packets with iTOW
    :param on_unknown: called with an UnknownPacket if there is no decoder for this frame
    :return: decoded packet, or None if there is no decoder for this frame
    :raises DecodeError: if the frame has a decoder but its payload can't be decoded

    To register a packet type, add an entry to the decode_frame.classes
    dictionary. The key is the (cls,id) tuple, and the value is a callable
    taking cls, id, payload and a keyword clock which returns the decoded packet.
    ublox_packet() does this for packet descriptions.
    """
    key=(frame.cls,frame.id)
    if key not in decode_frame.classes:
        on_unknown(UnknownPacket(frame=frame,key=key,name=packet_name(*key)))
        return None
    return decode_frame.classes[key](frame.cls,frame.id,frame.payload,clock=clock)
decode_frame.classes={}


def decode_frames(frames:Iterable[Frame],*,clock:Clock=utcnow,
                  on_unknown:Callable[[UnknownPacket],None]=warn_unknown,strict:bool=False)->Iterator[UBloxPacket]:
    """
    Decode a sequence of frames, in order.

    A frame that can't be decoded is skipped with a BadPacketWarning and
    does not stop the stream, unless strict is set, in which case the
    DecodeError propagates. Frames with no decoder go to on_unknown and
    produce nothing.
    """
    for frame in frames:
        try:
            packet=decode_frame(frame,clock=clock,on_unknown=on_unknown)
        except DecodeError as e:
            if strict:
                raise
            warnings.warn(f"Skipping bad packet: {e}",BadPacketWarning)
            continue
        if packet is not None:
            yield packet


from gnsspacket.ublox import protocol
