"""

"""
from datetime import datetime
from decimal import Decimal
from fractions import Fraction
from struct import pack, unpack_from

import pytest
import pytz

from gnsspacket import DecodeError, Frame
from gnsspacket.ublox import decode_frame


def clock():
    return pytz.utc.localize(datetime(2024,1,10,12))


def decode(cls,id,payload):
    return decode_frame(Frame(cls=cls,id=id,payload=payload),clock=clock)


def utc(*args):
    return pytz.utc.localize(datetime(*args))


ITOW=123456000
# 1 day 10:17:36 into GPS week 2296, which starts 2024-01-07
ITOW_TIME=utc(2024,1,8,10,17,36)


def nav_pvt(valid=0b0111,sec=56,nano=123456789):
    return pack('<IHBBBBBBIiBBBBiiiiIIiiiiiIIHH4sihH',
                ITOW,2024,1,10,12,34,sec,valid,20,nano,
                3,0b10001111,0b11100000,12,
                -1054321234,401234567,1600000,1620000,1500,2500,
                100,-200,5,224,12345678,50,500000,135,0b110,
                bytes(4),0,820,50)


def nav_sat(*sats,version=1,numSvs=None):
    if numSvs is None:
        numSvs=len(sats)
    return pack('<IBBxx',ITOW,version,numSvs)+b''.join(pack('<BBBbhhI',*sat) for sat in sats)


def nav_sig(*sigs,version=0):
    return pack('<IBBxx',ITOW,version,len(sigs))+b''.join(pack('<BBBBhBBBBH4x',*sig) for sig in sigs)


def nav_hpposllh(version=0):
    return pack('<BxxBIiiiibbbbII',version,0,ITOW,1,2,1000,2000,5,-3,7,-2,15,25)


def nav_relposned():
    return pack('<BxHIiiiii4xbbbbIIIII4xI',1,17,ITOW,
                123,-50,0,133,9000000,
                4,-5,0,1,
                14,15,16,17,180000,
                0b100010111)


def mon_ver(*extensions):
    return (b'ROM CORE 3.01 (107888)'.ljust(30,b'\0')+b'00080000'.ljust(10,b'\0')+
            b''.join(extension.ljust(30,b'\0') for extension in extensions))


def mon_rf(version=0):
    return (pack('<BBxx',version,2)+
            pack('<BBBBI4xHHBbBbB3x',0,0b01,2,1,0,87,6000,12,-3,120,4,130)+
            pack('<BBBBI4xHHBbBbB3x',1,0b11,4,2,0,90,5000,0,0,100,0,100))


@pytest.mark.parametrize(
    "cls,id,payload,itow_ofs",
    [
        (0x01,0x03,pack('<IBBBBII',ITOW,3,0x0f,0x83,0xd1,30000,1234567),0),
        (0x01,0x02,pack('<IiiiiII',ITOW,0,0,0,0,0,0),0),
        (0x01,0x12,pack('<IiiiIIiII',ITOW,0,0,0,0,0,0,0,0),0),
        (0x01,0x07,nav_pvt(),0),
        (0x01,0x35,nav_sat(),0),
        (0x01,0x43,nav_sig(),0),
        (0x01,0x14,nav_hpposllh(),4),
        (0x01,0x3c,nav_relposned(),4),
        (0x01,0x61,pack('<I',ITOW),0),
        (0x01,0x04,pack('<I7H',ITOW,1,2,3,4,5,6,7),0),
        (0x01,0x22,pack('<IiiII',ITOW,1,2,3,4),0),
        (0x01,0x20,pack('<IihbBI',ITOW,0,2296,18,0b111,10),0),
        (0x01,0x21,pack('<IIiHBBBBBB',ITOW,10,0,2024,1,8,10,17,18,0x37),0),
    ]
)
def test_itow(cls,id,payload,itow_ofs):
    packet=decode(cls,id,payload)
    assert packet.iTOW==unpack_from('<I',payload,itow_ofs)[0]
    assert packet.timestamp==ITOW_TIME
    assert packet.as_dict()["iTOW"]==packet.iTOW


def test_nav_pvt():
    packet=decode(0x01,0x07,nav_pvt())
    assert packet.type=="NAV-PVT"
    assert (packet.year,packet.month,packet.day,packet.hour,packet.min,packet.sec)==(2024,1,10,12,34,56)
    assert packet.fixType.name=="THREE_D_FIX"
    assert packet.gnssFixOK
    assert packet.diffSoln
    assert packet.psmState.name=="TRACKING"
    assert packet.carrSoln.name=="CARRIER_SOLUTION_WITH_FIXED_AMBIGUITIES"
    assert packet.confirmedAvai and packet.confirmedDate and packet.confirmedTime
    assert packet.numSV==12
    assert packet.lon==Decimal('-105.4321234')
    assert packet.lat==Decimal('40.1234567')
    assert packet.height==1600000
    assert packet.velE==-200
    assert packet.headMot==Decimal('123.45678')
    assert packet.headAcc==Decimal('5')
    assert packet.pDOP==Decimal('1.35')
    assert not packet.invalidLlh
    assert packet.lastCorrectionAge==5.0
    assert packet.magDec==Decimal('8.2')
    assert packet.utc==utc(2024,1,10,12,34,56,123456)
    data=packet.data
    assert data["valid"]=={"validDate":True,"validTime":True,"fullyResolved":True,"validMag":False}
    assert data["flags"]["gnssFixOK"]
    assert data["utc"]==packet.utc
    assert "reserved0" not in data


@pytest.mark.parametrize(
    "valid",
    [0b0000,0b0001,0b0010]
)
def test_nav_pvt_utc_invalid(valid):
    assert decode(0x01,0x07,nav_pvt(valid=valid)).utc is None


def test_nav_pvt_leap_second():
    payload=bytearray(nav_pvt(sec=60,nano=0))
    payload[4:10]=pack('<HBBBB',2016,12,31,23,59)
    assert decode(0x01,0x07,bytes(payload)).utc==utc(2017,1,1)


def test_nav_status():
    packet=decode(0x01,0x03,pack('<IBBBBII',ITOW,3,0x0f,0x83,0xd1,30000,1234567))
    assert packet.gpsFix.name=="THREE_D_FIX"
    assert packet.gpsFixOk and packet.diffSoln and packet.wknSet and packet.towSet
    assert packet.diffCorr and packet.carrSolnValid
    assert packet.mapMatching.name=="VALID_USED"
    assert packet.psmState.name=="TRACKING"
    assert packet.spoofDetState.name=="SPOOFING_INDICATED"
    # 0b11 is reserved for the carrier solution
    assert packet.carrSoln.name is None
    assert packet.carrSoln.bits=="11"
    assert packet.carrSoln.value==3
    assert packet.ttff==30000
    assert packet.msss==1234567
    assert packet.data["fixStat"]["mapMatching"]==packet.mapMatching


def test_nav_posllh():
    packet=decode(0x01,0x02,pack('<IiiiiII',ITOW,-1054321234,401234567,1600000,1620000,1500,2500))
    assert packet.lon==Decimal('-105.4321234')
    assert packet.lat==Decimal('40.1234567')
    assert (packet.height,packet.hMSL,packet.hAcc,packet.vAcc)==(1600000,1620000,1500,2500)


def test_nav_velned():
    packet=decode(0x01,0x12,pack('<IiiiIIiII',ITOW,10,-20,3,23,22,-9000000,4,100000))
    assert (packet.velN,packet.velE,packet.velD,packet.speed,packet.gSpeed)==(10,-20,3,23,22)
    assert packet.heading==Decimal('-90')
    assert packet.sAcc==4
    assert packet.cAcc==Decimal('1')


def test_nav_sat():
    packet=decode(0x01,0x35,nav_sat((0,5,45,30,270,-12,2335),
                                    (9,1,0,-91,0,0,0b110000)))
    assert packet.version==1
    assert packet.numSvs==2
    assert len(packet.sats)==2
    sv=packet.sats[0]
    assert sv.gnssId.name=="GPS"
    assert (sv.svId,sv.cno,sv.elev,sv.azim)==(5,45,30,270)
    assert sv.prRes==Decimal('-1.2')
    assert sv.qualityInd.name=="CODE_CARRIER_LOCKED_TIME_SYNC7"
    assert sv.svUsed
    assert sv.health.name=="HEALTHY"
    assert sv.orbitSource.name=="EPHEMERIS"
    assert sv.ephAvail
    assert not sv.almAvail
    sv=packet.sats[1]
    assert sv.gnssId.name is None
    assert sv.gnssId.value==9
    assert sv.health.name is None
    assert sv.health.bits=="11"
    assert packet.data["sats"][0]["flags"]["svUsed"]


def test_nav_sat_empty():
    # Header only, not even the reserved bytes
    packet=decode(0x01,0x35,pack('<IBB',ITOW,1,0))
    assert packet.sats==[]
    assert packet.data["sats"]==[]


def test_nav_sat_count_too_large():
    with pytest.raises(DecodeError) as excinfo:
        decode(0x01,0x35,nav_sat((0,5,45,30,270,-12,2335),numSvs=2))
    assert excinfo.value.packet_type=="NAV-SAT"
    assert excinfo.value.field=="sats"
    assert excinfo.value.offset==8


def test_nav_sig():
    packet=decode(0x01,0x43,nav_sig((0,3,0,0,5,40,7,0,1,0b1001),
                                    (2,11,5,0,-3,35,4,4,8,0b1),
                                    (6,2,1,8,0,20,1,0,0,0),
                                    (4,1,0,0,0,0,0,0,0,0)))
    assert packet.numSigs==4
    sig=packet.sigs[0]
    assert sig.gnssId.name=="GPS"
    assert sig.sigId.name=="GPS_L1CA"
    assert sig.prRes==Decimal('0.5')
    assert sig.qualityInd.name=="CODE_CARRIER_LOCKED_TIME_SYNC7"
    assert sig.corrSource.name=="NONE"
    assert sig.ionoModel.name=="KLOBUCHAR_GPS"
    assert sig.health.name=="HEALTHY"
    assert sig.prUsed
    assert not sig.crUsed
    sig=packet.sigs[1]
    assert sig.gnssId.name=="Galileo"
    assert sig.sigId.name=="Galileo_E5bI"
    assert sig.corrSource.name=="RTCM3_OSR"
    assert sig.ionoModel.name=="DUAL_FREQ"
    # Unknown signal of a known constellation, and a constellation with no signal table
    assert packet.sigs[2].sigId.name is None
    assert packet.sigs[2].sigId.value==1
    assert packet.sigs[3].gnssId.name=="IMES"
    assert packet.sigs[3].sigId.name is None


def test_nav_hpposllh():
    packet=decode(0x01,0x14,nav_hpposllh())
    assert Fraction(packet.lon)==Fraction(1,10**7)+Fraction(5,10**9)
    assert packet.lon==Decimal('1.05e-7')
    assert packet.lat==Decimal('1.97e-7')
    assert packet.height==Decimal('1000.7')
    assert packet.hMSL==Decimal('1999.8')
    assert packet.hAcc==Decimal('1.5')
    assert packet.vAcc==Decimal('2.5')
    assert not packet.invalidLlh
    for residual in ("lonHp","latHp","heightHp","hMSLHp"):
        assert residual not in packet.data


def test_nav_relposned():
    packet=decode(0x01,0x3c,nav_relposned())
    assert packet.refStationId==17
    assert packet.relPosN==Decimal('1230.4')
    assert packet.relPosE==Decimal('-500.5')
    assert packet.relPosD==0
    assert packet.relPosLength==Decimal('1330.1')
    assert packet.relPosHeading==Decimal('90')
    assert packet.accN==Decimal('1.4')
    assert packet.accHeading==Decimal('1.8')
    assert packet.gnssFixOK and packet.diffSoln and packet.relPosValid
    assert packet.carrSoln.name=="CARRIER_SOLUTION_WITH_FIXED_AMBIGUITIES"
    assert not packet.isMoving
    assert packet.relPosHeadingValid
    assert not packet.relPosNormalized
    assert "relPosHPN" not in packet.data


def test_nav_eoe():
    packet=decode(0x01,0x61,pack('<I',ITOW))
    assert packet.as_dict()=={"type":"NAV-EOE","iTOW":ITOW,"timestamp":ITOW_TIME,"data":{"iTOW":ITOW}}


def test_nav_dop():
    packet=decode(0x01,0x04,pack('<I7H',ITOW,250,180,120,150,90,70,60))
    assert packet.gDOP==Decimal('2.5')
    assert packet.eDOP==Decimal('0.6')


def test_nav_clock():
    packet=decode(0x01,0x22,pack('<IiiII',ITOW,-1000,25,15,300))
    assert (packet.clkB,packet.clkD,packet.tAcc,packet.fAcc)==(-1000,25,15,300)


def test_nav_timegps():
    packet=decode(0x01,0x20,pack('<IihbBI',3600000,500000,2296,18,0b111,10))
    assert packet.week==2296
    assert packet.leapS==18
    assert packet.gpsTime==utc(2024,1,7,1,0,0,500)
    packet=decode(0x01,0x20,pack('<IihbBI',3600000,500000,2296,18,0b101,10))
    assert packet.gpsTime is None


def test_nav_timeutc():
    packet=decode(0x01,0x21,pack('<IIiHBBBBBB',ITOW,10,-1000,2024,1,8,10,17,18,0x37))
    assert packet.utcStandard.name=="USNO"
    assert packet.utc==utc(2024,1,8,10,17,17,999999)
    packet=decode(0x01,0x21,pack('<IIiHBBBBBB',ITOW,10,0,2024,1,8,10,17,18,0x33))
    assert packet.utc is None


@pytest.mark.parametrize(
    "id,attr",
    [
        (0x01,"ackName"),
        (0x00,"nakName"),
    ]
)
def test_ack(id,attr):
    packet=decode(0x05,id,pack('<BB',0x06,0x8a))
    assert (packet.clsID,packet.msgID)==(0x06,0x8a)
    assert getattr(packet,attr)=="CFG-VALSET"
    assert packet.timestamp is None
    assert "iTOW" not in packet.as_dict()


def test_mon_ver():
    packet=decode(0x0a,0x04,mon_ver())
    assert packet.swVersion=="ROM CORE 3.01 (107888)"
    assert packet.hwVersion=="00080000"
    assert packet.extensions==[]
    packet=decode(0x0a,0x04,mon_ver(b'FWVER=HPG 1.13'))
    assert packet.extensions==["FWVER=HPG 1.13"]
    assert packet.timestamp is None
    assert packet.as_dict()=={"type":"MON-VER","data":{"swVersion":"ROM CORE 3.01 (107888)",
                                                       "hwVersion":"00080000",
                                                       "extensions":["FWVER=HPG 1.13"]}}


def test_mon_ver_partial_extension():
    with pytest.raises(DecodeError) as excinfo:
        decode(0x0a,0x04,mon_ver()+b'PROTVER=27.11')
    assert excinfo.value.field=="extensions"
    assert excinfo.value.offset==40


def test_mon_rf():
    packet=decode(0x0a,0x38,mon_rf())
    assert packet.nBlocks==2
    block=packet.blocks[0]
    assert block.blockId.name=="L1"
    assert block.jammingState.name=="OK"
    assert block.antStatus.name=="OK"
    assert block.antPower.name=="ON"
    assert (block.noisePerMS,block.agcCnt,block.jamInd)==(87,6000,12)
    assert (block.ofsI,block.magI,block.ofsQ,block.magQ)==(-3,120,4,130)
    block=packet.blocks[1]
    assert block.blockId.name=="L2_OR_L5"
    assert block.jammingState.name=="CRITICAL"
    assert block.antStatus.name=="OPEN"
    assert block.antPower.name=="DONTKNOW"


@pytest.mark.parametrize(
    "cls,id,payload,version,count",
    [
        (0x01,0x35,nav_sat((0,5,45,30,270,-12,2335),version=0),0,("sats",1)),
        (0x01,0x43,nav_sig((0,3,0,0,5,40,7,0,1,0b1001),version=1),1,("sigs",1)),
        (0x01,0x14,nav_hpposllh(version=1),1,None),
        (0x0a,0x38,mon_rf(version=1),1,("blocks",2)),
    ]
)
def test_other_versions(cls,id,payload,version,count):
    packet=decode(cls,id,payload)
    assert packet.version==version
    assert packet.data["version"]==version
    if count is not None:
        name,n=count
        assert len(getattr(packet,name))==n


def test_nav_sat_zeroed_header():
    packet=decode(0x01,0x35,bytes(6))
    assert packet.version==0
    assert packet.numSvs==0
    assert packet.sats==[]


def test_nav_relposned_version_0():
    payload=bytearray(64)
    payload[8:12]=pack('<i',1)
    packet=decode(0x01,0x3c,bytes(payload))
    assert packet.version==0
    assert packet.relPosN==10
    assert packet.relPosLength==0
    assert packet.carrSoln.name=="NO_CARRIER_SOLUTION"


@pytest.mark.parametrize(
    "cls,id,payload,offset",
    [
        (0x01,0x07,pack('<IHBBBBBB',ITOW,0,0,0,0,0,0,0b011)+bytes(80),4),
        (0x01,0x07,nav_pvt()[:4]+pack('<HBBBBB',2024,2,30,12,0,0)+nav_pvt()[11:],4),
        (0x01,0x21,pack('<IIiHBBBBBB',ITOW,10,0,2024,13,1,0,0,0,0x07),12),
        (0x01,0x21,pack('<IIiHBBBBBB',ITOW,10,0,2024,1,1,24,0,0,0x07),12),
    ]
)
def test_bad_utc(cls,id,payload,offset):
    with pytest.raises(DecodeError) as excinfo:
        decode(cls,id,payload)
    assert excinfo.value.field=="utc"
    assert excinfo.value.offset==offset


def test_bad_utc_not_valid():
    payload=pack('<IHBBBBBB',ITOW,0,0,0,0,0,0,0b001)+bytes(80)
    assert decode(0x01,0x07,payload).utc is None


@pytest.mark.parametrize(
    "cls,id,payload,field,offset",
    [
        (0x01,0x02,bytes(10),"lat",8),
        (0x01,0x07,nav_pvt()[:91],"magAcc",90),
        (0x01,0x61,bytes(3),"iTOW",0),
        (0x0a,0x38,mon_rf()[:20],"blocks",4),
        (0x0a,0x04,bytes(35),"hwVersion",30),
    ]
)
def test_payload_too_short(cls,id,payload,field,offset):
    with pytest.raises(DecodeError) as excinfo:
        decode(cls,id,payload)
    assert excinfo.value.field==field
    assert excinfo.value.offset==offset
    assert field in str(excinfo.value)
