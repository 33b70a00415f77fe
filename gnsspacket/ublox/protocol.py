"""
Packets defined by the UBX protocol, as used by the u-blox M8/F9 families.

Where a message has gone through several revisions, the description here is
the latest and most complete one, since the older revisions are subsets of it.
The version byte of versioned messages is reported but not checked, so a
message from a different revision is decoded with this layout as far as its
payload reaches.

Many fields in these packets are transmitted in the form of scaled integers. When the scale factor
is a power of 10, we use the Decimal type for it, so the scaled value is exact. Fields whose
unit in the interface description is already useful (mm, mm/s, ns, ms) are left as raw integers,
and the unit is recorded in the unit= parameter.

Fields which make sense as enumerations are declared with enum= and an Enum class. Only the codes
which have a meaning are members, so reserved codes come out as an EnumField with no name. If the
enum is only used with one packet, declare it inside of that packet, just before the (first) field
that uses it. If not, hoist it above the first packet that uses it.

Some positions are split into a coarse part and a high-precision part at a different offset. Both
parts are read with their own scale, so they are in the same unit, then added in fixup().
"""
from dataclasses import field
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional

import pytz

from gnsspacket import DecodeError
from gnsspacket.bin import EnumField, bit_string
from gnsspacket.gpstime import week_itow_to_datetime
from gnsspacket.ublox import ublox_packet, ublox_block, UBloxPacket, UBloxBlock, bin_field
from gnsspacket.ublox.identifiers import GNSSID, packet_name, signal_name


def utc_datetime(year:int,month:int,day:int,hour:int,min:int,sec:int,nano:int)->datetime:
    """
    Assemble a UTC timestamp to microsecond precision from the calendar fields of a packet.

    sec may be 60 during a leap second, which datetime can't represent, so that
    second is carried over into the next minute. nano may be negative.

    :raises ValueError: if the calendar fields are out of range
    """
    utc=pytz.utc.localize(datetime(year=year,month=month,day=day,hour=hour,minute=min,second=0))
    return utc+timedelta(seconds=sec,microseconds=int(nano/1000))


class FIX(Enum):
    NO_FIX = 0
    DEAD_RECKONING_ONLY = 1
    TWO_D_FIX = 2
    THREE_D_FIX = 3
    GNSS_AND_DEAD_RECKONING_COMBINED = 4
    TIME_ONLY = 5


class CARR_SOLN(Enum):
    NO_CARRIER_SOLUTION = 0
    CARRIER_SOLUTION_WITH_FLOATING_AMBIGUITIES = 1
    CARRIER_SOLUTION_WITH_FIXED_AMBIGUITIES = 2


class HEALTH(Enum):
    UNKNOWN = 0
    HEALTHY = 1
    UNHEALTHY = 2


class QIND(Enum):
    """Signal quality indicator"""
    NO_SIGNAL = 0
    SEARCHING = 1
    ACQUIRED = 2
    DETECTED_UNUSABLE = 3
    CODE_LOCKED_TIME_SYNC = 4
    CODE_CARRIER_LOCKED_TIME_SYNC5 = 5
    CODE_CARRIER_LOCKED_TIME_SYNC6 = 6
    CODE_CARRIER_LOCKED_TIME_SYNC7 = 7


class UTCSTD(Enum):
    NA = 0
    CRL = 1
    NIST = 2
    USNO = 3
    BIPM = 4
    EU_LABS = 5
    SU = 6
    CHINA_NTSC = 7
    NPL_INDIA = 8
    NOT_UTC = 14
    UNKNOWN = 15


@ublox_packet(0x01,0x03)
class UBX_NAV_STATUS(UBloxPacket):
    """Receiver navigation status"""
    iTOW         :int          =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    gpsFix       :EnumField    =field(metadata=bin_field("U1", enum=FIX, comment="GPSfix Type"))
    gpsFixOk     :bool         =field(metadata=bin_field("X1", b0=0, scale=bool, group="flags", comment="Position and velocity valid and within DOP and ACC Masks"))
    diffSoln     :bool         =field(metadata=bin_field("X1", b0=1, scale=bool, group="flags", comment="Differential corrections were applied"))
    wknSet       :bool         =field(metadata=bin_field("X1", b0=2, scale=bool, group="flags", comment="Week Number valid"))
    towSet       :bool         =field(metadata=bin_field("X1", b0=3, scale=bool, group="flags", comment="Time of Week valid"))
    diffCorr     :bool         =field(metadata=bin_field("X1", b0=0, scale=bool, group="fixStat", comment="Differential corrections available"))
    carrSolnValid:bool         =field(metadata=bin_field("X1", b0=1, scale=bool, group="fixStat", comment="Valid carrSoln"))
    class MAPMATCHING(Enum):
        NONE=0
        VALID_UNUSED=1
        VALID_USED=2
        VALID_USED_DR_ENABLED = 3
    mapMatching  :EnumField    =field(metadata=bin_field("X1", b1=7, b0=6, enum=MAPMATCHING, group="fixStat"))
    class PSM(Enum):
        ACQUISITION=0
        TRACKING=1
        POWER_OPTIMIZED_TRACKING=2
        INACTIVE=3
    psmState     :EnumField    =field(metadata=bin_field("X1", b1=1, b0=0, enum=PSM, group="flags", comment="Power save mode state"))
    class SPOOFDET(Enum):
        UNKNOWN_OR_DEACTIVATED=0
        NO_SPOOFING_INDICATED=1
        SPOOFING_INDICATED=2
        MULTIPLE_SPOOFING_INDICATIONS=3
    spoofDetState:EnumField    =field(metadata=bin_field("X1", b1=4, b0=3, enum=SPOOFDET, group="flags", comment="Spoofing detection state"))
    carrSoln     :EnumField    =field(metadata=bin_field("X1", b1=7, b0=6, enum=CARR_SOLN, group="flags", comment="Carrier phase range solution status"))
    ttff         :int          =field(metadata=bin_field("U4", unit="ms", comment="Time to first fix (millisecond time tag)"))
    msss         :int          =field(metadata=bin_field("U4", unit="ms", comment="Milliseconds since Startup / Reset"))


@ublox_packet(0x01,0x02)
class UBX_NAV_POSLLH(UBloxPacket):
    """Geodetic position solution"""
    iTOW         :int          =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    lon          :Decimal      =field(metadata=bin_field("I4", scale=Decimal('1e-7'), unit="deg", comment="Longitude"))
    lat          :Decimal      =field(metadata=bin_field("I4", scale=Decimal('1e-7'), unit="deg", comment="Latitude"))
    height       :int          =field(metadata=bin_field("I4", unit="mm", comment="Height above ellipsoid"))
    hMSL         :int          =field(metadata=bin_field("I4", unit="mm", comment="Height above mean sea level"))
    hAcc         :int          =field(metadata=bin_field("U4", unit="mm", comment="Horizontal accuracy estimate"))
    vAcc         :int          =field(metadata=bin_field("U4", unit="mm", comment="Vertical accuracy estimate"))


@ublox_packet(0x01,0x12)
class UBX_NAV_VELNED(UBloxPacket):
    """Velocity solution in NED frame"""
    iTOW         :int          =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    velN         :int          =field(metadata=bin_field("I4", unit="cm/s", comment="North velocity component"))
    velE         :int          =field(metadata=bin_field("I4", unit="cm/s", comment="East velocity component"))
    velD         :int          =field(metadata=bin_field("I4", unit="cm/s", comment="Down velocity component"))
    speed        :int          =field(metadata=bin_field("U4", unit="cm/s", comment="Speed (3-D)"))
    gSpeed       :int          =field(metadata=bin_field("U4", unit="cm/s", comment="Ground speed (2-D)"))
    heading      :Decimal      =field(metadata=bin_field("I4", scale=Decimal('1e-5'), unit="deg", comment="Heading of motion 2-D"))
    sAcc         :int          =field(metadata=bin_field("U4", unit="cm/s", comment="Speed accuracy Estimate"))
    cAcc         :Decimal      =field(metadata=bin_field("U4", scale=Decimal('1e-5'), unit="deg", comment="Course / Heading accuracy estimate"))


@ublox_block
class NAV_SAT_SV(UBloxBlock):
    """One satellite of UBX-NAV-SAT"""
    gnssId        :EnumField    =field(metadata=bin_field("U1", enum=GNSSID, comment="GNSS identifier"))
    svId          :int          =field(metadata=bin_field("U1", comment="Satellite identifier"))
    cno           :int          =field(metadata=bin_field("U1", unit="dBHz", comment="Carrier-to-noise density ratio (signal strength)"))
    elev          :int          =field(metadata=bin_field("I1", unit="deg", comment="Elevation (range: +/-90), unknown if out of range"))
    azim          :int          =field(metadata=bin_field("I2", unit="deg", comment="Azimuth (range 0-360), unknown if elevation is out of range"))
    prRes         :Decimal      =field(metadata=bin_field("I2", scale=Decimal('1e-1'), unit="m", comment="Pseudorange residual"))
    qualityInd    :EnumField    =field(metadata=bin_field("X4", b1=2, b0=0, enum=QIND, group="flags", comment="Signal quality indicator"))
    svUsed        :bool         =field(metadata=bin_field("X4", b0=3, scale=bool, group="flags", comment="Signal in the subset specified "
                                                                                                        "in Signal Identifiers is currently "
                                                                                                        "being used for navigation"))
    health        :EnumField    =field(metadata=bin_field("X4", b1=5, b0=4, enum=HEALTH, group="flags", comment="Signal health flag"))
    diffCorr      :bool         =field(metadata=bin_field("X4", b0=6, scale=bool, group="flags", comment="Differential correction available for this SV"))
    smoothed      :bool         =field(metadata=bin_field("X4", b0=7, scale=bool, group="flags", comment="Carrier-smoothed pseudorange used"))
    class ORBSRC(Enum):
        NONE=0
        EPHEMERIS=1
        ALMANAC=2
        ASSISTNOW_OFFLINE=3
        ASSISTNOW_AUTONOMOUS=4
        OTHER5=5
        OTHER6=6
        OTHER7=7
    orbitSource   :EnumField    =field(metadata=bin_field("X4", b1=10, b0=8, enum=ORBSRC, group="flags", comment="Orbit source"))
    ephAvail      :bool         =field(metadata=bin_field("X4", b0=11, scale=bool, group="flags", comment="Ephemeris is available for this SV"))
    almAvail      :bool         =field(metadata=bin_field("X4", b0=12, scale=bool, group="flags", comment="Almanac is available for this SV"))
    anoAvail      :bool         =field(metadata=bin_field("X4", b0=13, scale=bool, group="flags", comment="AssistNow Offline data is available for this SV"))
    aopAvail      :bool         =field(metadata=bin_field("X4", b0=14, scale=bool, group="flags", comment="AssistNow Autonomous data is available for this SV"))
    sbasCorrUsed  :bool         =field(metadata=bin_field("X4", b0=16, scale=bool, group="flags"))
    rtcmCorrUsed  :bool         =field(metadata=bin_field("X4", b0=17, scale=bool, group="flags"))
    slasCorrUsed  :bool         =field(metadata=bin_field("X4", b0=18, scale=bool, group="flags"))
    spartnCorrUsed:bool         =field(metadata=bin_field("X4", b0=19, scale=bool, group="flags"))
    prCorrUsed    :bool         =field(metadata=bin_field("X4", b0=20, scale=bool, group="flags"))
    crCorrUsed    :bool         =field(metadata=bin_field("X4", b0=21, scale=bool, group="flags"))
    doCorrUsed    :bool         =field(metadata=bin_field("X4", b0=22, scale=bool, group="flags"))
    clasCorrUsed  :bool         =field(metadata=bin_field("X4", b0=23, scale=bool, group="flags"))


@ublox_packet(0x01,0x35)
class UBX_NAV_SAT(UBloxPacket):
    "This message displays information about SVs that are either "\
    "known to be visible or currently tracked by the receiver. "\
    "All signal related information corresponds to the subset of signals specified in Signal Identifiers."
    iTOW      :int              =field(metadata=bin_field("U4", unit="ms"))
    version   :int              =field(metadata=bin_field("U1", comment="Message version"))
    numSvs    :int              =field(metadata=bin_field("U1", comment="Number of satellites"))
    reserved0 :None             =field(metadata=bin_field("U[2]"))
    sats      :list[NAV_SAT_SV] =field(metadata=bin_field(NAV_SAT_SV, count="numSvs"))


@ublox_block
class NAV_SIG_SIGNAL(UBloxBlock):
    """One signal of UBX-NAV-SIG"""
    class CSRC(Enum):
        NONE = 0
        SBAS = 1
        BDS = 2
        RTCM2 = 3
        RTCM3_OSR = 4
        RTCM3_SSR = 5
        QZSS_SLAS = 6
        SPARTN = 7
        CLAS = 8
    class IONO(Enum):
        NONE = 0
        KLOBUCHAR_GPS = 1
        SBAS = 2
        KLOBUCHAR_BDS = 3
        DUAL_FREQ = 8
    gnssId    :EnumField    =field(metadata=bin_field("U1", enum=GNSSID, comment="GNSS identifier"))
    svId      :int          =field(metadata=bin_field("U1", comment="Satellite identifier"))
    sigId     :EnumField    =field(metadata=bin_field("U1", comment="New style signal identifier. Only unique within a constellation."))
    freqId    :int          =field(metadata=bin_field("U1", comment="GLONASS frequency slot + 7 (range from 0 to 13)"))
    prRes     :Decimal      =field(metadata=bin_field("I2", scale=Decimal('1e-1'), unit="m", comment="Pseudorange residual"))
    cno       :int          =field(metadata=bin_field("U1", unit="dBHz", comment="Carrier-to-noise density ratio (signal strength)"))
    qualityInd:EnumField    =field(metadata=bin_field("U1", enum=QIND, comment="Signal quality indicator"))
    corrSource:EnumField    =field(metadata=bin_field("U1", enum=CSRC, comment="Correction source"))
    ionoModel :EnumField    =field(metadata=bin_field("U1", enum=IONO, comment="Ionospheric model used"))
    health    :EnumField    =field(metadata=bin_field("X2", b1=1, b0=0, enum=HEALTH, group="flags", comment="Signal health flag"))
    prSmoothed:bool         =field(metadata=bin_field("X2", b0=2, scale=bool, group="flags", comment="Pseudorange has been smoothed"))
    prUsed    :bool         =field(metadata=bin_field("X2", b0=3, scale=bool, group="flags", comment="Pseudorange has been used for this signal"))
    crUsed    :bool         =field(metadata=bin_field("X2", b0=4, scale=bool, group="flags", comment="Carrier range has been used for this signal"))
    doUsed    :bool         =field(metadata=bin_field("X2", b0=5, scale=bool, group="flags", comment="Range rate (Doppler) has been used for this signal"))
    prCorrUsed:bool         =field(metadata=bin_field("X2", b0=6, scale=bool, group="flags", comment="Pseudorange corrections have been used for this signal"))
    crCorrUsed:bool         =field(metadata=bin_field("X2", b0=7, scale=bool, group="flags", comment="Carrier range corrections have been used for this signal"))
    doCorrUsed:bool         =field(metadata=bin_field("X2", b0=8, scale=bool, group="flags", comment="Range rate (Doppler) corrections have been used for this signal"))
    reserved1 :None         =field(metadata=bin_field("U[4]"))
    def fixup(self):
        self.sigId=EnumField(bits=bit_string(self.sigId,8),value=self.sigId,
                             name=signal_name(self.gnssId.value,self.sigId))


@ublox_packet(0x01,0x43)
class UBX_NAV_SIG(UBloxPacket):
    "This message displays information about signals currently tracked by the receiver. On the F9 platform the maximum number of signals is 120."
    iTOW      :int                  =field(metadata=bin_field("U4", unit="ms"))
    version   :int                  =field(metadata=bin_field("U1", comment="Message version"))
    numSigs   :int                  =field(metadata=bin_field("U1", comment="Number of signals"))
    reserved0 :None                 =field(metadata=bin_field("U[2]"))
    sigs      :list[NAV_SIG_SIGNAL] =field(metadata=bin_field(NAV_SIG_SIGNAL, count="numSigs"))


@ublox_packet(0x01,0x07)
class UBX_NAV_PVT(UBloxPacket):
    """This message combines position, velocity and time solution, including accuracy figures."""
    iTOW         :int      =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    year         :int      =field(metadata=bin_field("U2", unit="y",comment="Year (UTC)"))
    month        :int      =field(metadata=bin_field("U1", unit="month",comment="Month, range 1..12 (UTC)"))
    day          :int      =field(metadata=bin_field("U1", unit="d",comment="Day of month, range 1..31 (UTC)"))
    hour         :int      =field(metadata=bin_field("U1", unit="h", comment="Hour of day, range 0..23 (UTC)"))
    min          :int      =field(metadata=bin_field("U1", unit="min", comment="Minute of hour, range 0..59 (UTC)"))
    sec          :int      =field(metadata=bin_field("U1", unit="s",comment="Seconds of minute, range 0..60 (UTC). "
                                                                            "Note that during a leap second there may "
                                                                            "be more or less than 60 seconds in a "
                                                                            "minute."))
    validDate    :bool     =field(metadata=bin_field("X1", b0=0, scale=bool, group="valid", comment="Date part of UTC is valid"))
    validTime    :bool     =field(metadata=bin_field("X1", b0=1, scale=bool, group="valid", comment="Time part of UTC is valid"))
    fullyResolved:bool     =field(metadata=bin_field("X1", b0=2, scale=bool, group="valid", comment="UTC time of day is fully resolved "
                                                                                                  "(no seconds uncertainty). Cannot be "
                                                                                                  "used to check if time is completely "
                                                                                                  "solved."))
    validMag     :bool     =field(metadata=bin_field("X1", b0=3, scale=bool, group="valid", comment="Magnetic declination is valid"))
    tAcc         :int      =field(metadata=bin_field("U4", unit="ns", comment="Time accuracy estimate (UTC)"))
    nano         :int      =field(metadata=bin_field("I4", unit="ns", comment="Fraction of second, range -1e9 .. 1e9 (UTC)"))
    utc          :Optional[datetime]=field(metadata=bin_field(None,comment="UTC timestamp of this packet to microsecond precision, "
                                                                           "from the date and time fields. None unless both "
                                                                           "validDate and validTime are set."))
    fixType      :EnumField=field(metadata=bin_field("U1", enum=FIX, comment="GNSSfix Type"))
    gnssFixOK    :bool     =field(metadata=bin_field("X1", b0=0, scale=bool, group="flags", comment="Valid fix (i.e within DOP & accuracy masks)"))
    diffSoln     :bool     =field(metadata=bin_field("X1", b0=1, scale=bool, group="flags", comment="Differential corrections were applied"))
    class PSM(Enum):
        NOT_ACTIVE = 0
        ENABLED = 1
        ACQUISITION = 2
        TRACKING = 3
        POWER_OPTIMIZED_TRACKING = 4
        INACTIVE = 5
    psmState     :EnumField=field(metadata=bin_field("X1", b1=4, b0=2, enum=PSM, group="flags", comment="Power save mode state"))
    headVehValid :bool     =field(metadata=bin_field("X1", b0=5, scale=bool, group="flags", comment="Heading of vehicle is valid, only "
                                                                                                  "set if the receiver is in sensor "
                                                                                                  "fusion mode."))
    carrSoln     :EnumField=field(metadata=bin_field("X1", b1=7, b0=6, enum=CARR_SOLN, group="flags", comment="Carrier phase range solution status"))
    confirmedAvai:bool     =field(metadata=bin_field("X1", b0=5, scale=bool, group="flags", comment="Information about UTC Date and "
                                                                                                  "Time of Day validity confirmation "
                                                                                                  "is available"))
    confirmedDate:bool     =field(metadata=bin_field("X1", b0=6, scale=bool, group="flags", comment="UTC Date validity could be confirmed"))
    confirmedTime:bool     =field(metadata=bin_field("X1", b0=7, scale=bool, group="flags", comment="UTC Time of Day could be confirmed"))
    numSV        :int      =field(metadata=bin_field("U1", comment="Number of satellites used in Nav solution"))
    lon          :Decimal  =field(metadata=bin_field("I4", scale=Decimal('1e-7'), unit="deg", comment="Longitude"))
    lat          :Decimal  =field(metadata=bin_field("I4", scale=Decimal('1e-7'), unit="deg", comment="Latitude"))
    height       :int      =field(metadata=bin_field("I4", unit="mm", comment="Height above ellipsoid"))
    hMSL         :int      =field(metadata=bin_field("I4", unit="mm", comment="Height above mean sea level"))
    hAcc         :int      =field(metadata=bin_field("U4", unit="mm", comment="Horizontal accuracy estimate"))
    vAcc         :int      =field(metadata=bin_field("U4", unit="mm", comment="Vertical accuracy estimate"))
    velN         :int      =field(metadata=bin_field("I4", unit="mm/s", comment="NED north velocity"))
    velE         :int      =field(metadata=bin_field("I4", unit="mm/s", comment="NED east velocity"))
    velD         :int      =field(metadata=bin_field("I4", unit="mm/s", comment="NED down velocity"))
    gSpeed       :int      =field(metadata=bin_field("I4", unit="mm/s", comment="Ground speed (2-D)"))
    headMot      :Decimal  =field(metadata=bin_field("I4", scale=Decimal('1e-5'), unit="deg", comment="Heading of motion (2-D)"))
    sAcc         :int      =field(metadata=bin_field("U4", unit="mm/s", comment="Speed accuracy estimate"))
    headAcc      :Decimal  =field(metadata=bin_field("U4", scale=Decimal('1e-5'), unit="deg", comment="Heading accuracy estimate (both motion and vehicle)"))
    pDOP         :Decimal  =field(metadata=bin_field("U2", scale=Decimal('0.01'), comment="Position DOP"))
    invalidLlh   :bool     =field(metadata=bin_field("X2", b0=0, scale=bool, group="flags", comment="Invalid lon, lat, height, and hMSL"))
    lastCorrectionAge:Optional[float]=field(metadata=bin_field("X2", b1=4, b0=1, unit="s", group="flags",
        scale=lambda x:(float('NaN'),1.0,2.0,5.0,10.0,15.0,20.0,30.0,45.0,60.0,90.0,120.0,float('Inf'))[x] if x<13 else None,
        comment="Age of the most recently received differential correction. This is sent as a range, and "
                "the stored value is the upper bound of that range. NaN means no differential correction "
                "has ever been received, while Inf means more than the highest finite value (120s). "
                "Reserved codes are None."))
    reserved0    :None     =field(metadata=bin_field("U[4]"))
    headVeh      :Decimal  =field(metadata=bin_field("I4", scale=Decimal('1e-5'), unit="deg",
                                                     comment="Heading of vehicle (2-D), this is only valid when "
                                                             "headVehValid is set, otherwise the output is set to the "
                                                             "heading of motion"))
    magDec       :Decimal  =field(metadata=bin_field("I2", scale=Decimal('1e-2'), unit="deg", comment="Magnetic declination"))
    magAcc       :Decimal  =field(metadata=bin_field("U2", scale=Decimal('1e-2'), unit="deg", comment="Magnetic declination accuracy"))
    def fixup(self):
        if self.validDate and self.validTime:
            try:
                self.utc=utc_datetime(self.year,self.month,self.day,self.hour,self.min,self.sec,self.nano)
            except ValueError as e:
                raise DecodeError(self.type,f"date/time fields are not a valid UTC time: {e}",offset=4,field="utc") from e


@ublox_packet(0x01,0x14)
class UBX_NAV_HPPOSLLH(UBloxPacket):
    """This message outputs the Geodetic position in the currently selected ellipsoid, to the full precision of the receiver."""
    version      :int      =field(metadata=bin_field("U1", comment="Message version"))
    reserved0    :None     =field(metadata=bin_field("U[2]"))
    invalidLlh   :bool     =field(metadata=bin_field("X1", b0=0, scale=bool, group="flags",
                                                     comment="Invalid lon, lat, height, hMSL, lonHp, latHp, heightHp and hMSLHp"))
    iTOW         :int      =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    lon          :Decimal  =field(metadata=bin_field("I4", scale=Decimal('1e-7'), unit="deg", comment="Longitude, including lonHp"))
    lat          :Decimal  =field(metadata=bin_field("I4", scale=Decimal('1e-7'), unit="deg", comment="Geodetic latitude, including latHp"))
    height       :Decimal  =field(metadata=bin_field("I4", unit="mm", comment="Height above ellipsoid, including heightHp"))
    hMSL         :Decimal  =field(metadata=bin_field("I4", unit="mm", comment="Height above mean sea level, including hMSLHp"))
    lonHp        :Decimal  =field(metadata=bin_field("I1", scale=Decimal('1e-9'), unit="deg", record=False))
    latHp        :Decimal  =field(metadata=bin_field("I1", scale=Decimal('1e-9'), unit="deg", record=False))
    heightHp     :Decimal  =field(metadata=bin_field("I1", scale=Decimal('0.1'), unit="mm", record=False))
    hMSLHp       :Decimal  =field(metadata=bin_field("I1", scale=Decimal('0.1'), unit="mm", record=False))
    hAcc         :Decimal  =field(metadata=bin_field("U4", scale=Decimal('0.1'), unit="mm", comment="Horizontal accuracy estimate"))
    vAcc         :Decimal  =field(metadata=bin_field("U4", scale=Decimal('0.1'), unit="mm", comment="Vertical accuracy estimate"))
    def fixup(self):
        self.lon+=self.lonHp
        self.lat+=self.latHp
        self.height+=self.heightHp
        self.hMSL+=self.hMSLHp


@ublox_packet(0x01,0x3c)
class UBX_NAV_RELPOSNED(UBloxPacket):
    """
    The NED frame is defined as the local topological system at the reference
    station. This message contains the relative position vector from the
    Reference Station to the Rover, including accuracy figures, in that frame.
    """
    version      :int      =field(metadata=bin_field("U1", comment="Message version"))
    reserved0    :None     =field(metadata=bin_field("U[1]"))
    refStationId :int      =field(metadata=bin_field("U2", comment="Reference Station ID. Must be in the range 0..4095"))
    iTOW         :int      =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    relPosN      :Decimal  =field(metadata=bin_field("I4", scale=10, unit="mm", comment="North component of relative position vector, including relPosHPN"))
    relPosE      :Decimal  =field(metadata=bin_field("I4", scale=10, unit="mm", comment="East component of relative position vector, including relPosHPE"))
    relPosD      :Decimal  =field(metadata=bin_field("I4", scale=10, unit="mm", comment="Down component of relative position vector, including relPosHPD"))
    relPosLength :Decimal  =field(metadata=bin_field("I4", scale=10, unit="mm", comment="Length of the relative position vector, including relPosHPLength"))
    relPosHeading:Decimal  =field(metadata=bin_field("I4", scale=Decimal('1e-5'), unit="deg", comment="Heading of the relative position vector"))
    reserved1    :None     =field(metadata=bin_field("U[4]"))
    relPosHPN    :Decimal  =field(metadata=bin_field("I1", scale=Decimal('0.1'), unit="mm", record=False))
    relPosHPE    :Decimal  =field(metadata=bin_field("I1", scale=Decimal('0.1'), unit="mm", record=False))
    relPosHPD    :Decimal  =field(metadata=bin_field("I1", scale=Decimal('0.1'), unit="mm", record=False))
    relPosHPLength:Decimal =field(metadata=bin_field("I1", scale=Decimal('0.1'), unit="mm", record=False))
    accN         :Decimal  =field(metadata=bin_field("U4", scale=Decimal('0.1'), unit="mm", comment="Accuracy of relative position North component"))
    accE         :Decimal  =field(metadata=bin_field("U4", scale=Decimal('0.1'), unit="mm", comment="Accuracy of relative position East component"))
    accD         :Decimal  =field(metadata=bin_field("U4", scale=Decimal('0.1'), unit="mm", comment="Accuracy of relative position Down component"))
    accLength    :Decimal  =field(metadata=bin_field("U4", scale=Decimal('0.1'), unit="mm", comment="Accuracy of length of the relative position vector"))
    accHeading   :Decimal  =field(metadata=bin_field("U4", scale=Decimal('1e-5'), unit="deg", comment="Accuracy of heading of the relative position vector"))
    reserved2    :None     =field(metadata=bin_field("U[4]"))
    gnssFixOK    :bool     =field(metadata=bin_field("X4", b0=0, scale=bool, group="flags", comment="A valid fix (i.e within DOP & accuracy masks)"))
    diffSoln     :bool     =field(metadata=bin_field("X4", b0=1, scale=bool, group="flags", comment="Differential corrections were applied"))
    relPosValid  :bool     =field(metadata=bin_field("X4", b0=2, scale=bool, group="flags", comment="Relative position components and accuracies are valid"))
    carrSoln     :EnumField=field(metadata=bin_field("X4", b1=4, b0=3, enum=CARR_SOLN, group="flags", comment="Carrier phase range solution status"))
    isMoving     :bool     =field(metadata=bin_field("X4", b0=5, scale=bool, group="flags", comment="The receiver is operating in moving base mode"))
    refPosMiss   :bool     =field(metadata=bin_field("X4", b0=6, scale=bool, group="flags", comment="Extrapolated reference position was used to "
                                                                                                  "compute moving base solution this epoch"))
    refObsMiss   :bool     =field(metadata=bin_field("X4", b0=7, scale=bool, group="flags", comment="Extrapolated reference observations were used to "
                                                                                                  "compute moving base solution this epoch"))
    relPosHeadingValid:bool=field(metadata=bin_field("X4", b0=8, scale=bool, group="flags", comment="relPosHeading is valid"))
    relPosNormalized:bool  =field(metadata=bin_field("X4", b0=9, scale=bool, group="flags", comment="The components of the relative position vector "
                                                                                                  "(including the high-precision parts) are normalized"))
    def fixup(self):
        self.relPosN+=self.relPosHPN
        self.relPosE+=self.relPosHPE
        self.relPosD+=self.relPosHPD
        self.relPosLength+=self.relPosHPLength


@ublox_packet(0x01,0x61)
class UBX_NAV_EOE(UBloxPacket):
    """
    Marker for the end of the navigation messages of an epoch. It is output
    after all enabled NAV class messages and after all enabled NMEA messages.
    """
    iTOW        :int      =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))


@ublox_packet(0x01,0x04)
class UBX_NAV_DOP(UBloxPacket):
    """Dilution of precision"""
    iTOW         :int      =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    gDOP         :Decimal  =field(metadata=bin_field("U2", scale=Decimal('1e-2'), comment="Geometric DOP"))
    pDOP         :Decimal  =field(metadata=bin_field("U2", scale=Decimal('1e-2'), comment="Position DOP"))
    tDOP         :Decimal  =field(metadata=bin_field("U2", scale=Decimal('1e-2'), comment="Time DOP"))
    vDOP         :Decimal  =field(metadata=bin_field("U2", scale=Decimal('1e-2'), comment="Vertical DOP"))
    hDOP         :Decimal  =field(metadata=bin_field("U2", scale=Decimal('1e-2'), comment="Horizontal DOP"))
    nDOP         :Decimal  =field(metadata=bin_field("U2", scale=Decimal('1e-2'), comment="Northing DOP"))
    eDOP         :Decimal  =field(metadata=bin_field("U2", scale=Decimal('1e-2'), comment="Easting DOP"))


@ublox_packet(0x01,0x22)
class UBX_NAV_CLOCK(UBloxPacket):
    """Clock solution"""
    iTOW         :int      =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    clkB         :int      =field(metadata=bin_field("I4", unit="ns", comment="Clock bias"))
    clkD         :int      =field(metadata=bin_field("I4", unit="ns/s", comment="Clock drift"))
    tAcc         :int      =field(metadata=bin_field("U4", unit="ns", comment="Time accuracy estimate"))
    fAcc         :int      =field(metadata=bin_field("U4", unit="ps/s", comment="Frequency accuracy estimate"))


@ublox_packet(0x01,0x20)
class UBX_NAV_TIMEGPS(UBloxPacket):
    """This message reports the precise GPS time of the most recent navigation solution including validity flags and
an accuracy estimate."""
    iTOW      :int    =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    fTOW      :int    =field(metadata=bin_field("I4", unit="ns", comment="Fractional part of iTOW (range: +/-500000)"))
    week      :int    =field(metadata=bin_field("I2", unit="week", comment="GPS week number of the navigation epoch"))
    leapS     :int    =field(metadata=bin_field("I1", unit="s", comment="GPS leap seconds (GPS-UTC)"))
    towValid  :bool   =field(metadata=bin_field("X1", b0=0, scale=bool, group="valid"))
    weekValid :bool   =field(metadata=bin_field("X1", b0=1, scale=bool, group="valid"))
    leapSValid:bool   =field(metadata=bin_field("X1", b0=2, scale=bool, group="valid"))
    tAcc      :int    =field(metadata=bin_field("U4", unit="ns", comment="Time accuracy estimate"))
    gpsTime   :Optional[datetime]=field(metadata=bin_field(None, comment="GPS time of the epoch from the receiver's own week number, "
                                                                         "not corrected for leap seconds. None unless both "
                                                                         "towValid and weekValid are set."))
    def fixup(self):
        if self.towValid and self.weekValid:
            self.gpsTime=week_itow_to_datetime(self.week,self.iTOW)+timedelta(microseconds=int(self.fTOW/1000))


@ublox_packet(0x01,0x21)
class UBX_NAV_TIMEUTC(UBloxPacket):
    """UTC time solution"""
    iTOW         :int      =field(metadata=bin_field("U4", unit="ms", comment="GPS time of week of the navigation epoch."))
    tAcc         :int      =field(metadata=bin_field("U4", unit="ns", comment="Time accuracy estimate (UTC)"))
    nano         :int      =field(metadata=bin_field("I4", unit="ns", comment="Fraction of second, range -1e9 .. 1e9 (UTC)"))
    year         :int      =field(metadata=bin_field("U2", unit="y", comment="Year (UTC)"))
    month        :int      =field(metadata=bin_field("U1", unit="month", comment="Month, range 1..12 (UTC)"))
    day          :int      =field(metadata=bin_field("U1", unit="d", comment="Day of month, range 1..31 (UTC)"))
    hour         :int      =field(metadata=bin_field("U1", unit="h", comment="Hour of day, range 0..23 (UTC)"))
    min          :int      =field(metadata=bin_field("U1", unit="min", comment="Minute of hour, range 0..59 (UTC)"))
    sec          :int      =field(metadata=bin_field("U1", unit="s", comment="Seconds of minute, range 0..60 (UTC)"))
    validTOW     :bool     =field(metadata=bin_field("X1", b0=0, scale=bool, group="valid", comment="Valid Time of Week"))
    validWKN     :bool     =field(metadata=bin_field("X1", b0=1, scale=bool, group="valid", comment="Valid Week Number"))
    validUTC     :bool     =field(metadata=bin_field("X1", b0=2, scale=bool, group="valid", comment="Valid UTC Time"))
    utcStandard  :EnumField=field(metadata=bin_field("X1", b1=7, b0=4, enum=UTCSTD, group="valid", comment="UTC standard identifier"))
    utc          :Optional[datetime]=field(metadata=bin_field(None, comment="UTC timestamp to microsecond precision. None unless validUTC is set."))
    def fixup(self):
        if self.validUTC:
            try:
                self.utc=utc_datetime(self.year,self.month,self.day,self.hour,self.min,self.sec,self.nano)
            except ValueError as e:
                raise DecodeError(self.type,f"date/time fields are not a valid UTC time: {e}",offset=12,field="utc") from e


@ublox_packet(0x05,0x01)
class UBX_ACK_ACK(UBloxPacket):
    """Message acknowledged"""
    clsID       :int      =field(metadata=bin_field("U1", comment="Class ID of the acknowledged message"))
    msgID       :int      =field(metadata=bin_field("U1", comment="Message ID of the acknowledged message"))
    ackName     :Optional[str]=field(metadata=bin_field(None, comment="Name of the acknowledged message, if known"))
    def fixup(self):
        self.ackName=packet_name(self.clsID,self.msgID)


@ublox_packet(0x05,0x00)
class UBX_ACK_NAK(UBloxPacket):
    """Message not acknowledged"""
    clsID       :int      =field(metadata=bin_field("U1", comment="Class ID of the not-acknowledged message"))
    msgID       :int      =field(metadata=bin_field("U1", comment="Message ID of the not-acknowledged message"))
    nakName     :Optional[str]=field(metadata=bin_field(None, comment="Name of the not-acknowledged message, if known"))
    def fixup(self):
        self.nakName=packet_name(self.clsID,self.msgID)


@ublox_packet(0x0a,0x04)
class UBX_MON_VER(UBloxPacket):
    """Receiver and software version. Payload is 40 bytes followed by any number of 30-byte extension strings."""
    swVersion   :str      =field(metadata=bin_field("CH30", comment="Nul-terminated software version string"))
    hwVersion   :str      =field(metadata=bin_field("CH10", comment="Nul-terminated hardware version string"))
    extensions  :list[str]=field(metadata=bin_field("CH30", comment="Extended software information strings"))


@ublox_block
class MON_RF_BLOCK(UBloxBlock):
    """One RF block of UBX-MON-RF"""
    class BAND(Enum):
        L1=0
        L2_OR_L5=1
    blockId     :EnumField=field(metadata=bin_field("U1", enum=BAND, comment="RF block ID"))
    class JAMSTATE(Enum):
        UNKNOWN_OR_DISABLED=0
        OK=1
        WARNING=2
        CRITICAL=3
    jammingState:EnumField=field(metadata=bin_field("X1", b1=1, b0=0, enum=JAMSTATE, comment="Output from Jamming/Interference Monitor"))
    class ANTSTATUS(Enum):
        INIT=0
        DONTKNOW=1
        OK=2
        SHORT=3
        OPEN=4
    antStatus   :EnumField=field(metadata=bin_field("U1", enum=ANTSTATUS, comment="Status of the antenna supervisor state machine"))
    class ANTPOWER(Enum):
        OFF=0
        ON=1
        DONTKNOW=2
    antPower    :EnumField=field(metadata=bin_field("U1", enum=ANTPOWER, comment="Current power status of antenna"))
    postStatus  :int      =field(metadata=bin_field("X4", comment="POST status word"))
    reserved1   :None     =field(metadata=bin_field("U[4]"))
    noisePerMS  :int      =field(metadata=bin_field("U2", comment="Noise level as measured by the GPS core"))
    agcCnt      :int      =field(metadata=bin_field("U2", comment="AGC Monitor (counts SIGHI xor SIGLO, range 0 to 8191)"))
    jamInd      :int      =field(metadata=bin_field("U1", comment="CW jamming indicator, scaled (0=no CW jamming, 255 = strong CW jamming)"))
    ofsI        :int      =field(metadata=bin_field("I1", comment="Imbalance of I-part of complex signal"))
    magI        :int      =field(metadata=bin_field("U1", comment="Magnitude of I-part of complex signal"))
    ofsQ        :int      =field(metadata=bin_field("I1", comment="Imbalance of Q-part of complex signal"))
    magQ        :int      =field(metadata=bin_field("U1", comment="Magnitude of Q-part of complex signal"))
    reserved2   :None     =field(metadata=bin_field("U[3]"))


@ublox_packet(0x0a,0x38)
class UBX_MON_RF(UBloxPacket):
    """Information for each RF block. There are as many RF blocks reported as bands supported by this receiver."""
    version     :int               =field(metadata=bin_field("U1", comment="Message version"))
    nBlocks     :int               =field(metadata=bin_field("U1", comment="The number of RF blocks included"))
    reserved0   :None              =field(metadata=bin_field("U[2]"))
    blocks      :list[MON_RF_BLOCK]=field(metadata=bin_field(MON_RF_BLOCK, count="nBlocks"))
