"""Hour-angle solver and clock-time conversion for horizon and twilight events."""

from ...exceptions import DomainError
from .solar_ephemeris import darccos, darccot, dcos, dsin, dtan, normalize_hour

SUNRISE_DEPRESSION = 0.833


def hour_angle(latitude: float, declination: float, depression_angle: float) -> float:
    """
    Hours between solar noon and the moment the sun is `depression_angle`
    degrees below the horizon.

    Raises DomainError when the sun never reaches that depression on this day
    (polar day or polar night for the requested angle).
    """
    cos_t = ((-dsin(depression_angle) - dsin(latitude) * dsin(declination))
             / (dcos(latitude) * dcos(declination)))
    if not -1.0 <= cos_t <= 1.0:
        state = "never sets that low" if cos_t < -1.0 else "never rises that high"
        raise DomainError(
            f"sun {state} (depression {depression_angle:.3f} deg, declination {declination:.3f} deg)",
            latitude=latitude,
        )
    return darccos(cos_t) / 15.0


def clock_noon(longitude: float, equation_of_time_minutes: float, timezone_offset: float) -> float:
    """Solar noon in unnormalized clock hours for an east-positive UTC offset."""
    return 12.0 + timezone_offset - longitude / 15.0 - equation_of_time_minutes / 60.0


def solar_noon(longitude: float, equation_of_time_minutes: float, timezone_offset: float) -> float:
    return normalize_hour(clock_noon(longitude, equation_of_time_minutes, timezone_offset))


def local_time(angle_hours: float, longitude: float, equation_of_time_minutes: float,
               timezone_offset: float, morning: bool) -> float:
    """Clock time of an event `angle_hours` before (morning) or after solar noon."""
    noon = clock_noon(longitude, equation_of_time_minutes, timezone_offset)
    return normalize_hour(noon - angle_hours if morning else noon + angle_hours)


def asr_depression_angle(asr_factor: float, latitude: float, declination: float) -> float:
    """
    Depression angle (negative, the sun is above the horizon) at which an
    object's shadow equals `asr_factor` times its length plus its noon shadow.
    """
    zenith_at_noon = abs(latitude - declination)
    if zenith_at_noon >= 90.0:
        raise DomainError(
            f"sun stays below the horizon at noon (declination {declination:.3f} deg)",
            latitude=latitude,
        )
    return -darccot(asr_factor + dtan(zenith_at_noon))
