import math

EARTH_RADIUS_KM = 6371.0


def distance_km(
    lat1: float | None,
    lon1: float | None,
    lat2: float | None,
    lon2: float | None,
) -> float | None:
    """
    Great-circle distance in kilometers (haversine, atan2 form).
    Returns None when either point is missing a coordinate; callers treat that
    as "unknown", never as 0 km.
    """
    if lat1 is None or lon1 is None or lat2 is None or lon2 is None:
        return None
    phi1 = float(lat1) * math.pi / 180
    phi2 = float(lat2) * math.pi / 180
    d_phi = (float(lat2) - float(lat1)) * math.pi / 180
    d_lambda = (float(lon2) - float(lon1)) * math.pi / 180

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def within_radius(distance: float | None, radius_km: float | None) -> bool:
    """Unknown distances are never excluded by a radius."""
    if radius_km is None or distance is None:
        return True
    return distance <= radius_km


def annotate_distances(jobs, lat: float | None, lon: float | None) -> list[tuple[object, float | None]]:
    """Pair each job with its distance from (lat, lon)."""
    return [(job, distance_km(lat, lon, job.latitude, job.longitude)) for job in jobs]
