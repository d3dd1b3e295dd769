# ==================== UTILS/DISTANCE_CALCULATOR.PY ====================
import math

from geopy.distance import geodesic

KM_PER_DEGREE_LATITUDE = 111.32


class DistanceCalculator:
    """Distances between coordinates, used by the nearby-spots search"""

    @staticmethod
    def get_distance_km(lat1, lng1, lat2, lng2):
        """Get distance in kilometers"""
        coord1 = (lat1, lng1)
        coord2 = (lat2, lng2)
        return geodesic(coord1, coord2).km

    @staticmethod
    def get_distance_m(lat1, lng1, lat2, lng2):
        return DistanceCalculator.get_distance_km(lat1, lng1, lat2, lng2) * 1000

    @staticmethod
    def bounding_box(lat, lng, radius_km):
        """Rough (min_lat, max_lat, min_lng, max_lng) box enclosing the radius.

        Used only to narrow the database query; exact filtering is geodesic.
        """
        delta_lat = radius_km / KM_PER_DEGREE_LATITUDE
        cos_lat = max(math.cos(math.radians(lat)), 0.01)
        delta_lng = radius_km / (KM_PER_DEGREE_LATITUDE * cos_lat)
        return (
            max(lat - delta_lat, -90.0),
            min(lat + delta_lat, 90.0),
            max(lng - delta_lng, -180.0),
            min(lng + delta_lng, 180.0),
        )
