"""Geometry helpers for positioning the choropleth map."""

from typing import Any, Dict, List, Tuple


def get_bounding_box(
    geometries: List[Dict[str, Any]],
) -> Tuple[float, float, float, float]:
    """
    Calculate the bounding box of GeoJSON geometries.

    Args:
        geometries: List of GeoJSON geometry objects

    Returns:
        (min_lon, min_lat, max_lon, max_lat), or all zeros when empty
    """
    min_lon = float("inf")
    min_lat = float("inf")
    max_lon = float("-inf")
    max_lat = float("-inf")

    def update_bounds(coords):
        nonlocal min_lon, min_lat, max_lon, max_lat
        for coord in coords:
            if isinstance(coord[0], (list, tuple)):
                update_bounds(coord)
            else:
                lon, lat = coord[0], coord[1]
                min_lon = min(min_lon, lon)
                min_lat = min(min_lat, lat)
                max_lon = max(max_lon, lon)
                max_lat = max(max_lat, lat)

    for geom in geometries:
        coords = geom.get("coordinates", [])
        if geom.get("type") == "Point":
            coords = [coords]
        if coords:
            update_bounds(coords)

    if min_lon == float("inf"):
        return (0, 0, 0, 0)

    return (min_lon, min_lat, max_lon, max_lat)


def get_bounds_center(geometries: List[Dict[str, Any]]) -> Tuple[float, float]:
    """Center of the bounding box as (lat, lon), the order Leaflet expects."""
    min_lon, min_lat, max_lon, max_lat = get_bounding_box(geometries)
    return ((min_lat + max_lat) / 2, (min_lon + max_lon) / 2)


def validate_geometry(geometry: Dict[str, Any]) -> bool:
    """
    Validate that a boundary geometry object is usable.

    Args:
        geometry: GeoJSON geometry object

    Returns:
        True if geometry is a non-empty Polygon or MultiPolygon
    """
    if not geometry:
        return False

    geom_type = geometry.get("type")
    coords = geometry.get("coordinates")

    if not geom_type or not coords:
        return False

    if geom_type == "Polygon":
        return len(coords) > 0 and len(coords[0]) >= 3
    elif geom_type == "MultiPolygon":
        return len(coords) > 0 and len(coords[0]) > 0 and len(coords[0][0]) >= 3

    return False
