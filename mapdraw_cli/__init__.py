"""
MapDraw CLI - Command-line interface for stored map feature payloads.

Usage:
    mapdraw normalize features.json
    mapdraw query features.json --type Polygon --lnglat 10.0,50.0
    mapdraw query features.json --type Point --index 0
    mapdraw bounds features.json
"""

__version__ = "1.0.0"
