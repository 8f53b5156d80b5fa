"""FleetGeo: GPS geospatial calculations for fleet operations."""

__version__ = "0.1.0"
