"""Skyline Bounded Context.

Responsible for the banded silhouette of an elevation map:
- Value Objects: ElevationMap, MapInfo, ResolutionQuantizer, ScanRegion, WindowMatrix
- Services: elevation_angle, indexed_elevation, scan_vertical, scan_horizontal,
  render_window
- MapViewer: configuration holder and directional views (N, S, E, W)
"""
