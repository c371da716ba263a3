"""
Data Collection Scripts

This module contains importers that load route data into the trail store:
- Waypoint CSV files exported from route planning tools
"""
