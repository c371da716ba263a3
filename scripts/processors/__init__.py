"""
Data Processing Scripts

This module contains processing applied to stored route data:
- Forward pace-target cascades along a trail's waypoint sequence
"""
