"""
Camino Planner Scripts Package

This package contains the trail data store and its data pipelines, organized
into logical subdirectories:

- collectors/: Waypoint ingestion (CSV route import)
- processors/: Route processing (pace cascade)
- database/: Storage layer (schema provisioning, stores, errors, the TrailDatabase facade)
"""
