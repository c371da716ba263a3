"""
Trail Data Store

This module contains the SQLite storage layer:
- Engine construction and per-trail schema provisioning
- Trail, reference, journal and app-config stores
- The error taxonomy shared by every component
"""
