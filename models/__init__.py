"""Data models and utility functions.

This package contains:
- device: LIFX device model parsed from the cloud API
- types: Structures exchanged with the host
- utils: Utility functions (get_bridge, find_device, similarity_score, etc.)
"""
