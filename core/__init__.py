"""Core functionality for the LIFX integration plugin.

This package contains:
- controller: LifxBridge class answering host calls via the LIFX API
- cache: Device cache with refresh suppression
- config: Constants and user configuration
- server: Plugin server speaking to the host process
- errors, logs: Exceptions and logging setup
"""
