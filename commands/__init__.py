"""CLI command modules.

This package contains:
- serve: Plugin entry point started by the host
- inspection: Inspection commands (devices, status, manifest)
- control: Direct control commands (power)
- setup: Setup and help commands
"""
