"""Utility functions for the LIFX plugin CLI.

This module contains helper functions used across the commands:
- get_bridge: Helper to create a bridge from CLI token options
- find_device: Look up a light by id or label
- format_power: Coloured ON/OFF label
- similarity_score: Canonical fuzzy string matching algorithm
- find_similar_strings: Find similar strings using fuzzy matching
"""

import click

from core.config import resolve_token
from models.device import LifxDevice


def get_bridge(token: str | None, timeout: float):
    """Create a LifxBridge for a CLI command.

    Args:
        token: Token from --token/LIFX_TOKEN, may be None
        timeout: API timeout in seconds

    Returns:
        A LifxBridge, or None if no token is configured
    """
    from core.controller import LifxBridge

    resolved = resolve_token(token)
    if not resolved:
        click.echo("Error: No LIFX token configured.")
        click.echo("Pass --token, set LIFX_TOKEN, or run 'configure'.")
        return None
    return LifxBridge(token=resolved, timeout=timeout)


def find_device(devices: list[LifxDevice], name_or_id: str) -> LifxDevice | None:
    """Find a light by exact id or case-insensitive label."""
    for device in devices:
        if device.id == name_or_id:
            return device
    for device in devices:
        if device.label.lower() == name_or_id.lower():
            return device
    return None


def format_power(on: bool) -> str:
    """Coloured ON/OFF label for terminal output."""
    return click.style('ON', fg='green') if on else click.style('OFF', fg='red')


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    This is the canonical implementation used throughout the application
    for fuzzy matching (command typo suggestions, light label matching).

    Args:
        s1: First string to compare
        s2: Second string to compare

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
        - 0: No match
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    if s1_lower == s2_lower:
        return 100

    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Character sequence matching
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            if s2_lower[j] == char:
                matches += 1
                j += 1
                break
            j += 1

    if matches > 0:
        score = int((matches / max(len(s1_lower), len(s2_lower))) * 50)
        return score if score > 20 else 0

    return 0


def find_similar_strings(target: str, candidates: list[str], limit: int = 5) -> list[str]:
    """Find similar strings using simple similarity scoring.

    Args:
        target: The string to match against
        candidates: List of candidate strings to search
        limit: Maximum number of results to return

    Returns:
        List of similar strings, sorted by similarity score (most similar first)
    """
    scored = [(candidate, similarity_score(target, candidate)) for candidate in candidates]
    filtered = [(c, s) for c, s in scored if s > 0]
    sorted_matches = sorted(filtered, key=lambda x: x[1], reverse=True)

    return [c for c, s in sorted_matches[:limit]]
