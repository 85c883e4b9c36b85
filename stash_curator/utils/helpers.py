"""
Fonctions utilitaires partagees dans le projet Stash Curator.

- convert_mb_to_bytes : conversion de megaoctets en octets
- format_bytes : taille lisible (Ko, Mo, Go...)
"""

from stash_curator.utils.constants import BYTES_PER_MB

_UNITS = ("Bytes", "KB", "MB", "GB", "TB", "PB")


def convert_mb_to_bytes(megabytes: float) -> int:
    """Convertit des megaoctets (base 1024) en octets."""
    return int(megabytes * BYTES_PER_MB)


def format_bytes(size: float, decimals: int = 2) -> str:
    """
    Formate une taille en octets de facon lisible.

    Exemples : 0 -> "0 Bytes", 1536 -> "1.5 KB", 5e9 -> "4.66 GB".
    Les tailles negatives gardent leur signe.
    """
    if size == 0:
        return "0 Bytes"

    sign = "-" if size < 0 else ""
    value = abs(float(size))
    unit_index = 0
    while value >= 1024 and unit_index < len(_UNITS) - 1:
        value /= 1024
        unit_index += 1

    formatted = f"{value:.{max(decimals, 0)}f}"
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    return f"{sign}{formatted} {_UNITS[unit_index]}"
