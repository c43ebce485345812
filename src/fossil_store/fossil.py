"""
Fossil naming convention.

A fossil is the logical name ``<name>.fsl``. It is never stored; it only
tells the backup engine that the newest version of ``<name>`` is a hide
marker. Everything below the adapter boundary works with bare names.
"""

from typing import Tuple

from fossil_store.versions import Hidden, ObjectState

FOSSIL_SUFFIX = ".fsl"


def is_fossil(path: str) -> bool:
    return path.endswith(FOSSIL_SUFFIX)


def to_fossil(name: str) -> str:
    return name + FOSSIL_SUFFIX


def parse_logical_path(path: str) -> Tuple[str, bool]:
    """Split a logical path into its stored name and whether it is a fossil."""
    if is_fossil(path):
        return path[:-len(FOSSIL_SUFFIX)], True
    return path, False


def project(name: str, state: ObjectState) -> str:
    """Logical name the engine sees for *name* in *state*."""
    if isinstance(state, Hidden):
        return to_fossil(name)
    return name
