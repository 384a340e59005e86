"""
Read dependency declarations from an npm package.json manifest.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Union

from .exceptions import ManifestError
from .models import DEPENDENCY, DEV_DEPENDENCY, PEER_DEPENDENCY, DependencyDeclaration


logger = logging.getLogger(__name__)

# Manifest key -> dependency type, in report order.
DEPENDENCY_GROUPS = (
    ("dependencies", DEPENDENCY),
    ("devDependencies", DEV_DEPENDENCY),
    ("peerDependencies", PEER_DEPENDENCY),
)


def read_manifest(path: Union[str, Path]) -> Dict:
    """Read and parse a package.json file.

    Args:
        path: Path to the manifest

    Returns:
        The parsed manifest as a dictionary

    Raises:
        ManifestError: If the file cannot be read, is not valid JSON,
            or is not a JSON object
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestError(f"Failed to read package.json: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(
            f"Failed to read package.json: expected a JSON object, got {type(data).__name__}"
        )
    return data


def extract_dependencies(manifest: Dict) -> List[DependencyDeclaration]:
    """Flatten the dependency groups of a manifest.

    Groups are concatenated as runtime, dev, then peer dependencies, each
    keeping the order of the manifest.
    """
    deps: List[DependencyDeclaration] = []
    for key, dependency_type in DEPENDENCY_GROUPS:
        group = manifest.get(key)
        if group is None:
            continue
        if not isinstance(group, dict):
            raise ManifestError(f"Failed to read package.json: '{key}' must be an object")
        for name, version in group.items():
            deps.append(DependencyDeclaration(
                name=name,
                version_range=str(version),
                dependency_type=dependency_type,
            ))
    return deps


def load_dependencies(path: Union[str, Path]) -> List[DependencyDeclaration]:
    logger.info("Analyzing package.json at: %s", path)
    return extract_dependencies(read_manifest(path))
