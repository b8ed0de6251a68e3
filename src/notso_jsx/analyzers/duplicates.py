"""Re-occurring geometry detection for instancing."""

from collections.abc import Iterable
from dataclasses import dataclass

from notso_jsx.scene.model import SceneNode
from notso_jsx.utils.naming import instance_base_name, node_reference

# (geometry uuid, material uuid)
DuplicateKey = tuple[str, str]


@dataclass
class DuplicateEntry:
    """One geometry+material pair and the nodes drawing it."""

    count: int
    name: str  # Key in the instances map, e.g. 'Wheel'
    node: str  # Source expression, e.g. 'nodes.Wheel'


DuplicateIndex = dict[DuplicateKey, DuplicateEntry]


def duplicate_key(node: SceneNode) -> DuplicateKey | None:
    """Instancing key of a node, or None when it lacks geometry or material."""
    if node.geometry is None or node.material is None:
        return None
    return (node.geometry.uuid, node.material.uuid)


def _unique_name(attempt: str, taken: set[str]) -> str:
    """'Part', 'Part1', 'Part2', ... first one not taken."""
    candidate = attempt
    index = 0
    while candidate in taken:
        index += 1
        candidate = f"{attempt}{index}"
    return candidate


def analyze_duplicates(
    objects: Iterable[SceneNode], instanceall: bool = False
) -> DuplicateIndex:
    """
    Count how often each geometry+material pair is drawn.

    Two nodes sharing a geometry but not a material are not instance
    compatible, so the material is part of the key. Native InstancedMesh
    nodes are already instanced and are skipped.

    Returns a mapping from key to entry; single-use pairs are dropped unless
    ``instanceall`` is set.
    """
    duplicates: DuplicateIndex = {}
    taken: set[str] = set()

    for obj in objects:
        if not obj.is_mesh or obj.type == "InstancedMesh":
            continue
        key = duplicate_key(obj)
        if key is None:
            continue

        entry = duplicates.get(key)
        if entry is not None:
            entry.count += 1
            continue

        name = _unique_name(instance_base_name(obj.name), taken)
        taken.add(name)
        duplicates[key] = DuplicateEntry(
            count=1, name=name, node=node_reference(obj.name)
        )

    if not instanceall:
        duplicates = {k: v for k, v in duplicates.items() if v.count > 1}

    return duplicates
