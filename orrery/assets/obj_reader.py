"""Wavefront OBJ/MTL reader producing flat, single-indexed arrays."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from orrery.render.errors import MeshLoadError

LOGGER = logging.getLogger(__name__)

Corner = Tuple[int, Optional[int], Optional[int]]


@dataclass
class MaterialRecord:
    """Raw material values as written in an MTL file."""

    name: str
    ambient: Optional[Tuple[float, float, float]] = None
    diffuse: Optional[Tuple[float, float, float]] = None
    specular: Optional[Tuple[float, float, float]] = None
    shininess: Optional[float] = None
    diffuse_texture: Optional[str] = None


@dataclass
class RawSubModel:
    """One ``o``/``g``/``usemtl`` run of faces, expanded to a single index."""

    name: str
    positions: List[float] = field(default_factory=list)
    normals: List[float] = field(default_factory=list)
    texcoords: List[float] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)
    material_id: Optional[int] = None

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3


@dataclass
class ObjScene:
    models: List[RawSubModel]
    materials: List[MaterialRecord]


class _SubModelBuilder:
    def __init__(self, name: str, material_id: Optional[int]) -> None:
        self.model = RawSubModel(name=name, material_id=material_id)
        self._corner_index: Dict[Corner, int] = {}
        self._corners: List[Corner] = []

    def add_corner(self, corner: Corner) -> int:
        index = self._corner_index.get(corner)
        if index is None:
            index = len(self._corners)
            self._corner_index[corner] = index
            self._corners.append(corner)
        return index

    def finish(
        self,
        positions: List[Tuple[float, float, float]],
        normals: List[Tuple[float, float, float]],
        uvs: List[Tuple[float, float]],
    ) -> RawSubModel:
        model = self.model
        has_normals = bool(self._corners) and all(vn is not None for _, _, vn in self._corners)
        has_uvs = bool(self._corners) and all(vt is not None for _, vt, _ in self._corners)
        for v_idx, vt_idx, vn_idx in self._corners:
            model.positions.extend(positions[v_idx])
            if has_normals:
                model.normals.extend(normals[vn_idx])
            if has_uvs:
                model.texcoords.extend(uvs[vt_idx])
        return model


def _split_tag(line: str) -> Tuple[str, str]:
    """Split a statement into its keyword and the remainder, on any whitespace."""

    fields = line.split(None, 1)
    return fields[0], (fields[1].strip() if len(fields) > 1 else "")


def _parse_floats(parts: List[str], count: int, path: Path, line_no: int) -> Tuple[float, ...]:
    if len(parts) < count:
        raise MeshLoadError(f"{path}:{line_no}: expected {count} values, got {len(parts)}")
    try:
        return tuple(float(value) for value in parts[:count])
    except ValueError as exc:
        raise MeshLoadError(f"{path}:{line_no}: {exc}") from exc


def _resolve_index(token: str, size: int, path: Path, line_no: int) -> int:
    """OBJ indices are 1-based; negative values count back from the end."""

    try:
        value = int(token)
    except ValueError as exc:
        raise MeshLoadError(f"{path}:{line_no}: bad index '{token}'") from exc
    index = value - 1 if value > 0 else size + value
    if value == 0 or index < 0 or index >= size:
        raise MeshLoadError(f"{path}:{line_no}: index {value} out of range ({size} entries)")
    return index


def _parse_corner(
    token: str,
    counts: Tuple[int, int, int],
    path: Path,
    line_no: int,
) -> Corner:
    parts = token.split("/")
    v = _resolve_index(parts[0], counts[0], path, line_no)
    vt = _resolve_index(parts[1], counts[1], path, line_no) if len(parts) > 1 and parts[1] else None
    vn = _resolve_index(parts[2], counts[2], path, line_no) if len(parts) > 2 and parts[2] else None
    return v, vt, vn


def read_mtl(path: Path) -> List[MaterialRecord]:
    materials: List[MaterialRecord] = []
    current: Optional[MaterialRecord] = None
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        for line_no, raw in enumerate(handle, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            tag, rest = _split_tag(line)
            parts = rest.split()
            if tag == "newmtl":
                current = MaterialRecord(name=rest.strip())
                materials.append(current)
                continue
            if current is None:
                continue
            if tag == "Ka":
                current.ambient = _parse_floats(parts, 3, path, line_no)
            elif tag == "Kd":
                current.diffuse = _parse_floats(parts, 3, path, line_no)
            elif tag == "Ks":
                current.specular = _parse_floats(parts, 3, path, line_no)
            elif tag == "Ns":
                current.shininess = _parse_floats(parts, 1, path, line_no)[0]
            elif tag == "map_Kd" and parts:
                # Options such as -bm precede the file name.
                current.diffuse_texture = parts[-1]
    return materials


def read_obj(path: Path | str) -> ObjScene:
    """Parse an OBJ file and any MTL libraries it references.

    Polygons are fan-triangulated. Every distinct ``v/vt/vn`` corner becomes
    one output vertex so positions, normals and texcoords share one index.

    Raises:
        MeshLoadError: the file is missing, malformed or holds no faces.
    """

    path = Path(path)
    if not path.is_file():
        raise MeshLoadError(f"Mesh file not found: {path}")

    positions: List[Tuple[float, float, float]] = []
    normals: List[Tuple[float, float, float]] = []
    uvs: List[Tuple[float, float]] = []
    materials: List[MaterialRecord] = []
    material_lookup: Dict[str, int] = {}
    builders: List[_SubModelBuilder] = []
    builder: Optional[_SubModelBuilder] = None
    object_name = path.stem
    material_id: Optional[int] = None

    def current_builder() -> _SubModelBuilder:
        nonlocal builder
        if builder is None:
            builder = _SubModelBuilder(object_name, material_id)
            builders.append(builder)
        return builder

    try:
        handle = path.open("r", encoding="utf-8", errors="replace")
    except OSError as exc:
        raise MeshLoadError(f"Cannot open mesh file {path}: {exc}") from exc

    with handle:
        for line_no, raw in enumerate(handle, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            tag, rest = _split_tag(line)
            parts = rest.split()

            if tag == "v":
                positions.append(_parse_floats(parts, 3, path, line_no))
            elif tag == "vn":
                normals.append(_parse_floats(parts, 3, path, line_no))
            elif tag == "vt":
                uvs.append(_parse_floats(parts, 2, path, line_no))
            elif tag == "f":
                if len(parts) < 3:
                    raise MeshLoadError(f"{path}:{line_no}: face needs at least 3 corners")
                counts = (len(positions), len(uvs), len(normals))
                target = current_builder()
                corner_ids = [
                    target.add_corner(_parse_corner(token, counts, path, line_no))
                    for token in parts
                ]
                for i in range(1, len(corner_ids) - 1):
                    target.model.indices.extend((corner_ids[0], corner_ids[i], corner_ids[i + 1]))
            elif tag in ("o", "g"):
                object_name = rest.strip() or object_name
                builder = None
            elif tag == "usemtl":
                material_id = material_lookup.get(rest.strip())
                if material_id is None:
                    LOGGER.warning("%s:%d: unknown material '%s'", path, line_no, rest.strip())
                builder = None
            elif tag == "mtllib":
                for name in parts:
                    mtl_path = path.parent / name
                    try:
                        records = read_mtl(mtl_path)
                    except OSError as exc:
                        LOGGER.warning("Material library %s unavailable: %s", mtl_path, exc)
                        continue
                    for record in records:
                        material_lookup[record.name] = len(materials)
                        materials.append(record)

    models = [b.finish(positions, normals, uvs) for b in builders if b.model.indices]
    if not models:
        raise MeshLoadError(f"No geometry found in OBJ: {path}")

    LOGGER.info(
        "Loaded %s: %d positions, %d normals, %d uvs, %d sub-models, %d materials",
        path,
        len(positions),
        len(normals),
        len(uvs),
        len(models),
        len(materials),
    )
    return ObjScene(models=models, materials=materials)


__all__ = ["MaterialRecord", "ObjScene", "RawSubModel", "read_mtl", "read_obj"]
