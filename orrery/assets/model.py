"""Load-time model preparation: normalisation and per-vertex color baking."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from pygame.math import Vector2, Vector3

from orrery.assets.obj_reader import MaterialRecord, RawSubModel, read_obj
from orrery.assets.texture import Texture
from orrery.render.errors import TextureLoadError
from orrery.render.vertex import Vertex

LOGGER = logging.getLogger(__name__)

WHITE_TOLERANCE = 0.01
TEXTURE_WEIGHT = 0.7


@dataclass
class Material:
    name: str
    ambient: Vector3 = field(default_factory=lambda: Vector3(0.2, 0.2, 0.2))
    diffuse: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    specular: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    shininess: float = 32.0
    texture_path: Optional[str] = None

    @classmethod
    def from_record(cls, record: MaterialRecord) -> "Material":
        material = cls(name=record.name, texture_path=record.diffuse_texture)
        if record.ambient is not None:
            material.ambient = Vector3(record.ambient)
        if record.diffuse is not None:
            material.diffuse = Vector3(record.diffuse)
        if record.specular is not None:
            material.specular = Vector3(record.specular)
        if record.shininess is not None:
            material.shininess = float(record.shininess)
        return material

    def base_color(self) -> Vector3:
        """Diffuse color, or ambient when diffuse is plain white."""

        diffuse = self.diffuse
        if all(abs(channel - 1.0) < WHITE_TOLERANCE for channel in diffuse):
            return Vector3(self.ambient)
        return Vector3(diffuse)


def resolve_base_color(
    material_id: Optional[int],
    materials: Sequence[Material],
    texture: Optional[Texture],
    tex_coords: Vector2,
) -> Vector3:
    if material_id is not None and 0 <= material_id < len(materials):
        color = materials[material_id].base_color()
    else:
        color = Vector3(1.0, 1.0, 1.0)
    if texture is not None:
        sampled = texture.sample_bilinear(tex_coords.x, tex_coords.y)
        color = sampled * TEXTURE_WEIGHT + color * (1.0 - TEXTURE_WEIGHT)
    return color


def normalize_submodel(
    raw: RawSubModel,
    materials: Sequence[Material],
    texture: Optional[Texture] = None,
) -> List[Vertex]:
    """Center a sub-model on the origin and fit it into the [-1, 1] cube.

    Y is flipped on positions and normals. Each vertex gets its baked base
    color from the sub-model's material and the optional texture.
    """

    count = raw.vertex_count
    if count == 0:
        return []
    xs = raw.positions[0::3]
    ys = raw.positions[1::3]
    zs = raw.positions[2::3]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    min_z, max_z = min(zs), max(zs)
    center = Vector3((min_x + max_x) / 2.0, (min_y + max_y) / 2.0, (min_z + max_z) / 2.0)
    max_size = max(max_x - min_x, max_y - min_y, max_z - min_z)
    scale = 2.0 / max_size if max_size > 0.0 else 1.0

    has_normals = len(raw.normals) >= count * 3
    has_uvs = len(raw.texcoords) >= count * 2

    vertices: List[Vertex] = []
    for i in range(count):
        position = Vector3(
            (xs[i] - center.x) * scale,
            -(ys[i] - center.y) * scale,
            (zs[i] - center.z) * scale,
        )
        if has_normals:
            normal = Vector3(raw.normals[i * 3], -raw.normals[i * 3 + 1], raw.normals[i * 3 + 2])
        else:
            normal = Vector3()
        if has_uvs:
            tex_coords = Vector2(raw.texcoords[i * 2], raw.texcoords[i * 2 + 1])
        else:
            tex_coords = Vector2()

        vertex = Vertex.new(position, normal, tex_coords)
        vertex.color = resolve_base_color(raw.material_id, materials, texture, tex_coords)
        vertices.append(vertex)
    return vertices


def _load_first_texture(base_dir: Path, materials: Sequence[Material]) -> Optional[Texture]:
    for material in materials:
        if not material.texture_path:
            continue
        texture_path = base_dir / material.texture_path
        try:
            texture = Texture.load(texture_path)
        except TextureLoadError as exc:
            LOGGER.warning("Texture skipped, using material colors: %s", exc)
            continue
        LOGGER.info("Loaded texture %s (%dx%d)", texture_path, texture.width, texture.height)
        return texture
    return None


@dataclass
class Model:
    """Normalised mesh ready for the pipeline."""

    vertices: List[Vertex]
    indices: List[int]
    materials: List[Material] = field(default_factory=list)
    mesh_materials: List[Optional[int]] = field(default_factory=list)
    texture: Optional[Texture] = None

    @classmethod
    def load(cls, path: Path | str) -> "Model":
        """Read and bake an OBJ model.

        Raises:
            MeshLoadError: the mesh cannot be read. Texture problems only log.
        """

        path = Path(path)
        scene = read_obj(path)
        materials = [Material.from_record(record) for record in scene.materials]
        texture = _load_first_texture(path.parent, materials)

        vertices: List[Vertex] = []
        indices: List[int] = []
        mesh_materials: List[Optional[int]] = []
        for raw in scene.models:
            offset = len(vertices)
            mesh_materials.append(raw.material_id)
            vertices.extend(normalize_submodel(raw, materials, texture))
            indices.extend(index + offset for index in raw.indices)

        return cls(
            vertices=vertices,
            indices=indices,
            materials=materials,
            mesh_materials=mesh_materials,
            texture=texture,
        )

    @classmethod
    def from_vertices(cls, vertices: Sequence[Vertex]) -> "Model":
        """Wrap an already flat triangle stream."""

        vertices = list(vertices)
        return cls(vertices=vertices, indices=list(range(len(vertices))))

    def vertex_array(self) -> List[Vertex]:
        """Expand the index buffer into a flat triangle-list stream."""

        return [self.vertices[index] for index in self.indices]

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3


__all__ = ["Material", "Model", "normalize_submodel", "resolve_base_color"]
