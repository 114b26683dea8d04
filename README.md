# voxelworld

A chunked voxel world model: block types and their properties, 4-bit-per-channel
lighting (red, green, blue, sun), 32×32×32 chunk storage, world/chunk
coordinate conversion, flood-fill light propagation and removal, packed quad
meshing with ambient occlusion, and prefabs such as trees.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `voxelworld.light` – `Light`, a frozen value packing four 4-bit channels into
  a 16-bit `raw` field. `Light.from_channels(r, g, b, s)`, `channels()`,
  `with_channel(index, value)`; levels outside 0–15 raise `ValueError`.
- `voxelworld.block` – `BlockType`, `Visibility`, `BlockProperties`, the
  `PROPERTIES_TABLE`, `properties_of(block_type)` and the frozen `Block`
  (type plus light, with `name`, `priority`, `ttk`, `destructible`,
  `emittance` and `visibility` read from the table).
- `voxelworld.coords` – `CHUNK_SIZE` (32), `LocalPos`, `world_to_local`,
  `local_to_world`, `index_from_3d`, `index_from_2d`.
- `voxelworld.shapes` – `AABB`, `AABB16` (4-component corners) and `Timestep`.
- `voxelworld.chunk` – `ArrayBlockStorage` (numpy-backed types and lights) and
  `Chunk`, whose accessors take a flat index or an in-chunk `(x, y, z)` and are
  guarded by a reentrant lock (`lock()` / `unlock()`).
- `voxelworld.world` – `VoxelWorld`. `set_dim(dim)` creates chunks at chunk
  positions 1..dim and keeps an empty one-chunk border. Read and write blocks
  by world position with `get_block`, `try_get_block`, `set_block`,
  `set_block_type`, `set_block_light`; look up chunks with `get_chunk`,
  `get_chunk_no_check`, `get_chunks_region`, `get_chunks_region_world_space`;
  `create_chunk` fills an empty slot; `chunks()` iterates existing chunks.
- `voxelworld.chunk_manager` – `ChunkManager`: `update_block` changes a block,
  removes and re-floods light, and schedules remeshing of every affected
  chunk; `update_block_cheap`, `update_chunk`, `update_chunk_at`,
  `reload_all_chunks`, `propagate_light_add`, `propagate_light_remove`.
  Meshes are built on a thread pool (`workers=0` builds them inline);
  `wait()` blocks until scheduled builds finish and `update()` hands built
  meshes to the allocator. Use it as a context manager or call `close()`.
- `voxelworld.mesh` – `encode_quad`, `decode_quad`, `encode_quad_light`,
  `Face`, `ChunkMesh` (`build_mesh`, `build_buffers`, `close`) and
  `MeshAllocator`, which keeps built quad streams under non-zero handles,
  optionally within a byte capacity.
- `voxelworld.vertices` – static cube, skybox and index tables, and
  `cube_face_corners(face)`.
- `voxelworld.prefab` – `PlacementType`, `Prefab` and `PrefabManager`, with the
  built-in prefabs `OakTree`, `OakTreeBig` and `Error`. Prefabs are saved as
  `<name>.bin` in the manager's directory (default `./Resources/Prefabs`); a
  prefab that cannot be loaded comes back as a copy of the error prefab.
- `voxelworld.colormath` – `rgb_to_hsl`, `hsl_to_rgb`,
  `make_inf_reversed_z_proj_rh`, `noise`, `map_range`, `djb2_hash`,
  `ivec3_hash`.
- `voxelworld.shading` – octahedral normal encoding, depth linearisation and
  unprojection, hash noise (`gold_noise`, `silver_noise`, `rand`, `random3`)
  and PBR terms (`d_ggx`, `hammersley`, `importance_sample_ggx`,
  `fresnel_schlick`, `fresnel_schlick_roughness`, `g_schlick_ggx`, `g_smith`).
- `voxelworld.hud` – `Hud`, whose `update(scroll_offset)` steps the selected
  block type, clamped to the valid types.

## Example

```python
from voxelworld.block import Block, BlockType
from voxelworld.chunk_manager import ChunkManager
from voxelworld.world import VoxelWorld

world = VoxelWorld((2, 2, 2))

with ChunkManager(world) as manager:
    manager.update_block((40, 40, 40), Block(BlockType.R_LIGHT))
    print(world.get_block((41, 40, 40)).light.channels())  # (14, 0, 0, 0)
    manager.wait()
    manager.update()
    print(len(manager.allocator))  # number of chunk meshes handed over
```

## What it does not do

The package is a model of the world and its meshes only. It draws nothing:
there is no window, GPU upload, texture loading or culling, and
`MeshAllocator` simply holds the packed quad streams in memory. There is no
physics collider, world generation, raycasting, in-game editor or chunk
compression, and no command-line program.