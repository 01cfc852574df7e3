"""Whitted-style recursive ray tracer with an automatic bounding-volume hierarchy.

This package renders scenes described in a line-oriented scene description
format using classic recursive ray tracing:
- Local Phong illumination with hard or jittered soft shadows
- Mirror reflection and refraction (with total internal reflection)
- Nested aggregates: plain object lists, affine transforms and an
  automatically built bounding-volume hierarchy

Subpackages:
    core: Vector math, intervals, boxes, affine maps, rays and the rasterizer
    geometry: Object capability model and geometric primitives
    aggregates: Object lists, transforms and the bounding-volume hierarchy
    materials: Surface materials, shaders and environment maps
    scene: Scene container, plugin registry and scene description builder
    camera: Pinhole camera and primary ray generation
    preview: Tone mapping, image export and the interactive preview window
"""

__version__ = "0.1.0"
