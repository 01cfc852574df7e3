"""Materials module: surface parameters, shaders and environment maps.

Components:
    material: Material dataclass (Phong parameters, reflectivity, translucency)
    shader: Shader interface and the Whitted BasicShader
    envmap: Envmap interface, constant and gradient environment maps

Shaders compute local illumination (ambient, diffuse, Phong specular with
shadow rays) and recurse through the scene for mirror reflection and
refraction, with total internal reflection keeping rays inside the medium.
"""

from .envmap import ConstantEnvmap, Envmap, GradientEnvmap
from .material import Material
from .shader import BasicShader, Shader, attenuation

__all__ = [
    "Material",
    "Shader",
    "BasicShader",
    "attenuation",
    "Envmap",
    "ConstantEnvmap",
    "GradientEnvmap",
]
