from .vec3 import Vec3
