from .fov import cast_ray, illuminate
from .memory import remember, viewed_set

__all__ = ["cast_ray", "illuminate", "remember", "viewed_set"]
