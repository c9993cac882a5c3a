from __future__ import annotations


class NoDrawableSurface(RuntimeError):
    pass


class ShapeTreeError(ValueError):
    """Invalid data in a caller's shape tree."""


class BadReference(ShapeTreeError):
    pass


class ReferenceDepthExceeded(BadReference):
    pass


class NoReferencePoint(ShapeTreeError):
    pass


class BadCoordinate(ShapeTreeError):
    pass


class AnimationDescriptorError(ValueError):
    pass


class SceneConfigError(ValueError):
    pass
