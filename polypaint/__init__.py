from polypaint.animation import Animation, AnimationScheduler, FrameSample, Track, sample
from polypaint.api import collect_primitives, paint, render_frames
from polypaint.attributes import POLYGON_ATTR, AttributeContext, AttrSpec
from polypaint.coordinates import Point, PointResolver
from polypaint.errors import (
    AnimationDescriptorError,
    BadCoordinate,
    BadReference,
    NoDrawableSurface,
    NoReferencePoint,
    ReferenceDepthExceeded,
    SceneConfigError,
    ShapeTreeError,
)
from polypaint.evaluator import Polygons
from polypaint.raster import RasterSink
from polypaint.sink import DrawingSink, Primitive, RecordingSink, backend_attribute
from polypaint.surface import SurfaceRegistry, acquire_sink
from polypaint.transform import transform_point

__all__ = [
    "Animation",
    "AnimationDescriptorError",
    "AnimationScheduler",
    "AttrSpec",
    "AttributeContext",
    "BadCoordinate",
    "BadReference",
    "DrawingSink",
    "FrameSample",
    "NoDrawableSurface",
    "NoReferencePoint",
    "POLYGON_ATTR",
    "Point",
    "PointResolver",
    "Polygons",
    "Primitive",
    "RasterSink",
    "RecordingSink",
    "ReferenceDepthExceeded",
    "SceneConfigError",
    "ShapeTreeError",
    "SurfaceRegistry",
    "Track",
    "acquire_sink",
    "backend_attribute",
    "collect_primitives",
    "paint",
    "render_frames",
    "sample",
    "transform_point",
]
