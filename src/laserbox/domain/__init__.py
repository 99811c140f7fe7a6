"""Domain layer: pure geometry and box logic."""

from .artwork import artwork_from_path_data, artwork_from_svg, place_artwork
from .drawer import (
    DrawerParams,
    DrawerResult,
    compute_drawer_dimensions,
    cut_thumb_notch,
    specialize_drawer,
)
from .face_generator import (
    BoxInputs,
    FaceBuilder,
    GenerationResult,
    compute_dimensions,
    ensure_simple,
    generate_dividers,
    generate_faces,
    generate_open_front_shell,
)
from .finger_joints import EdgeJoint, FingerPattern, build_panel, plan_fingers
from .geometry import (
    DrawPath,
    PathCommand,
    bbox,
    cut_top_notch,
    is_simple_polygon,
    largest_subpath,
    normalize,
    polygon_area,
    simplify_closed,
)
from .hinge import (
    HingeParams,
    HingeResult,
    compute_pin_holes,
    generate_hinged_box,
    lid_profile,
    resize_face,
    specialize_hinge,
)
from .value_objects import (
    BoxDimensions,
    BoxType,
    ConfigurationError,
    DimensionReference,
    DrawerDimensions,
    EngraveOverlayItem,
    FacePath,
    FaceRole,
    FrontFaceStyle,
    GeneratedFace,
    GeometryError,
    HingeHoles,
    LaserboxError,
    LidType,
    Operation,
    OverlayPlacement,
    PinHole,
    Point,
)

__all__ = [
    # Value objects
    "BoxDimensions",
    "BoxType",
    "DimensionReference",
    "DrawerDimensions",
    "EngraveOverlayItem",
    "FacePath",
    "FaceRole",
    "FrontFaceStyle",
    "GeneratedFace",
    "HingeHoles",
    "LidType",
    "Operation",
    "OverlayPlacement",
    "PinHole",
    "Point",
    # Errors
    "ConfigurationError",
    "GeometryError",
    "LaserboxError",
    # Geometry
    "DrawPath",
    "PathCommand",
    "bbox",
    "cut_top_notch",
    "is_simple_polygon",
    "largest_subpath",
    "normalize",
    "polygon_area",
    "simplify_closed",
    # Finger joints and faces
    "BoxInputs",
    "EdgeJoint",
    "FaceBuilder",
    "FingerPattern",
    "GenerationResult",
    "build_panel",
    "compute_dimensions",
    "ensure_simple",
    "generate_dividers",
    "generate_faces",
    "generate_open_front_shell",
    "plan_fingers",
    # Hinge
    "HingeParams",
    "HingeResult",
    "compute_pin_holes",
    "generate_hinged_box",
    "lid_profile",
    "resize_face",
    "specialize_hinge",
    # Drawer
    "DrawerParams",
    "DrawerResult",
    "compute_drawer_dimensions",
    "cut_thumb_notch",
    "specialize_drawer",
    # Artwork
    "artwork_from_path_data",
    "artwork_from_svg",
    "place_artwork",
]
