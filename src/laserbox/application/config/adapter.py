"""Adapters from the configuration schema to domain and application objects."""

from __future__ import annotations

from laserbox.application.config.schema import BoxConfiguration, OverlayConfig
from laserbox.application.dtos import BoxRequest, OverlayInput
from laserbox.domain import BoxInputs, BoxType, DrawerParams, HingeParams
from laserbox.infrastructure.sheet_packer import SheetConfig


def config_to_inputs(config: BoxConfiguration) -> BoxInputs:
    """Flatten the box, material, fingers, lid and dividers sections.

    Example:
        >>> config = load_config(Path("my-box.json"))
        >>> inputs = config_to_inputs(config)
        >>> result = generate_faces(inputs)
    """
    box = config.box
    fingers = config.fingers
    dividers = config.dividers
    return BoxInputs(
        width=box.width,
        depth=box.depth,
        height=box.height,
        thickness=config.material.thickness,
        kerf=config.material.kerf,
        finger_min=fingers.min,
        finger_max=fingers.max,
        finger_width=fingers.width,
        auto_finger_count=fingers.auto_count,
        finger_count=fingers.count,
        dimension_reference=box.dimension_reference,
        lid_type=config.lid.type,
        groove_offset=config.lid.groove_offset,
        groove_depth=config.lid.groove_depth,
        dividers_enabled=dividers.enabled,
        divider_count_x=dividers.count_x,
        divider_count_z=dividers.count_z,
        divider_clearance=dividers.clearance,
    )


def config_to_hinge_params(config: BoxConfiguration) -> HingeParams:
    hinge = config.hinge
    return HingeParams(
        top_inset=hinge.top_inset,
        back_inset=hinge.back_inset,
        notch_width=hinge.notch_width,
        notch_depth=hinge.notch_depth,
        pin_clearance=hinge.pin_clearance,
    )


def config_to_drawer_params(config: BoxConfiguration) -> DrawerParams:
    drawer = config.drawer
    return DrawerParams(
        clearance=drawer.clearance,
        bottom_offset=drawer.bottom_offset,
        front_style=drawer.front_style,
        lip_reveal=drawer.lip_reveal,
        thumb_notch=drawer.thumb_notch,
    )


def config_to_sheet(config: BoxConfiguration) -> SheetConfig | None:
    """Sheet for packing, or None when the config has no sheet section."""
    if config.sheet is None:
        return None
    return SheetConfig(
        width=config.sheet.width,
        height=config.sheet.height,
        spacing=config.sheet.spacing,
        auto_rotate=config.sheet.auto_rotate,
    )


def _overlay_to_input(overlay: OverlayConfig) -> OverlayInput:
    return OverlayInput(
        target=overlay.target,
        path_data=overlay.path,
        x=overlay.x,
        y=overlay.y,
        rotation=overlay.rotation,
        scale_x=overlay.scale_x,
        scale_y=overlay.scale_y,
        operation=overlay.operation,
    )


def config_to_request(config: BoxConfiguration) -> BoxRequest:
    """Build the full request for ``GenerateBoxCommand``.

    Hinge and drawer parameters are only attached for the box type that
    uses them.
    """
    box_type = config.box.type
    return BoxRequest(
        inputs=config_to_inputs(config),
        box_type=box_type,
        hinge=config_to_hinge_params(config) if box_type == BoxType.HINGED else None,
        drawer=config_to_drawer_params(config) if box_type == BoxType.DRAWER else None,
        sheet=config_to_sheet(config),
        overlays=[_overlay_to_input(o) for o in config.overlays],
    )
