"""Validation result structures and laser-fabrication checks.

Pydantic already guarantees the configuration is well formed. The checks here
catch configurations that are well formed but cannot be cut: a kerf as wide
as the material, fingers longer than the edges they sit on, a drawer with no
room left inside its shell, or a sheet too small for any panel. Anything the
generator itself reports is folded in as well, so ``validate`` and
``generate`` never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from laserbox.application.commands import GenerateBoxCommand
from laserbox.application.config.adapter import (
    config_to_drawer_params,
    config_to_inputs,
    config_to_request,
)
from laserbox.application.config.schema import BoxConfiguration
from laserbox.domain import BoxType, compute_dimensions, compute_drawer_dimensions


@dataclass
class ValidationError:
    """A blocking validation error.

    Attributes:
        path: JSON path to the invalid field (e.g., "material.kerf")
        message: Human-readable description of the error
        value: The invalid value that caused the error
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """A non-blocking validation warning.

    Attributes:
        path: JSON path to the concerning field
        message: Human-readable description of the concern
        suggestion: Optional suggested remediation
    """

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """CLI exit code: 0 clean, 1 errors, 2 warnings only."""
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(self, path: str, message: str, value: Any = None) -> ValidationResult:
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> ValidationResult:
        self.warnings.append(ValidationWarning(path=path, message=message, suggestion=suggestion))
        return self

    def merge(self, other: ValidationResult) -> ValidationResult:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def check_material(config: BoxConfiguration) -> ValidationResult:
    """Kerf against the material thickness and the finger width."""
    result = ValidationResult()
    kerf = config.material.kerf
    thickness = config.material.thickness
    if kerf >= thickness:
        result.add_error(
            "material.kerf",
            f"Kerf ({kerf:g} mm) must be smaller than the material thickness ({thickness:g} mm)",
            kerf,
        )

    finger_min = config.fingers.width if config.fingers.width is not None else config.fingers.min
    if kerf >= finger_min:
        path = "fingers.width" if config.fingers.width is not None else "fingers.min"
        result.add_error(
            path,
            f"Finger width ({finger_min:g} mm) must be larger than the kerf ({kerf:g} mm)",
            finger_min,
        )
    elif kerf > finger_min / 4:
        result.add_warning(
            "material.kerf",
            f"Kerf ({kerf:g} mm) is large relative to the finger width ({finger_min:g} mm)",
            "Use wider fingers for a tighter fit",
        )
    return result


def check_dimensions(config: BoxConfiguration) -> ValidationResult:
    """Interior must be positive and every edge must hold one finger pair."""
    result = ValidationResult()
    inputs = config_to_inputs(config)
    dims = compute_dimensions(inputs)
    if not dims.is_positive:
        result.add_error(
            "box",
            "Resolved interior dimensions must be positive "
            f"(got {dims.inner_width:g} x {dims.inner_depth:g} x {dims.inner_height:g} mm)",
        )
        return result

    finger_min, _ = inputs.finger_bounds
    edges = {
        "box.width": dims.inner_width,
        "box.depth": dims.inner_depth,
        "box.height": dims.inner_height,
    }
    for path, length in edges.items():
        if length < 2 * finger_min:
            result.add_error(
                path,
                f"Edge of {length:.2f} mm is too short for one finger pair "
                f"(needs {2 * finger_min:g} mm with fingers of {finger_min:g} mm)",
                length,
            )
    return result


def check_drawer(config: BoxConfiguration) -> ValidationResult:
    """The drawer must keep a positive size after clearances."""
    result = ValidationResult()
    if config.box.type != BoxType.DRAWER:
        return result
    dims, _ = compute_drawer_dimensions(config_to_inputs(config), config_to_drawer_params(config))
    if not dims.is_positive:
        result.add_error(
            "drawer.clearance",
            "Drawer collapses to "
            f"{dims.drawer_width:g} x {dims.drawer_depth:g} x {dims.drawer_height:g} mm "
            "after clearances",
            config.drawer.clearance,
        )
    return result


def _message_path(message: str) -> str:
    if message.startswith("Overlay"):
        return "overlays"
    if message.startswith("Panel '"):
        return "sheet"
    return "box"


def check_generation(config: BoxConfiguration) -> ValidationResult:
    """Run the generator and report what it reports, plus sheet fit."""
    result = ValidationResult()
    output = GenerateBoxCommand().execute(config_to_request(config))
    for message in output.errors:
        result.add_error(_message_path(message), message)
    for message in output.warnings:
        result.add_warning(_message_path(message), message)

    packing = output.packing_result
    if packing is not None and output.faces and packing.ready_count == 0:
        result.add_error(
            "sheet",
            f"Sheet {packing.sheet.width:g} x {packing.sheet.height:g} mm is smaller "
            "than every panel",
        )
    return result


def validate_config(config: BoxConfiguration) -> ValidationResult:
    """Perform full validation of a box configuration.

    Static checks run first. The generator only runs when they pass, since
    it would report the same problems again with less precise paths.

    Args:
        config: A BoxConfiguration instance (already validated by Pydantic)

    Returns:
        ValidationResult containing any errors or warnings
    """
    result = ValidationResult()
    result.merge(check_material(config))
    result.merge(check_dimensions(config))
    result.merge(check_drawer(config))
    if not result.is_valid:
        return result
    return result.merge(check_generation(config))
