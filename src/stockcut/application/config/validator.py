"""Validation structures and stock advisory checks for workspaces.

Schema validation catches malformed files. The checks here look for
workspaces that load fine but cannot be optimized or committed as written,
such as a cut longer than every standard length.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from stockcut.application.config.schema import MaterialSchema, WorkspaceSchema
from stockcut.domain.value_objects import (
    LENGTH_TOLERANCE,
    InventoryTracking,
    MaterialCategory,
    convert_length,
    lengths_match,
)


@dataclass
class ValidationError:
    """A blocking problem: the workspace cannot be used as written.

    Attributes:
        path: JSON path to the invalid field (e.g., "orders[0].items[1].item_ref")
        message: Human-readable description of the error
        value: The invalid value that caused the error
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """A non-blocking concern, e.g. an order that will fail to optimize."""

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
        """Get the CLI exit code based on validation status.

        Returns:
            0 if valid with no warnings
            1 if there are errors
            2 if valid but has warnings
        """
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(self, path: str, message: str, value: Any = None) -> "ValidationResult":
        """Add a validation error and return self for chaining."""
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        """Add a validation warning and return self for chaining."""
        self.warnings.append(
            ValidationWarning(path=path, message=message, suggestion=suggestion)
        )
        return self


def _standard_sizes(material: MaterialSchema, gauge: str | None = None) -> list[Decimal]:
    """Standard lengths (or widths) of a material in its usage unit."""
    return [
        convert_length(entry.length, entry.unit, material.usage_unit)
        for entry in material.standard_lengths
        if entry.gauge is None or gauge is None or entry.gauge == gauge
    ]


def check_stock_advisories(workspace: WorkspaceSchema) -> ValidationResult:
    """Check materials for stock records that do not line up with the catalog."""
    result = ValidationResult()

    for m_index, material in enumerate(workspace.materials):
        path = f"materials[{m_index}]"
        if not material.standard_lengths:
            result.add_warning(
                f"{path}.standard_lengths",
                f"{material.name} has no standard lengths; orders using it cannot be optimized",
            )

        if material.tracking == InventoryTracking.LEGACY and (
            material.batches or material.roll_batches
        ):
            result.add_warning(
                f"{path}.tracking",
                f"{material.name} is tracked as legacy stock; its batches are ignored",
                suggestion="Set tracking to 'batch' or move the stock to stock_by_length",
            )
        if material.tracking == InventoryTracking.BATCH and material.stock_by_length:
            result.add_warning(
                f"{path}.tracking",
                f"{material.name} is tracked by batch; its stock_by_length rows are ignored",
            )

        for b_index, batch in enumerate(material.batches):
            matches = any(
                lengths_match(batch.length, batch.unit, entry.length, entry.unit, LENGTH_TOLERANCE)
                for entry in material.standard_lengths
            )
            if material.standard_lengths and not matches:
                result.add_warning(
                    f"{path}.batches[{b_index}].length",
                    f"Batch {batch.batch_id} length {batch.length} {batch.unit.value} "
                    f"is not a standard length of {material.name}; it will never be consumed",
                )

    return result


def check_order_advisories(workspace: WorkspaceSchema) -> ValidationResult:
    """Check orders against the materials they reference."""
    result = ValidationResult()
    materials = {m.material_id: m for m in workspace.materials}

    for o_index, order in enumerate(workspace.orders):
        for i_index, item in enumerate(order.items):
            item_path = f"orders[{o_index}].items[{i_index}]"

            for c_index, cut in enumerate(item.material_cuts):
                material = materials[cut.material_id]
                path = f"{item_path}.material_cuts[{c_index}]"
                if material.category == MaterialCategory.WIRE_MESH:
                    result.add_error(
                        f"{path}.material_id",
                        f"{material.name} is wire mesh; list it under mesh_panels",
                        cut.material_id,
                    )
                    continue
                sizes = _standard_sizes(material, cut.gauge)
                if sizes and max(cut.cut_lengths) > max(sizes) + LENGTH_TOLERANCE:
                    result.add_warning(
                        f"{path}.cut_lengths",
                        f"Cut of {max(cut.cut_lengths)} {material.usage_unit.value} is longer "
                        f"than the longest standard length of {material.name} "
                        f"({max(sizes)} {material.usage_unit.value})",
                    )

            for p_index, panel in enumerate(item.mesh_panels):
                material = materials[panel.material_id]
                path = f"{item_path}.mesh_panels[{p_index}]"
                if material.category != MaterialCategory.WIRE_MESH:
                    result.add_error(
                        f"{path}.material_id",
                        f"{material.name} is not wire mesh; list it under material_cuts",
                        panel.material_id,
                    )
                    continue
                widths = _standard_sizes(material)
                if widths and min(panel.width, panel.length) > max(widths):
                    result.add_warning(
                        path,
                        f"Panel {panel.width}x{panel.length} does not fit any standard "
                        f"width of {material.name} in either orientation",
                    )

    return result


def validate_workspace(workspace: WorkspaceSchema) -> ValidationResult:
    """Run every advisory check on a loaded workspace."""
    result = check_stock_advisories(workspace)
    orders = check_order_advisories(workspace)
    result.errors.extend(orders.errors)
    result.warnings.extend(orders.warnings)
    return result
