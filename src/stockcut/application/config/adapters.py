"""Adapters between the pydantic file schemas and domain objects.

Settings become the frozen configuration objects the services take, and a
workspace becomes the materials and orders held by the in-memory stores.
``workspace_from_domain`` goes the other way so a command line run can
write its inventory changes back to disk.
"""

from __future__ import annotations

from stockcut.application.config.schema import (
    BatchSchema,
    LegacyStockSchema,
    MaterialCutSchema,
    MaterialSchema,
    MeshPanelSchema,
    OrderItemSchema,
    OrderSchema,
    RollBatchSchema,
    StandardLengthSchema,
    StockCutConfiguration,
    WorkspaceSchema,
)
from stockcut.domain.entities import (
    Batch,
    LegacyStockEntry,
    Material,
    Order,
    OrderItem,
    RequiredMaterialCut,
    RequiredMeshPanel,
    RollBatch,
)
from stockcut.domain.value_objects import StockCatalogEntry
from stockcut.infrastructure.pipe_packing import PipePackingConfig


def config_to_packing_config(config: StockCutConfiguration) -> PipePackingConfig:
    """Build the optimizer configuration from settings."""
    return PipePackingConfig(
        tolerance=config.optimizer.tolerance,
        kerf_inches=config.optimizer.kerf_inches,
    )


def material_from_schema(schema: MaterialSchema) -> Material:
    """Convert a material schema, with its stock, into a domain Material."""
    return Material(
        material_id=schema.material_id,
        name=schema.name,
        category=schema.category,
        usage_unit=schema.usage_unit,
        standard_lengths=[
            StockCatalogEntry(
                material_id=schema.material_id,
                standard_length=entry.length,
                unit=entry.unit,
                gauge=entry.gauge,
            )
            for entry in schema.standard_lengths
        ],
        gauge_weights=dict(schema.gauge_weights),
        weight_unit=schema.weight_unit,
        tracking=schema.tracking,
        batches=[
            Batch(
                batch_id=b.batch_id,
                length=b.length,
                unit=b.unit,
                original_quantity=(
                    b.original_quantity
                    if b.original_quantity is not None
                    else b.current_quantity
                ),
                current_quantity=b.current_quantity,
                rate_per_piece=b.rate_per_piece,
                purchase_date=b.purchase_date,
                gauge=b.gauge,
                supplier=b.supplier,
                invoice_number=b.invoice_number,
                is_active=b.is_active,
                is_completed=b.is_completed,
            )
            for b in schema.batches
        ],
        roll_batches=[
            RollBatch(
                batch_id=r.batch_id,
                width=r.width,
                unit=r.unit,
                current_rolls=r.current_rolls,
                area_per_roll=r.area_per_roll,
                total_area=(
                    r.total_area
                    if r.total_area is not None
                    else r.current_rolls * r.area_per_roll
                ),
                rate_per_area=r.rate_per_area,
                purchase_date=r.purchase_date,
                supplier=r.supplier,
                is_active=r.is_active,
                is_completed=r.is_completed,
            )
            for r in schema.roll_batches
        ],
        stock_by_length=[
            LegacyStockEntry(
                length=row.length,
                unit=row.unit,
                quantity=row.quantity,
                unit_rate=row.unit_rate,
                gauge=row.gauge,
            )
            for row in schema.stock_by_length
        ],
    )


def order_from_schema(schema: OrderSchema) -> Order:
    """Convert an order schema into a domain Order."""
    return Order(
        order_id=schema.order_id,
        company_id=schema.company_id,
        display_id=schema.display_id,
        status=schema.status,
        cutting_plan_id=schema.cutting_plan_id,
        cutting_plan_status=schema.cutting_plan_status,
        notes=schema.notes,
        items=[
            OrderItem(
                item_ref=item.item_ref,
                material_cuts=[
                    RequiredMaterialCut(
                        material_id=cut.material_id,
                        cut_lengths=tuple(cut.cut_lengths),
                        gauge=cut.gauge,
                    )
                    for cut in item.material_cuts
                ],
                mesh_panels=[
                    RequiredMeshPanel(
                        material_id=panel.material_id,
                        width=panel.width,
                        length=panel.length,
                        quantity=panel.quantity,
                    )
                    for panel in item.mesh_panels
                ],
            )
            for item in schema.items
        ],
    )


def workspace_to_domain(workspace: WorkspaceSchema) -> tuple[list[Material], list[Order]]:
    """Convert a workspace into domain materials and orders."""
    materials = [material_from_schema(m) for m in workspace.materials]
    orders = [order_from_schema(o) for o in workspace.orders]
    return materials, orders


def _material_to_schema(material: Material) -> MaterialSchema:
    return MaterialSchema(
        material_id=material.material_id,
        name=material.name,
        category=material.category,
        usage_unit=material.usage_unit,
        standard_lengths=[
            StandardLengthSchema(
                length=entry.standard_length, unit=entry.unit, gauge=entry.gauge
            )
            for entry in material.standard_lengths
        ],
        gauge_weights=dict(material.gauge_weights),
        weight_unit=material.weight_unit,
        tracking=material.tracking,
        batches=[
            BatchSchema(
                batch_id=b.batch_id,
                length=b.length,
                unit=b.unit,
                gauge=b.gauge,
                current_quantity=b.current_quantity,
                original_quantity=b.original_quantity,
                rate_per_piece=b.rate_per_piece,
                purchase_date=b.purchase_date,
                supplier=b.supplier,
                invoice_number=b.invoice_number,
                is_active=b.is_active,
                is_completed=b.is_completed,
            )
            for b in material.batches
        ],
        roll_batches=[
            RollBatchSchema(
                batch_id=r.batch_id,
                width=r.width,
                unit=r.unit,
                current_rolls=r.current_rolls,
                area_per_roll=r.area_per_roll,
                total_area=r.total_area,
                rate_per_area=r.rate_per_area,
                purchase_date=r.purchase_date,
                supplier=r.supplier,
                is_active=r.is_active,
                is_completed=r.is_completed,
            )
            for r in material.roll_batches
        ],
        stock_by_length=[
            LegacyStockSchema(
                length=row.length,
                unit=row.unit,
                quantity=row.quantity,
                unit_rate=row.unit_rate,
                gauge=row.gauge,
            )
            for row in material.stock_by_length
        ],
    )


def _order_to_schema(order: Order) -> OrderSchema:
    return OrderSchema(
        order_id=order.order_id,
        company_id=order.company_id,
        display_id=order.display_id,
        status=order.status,
        cutting_plan_id=order.cutting_plan_id,
        cutting_plan_status=order.cutting_plan_status,
        notes=order.notes,
        items=[
            OrderItemSchema(
                item_ref=item.item_ref,
                material_cuts=[
                    MaterialCutSchema(
                        material_id=cut.material_id,
                        gauge=cut.gauge,
                        cut_lengths=list(cut.cut_lengths),
                    )
                    for cut in item.material_cuts
                ],
                mesh_panels=[
                    MeshPanelSchema(
                        material_id=panel.material_id,
                        width=panel.width,
                        length=panel.length,
                        quantity=panel.quantity,
                    )
                    for panel in item.mesh_panels
                ],
            )
            for item in order.items
        ],
    )


def workspace_from_domain(
    materials: list[Material], orders: list[Order], schema_version: str = "1.0"
) -> WorkspaceSchema:
    """Convert domain materials and orders back into a workspace."""
    return WorkspaceSchema(
        schema_version=schema_version,
        materials=[_material_to_schema(m) for m in materials],
        orders=[_order_to_schema(o) for o in orders],
    )
