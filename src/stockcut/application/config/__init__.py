"""Settings and workspace files.

Public API:
    - StockCutConfiguration: Root settings model
    - WorkspaceSchema: Materials and orders for command line runs
    - load_config / load_config_from_dict: Load settings
    - load_workspace: Load a workspace file
    - ConfigError: Exception for configuration errors
    - ValidationResult, validate_workspace: Advisory checks for workspaces
    - config_to_packing_config, workspace_to_domain, workspace_from_domain:
      Conversions between schemas and domain objects

Example:
    >>> from pathlib import Path
    >>> from stockcut.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("stockcut.json"))
    ...     print(config.optimizer.kerf_inches)
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from stockcut.application.config.adapters import (
    config_to_packing_config,
    material_from_schema,
    order_from_schema,
    workspace_from_domain,
    workspace_to_domain,
)
from stockcut.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
    load_workspace,
)
from stockcut.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    check_order_advisories,
    check_stock_advisories,
    validate_workspace,
)
from stockcut.application.config.schema import (
    SUPPORTED_VERSIONS,
    BatchSchema,
    CommitConfigSchema,
    LegacyStockSchema,
    LockConfigSchema,
    MaterialCutSchema,
    MaterialSchema,
    MeshPanelSchema,
    OptimizerConfigSchema,
    OrderItemSchema,
    OrderSchema,
    RollBatchSchema,
    StandardLengthSchema,
    StockCutConfiguration,
    WorkspaceSchema,
)

__all__ = [
    # Loader
    "ConfigError",
    "load_config",
    "load_config_from_dict",
    "load_workspace",
    # Adapters
    "config_to_packing_config",
    "material_from_schema",
    "order_from_schema",
    "workspace_from_domain",
    "workspace_to_domain",
    # Validation
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "check_order_advisories",
    "check_stock_advisories",
    "validate_workspace",
    # Schema
    "SUPPORTED_VERSIONS",
    "BatchSchema",
    "CommitConfigSchema",
    "LegacyStockSchema",
    "LockConfigSchema",
    "MaterialCutSchema",
    "MaterialSchema",
    "MeshPanelSchema",
    "OptimizerConfigSchema",
    "OrderItemSchema",
    "OrderSchema",
    "RollBatchSchema",
    "StandardLengthSchema",
    "StockCutConfiguration",
    "WorkspaceSchema",
]
