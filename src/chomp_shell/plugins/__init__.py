"""
Plugin system for chomp-shell optimizers and waypoint initialization.

Optimizers are discovered via the "chomp_shell.optimizers" entry point
group. Example plugin registration in pyproject.toml:

    [project.entry-points."chomp_shell.optimizers"]
    my_optimizer = "my_package:register_optimizers"

The target is a function that calls `register_optimizer`. Waypoint
initialization policies are registered at runtime with
`register_initialization_policy`.
"""

from __future__ import annotations

from ..core.optimizer import (
    ENTRY_POINT_GROUP,
    Optimizer,
    OptimizerFactory,
    create_optimizer,
    discover_optimizer_plugins,
    get_registered_optimizers,
    register_optimizer,
    unregister_optimizer,
)
from ..core.trajectory import (
    InitializationPolicy,
    get_initialization_policies,
    register_initialization_policy,
    unregister_initialization_policy,
)


def discover_all_plugins() -> None:
    """
    Discover all plugin types.

    Call this early at startup so plugin optimizers are registered before
    session configuration is validated.
    """
    discover_optimizer_plugins()


__all__ = [
    # Optimizer plugins
    "ENTRY_POINT_GROUP",
    "Optimizer",
    "OptimizerFactory",
    "create_optimizer",
    "discover_optimizer_plugins",
    "get_registered_optimizers",
    "register_optimizer",
    "unregister_optimizer",
    # Initialization policies
    "InitializationPolicy",
    "get_initialization_policies",
    "register_initialization_policy",
    "unregister_initialization_policy",
    # Combined discovery
    "discover_all_plugins",
]
