"""Action Layer - Resolve-then-act execution on live pages."""

from pinpoint.layers.action.executor import ActionExecutor, ActionResult

__all__ = ["ActionExecutor", "ActionResult"]
