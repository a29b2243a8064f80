"""Core framework components for toolengine.

Modules:
  tool_base: BaseEngine capability contract plus context/result records.
  registry: In-memory catalog of manifests, engine instances and metrics.
  config_loader: Parse YAML/JSON/Python tool configs into normalized dicts.
  sources: Directory-backed and static tool sources feeding the loader.
  loader: Discovery and load/unload/reload lifecycle transitions.
  orchestrator: Execution dispatch with lazy loading and a concurrency ceiling.
  status: Read-side status/health projection.
  activity: Capacity-bounded activity log.
  admin: Activate/deactivate, bulk operations and audited execution.
  settings: Environment-driven engine settings.
"""

from .registry import ToolRegistry  # noqa: F401
