"""Centralized custom exception hierarchy for the tool engine."""
from __future__ import annotations


class ToolError(Exception):
    """Base class for all tool related errors."""


class ConfigError(ToolError):
    pass


class RegistrationError(ToolError):
    pass


class DuplicateToolError(RegistrationError):
    def __init__(self, tool_id: str):
        super().__init__(f"Plugin {tool_id} is already registered")
        self.tool_id = tool_id


class MissingDependencyError(RegistrationError):
    def __init__(self, tool_id: str, dependency: str):
        super().__init__(f"Dependency {dependency} not found for plugin {tool_id}")
        self.tool_id = tool_id
        self.dependency = dependency


class ToolNotFoundError(ToolError):
    pass


class LoadError(ToolError):  # config read / engine resolution / initialize()
    pass


class ExecutionError(ToolError):
    pass


__all__ = [
    "ToolError",
    "ConfigError",
    "RegistrationError",
    "DuplicateToolError",
    "MissingDependencyError",
    "ToolNotFoundError",
    "LoadError",
    "ExecutionError",
]
