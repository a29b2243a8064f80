"""Dynamic configuration alternative to config.yaml.

Shipped disabled; enable it through the administration service.
"""
from typing import Any, Dict


def get_config() -> Dict[str, Any]:
    return {
        "id": "calculator",
        "name": "Calculator",
        "version": "0.9.0",
        "description": "Binary arithmetic on two numbers (add, sub, mul, div).",
        "enabled": False,
        "permissions": ["math:compute"],
        "settings": {"precision": 6},
        "entry": "tool_impl:CalculatorEngine",
    }
