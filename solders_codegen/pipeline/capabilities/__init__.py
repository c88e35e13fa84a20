"""
Capabilities module.

Contains the capability catalog, request nodes and the parser.
"""

from __future__ import annotations

from .catalog import CAPABILITIES, CapabilitySpec, OptionKind, OptionSpec
from .nodes import CapabilityOptions, CapabilitySet, RawCapability
from .parser import CapabilityParser

__all__ = [
    "CAPABILITIES",
    "CapabilitySpec",
    "OptionKind",
    "OptionSpec",
    "RawCapability",
    "CapabilityOptions",
    "CapabilitySet",
    "CapabilityParser",
]
