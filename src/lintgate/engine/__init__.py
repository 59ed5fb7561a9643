# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Engine contracts, registration and invocation."""

from __future__ import annotations

from .interfaces import Engine, EngineFactory, EngineProject, EngineRequest, FormatterSpec
from .invoker import EngineInvoker, InvocationResult
from .loader import BUILTIN_ENGINES, EngineLoader, isolated_import_path

__all__ = [
    "BUILTIN_ENGINES",
    "Engine",
    "EngineFactory",
    "EngineInvoker",
    "EngineLoader",
    "EngineProject",
    "EngineRequest",
    "FormatterSpec",
    "InvocationResult",
    "isolated_import_path",
]
