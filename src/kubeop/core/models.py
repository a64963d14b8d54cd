#!/usr/bin/env python3
"""
KUBEOP CORE MODELS
------------------
Defines the fundamental data structures used across the KubeOp engine.
These models represent the lowest level of deployment abstraction: the raw
manifest text pulled out of an archive and the records handed back to callers.

Author: KubeOp Team
Date: 2026-10-18
"""

from dataclasses import dataclass
from typing import Optional

@dataclass
class RawDocument:
    """
    The atomic unit of an operator deployment archive.

    A RawDocument holds one manifest body exactly as it was read from the
    archive (or split out of a multi-document body by the Decoder).
    """
    body: str                    # Raw YAML text of the manifest
    name: Optional[str] = None   # Archive entry name, when known


@dataclass
class ContainerStatus:
    """Normalized lifecycle summary for one container of the operator pod."""
    name: str
    image: str
    state: str                   # Running, Terminated or Waiting
    created_time: int = 0        # Unix seconds; 0 while Waiting


@dataclass
class ObjectOutcome:
    """Result of a single install or uninstall call against the cluster."""
    kind: str
    name: str
    success: bool = True
    error: Optional[str] = None
