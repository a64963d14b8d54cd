#!/usr/bin/env python3
"""
KUBEOP SETTINGS
---------------
Agent-level configuration consumed by the engine and the CLI.
Values come from the environment first; CLI flags override them.

Author: KubeOp Team
Date: 2026-10-18
"""

import os
from dataclasses import dataclass
from typing import Optional

# The namespace a cluster-scoped agent runs in. An agent installed anywhere
# else is namespace-scoped and may only deploy services into its own namespace.
DEFAULT_AGENT_NAMESPACE = "openhorizon-agent"

# ConfigMap holding the user inputs of a service. Only [a-z0-9] "." and "-"
# are valid in the final name.
ENV_CONFIG_PREFIX = "hzn-env-vars"
# Env var injected into every operator container, naming the ConfigMap above
ENV_CONFIG_KEY = "HZN_ENV_VARS"


@dataclass
class AgentSettings:
    namespace: str = DEFAULT_AGENT_NAMESPACE
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    poll_interval: float = 2.0     # Seconds between custom resource discovery attempts

    @classmethod
    def from_env(cls) -> "AgentSettings":
        """Builds settings from AGENT_NAMESPACE / KUBECONFIG."""
        return cls(
            namespace=os.environ.get("AGENT_NAMESPACE") or DEFAULT_AGENT_NAMESPACE,
            kubeconfig=os.environ.get("KUBECONFIG") or None,
        )

    @property
    def is_cluster_scoped(self) -> bool:
        return self.namespace == DEFAULT_AGENT_NAMESPACE
