#!/usr/bin/env python3
"""
KUBEOP ENVIRONMENT INJECTOR
---------------------------
Materializes the service's user inputs as a ConfigMap and wires a reference
to it into every container of the operator Deployment. Containers receive
the ConfigMap *name* in HZN_ENV_VARS, never the values themselves.

Author: KubeOp Team
Date: 2026-10-18
"""

import logging
from typing import Any, Dict, Optional

from kubernetes import client
from kubernetes.client import ApiException

from kubeop.cluster.client import KubeClient
from kubeop.core.errors import ConfigCreationError
from kubeop.core.settings import ENV_CONFIG_KEY, ENV_CONFIG_PREFIX

logger = logging.getLogger("kubeop.environment")


class EnvironmentInjector:
    """Creates the per-agreement env ConfigMap and references it."""

    def config_name(self, workload_id: str) -> str:
        return f"{ENV_CONFIG_PREFIX}-{workload_id}"

    def usable_vars(self, env_vars: Dict[str, Any]) -> Dict[str, str]:
        """
        A user input with an empty name makes the ConfigMap invalid, so it
        is dropped here. The caller's mapping is left untouched.
        """
        usable = {}
        for var_name, var_value in (env_vars or {}).items():
            if not var_name:
                logger.error(f"Omitting userinput with empty name and value: {var_value}")
                continue
            usable[str(var_name)] = var_value if isinstance(var_value, str) else str(var_value)
        return usable

    def create_config(self, kube: KubeClient, env_vars: Dict[str, Any],
                      workload_id: str, namespace: str) -> Optional[str]:
        """
        Creates the ConfigMap and returns its name, or None when no usable
        variables remain. Existing ConfigMaps are not updated.
        """
        data = self.usable_vars(env_vars)
        if not data:
            return None

        name = self.config_name(workload_id)
        config_map = client.V1ConfigMap(
            api_version="v1",
            kind="ConfigMap",
            metadata=client.V1ObjectMeta(name=name),
            data=data,
        )
        try:
            kube.core.create_namespaced_config_map(namespace=namespace, body=config_map)
        except ApiException as e:
            raise ConfigCreationError(
                f"Error: failed to create config map for {workload_id}: {e.reason}",
                status=e.status
            ) from e

        logger.info(f"Created env var config map {name} in namespace {namespace}")
        return name

    def delete_config(self, kube: KubeClient, workload_id: str, namespace: str) -> None:
        name = self.config_name(workload_id)
        try:
            kube.core.delete_namespaced_config_map(name=name, namespace=namespace)
        except ApiException as e:
            if e.status != 404:
                logger.warning(f"Unable to delete config map {name}: {e.reason}")
        except Exception as e:
            logger.warning(f"Unable to delete config map {name}: {type(e).__name__}: {e}")

    def inject_reference(self, deployment: Dict[str, Any], config_name: str) -> Dict[str, Any]:
        """Appends HZN_ENV_VARS=<config_name> to every container's env."""
        spec = deployment.get("spec") or {}
        template = spec.get("template") or {}
        containers = (template.get("spec") or {}).get("containers") or []

        for container in containers:
            if not isinstance(container, dict):
                continue
            env = container.get("env") or []
            env.append({"name": ENV_CONFIG_KEY, "value": config_name})
            container["env"] = env

        return deployment
