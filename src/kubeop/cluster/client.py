#!/usr/bin/env python3
"""
KUBEOP CLUSTER CLIENT
---------------------
Bundles the Kubernetes API clients the object adapters need. This is the
single place where cluster credentials are loaded, so adapters and the
engine stay free of configuration concerns.

Author: KubeOp Team
Date: 2026-10-18
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from kubernetes import client, config
from kubernetes.client import ApiException
from kubernetes.config.config_exception import ConfigException
from kubernetes.dynamic import DynamicClient

from kubeop.core.errors import ClusterError

logger = logging.getLogger("kubeop.cluster")


@dataclass(frozen=True)
class KubeClient:
    """Typed APIs for the base kinds plus a dynamic client for the rest."""
    core: client.CoreV1Api
    apps: client.AppsV1Api
    rbac: client.RbacAuthorizationV1Api
    apiextensions: client.ApiextensionsV1Api
    dynamic: Any   # kubernetes.dynamic.DynamicClient


def load_kube_client(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> KubeClient:
    """
    Create the client bundle. Inside a pod the service account credentials
    are used; otherwise the kubeconfig (and optional context) is loaded.
    """
    try:
        if kubeconfig or context:
            config.load_kube_config(config_file=kubeconfig, context=context)
        else:
            try:
                config.load_incluster_config()
                logger.debug("Loaded in-cluster configuration")
            except ConfigException:
                config.load_kube_config()
    except (ConfigException, OSError) as e:
        raise ClusterError(f"Unable to load cluster configuration: {e}") from e

    api_client = client.ApiClient()
    return KubeClient(
        core=client.CoreV1Api(api_client),
        apps=client.AppsV1Api(api_client),
        rbac=client.RbacAuthorizationV1Api(api_client),
        apiextensions=client.ApiextensionsV1Api(api_client),
        dynamic=DynamicClient(api_client),
    )


def cluster_error(action: str, exc: ApiException) -> ClusterError:
    """Translate an ApiException into the KubeOp taxonomy."""
    reason = exc.reason or "unknown reason"
    return ClusterError(f"{action} failed ({exc.status}): {reason}", status=exc.status)


def is_not_found(exc: ApiException) -> bool:
    return exc.status == 404
