#!/usr/bin/env python3
"""
KUBEOP API OBJECTS - The Contract
---------------------------------
Every decoded manifest becomes an APIObject. The engine never inspects
what kind of object it holds; it only calls the capability methods below,
and each concrete adapter maps them onto the Kubernetes API.

  install    create-or-fail, raises ClusterError
  uninstall  best-effort delete, returns the error instead of raising
  status     payload describing the object (Deployment only)

Author: KubeOp Team
Date: 2026-10-18
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from kubernetes.client import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError

from kubeop.cluster.client import KubeClient, cluster_error, is_not_found
from kubeop.core.errors import ClusterError, TypeMismatchError

logger = logging.getLogger("kubeop.objects")


class APIObject(ABC):
    """A manifest that knows how to install and remove itself."""

    kind: str = ""

    def __init__(self, body: Dict[str, Any], api_version: str = ""):
        self.body = body
        self.api_version = api_version or body.get("apiVersion", "")

    @property
    def metadata(self) -> Dict[str, Any]:
        meta = self.body.setdefault("metadata", {})
        if not isinstance(meta, dict):
            raise TypeMismatchError(f"{self.kind} metadata must be a mapping")
        return meta

    @property
    def name(self) -> str:
        return str(self.metadata.get("name", ""))

    @abstractmethod
    def install(self, kube: KubeClient, namespace: str) -> None:
        ...

    @abstractmethod
    def uninstall(self, kube: KubeClient, namespace: str) -> Optional[ClusterError]:
        ...

    def status(self, kube: KubeClient, namespace: str) -> Any:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind}/{self.name})"

    # --- shared helpers for the adapters ---

    def _create(self, action: Callable[[], Any]) -> Any:
        try:
            return action()
        except ApiException as e:
            raise cluster_error(f"Creating {self.kind} {self.name}", e) from e
        except ResourceNotFoundError as e:
            raise ClusterError(f"Creating {self.kind} {self.name} failed: {e}") from e

    def _delete(self, action: Callable[[], Any]) -> Optional[ClusterError]:
        try:
            action()
        except ApiException as e:
            if is_not_found(e):
                logger.debug(f"{self.kind} {self.name} already removed")
                return None
            err = cluster_error(f"Deleting {self.kind} {self.name}", e)
            logger.warning(str(err))
            return err
        except ResourceNotFoundError:
            logger.debug(f"{self.kind} {self.name} has no API in the cluster, nothing to remove")
            return None
        return None
