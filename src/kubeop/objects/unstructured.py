#!/usr/bin/env python3
"""
KUBEOP UNSTRUCTURED ADAPTER
---------------------------
Any object without a typed adapter: catalog kinds outside the base set
(Service, ConfigMap, ClusterRole, ...) and the operator's own custom
resources. These are sent through the dynamic client as plain dicts.

A custom resource is usually created right after its CRD, before the API
server has started serving the new kind. When the object carries an install
timeout it keeps polling discovery until the kind shows up or time runs out.

Author: KubeOp Team
Date: 2026-10-18
"""

import copy
import time
import logging
from typing import Any, Dict, Optional

from kubernetes.dynamic.exceptions import ResourceNotFoundError

from kubeop.cluster.client import KubeClient
from kubeop.core.errors import ClusterError
from kubeop.objects.base import APIObject

logger = logging.getLogger("kubeop.objects")


class UnstructuredObject(APIObject):

    def __init__(self, body: Dict[str, Any], api_version: str = "",
                 install_timeout: float = 0, poll_interval: float = 2.0):
        super().__init__(body, api_version)
        self.install_timeout = install_timeout
        self.poll_interval = poll_interval

    @property
    def kind(self) -> str:
        return str(self.body.get("kind", ""))

    def _resource(self, kube: KubeClient):
        return kube.dynamic.resources.get(api_version=self.api_version, kind=self.kind)

    def _wait_for_resource(self, kube: KubeClient):
        deadline = time.monotonic() + max(self.install_timeout, 0)
        while True:
            try:
                return self._resource(kube)
            except ResourceNotFoundError:
                if time.monotonic() >= deadline:
                    raise ClusterError(
                        f"Timed out after {self.install_timeout}s waiting for the API to serve "
                        f"{self.api_version} {self.kind}"
                    )
                logger.debug(f"{self.api_version} {self.kind} not served yet, retrying")
                time.sleep(self.poll_interval)

    def install(self, kube: KubeClient, namespace: str) -> None:
        resource = self._create(lambda: self._wait_for_resource(kube))
        if resource.namespaced:
            body = copy.deepcopy(self.body)
            body.setdefault("metadata", {})["namespace"] = namespace
            self._create(lambda: resource.create(body=body, namespace=namespace))
        else:
            self._create(lambda: resource.create(body=self.body))

    def uninstall(self, kube: KubeClient, namespace: str) -> Optional[ClusterError]:
        def _remove():
            resource = self._resource(kube)
            if resource.namespaced:
                resource.delete(name=self.name, namespace=namespace)
            else:
                resource.delete(name=self.name)

        return self._delete(_remove)
