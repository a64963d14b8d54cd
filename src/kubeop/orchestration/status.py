#!/usr/bin/env python3
"""
KUBEOP STATUS AGGREGATOR
------------------------
Reduces the pod list returned by the Deployment adapter to one
ContainerStatus per container of the first operator pod.

Author: KubeOp Team
Date: 2026-10-18
"""

from typing import Any, List

from kubernetes import client

from kubeop.core.errors import TypeMismatchError
from kubeop.core.models import ContainerStatus

RUNNING = "Running"
TERMINATED = "Terminated"
WAITING = "Waiting"


def _epoch(moment: Any) -> int:
    return int(moment.timestamp()) if moment is not None else 0


def aggregate_container_status(pod_list: Any) -> List[ContainerStatus]:
    """
    Raises TypeMismatchError when the payload is not a V1PodList.
    """
    if not isinstance(pod_list, client.V1PodList):
        raise TypeMismatchError(
            f"Error: deployment status returned unexpected type {type(pod_list).__name__}."
        )

    if not pod_list.items:
        return []

    pod = pod_list.items[0]
    statuses = []
    for status in (pod.status.container_statuses if pod.status else None) or []:
        state = status.state
        if state is not None and state.running is not None:
            entry = ContainerStatus(status.name, status.image, RUNNING, _epoch(state.running.started_at))
        elif state is not None and state.terminated is not None:
            entry = ContainerStatus(status.name, status.image, TERMINATED, _epoch(state.terminated.started_at))
        else:
            entry = ContainerStatus(status.name, status.image, WAITING)
        statuses.append(entry)

    return statuses
