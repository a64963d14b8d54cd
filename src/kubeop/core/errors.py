"""
KUBEOP ERRORS
-------------
Exception taxonomy shared by every KubeOp component.

Decoding problems are ProcessingErrors and always abort the operation.
ClusterErrors come from the platform rejecting a call; the engine lets them
propagate during install and absorbs them during uninstall.
"""

from typing import Optional


class KubeOpError(Exception):
    """Base class for all KubeOp failures."""


class ProcessingError(KubeOpError):
    """The deployment archive could not be turned into objects."""


class DecodeError(ProcessingError):
    """Bad base64, gzip or tar content."""


class ArchiveError(DecodeError):
    """The decoded bytes are not a readable gzip-compressed tar stream."""


class ManifestError(ProcessingError):
    """A manifest could not be parsed even as generic YAML."""


class ClusterError(KubeOpError):
    """The target platform rejected a create, delete or get call."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ConfigCreationError(ClusterError):
    """The environment variable ConfigMap could not be created."""


class NamespaceConflictError(KubeOpError):
    """The workload asked for a namespace the agent is not allowed to use."""


class NotFoundError(KubeOpError):
    """An object the operation depends on is missing from the archive."""


class TypeMismatchError(KubeOpError):
    """A lower layer returned a payload of an unexpected shape."""
