#!/usr/bin/env python3
"""
KUBEOP MANIFEST DECODER - The Sorter
------------------------------------
Splits multi-document manifests and classifies every document against the
kind catalog. Each document lands in exactly one bucket:

  1. Unknown to the catalog   -> custom resource, built generically later
  2. Base kind                -> typed adapter, grouped under its kind
  3. Danger kind              -> skipped with a diagnostic
  4. Any other catalog kind   -> generic object in the "Unstructured" bucket

Custom resources are appended to the "Unstructured" bucket after every
catalog-known generic object, so the operator's CRs are created last.

Author: KubeOp Team
Date: 2026-10-18
"""

import re
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ruamel.yaml import YAML, YAMLError

from kubeop.core import catalog
from kubeop.core.errors import ManifestError
from kubeop.core.models import RawDocument
from kubeop.decoding.normalize import stringify_keys
from kubeop.objects.base import APIObject
from kubeop.objects.typed import TYPED_ADAPTERS
from kubeop.objects.unstructured import UnstructuredObject

logger = logging.getLogger("kubeop.decoder")

# A line holding only the document marker, optionally followed by a comment.
# Lines may end in LF or CRLF.
SEPARATOR = re.compile(r"^---[ \t]*(?:#[^\r\n]*)?\r?$", re.MULTILINE)


class ObjectGroups:
    """
    Classified objects keyed by kind, in manifest order. Generic objects live
    in the reserved "Unstructured" bucket, never under their own kind.
    """

    def __init__(self):
        self.groups: Dict[str, List[APIObject]] = {}
        self.diagnostics: List[str] = []

    def add(self, kind: str, obj: APIObject):
        self.groups.setdefault(kind, []).append(obj)

    def get(self, kind: str) -> List[APIObject]:
        return self.groups.get(kind, [])

    def __contains__(self, kind: str) -> bool:
        return bool(self.groups.get(kind))

    def __iter__(self) -> Iterator[APIObject]:
        for objects in self.groups.values():
            yield from objects

    def __len__(self) -> int:
        return sum(len(objects) for objects in self.groups.values())

    @property
    def unstructured(self) -> List[APIObject]:
        return self.get(catalog.UNSTRUCTURED_KIND)

    def counts(self) -> Dict[str, int]:
        return {kind: len(objects) for kind, objects in self.groups.items()}


@dataclass
class _Candidate:
    """A document the catalog could not decode."""
    unit: RawDocument
    tree: Any = None
    error: Optional[str] = None


def split_documents(documents: List[RawDocument]) -> List[RawDocument]:
    """
    Multiple manifests can be in one file separated by '---' lines. These
    are split into individual documents; single-document bodies pass through.
    """
    units = []
    for doc in documents:
        pieces = SEPARATOR.split(doc.body)
        if len(pieces) > 1:
            for piece in pieces:
                if piece.strip():
                    units.append(RawDocument(body=piece.strip(), name=doc.name))
        else:
            units.append(doc)
    return units


class ManifestDecoder:
    """
    Converts RawDocuments into an ObjectGroups instance.
    """

    def __init__(self, cr_install_timeout: float = 0, poll_interval: float = 2.0):
        # Safe loading rejects duplicate keys, which keeps generic parsing strict
        self.yaml = YAML(typ="safe", pure=True)
        self.cr_install_timeout = cr_install_timeout
        self.poll_interval = poll_interval

    def _load(self, body: str) -> Tuple[Any, Optional[str]]:
        try:
            return self.yaml.load(body), None
        except (YAMLError, ValueError, TypeError) as e:
            return None, str(e)

    def _identify(self, tree: Any) -> Tuple[str, str]:
        if not isinstance(tree, dict):
            return "", ""
        return str(tree.get("apiVersion") or ""), str(tree.get("kind") or "")

    def decode(self, documents: List[RawDocument]) -> ObjectGroups:
        groups = ObjectGroups()
        candidates: List[_Candidate] = []

        for unit in split_documents(documents):
            tree, error = self._load(unit.body)
            if error is None and tree is None:
                msg = f"Skipping empty manifest {unit.name or ''}".rstrip()
                logger.warning(msg)
                groups.diagnostics.append(msg)
                continue

            api_version, kind = self._identify(tree)

            # --- CASE 1: not decodable against the catalog ---
            if error is not None or not catalog.is_known(api_version, kind):
                candidates.append(_Candidate(unit=unit, tree=tree, error=error))
                continue

            body = stringify_keys(tree)

            # --- CASE 2: base kinds keep their typed adapter ---
            if catalog.is_base_kind(kind):
                groups.add(kind, TYPED_ADAPTERS[kind](body, api_version))

            # --- CASE 3: recognized, but not safe to handle generically ---
            elif catalog.is_danger_kind(kind):
                msg = f"Skipping unsupported kind {kind}"
                logger.error(msg)
                groups.diagnostics.append(msg)

            # --- CASE 4: everything else is sent as a generic object ---
            else:
                groups.add(catalog.UNSTRUCTURED_KIND, UnstructuredObject(
                    body, api_version, poll_interval=self.poll_interval
                ))

        for kind, resources in self._custom_resources(candidates).items():
            logger.debug(f"Found {len(resources)} custom resource(s) of kind {kind}")
            for resource in resources:
                groups.add(catalog.UNSTRUCTURED_KIND, resource)

        return groups

    def _custom_resources(self, candidates: List[_Candidate]) -> Dict[str, List[UnstructuredObject]]:
        """
        Builds generic objects for the custom resources, keyed by declared
        kind in first-seen order. Any document that is not a well-formed
        mapping aborts the whole deployment.
        """
        by_kind: Dict[str, List[UnstructuredObject]] = {}
        for candidate in candidates:
            label = candidate.unit.name or "manifest"
            if candidate.error is not None:
                raise ManifestError(f"Error unmarshaling custom resource in {label}: {candidate.error}")
            if not isinstance(candidate.tree, dict):
                raise ManifestError(f"Custom resource in {label} is not a mapping")

            body = stringify_keys(candidate.tree)
            api_version, kind = self._identify(body)
            if not api_version or not kind:
                raise ManifestError(f"Custom resource in {label} is missing apiVersion or kind")

            by_kind.setdefault(kind, []).append(UnstructuredObject(
                body, api_version,
                install_timeout=self.cr_install_timeout,
                poll_interval=self.poll_interval
            ))
        return by_kind
