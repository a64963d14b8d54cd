#!/usr/bin/env python3
"""
KUBEOP ARCHIVE EXTRACTOR - The Unpacker
---------------------------------------
Turns the operator deployment string (base64 text wrapping a gzip-compressed
tar stream) into RawDocuments, one per regular file, in archive order.

Failure is all-or-nothing: a bad encoding, a non-gzip payload or a corrupt
tar member aborts the whole extraction and no partial result is returned.

Author: KubeOp Team
Date: 2026-10-18
"""

import io
import gzip
import base64
import binascii
import logging
import tarfile
import zlib
from typing import List

from kubeop.core.errors import ArchiveError, DecodeError
from kubeop.core.models import RawDocument

logger = logging.getLogger("kubeop.archive")


class ArchiveExtractor:
    """
    Reads the compressed tar file from the operator deployment section.
    """

    def decode(self, archive: str) -> bytes:
        """Base64 -> bytes. Line breaks in the text are ignored."""
        compact = "".join(archive.split())
        try:
            return base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Deployment archive is not valid base64: {e}") from e

    def _open_gzip(self, data: bytes) -> gzip.GzipFile:
        if not data:
            raise ArchiveError("Deployment archive is empty, expected a gzip stream.")
        stream = gzip.GzipFile(fileobj=io.BytesIO(data))
        try:
            # Forces the gzip header to be read so bad input fails here
            stream.peek(1)
        except (OSError, EOFError, zlib.error) as e:
            raise ArchiveError(f"Deployment archive is not a valid gzip stream: {e}") from e
        return stream

    def extract(self, archive: str) -> List[RawDocument]:
        data = self.decode(archive)
        stream = self._open_gzip(data)

        if not stream.peek(1):
            logger.warning("Deployment archive holds no data.")
            return []

        documents = []
        try:
            with tarfile.open(fileobj=stream, mode="r|") as tar:
                for member in tar:
                    if member.isdir():
                        continue
                    if not member.isfile():
                        logger.debug(f"Skipping non-regular archive entry {member.name}")
                        continue

                    handle = tar.extractfile(member)
                    body = handle.read() if handle else b""
                    documents.append(RawDocument(
                        body=body.decode("utf-8-sig"),
                        name=member.name
                    ))
        except (tarfile.TarError, OSError, EOFError, zlib.error) as e:
            raise ArchiveError(f"Error reading tar file: {e}") from e
        except UnicodeDecodeError as e:
            raise ArchiveError(f"Archive entry is not UTF-8 text: {e}") from e

        logger.debug(f"Extracted {len(documents)} manifest file(s) from the archive")
        return documents


def extract_documents(archive: str) -> List[RawDocument]:
    """Module-level shortcut for ArchiveExtractor().extract()."""
    return ArchiveExtractor().extract(archive)
