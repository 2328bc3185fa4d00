"""Recursive directory provisioning for Azure Files uploads."""

import logging

from .exceptions import StorageConflictError
from .transport import RetryingTransport

log = logging.getLogger(__name__)


class DirectoryEnsurer:
    """Creates each missing directory of a path, shallowest first.

    Azure Files has no implicit parent directories, so uploading
    ``a/b/c/file`` needs ``a``, ``a/b`` and ``a/b/c`` to exist first.
    An "already exists" conflict counts as success; any other error
    propagates.
    """

    def __init__(self, transport: RetryingTransport):
        self._transport = transport

    def ensure(self, base: str, relative: str) -> None:
        segments = [segment for segment in relative.split("/") if segment]
        if not segments:
            return
        first, rest = segments[0], "/".join(segments[1:])
        path = f"{base.strip('/')}/{first}" if base.strip("/") else first
        try:
            self._transport.create_directory(path)
            log.debug("Created directory %s", path)
        except StorageConflictError:
            log.debug("Directory %s already exists", path)
        self.ensure(path, rest)
