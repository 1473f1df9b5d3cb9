"""Thin wrapper around :func:`subprocess.run` used for every engine call."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import Any

logger = logging.getLogger(__name__)


def run_checked(cmd: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess[Any]:
    """Run *cmd* without a shell after validating every argument is a string."""

    argv = list(cmd)
    if not argv or not all(isinstance(arg, str) for arg in argv):
        raise TypeError("command must be a non-empty sequence of strings")
    kwargs.pop("shell", None)
    logger.debug("exec: %s", " ".join(argv))
    return subprocess.run(argv, shell=False, **kwargs)
