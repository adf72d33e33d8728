"""Best effort formatting of generated TypeScript."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from borsh_gen_ts.errors import GeneratorWarning

logger = logging.getLogger(__name__)

DEFAULT_FMT_COMMAND = ("deno", "fmt")


def fmt_check(out_dir: Path, command: Sequence[str] = DEFAULT_FMT_COMMAND) -> subprocess.Popen[bytes] | None:
    """Launch the formatter over `out_dir` without waiting for it.

    A missing formatter binary is only worth a warning; any other launch
    failure propagates.
    """
    try:
        process = subprocess.Popen([*command, str(out_dir)])
    except FileNotFoundError:
        logger.warning("%s", GeneratorWarning.DENO_NOT_FOUND)
        return None
    logger.debug("started %s (pid %d)", " ".join(command), process.pid)
    return process
