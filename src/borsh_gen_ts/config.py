"""Generator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from borsh_gen_ts.formatter import DEFAULT_FMT_COMMAND

OUT_DIR_ENV = "OUT_DIR"
DEFAULT_OUT_DIR = "outdir"


@dataclass(frozen=True)
class GeneratorConfig:
    """Where generated worlds go and how they get formatted."""

    out_dir: Path = Path(DEFAULT_OUT_DIR)
    # Run the external formatter over `out_dir` after writing
    fmt: bool = True
    fmt_command: tuple[str, ...] = field(default=DEFAULT_FMT_COMMAND)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GeneratorConfig:
        """Build a config from `OUT_DIR`, falling back to `outdir`."""
        if environ is None:
            environ = os.environ
        out_dir = Path(environ.get(OUT_DIR_ENV, DEFAULT_OUT_DIR))
        return cls(out_dir=out_dir)

    def ensure_out_dir(self) -> Path:
        """Create the output directory if absent."""
        self.out_dir.mkdir(parents=True, exist_ok=True)
        return self.out_dir
