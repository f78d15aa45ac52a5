# src/starphot/__main__.py
# =============================================================================
# starphot: CLI Entrypoint (python -m starphot …)
# -----------------------------------------------------------------------------
# Delegates to the Typer app defined in starphot.cli.
# =============================================================================
from __future__ import annotations

import os
import signal

from starphot.cli import main


def _set_sigpipe_quiet() -> None:
    # Avoid BrokenPipeErrors when piping the record table to head -n1, etc.
    if os.name != "nt":
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)


if __name__ == "__main__":
    _set_sigpipe_quiet()
    main()
