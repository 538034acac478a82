from __future__ import annotations

from blobmend.ui.cli import run

run()
