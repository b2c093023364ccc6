"""Infrastructure: open the Assay dashboard in the user's browser."""

from __future__ import annotations

import logging
import webbrowser

log = logging.getLogger(__name__)

DASHBOARD_URL = "https://assay.cirrusly-clever.com/dashboard"


def open_dashboard(url: str = DASHBOARD_URL) -> bool:
    """Try to open *url*; return ``False`` when no browser could be launched."""
    try:
        opened = webbrowser.open(url, new=2)
    except webbrowser.Error as exc:
        log.debug("Browser launch failed: %s", exc)
        return False
    return bool(opened)
