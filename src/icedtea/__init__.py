from __future__ import annotations

from icedtea.domain.constants import APP_VERSION

__version__ = APP_VERSION

__all__ = ["__version__"]
