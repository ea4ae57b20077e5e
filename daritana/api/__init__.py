"""Public API surface for the Daritana compliance subsystem."""

from daritana.api.facade import Daritana, status_code

__all__ = ["Daritana", "status_code"]
