from branchstack.core.time.abc import Time
from branchstack.core.time.real import RealTime

__all__ = ["RealTime", "Time"]
