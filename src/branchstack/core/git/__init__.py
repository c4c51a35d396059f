from branchstack.core.git.abc import Git
from branchstack.core.git.real import RealGit

__all__ = ["Git", "RealGit"]
