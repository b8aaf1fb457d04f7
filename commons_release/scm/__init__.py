"""SCM client abstraction and the Subversion command line provider."""

from .base import ScmProvider
from .manager import ScmManager, default_manager
from .repository import ScmRepository, make_repository
from .svn import SvnExeScmProvider

__all__ = [
    "ScmProvider",
    "ScmManager",
    "ScmRepository",
    "SvnExeScmProvider",
    "default_manager",
    "make_repository",
]
