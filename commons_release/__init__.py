"""
Release steps for Apache Commons style builds.

The package exposes building blocks for:
- detaching distribution archives (and their signature and checksum files)
  from the artifacts the build would deploy,
- emptying the remote SVN staging area ahead of a release candidate,
- a small SCM client abstraction with a Subversion command line provider.
"""

from .core.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
