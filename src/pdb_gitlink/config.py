import os
import shutil

_DEFAULT_GIT = "git"
_DEFAULT_PDBSTR = "pdbstr"
_DEFAULT_PDBUTIL = "llvm-pdbutil"


def _resolve_tool(env_var: str, default: str) -> str:
    configured = os.getenv(env_var)
    if configured:
        return configured
    return shutil.which(default) or default


def get_git_executable() -> str:
    return _resolve_tool("PDB_GITLINK_GIT", _DEFAULT_GIT)


def get_pdbstr_executable() -> str:
    """Location of ``pdbstr``, from ``PDB_GITLINK_PDBSTR`` or ``PATH``."""
    return _resolve_tool("PDB_GITLINK_PDBSTR", _DEFAULT_PDBSTR)


def get_pdbutil_executable() -> str:
    """Location of ``llvm-pdbutil``, from ``PDB_GITLINK_PDBUTIL`` or ``PATH``."""
    return _resolve_tool("PDB_GITLINK_PDBUTIL", _DEFAULT_PDBUTIL)
