from pdb_gitlink.scm.git import GitRepository

__all__ = ["GitRepository"]
