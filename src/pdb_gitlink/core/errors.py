class LinkError(Exception):
    """Base class for fatal conditions while linking a PDB."""


class ConfigurationError(LinkError):
    pass


class InvalidUrlTemplateError(ConfigurationError):
    pass


class DiscoveryError(LinkError):
    pass


class RepositoryNotFoundError(LinkError):
    def __init__(self, path: object) -> None:
        super().__init__(f'Unable to find git repo at "{path}".')
        self.path = path


class EmbedError(LinkError):
    pass


class SymbolFileError(LinkError):
    pass


class SourceIndexWriteError(LinkError):
    pass
