from collections.abc import Sequence

from pdb_gitlink.core.errors import InvalidUrlTemplateError
from pdb_gitlink.core.providers import FILENAME_PLACEHOLDER, REVISION_PLACEHOLDER, Provider
from pdb_gitlink.models import LinkContext, LinkMethod

# Tokens understood by the srcsrv serializer: the revision is formatted in
# when the stream is written, %var2% is the per-file srcsrv variable.
REVISION_TOKEN = "{0}"
FILENAME_TOKEN = "%var2%"


def _placeholder_spellings(placeholder: str) -> tuple[str, ...]:
    inner = placeholder[1:-1]
    return (placeholder, f"%7B{inner}%7D", f"%7b{inner}%7d")


def _replace_placeholder(url: str, placeholder: str, token: str) -> tuple[str, bool]:
    found = False
    for spelling in _placeholder_spellings(placeholder):
        if spelling in url:
            found = True
            url = url.replace(spelling, token)
    return url, found


def to_token_template(raw_url: str) -> str:
    """Convert a provider raw URL into the serializer's token form.

    A URL carrying both ``{revision}`` and ``{filename}`` is used as a custom
    template; a URL carrying neither is treated as a directory prefix.
    """
    url, has_revision = _replace_placeholder(raw_url, REVISION_PLACEHOLDER, REVISION_TOKEN)
    url, has_filename = _replace_placeholder(url, FILENAME_PLACEHOLDER, FILENAME_TOKEN)
    if has_revision and has_filename:
        return url
    if has_revision or has_filename:
        raise InvalidUrlTemplateError(
            "Supplied custom URL pattern must contain both a revision and a filename placeholder."
        )
    return f"{raw_url.rstrip('/')}/{REVISION_TOKEN}/{FILENAME_TOKEN}"


def build_link_context(
    provider: Provider,
    revision: str,
    paths: Sequence[tuple[str, str | None]],
    method: LinkMethod = LinkMethod.HTTP,
) -> LinkContext:
    raw_url = to_token_template(provider.raw_url)
    normalized = [
        (build_path, repo_path.replace("\\", "/") if repo_path is not None else None)
        for build_path, repo_path in paths
    ]
    return LinkContext(
        revision=revision,
        raw_url=raw_url,
        method=method,
        paths=normalized,
        extra_metadata=dict(provider.extra_metadata),
    )
