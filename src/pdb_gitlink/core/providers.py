"""Git hosting providers and remote URL matching."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

REVISION_PLACEHOLDER = "{revision}"
FILENAME_PLACEHOLDER = "{filename}"

_CREDENTIALS_RE = re.compile(r"^(?P<scheme>[a-z][a-z0-9+.-]*://)[^/@]+@", re.IGNORECASE)


@dataclass(frozen=True)
class Provider:
    """A resolved hosting service for one remote URL.

    ``raw_url`` is either a directory prefix under which ``<revision>/<path>``
    serves raw file content, or a template carrying both placeholders.
    """

    name: str
    raw_url: str
    extra_metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderDefinition:
    name: str
    description: str
    patterns: tuple[re.Pattern[str], ...]
    build: Callable[[re.Match[str], str], Provider]

    def match(self, url: str) -> Provider | None:
        for pattern in self.patterns:
            m = pattern.match(url)
            if m is not None:
                return self.build(m, url)
        return None


def strip_credentials(url: str) -> str:
    """Remove ``user[:password]@`` from a scheme-qualified URL."""
    return _CREDENTIALS_RE.sub(r"\g<scheme>", url.strip())


def _hosted_patterns(host: str) -> tuple[re.Pattern[str], ...]:
    escaped = re.escape(host)
    tail = r"(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$"
    return (
        re.compile(rf"^https?://(?:www\.)?{escaped}/{tail}", re.IGNORECASE),
        re.compile(rf"^ssh://git@{escaped}(?::\d+)?/{tail}", re.IGNORECASE),
        re.compile(rf"^git@{escaped}:{tail}", re.IGNORECASE),
    )


def _github(m: re.Match[str], url: str) -> Provider:
    return Provider("github", f"https://raw.githubusercontent.com/{m['owner']}/{m['repo']}")


def _bitbucket(m: re.Match[str], url: str) -> Provider:
    return Provider("bitbucket", f"https://bitbucket.org/{m['owner']}/{m['repo']}/raw")


def _gitlab(m: re.Match[str], url: str) -> Provider:
    return Provider("gitlab", f"https://gitlab.com/{m['owner']}/{m['repo']}/-/raw")


def _azure_devops(m: re.Match[str], url: str) -> Provider:
    groups = m.groupdict()
    if groups.get("account"):
        collection_url = f"https://{groups['account']}.visualstudio.com/"
    else:
        collection_url = f"https://dev.azure.com/{groups['org']}/"
    project = groups["project"]
    repo = groups["repo"]
    raw_url = (
        f"{collection_url}{project}/_apis/git/repositories/{repo}/items"
        f"?api-version=1.0&versionType=commit&version={REVISION_PLACEHOLDER}&path={FILENAME_PLACEHOLDER}"
    )
    # Team Foundation resolves the repository by the project name.
    return Provider(
        "azure-devops",
        raw_url,
        {
            "TFS_COLLECTION": collection_url,
            "TFS_TEAM_PROJECT": project,
            "TFS_REPO": project,
        },
    )


def _custom(m: re.Match[str], url: str) -> Provider:
    return Provider("custom", url.rstrip("/"))


GITHUB = ProviderDefinition("github", "GitHub (raw.githubusercontent.com)", _hosted_patterns("github.com"), _github)
BITBUCKET = ProviderDefinition("bitbucket", "Bitbucket Cloud", _hosted_patterns("bitbucket.org"), _bitbucket)
GITLAB = ProviderDefinition("gitlab", "GitLab.com", _hosted_patterns("gitlab.com"), _gitlab)
AZURE_DEVOPS = ProviderDefinition(
    "azure-devops",
    "Azure DevOps / Visual Studio Team Services (tf.exe git view)",
    (
        re.compile(
            r"^https://(?P<account>[^/.]+)\.visualstudio\.com/(?:DefaultCollection/)?"
            r"(?P<project>[^/]+)/_git/(?P<repo>[^/?#]+?)/?$",
            re.IGNORECASE,
        ),
        re.compile(
            r"^https://dev\.azure\.com/(?P<org>[^/]+)/(?P<project>[^/]+)/_git/(?P<repo>[^/?#]+?)/?$",
            re.IGNORECASE,
        ),
    ),
    _azure_devops,
)
CUSTOM = ProviderDefinition(
    "custom",
    "Any other http(s) URL, used verbatim as the raw content URL",
    (re.compile(r"^https?://\S+$", re.IGNORECASE),),
    _custom,
)

DEFAULT_PROVIDERS: tuple[ProviderDefinition, ...] = (GITHUB, BITBUCKET, GITLAB, AZURE_DEVOPS, CUSTOM)


def get_provider(url: str, providers: Iterable[ProviderDefinition] = DEFAULT_PROVIDERS) -> Provider | None:
    cleaned = strip_credentials(url)
    if not cleaned:
        return None
    for definition in providers:
        provider = definition.match(cleaned)
        if provider is not None:
            return provider
    return None


def select_provider(
    candidate_urls: Sequence[str],
    providers: Sequence[ProviderDefinition] = DEFAULT_PROVIDERS,
) -> Provider | None:
    """Return the provider of the first candidate URL that any provider recognises."""
    for url in candidate_urls:
        provider = get_provider(url, providers)
        if provider is not None:
            return provider
    return None
