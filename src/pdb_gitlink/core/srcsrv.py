"""Render a ``LinkContext`` into the srcsrv stream consumed by ``pdbstr``.

The layout is line oriented and fixed: section banners, ``KEY=value``
variables, then one ``<build path>*...`` line per indexed file.  Lines end in
CRLF and the stream is UTF-8 without a BOM.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlsplit

from pdb_gitlink.core.errors import SourceIndexWriteError
from pdb_gitlink.core.index import REVISION_TOKEN
from pdb_gitlink.models import LinkContext, LinkMethod

NEWLINE = "\r\n"

INI_BANNER = "SRCSRV: ini ------------------------------------------------"
VARIABLES_BANNER = "SRCSRV: variables ------------------------------------------"
SOURCE_FILES_BANNER = "SRCSRV: source files ---------------------------------------"
END_BANNER = "SRCSRV: end ------------------------------------------------"

_POWERSHELL_EXE = "%windir%\\System32\\WindowsPowerShell\\v1.0\\powershell.exe"
_POWERSHELL_CMD = (
    "%POWERSHELL% -NoProfile -Command "
    "\"New-Item -ItemType File -Path '%TRGFILE%' -Force | Out-Null; "
    "Invoke-WebRequest '%RAWURL%' -OutFile '%TRGFILE%'\""
)

_TFS_EXTRACT_TARGET = "%targ%\\%var5%\\%fnvar%(%var6%)%fnbksl%(%var7%)"
_TFS_EXTRACT_CMD = (
    "tf.exe git view /collection:%fnvar%(%var2%) /teamproject:\"%fnvar%(%var3%)\" "
    "/repository:\"%fnvar%(%var4%)\" /commitId:%fnvar%(%var5%) /path:\"%var7%\" "
    "/output:%SRCSRVTRG% %fnvar%(%var8%)"
)
_TFS_FIELDS = ("TFS_COLLECTION", "TFS_TEAM_PROJECT", "TFS_REPO", "TFS_COMMIT", "TFS_SHORT_COMMIT")


def _encode(lines: list[str]) -> bytes:
    return "".join(line + NEWLINE for line in lines).encode("utf-8", errors="surrogateescape")


def _require(context: LinkContext) -> None:
    if not context.revision.strip():
        raise ValueError("revision must not be empty")
    if not context.raw_url.strip():
        raise ValueError("raw_url must not be empty")


def create_generic(context: LinkContext) -> bytes:
    raw_url = context.raw_url.replace(REVISION_TOKEN, context.revision)
    lines = [
        INI_BANNER,
        "VERSION=2",
        VARIABLES_BANNER,
        f"RAWURL={raw_url}",
    ]
    if context.method is LinkMethod.POWERSHELL:
        lines += [
            "TRGFILE=%fnbksl%(%targ%%var2%)",
            "SRCSRVTRG=%TRGFILE%",
            f"POWERSHELL={_POWERSHELL_EXE}",
            f"SRCSRVCMD={_POWERSHELL_CMD}",
        ]
    else:
        scheme = urlsplit(raw_url).scheme or "http"
        lines += [
            f"SRCSRVVERCTRL={scheme}",
            "SRCSRVTRG=%RAWURL%",
        ]
    lines.append(SOURCE_FILES_BANNER)
    lines += [f"{build_path}*{repo_path}" for build_path, repo_path in context.indexed_paths]
    lines.append(END_BANNER)
    return _encode(lines)


def create_team_foundation(context: LinkContext, now: datetime | None = None) -> bytes:
    timestamp = (now or datetime.now(timezone.utc)).strftime("%a %b %d %H:%M:%S %Y")
    lines = [
        INI_BANNER,
        "VERSION=3",
        "INDEXVERSION=2",
        "VERCTRL=Team Foundation Server",
        f"DATETIME={timestamp}",
        "INDEXER=TFSTB",
        VARIABLES_BANNER,
        f"TFS_EXTRACT_TARGET={_TFS_EXTRACT_TARGET}",
        f"TFS_EXTRACT_CMD={_TFS_EXTRACT_CMD}",
    ]
    lines += [f"{key}={value}" for key, value in context.extra_metadata.items()]
    lines += [
        f"TFS_COMMIT={context.revision}",
        f"TFS_SHORT_COMMIT={context.revision[:8]}",
        "TFS_APPLY_FILTERS=/applyfilters",
        "SRCSRVVERCTRL=git",
        "SRCSRVERRDESC=access",
        "SRCSRVERRVAR=var2",
        "SRCSRVTRG=%TFS_EXTRACT_TARGET%",
        "SRCSRVCMD=%TFS_EXTRACT_CMD%",
        SOURCE_FILES_BANNER,
    ]
    # var7 is the server path, rooted at the repository.
    fields = "*".join(_TFS_FIELDS)
    lines += [
        f"{build_path}*{fields}*/{repo_path}*TFS_APPLY_FILTERS" for build_path, repo_path in context.indexed_paths
    ]
    lines.append(END_BANNER)
    return _encode(lines)


def serialize(context: LinkContext, now: datetime | None = None) -> bytes:
    _require(context)
    if context.extra_metadata:
        return create_team_foundation(context, now)
    return create_generic(context)


def write_srcsrv(path: Path, context: LinkContext, now: datetime | None = None) -> Path:
    data = serialize(context, now)
    try:
        path.write_bytes(data)
    except OSError as e:
        raise SourceIndexWriteError(f'Unable to write source server file "{path}": {e.strerror or e}') from e
    return path
