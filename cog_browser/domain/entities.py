from __future__ import annotations

from enum import Enum
from typing import Any, List, Mapping, Tuple
import logging

from cog_browser.domain.cog_utils import (
    build_requirements,
    get_bool,
    get_string,
    get_string_list,
    get_version_triple,
)

logger = logging.getLogger(__name__)

# Bot version placeholder that index authors use to mean "no bound".
UNSET_BOT_VERSION = "0.0.0"


class InvalidRepo(ValueError):
    """A repository entry failed category or required-field validation."""


class InvalidPackage(ValueError):
    """A single cog entry could not be parsed."""


class RepoCategory(str, Enum):
    APPROVED = "approved"
    UNAPPROVED = "unapproved"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class InstallableType(str, Enum):
    COG = "COG"
    SHARED_LIBRARY = "SHARED_LIBRARY"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_raw(cls, raw: str) -> "InstallableType":
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


class Repo:
    def __init__(
        self,
        url: str,
        name: str,
        category: RepoCategory,
        branch: str = "",
    ):
        self.url = url
        self.name = name
        self.category = category
        self.branch = branch
        self._packages: List[Package] = []

    @property
    def packages(self) -> Tuple[Package, ...]:
        return tuple(self._packages)

    @property
    def is_approved(self) -> bool:
        return self.category is RepoCategory.APPROVED

    @property
    def install_name(self) -> str:
        return self.name.lower()

    def __repr__(self) -> str:
        return f"Repo(url={self.url!r}, name={self.name!r}, category={self.category.value!r})"


class Package:
    """
    A single installable cog offered by a repository.

    ``repo`` refers back to the owning repository for display only; the
    repository owns its packages. Requirements are derived once here.
    """

    def __init__(
        self,
        name: str,
        repo: Repo,
        type: InstallableType = InstallableType.UNKNOWN,
        author: Tuple[str, ...] = (),
        short: str = "",
        description: str = "",
        end_user_data_statement: str = "",
        min_bot_version: str = "",
        max_bot_version: str = "",
        min_python_version: str = "",
        disabled: bool = False,
        hidden: bool = False,
        requirements: Tuple[str, ...] = (),
        permissions: Tuple[str, ...] = (),
        tags: Tuple[str, ...] = (),
    ):
        self.name = name
        self.repo = repo
        self.type = type
        self.author = tuple(author)
        self.short = short
        self.description = description
        self.end_user_data_statement = end_user_data_statement
        self.min_bot_version = "" if min_bot_version == UNSET_BOT_VERSION else min_bot_version
        self.max_bot_version = "" if max_bot_version == UNSET_BOT_VERSION else max_bot_version
        self.min_python_version = min_python_version
        self.disabled = disabled
        self.hidden = hidden
        self.requirements = tuple(requirements)
        self.permissions = tuple(permissions)
        self.tags = tuple(tag.lower() for tag in tags)
        self.all_requirements = tuple(
            build_requirements(
                self.min_bot_version,
                self.max_bot_version,
                self.min_python_version,
                self.requirements,
            )
        )

    @property
    def is_visible(self) -> bool:
        return not (self.hidden or self.disabled)

    @property
    def display_description(self) -> str:
        return self.description or self.short

    @property
    def sorted_tags(self) -> List[str]:
        return sorted(self.tags)

    @property
    def install_commands(self) -> List[str]:
        repo_name = self.repo.install_name
        add_cmd = " ".join(part for part in ("repo add", repo_name, self.repo.url, self.repo.branch) if part)
        return [add_cmd, f"cog install {repo_name} {self.name}"]

    def __repr__(self) -> str:
        return f"Package(name={self.name!r}, repo={self.repo.url!r})"


def parse_package(repo: Repo, name: str, data: Any) -> Package:
    if not isinstance(data, Mapping):
        raise InvalidPackage(f"Cog {name!r} in {repo.url} is not an object")

    return Package(
        name=name,
        repo=repo,
        type=InstallableType.from_raw(get_string(data, "type")),
        author=tuple(get_string_list(data, "author")),
        short=get_string(data, "short"),
        description=get_string(data, "description"),
        end_user_data_statement=get_string(data, "end_user_data_statement"),
        min_bot_version=get_string(data, "min_bot_version"),
        max_bot_version=get_string(data, "max_bot_version"),
        min_python_version=get_version_triple(data, "min_python_version"),
        disabled=get_bool(data, "disabled"),
        hidden=get_bool(data, "hidden"),
        requirements=tuple(get_string_list(data, "requirements")),
        permissions=tuple(get_string_list(data, "permissions")),
        tags=tuple(get_string_list(data, "tags")),
    )


def parse_repo(source_key: str, data: Any) -> Repo:
    """
    Build a repository and its cogs from one index entry.

    ``source_key`` may carry an ``@branch`` suffix which is not part of the URL.
    Raises InvalidRepo when the entry cannot be used at all; individual cogs
    that fail to parse are logged and skipped.
    """
    url = source_key.split("@", 1)[0]
    if not isinstance(data, Mapping):
        raise InvalidRepo(f"Repository {url} is not an object")

    raw_category = data.get("rx_category")
    try:
        category = RepoCategory(raw_category)
    except ValueError:
        raise InvalidRepo(f"Repository {url} has invalid category {raw_category!r}") from None

    name = data.get("name")
    if not isinstance(name, str):
        raise InvalidRepo(f"Repository {url} has no name")

    branch = data.get("rx_branch")
    if branch is None:
        branch = ""
    elif not isinstance(branch, str):
        raise InvalidRepo(f"Repository {url} has a non-string branch")

    raw_cogs = data.get("rx_cogs")
    if raw_cogs is None:
        raw_cogs = {}
    elif not isinstance(raw_cogs, Mapping):
        raise InvalidRepo(f"Repository {url} has malformed cog listing")

    repo = Repo(url=url, name=name, category=category, branch=branch)
    for cog_name, cog_data in raw_cogs.items():
        try:
            repo._packages.append(parse_package(repo, str(cog_name), cog_data))
        except InvalidPackage as e:
            logger.warning(f"Skipping cog: {e}")
    return repo
