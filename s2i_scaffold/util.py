import configparser
import logging
import os
from pathlib import Path
from typing import Union

import git

from s2i_scaffold.const import REPO_URL_PLACEHOLDER

log = logging.getLogger(__name__)


def try_get_repo_url(context: Union[str, bytes, os.PathLike]) -> str:
    """Best guesses a repository URL for image labeling purposes based off the Git remote origin URL

    :param context: The directory to check for an enclosing repository with a remote URL
    :return: The guessed repository URL
    """
    url = REPO_URL_PLACEHOLDER
    try:
        repo = git.Repo(context, search_parent_directories=True)
        # Use splitext since remotes should have `.git` as a suffix
        url = os.path.splitext(repo.remotes[0].config_reader.get("url"))[0]
        # If the URL is a git@ SSH URL, convert it to a https:// URL
        if url.startswith("git@"):
            url = url.removeprefix("git@")
            url = url.replace(":", "/")
        elif url.startswith("https://"):
            url = url.removeprefix("https://")
            url = url.split("@")[-1]
    except (git.GitError, configparser.Error, IndexError, OSError):
        log.warning("Unable to determine repository URL, labels will use a placeholder")
    return url


def nearest_existing_parent(path: Path) -> Path:
    """Returns the path itself or its closest ancestor that exists on disk"""
    path = Path(path)
    while not path.exists() and path != path.parent:
        path = path.parent
    return path


def auto_path() -> Path:
    context = Path(os.getcwd())
    return context
