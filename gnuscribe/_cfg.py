"""Loads and holds the gnuscribe configuration.

The configuration is assembled from the package defaults, stored in
``cfg/defaults.yml``, and an optional user configuration file, the path of
which can be given via the ``GNUSCRIBE_CFG`` environment variable. It can be
further adjusted at runtime using :py:func:`.update_config`.
"""

import copy
import logging
import os

from .exceptions import ConfigError
from .tools import load_yml, recursive_update, write_yml

log = logging.getLogger(__name__)

DEFAULT_CFG_PATH: str = os.path.join(
    os.path.dirname(__file__), "cfg", "defaults.yml"
)
"""Path to the package's default configuration"""

USER_CFG_ENV_VAR: str = "GNUSCRIBE_CFG"
"""Name of the environment variable that can hold a user config file path"""

_CFG: dict = None
"""The currently active configuration; populated upon first access"""

# -----------------------------------------------------------------------------


def load_config(*, user_cfg_path: str = None) -> dict:
    """Loads the default configuration and, if available, recursively updates
    it with the user configuration.

    Args:
        user_cfg_path (str, optional): Path to a user configuration file. If
            not given, will look at the ``GNUSCRIBE_CFG`` environment
            variable.

    Returns:
        dict: The assembled configuration

    Raises:
        ConfigError: If a user configuration path was given but no file
            exists there, or if it does not contain a mapping
    """
    cfg = load_yml(DEFAULT_CFG_PATH)

    if user_cfg_path is None:
        user_cfg_path = os.environ.get(USER_CFG_ENV_VAR)

    if not user_cfg_path:
        return cfg

    user_cfg_path = os.path.expanduser(user_cfg_path)
    if not os.path.isfile(user_cfg_path):
        raise ConfigError(
            f"No user configuration file found at '{user_cfg_path}'! Check "
            f"the path given via the {USER_CFG_ENV_VAR} environment variable."
        )

    user_cfg = load_yml(user_cfg_path)
    if user_cfg is None:
        log.debug("User configuration at %s is empty.", user_cfg_path)
        return cfg

    elif not isinstance(user_cfg, dict):
        raise ConfigError(
            "The user configuration needs to be a mapping, but the file at "
            f"'{user_cfg_path}' contained a {type(user_cfg).__name__}!"
        )

    log.remark("Merging user configuration from %s ...", user_cfg_path)
    return recursive_update(cfg, user_cfg)


def get_config() -> dict:
    """Returns a deep copy of the currently active configuration"""
    global _CFG
    if _CFG is None:
        _CFG = load_config()
    return copy.deepcopy(_CFG)


def update_config(**updates) -> dict:
    """Recursively updates the active configuration and returns a copy of it.

    Example:

    .. code-block:: python

        update_config(renderer=dict(raise_exc=True))
    """
    global _CFG
    if _CFG is None:
        _CFG = load_config()
    _CFG = recursive_update(_CFG, copy.deepcopy(updates))
    return get_config()


def reset_config() -> None:
    """Discards all runtime changes; the configuration is re-loaded upon the
    next access."""
    global _CFG
    _CFG = None


def dump_config(path: str) -> None:
    """Writes the active configuration to a YAML file"""
    write_yml(get_config(), path=path)
    log.remark("Configuration written to %s .", path)
