# Configuration settings should be set in app.config
# The ForgeQuery class variables hold the defaults, environment variables are used as a last resort
import os
import logging
from flask import current_app
import forgequery
from typing import Optional, Union


def get_config(option: str) -> Optional[Union[bool, int, str]]:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :return: configuration value
    """

    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        # KeyError: not configured, RuntimeError: no application context
        result = getattr(forgequery.ForgeQuery, option, None)
    if result is None:
        result = os.environ.get(option, None)
    return result


def get_int_config(option: str) -> int:
    """
    :param option: configuration parameter
    :return: the configuration value as an int (environment values are strings)
    """
    return int(get_config(option))


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return forgequery.log.getEffectiveLevel() < logging.INFO
