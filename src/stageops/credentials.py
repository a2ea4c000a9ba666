"""
AWS credential and profile discovery.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

import boto3
from botocore.exceptions import ProfileNotFound

from .errors import MissingConfigError

logger = logging.getLogger(__name__)


def aws_config_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the directory containing AWS configuration files.

    Looks at HOME, then USERPROFILE, then HOMEDRIVE + HOMEPATH.

    Raises:
        MissingConfigError: If no home directory can be determined
    """
    env = os.environ if env is None else env

    home = env.get("HOME") or env.get("USERPROFILE")
    if not home and env.get("HOMEPATH"):
        home = env.get("HOMEDRIVE", "C:/") + env["HOMEPATH"]

    if not home:
        raise MissingConfigError("Cant find homedir")

    return Path(home) / ".aws"


def list_profiles(env: Optional[Mapping[str, str]] = None) -> Dict[str, Dict[str, str]]:
    """Get a map of profile name to settings from ~/.aws/credentials."""
    creds_path = aws_config_dir(env) / "credentials"

    parser = configparser.ConfigParser()
    try:
        parser.read(creds_path)
    except configparser.Error as e:
        logger.warning(f"Could not parse {creds_path}: {e}")
        return {}

    return {section: dict(parser[section]) for section in parser.sections()}


def create_session(
    region: Optional[str] = None, profile: Optional[str] = None
) -> boto3.Session:
    """
    Create an AWS session.

    Args:
        region: Default region for clients created from the session
        profile: Named profile to use, or None for the default credential chain

    Raises:
        MissingConfigError: If the named profile does not exist
    """
    session_args = {}
    if region:
        session_args["region_name"] = region
    if profile:
        session_args["profile_name"] = profile

    try:
        return boto3.Session(**session_args)
    except ProfileNotFound:
        raise MissingConfigError(
            f"Cant find profile {profile} in ~/.aws/credentials"
        ) from None
