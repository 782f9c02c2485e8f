"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    RESOLUTION_ERROR = 1


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_BUCKET = "heroku-nodebin"
    LISTING_URL_TEMPLATE = "https://{bucket}.s3.amazonaws.com"
    LISTING_MAX_PAGES = 1000
    S3_XML_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"

    RUNTIME_URL_TEMPLATE = (
        "https://s3.amazonaws.com/{bucket}/{name}/{stage}/{platform}/{name}-v{version}-{platform}.tar.gz"
    )
    # Package-manager URLs always point at the "release" stage.
    PACKAGE_MANAGER_URL_TEMPLATE = (
        "https://s3.amazonaws.com/{bucket}/{name}/release/{name}-v{version}.tar.gz"
    )

    STAGING_STAGE = "staging"
    PLATFORM_DARWIN = "darwin-x64"
    PLATFORM_LINUX = "linux-x64"

    USAGE = "resolve-version binary version-requirement"
    CONFIG_SECTION = "resolve_version"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "RESOLVE_VERSION_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
