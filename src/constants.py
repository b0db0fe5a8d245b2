"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    INSTALL_ERROR = 4


class PackageManagers(Enum):
    """Package managers that can reinstall a pinned project.

    Args:
        Enum (string): Executable names of the supported package managers.
    """

    BUN = "bun"
    PNPM = "pnpm"
    YARN = "yarn"
    NPM = "npm"


class PinKinds(Enum):
    """Range syntaxes the pin writer can render.

    Args:
        Enum (string): Pin kind identifiers.
    """

    COMPATIBLE = "compatible"
    BELOW_NEXT_MAJOR = "below-next-major"
    AT_LEAST = "at-least"
    EXACT = "exact"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    REGISTRY_ACCEPT_HEADER = (
        "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"
    )
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 1  # Failed lookups are not retried

    PACKAGE_JSON_FILE = "package.json"
    NODE_MODULES_DIR = "node_modules"
    BIN_STUB_DIR = ".bin"
    SCOPE_MARKER = "@"
    CONFIG_FILE = ".ltspin.yml"

    DIRECT_SECTIONS = ["dependencies", "devDependencies", "peerDependencies"]
    OVERRIDES_SECTION = "overrides"

    # Checked in order; the first lockfile present selects the manager.
    LOCKFILES = [
        ("bun.lock", PackageManagers.BUN),
        ("pnpm-lock.yaml", PackageManagers.PNPM),
        ("yarn.lock", PackageManagers.YARN),
        ("package-lock.json", PackageManagers.NPM),
    ]
    DEFAULT_PACKAGE_MANAGER = PackageManagers.NPM
    INSTALL_ARGS = {
        PackageManagers.BUN.value: [],
        PackageManagers.PNPM.value: [],
        PackageManagers.YARN.value: [],
        PackageManagers.NPM.value: ["--legacy-peer-deps"],
    }

    PIN_STYLES = [PinKinds.BELOW_NEXT_MAJOR.value, PinKinds.COMPATIBLE.value]
    DIRECT_PIN_STYLE = PinKinds.BELOW_NEXT_MAJOR.value

    # Packages that always track upstream; pinned as a floor at their latest release.
    WHITELIST = frozenset(
        [
            "typescript",
            "tslib",
            "@types/node",
            "caniuse-lite",
            "electron-to-chromium",
        ]
    )

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "LTSPIN_LOG_LEVEL"
