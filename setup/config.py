# setup/config.py
"""
Static constants for the provisioning flows.

Package lists and fixed system paths that are not meant to be overridden at
runtime. Anything an operator may want to change lives in config_models.
"""

# Represents the version of the provisioning logic.
SCRIPT_VERSION: str = "1.0.0"

# --- Package Lists (for apt installation) ---
TYPO3_DEPENDENCY_PACKAGES: list[str] = [
    "apt-transport-https",
    "ca-certificates",
    "curl",
    "gnupg",
    "unzip",
    "imagemagick",
    "apache2",
    "libapache2-mod-php",
    "php",
    "php-cli",
    "php-mysql",
    "php-gd",
    "php-imagick",
    "php-curl",
    "php-xml",
    "php-mbstring",
    "php-zip",
    "php-intl",
]

MYSQL_SERVER_PACKAGES: list[str] = ["mysql-server"]
FIREWALL_PACKAGES: list[str] = ["ufw"]

# --- Fixed paths ---
APT_SOURCES_DIR: str = "/etc/apt/sources.list.d"
TYPO3_SETTINGS_RELATIVE_PATH: str = "config/system/settings.yaml"
TYPO3_ARCHIVE_NAME: str = "typo3.tar.gz"
TYPO3_EXTRACTED_PREFIX: str = "typo3_src-"

# --- Service names ---
MYSQL_SERVICE: str = "mysql"
APACHE_SERVICE: str = "apache2"

# --- Root-only file permissions ---
CREDENTIALS_FILE_MODE: str = "600"
APP_CONFIG_FILE_MODE: str = "640"
