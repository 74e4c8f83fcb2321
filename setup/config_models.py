# setup/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for both provisioning flows
(TYPO3 on the host, SOGo inside a Proxmox LXC container), including defaults,
type annotations, and descriptions. It utilizes Pydantic for data validation
and settings management.
"""

from typing import Dict, List

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_PREFIX_DEFAULT: str = "[STACK-SETUP]"
CONNECTIVITY_CHECK_HOST_DEFAULT: str = "8.8.8.8"
SOGO_LOG_FILE_DEFAULT: str = "/var/log/sogo_lxc_setup.log"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}

MYSQL_HOST_DEFAULT: str = "127.0.0.1"
MYSQL_PORT_DEFAULT: int = 3306

TYPO3_VERSION_DEFAULT: str = "13.4.9"
TYPO3_DOWNLOAD_URL_TEMPLATE_DEFAULT: str = "https://get.typo3.org/{version}"

LXC_TEMPLATE_DEFAULT: str = "debian-12-standard_12.7-1_amd64.tar.zst"

TYPO3_VHOST_TEMPLATE_DEFAULT: str = """\
<VirtualHost *:80>
    ServerAdmin {server_admin}
    ServerName {server_name}
    DocumentRoot {document_root}
    <Directory {document_root}>
        Options -Indexes +FollowSymLinks
        AllowOverride All
        Require all granted
    </Directory>
    ErrorLog ${{APACHE_LOG_DIR}}/{site_name}_error.log
    CustomLog ${{APACHE_LOG_DIR}}/{site_name}_access.log combined
</VirtualHost>
"""

TYPO3_SETTINGS_TEMPLATE_DEFAULT: str = """\
db:
  Connections:
    Default:
      driver: mysqli
      host: {db_host}
      port: {db_port}
      dbname: {db_name}
      user: {db_user}
      password: {db_password}
"""

SOGO_CONFIG_TEMPLATE_DEFAULT: str = """\
{{
  SOGoProfileURL = "mysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}/sogo_user_profile";
  OCSFolderInfoURL = "mysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}/sogo_folder_info";
  OCSSessionsFolderURL = "mysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}/sogo_sessions_folder";
  OCSEMailAlarmsFolderURL = "mysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}/sogo_alarms_folder";
  OCSStoreURL = "mysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}/sogo_store";
  OCSAclURL = "mysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}/sogo_acl";
  OCSCacheFolderURL = "mysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}/sogo_cache_folder";

  SOGoUserSources = (
    {{
      type = sql;
      id = directory;
      viewURL = "mysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}/sogo_users";
      canAuthenticate = YES;
      isAddressBook = YES;
      userPasswordAlgorithm = ssha256;
      displayName = "SOGo Users";
    }}
  );

  SOGoMailDomain = "{mail_domain}";
  SOGoTimeZone = "{time_zone}";
  SOGoLanguage = English;
  SOGoMemcachedHost = "127.0.0.1";
  WOPort = "127.0.0.1:20000";
  WOWorkersCount = 5;
}}
"""


class MySQLSettings(BaseSettings):
    """MySQL repository and connection settings."""
    model_config = SettingsConfigDict(env_prefix="MYSQL_", extra="ignore")

    apt_repo_url: str = Field(default="http://repo.mysql.com/apt/debian",
                              description="Base URL of the MySQL apt repository.")
    apt_suite: str = Field(default="bookworm", description="Debian suite for the MySQL repository.")
    apt_component: str = Field(default="mysql-8.0", description="Repository component (MySQL series).")
    gpg_key_url: str = Field(default="https://repo.mysql.com/RPM-GPG-KEY-mysql-2023",
                             description="Signing key for the MySQL repository.")
    keyring_path: str = Field(default="/usr/share/keyrings/mysql.gpg",
                              description="Where the dearmored MySQL keyring is stored.")
    host: str = Field(default=MYSQL_HOST_DEFAULT, description="Host the application connects to.")
    port: int = Field(default=MYSQL_PORT_DEFAULT, description="Port the application connects to.")


class ApacheSettings(BaseModel):
    """Apache virtual host settings."""

    server_admin: str = Field(default="admin@example.com", description="ServerAdmin for generated vhosts.")
    sites_available_dir: str = Field(default="/etc/apache2/sites-available",
                                     description="Directory holding site configuration files.")


class Typo3Settings(BaseSettings):
    """TYPO3 CMS install settings."""
    model_config = SettingsConfigDict(env_prefix="TYPO3_", extra="ignore")

    version: str = Field(default=TYPO3_VERSION_DEFAULT, description="TYPO3 release to download.")
    download_url_template: str = Field(default=TYPO3_DOWNLOAD_URL_TEMPLATE_DEFAULT,
                                       description="Download URL. Supports placeholder {version}.")
    web_root_parent: str = Field(default="/var/www", description="Directory the release is unpacked into.")
    install_dir_name: str = Field(default="typo3", description="Final directory name of the install.")
    site_name: str = Field(default="typo3", description="Apache site name (typo3.conf).")
    db_name: str = Field(default="typo3", description="Database name.")
    db_user: str = Field(default="typo3", description="Database user.")
    credentials_file: str = Field(default="/root/typo3.creds",
                                  description="Root-only file recording the generated credentials.")
    web_user: str = Field(default="www-data", description="Owner of the TYPO3 tree.")
    web_group: str = Field(default="www-data", description="Group of the TYPO3 tree.")
    download_timeout: int = Field(default=300, description="HTTP timeout in seconds for the release download.")

    vhost_template: str = Field(
        default=TYPO3_VHOST_TEMPLATE_DEFAULT,
        description="Apache vhost template. Placeholders: {server_admin}, {server_name}, {document_root}, {site_name}.",
    )
    settings_template: str = Field(
        default=TYPO3_SETTINGS_TEMPLATE_DEFAULT,
        description="TYPO3 settings.yaml template. Placeholders: {db_host}, {db_port}, {db_name}, {db_user}, {db_password}.",
    )


class FirewallSettings(BaseModel):
    """UFW settings."""

    allowed_ports: List[int] = Field(default_factory=lambda: [80, 443, 22],
                                     description="TCP ports opened before enabling UFW.")


class LxcSettings(BaseSettings):
    """Proxmox LXC container settings."""
    model_config = SettingsConfigDict(env_prefix="LXC_", extra="ignore")

    ctid: int = Field(default=100, ge=100, description="Proxmox container ID.")
    hostname: str = Field(default="sogo-server", description="Container hostname.")
    storage: str = Field(default="local-lvm", description="Storage for the container root filesystem.")
    template_storage: str = Field(default="local", description="Storage holding container templates.")
    disk_size: int = Field(default=32, gt=0, description="Root filesystem size in GB.")
    cores: int = Field(default=2, gt=0, description="CPU cores.")
    memory: int = Field(default=8192, gt=0, description="Memory in MB.")
    swap: int = Field(default=2048, ge=0, description="Swap in MB.")
    bridge: str = Field(default="vmbr0", description="Network bridge for eth0.")
    ip: str = Field(default="dhcp", description="IPv4 config for eth0 ('dhcp' or CIDR).")
    template: str = Field(default=LXC_TEMPLATE_DEFAULT, description="Container template file name.")
    template_cache_dir: str = Field(default="/var/lib/vz/template/cache",
                                    description="Local cache directory of downloaded templates.")
    boot_wait_seconds: int = Field(default=10, ge=0, description="Fixed wait after starting the container.")
    unprivileged: bool = Field(default=True, description="Create an unprivileged container.")
    nesting: bool = Field(default=True, description="Enable the nesting feature.")


class SogoSettings(BaseSettings):
    """SOGo groupware settings (applied inside the container)."""
    model_config = SettingsConfigDict(env_prefix="SOGO_", extra="ignore")

    apt_repo_url: str = Field(default="http://packages.sogo.nu/nightly/5/debian/",
                              description="SOGo apt repository.")
    apt_suite: str = Field(default="bookworm", description="Debian suite for the SOGo repository.")
    gpg_key_url: str = Field(default="https://keys.openpgp.org/pks/lookup?op=get&search=0x1B36D249B0F332D2",
                             description="Signing key for the SOGo repository.")
    keyring_path: str = Field(default="/usr/share/keyrings/sogo.gpg",
                              description="Where the dearmored SOGo keyring is stored.")
    prerequisite_packages: List[str] = Field(
        default_factory=lambda: ["wget", "gnupg2", "curl", "apt-transport-https", "ca-certificates"],
        description="Packages installed before the SOGo repository is added.",
    )
    packages: List[str] = Field(
        default_factory=lambda: ["sogo", "sope4.9-gdl1-mysql", "mysql-server", "apache2", "memcached"],
        description="SOGo stack packages.",
    )
    services: List[str] = Field(default_factory=lambda: ["mysql", "apache2", "memcached", "sogo"],
                                description="Services enabled and started inside the container.")
    apache_modules: List[str] = Field(default_factory=lambda: ["proxy", "proxy_http", "rewrite", "headers"],
                                      description="Apache modules required by the SOGo reverse proxy.")
    apache_conf: str = Field(default="SOGo", description="Apache conf shipped by the sogo package.")
    db_name: str = Field(default="sogo", description="Database name.")
    db_user: str = Field(default="sogo", description="Database user.")
    credentials_file: str = Field(default="/root/sogo.creds",
                                  description="Root-only credentials file inside the container.")
    config_path: str = Field(default="/etc/sogo/sogo.conf", description="SOGo configuration file.")
    mail_domain: str = Field(default="example.com", description="SOGoMailDomain.")
    time_zone: str = Field(default="UTC", description="SOGoTimeZone.")
    config_template: str = Field(
        default=SOGO_CONFIG_TEMPLATE_DEFAULT,
        description="sogo.conf template. Placeholders: {db_host}, {db_port}, {db_name}, {db_user}, {db_password}, {mail_domain}, {time_zone}.",
    )


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(extra="ignore")

    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT,
                            description="Prefix for log messages from the installer.")
    log_file: str = Field(default="", description="Optional log file. Empty disables file logging.")
    connectivity_check_host: str = Field(default=CONNECTIVITY_CHECK_HOST_DEFAULT,
                                         description="Host pinged by the connectivity preflight.")

    mysql: MySQLSettings = Field(default_factory=MySQLSettings)
    apache: ApacheSettings = Field(default_factory=ApacheSettings)
    typo3: Typo3Settings = Field(default_factory=Typo3Settings)
    firewall: FirewallSettings = Field(default_factory=FirewallSettings)
    lxc: LxcSettings = Field(default_factory=LxcSettings)
    sogo: SogoSettings = Field(default_factory=SogoSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
