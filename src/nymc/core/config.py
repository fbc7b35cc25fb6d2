"""Scan configuration stored in <project>/.nymc/config.json"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any

import click
import requests

from .errors import ConfigurationError, RemoteFeedError


CONFIG_DIR_NAME = '.nymc'
CONFIG_FILE_NAME = 'config.json'
DEFAULT_VERSION = '0.0.1'
FETCH_TIMEOUT = 30


@dataclass
class ScanConfiguration:
    """
    Contents of the config file

    JSON layout:
        {"version": "1.0.0", "url": "", "httpsHeader": "", "packages": ["evil@1.0.0"]}

    When the remote feed is used, the fetched list replaces `packages`
    for the scan; the two are never merged.
    """

    version: str = DEFAULT_VERSION
    url: str = ''
    https_header: str = ''
    packages: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScanConfiguration':
        if not isinstance(data, dict):
            raise ConfigurationError("Invalid config: expected a JSON object")

        return cls(
            version=str(data.get('version', DEFAULT_VERSION)),
            url=data.get('url') or '',
            https_header=data.get('httpsHeader') or '',
            packages=data.get('packages', []),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk JSON layout"""
        return {
            'version': self.version,
            'url': self.url,
            'httpsHeader': self.https_header,
            'packages': list(self.packages),
        }


def config_path(project_root: Path) -> Path:
    return Path(project_root) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def config_exists(project_root: Path) -> bool:
    """Check whether the config file exists in the project root"""
    return config_path(project_root).is_file()


def read_config(project_root: Path) -> ScanConfiguration:
    """
    Load the config file

    Raises:
        ConfigurationError: if the file is missing or is not valid JSON
    """
    path = config_path(project_root)
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Error reading {path}: {e}") from e

    return ScanConfiguration.from_dict(data)


def _project_version(project_root: Path) -> str:
    """Version field of the project's own package.json, if there is one"""
    manifest = Path(project_root) / 'package.json'
    if not manifest.is_file():
        return DEFAULT_VERSION

    try:
        with open(manifest, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error reading {manifest}: {e}") from e

    version = data.get('version') if isinstance(data, dict) else None
    return str(version) if version else DEFAULT_VERSION


def create_config(project_root: Path, force: bool = False) -> Optional[Path]:
    """
    Create the config file with an empty package list

    Args:
        project_root: Project root directory
        force: Overwrite an existing config file

    Returns:
        Path of the written file, or None if an existing file was kept
    """
    path = config_path(project_root)
    if path.exists() and not force:
        return None

    config = ScanConfiguration(version=_project_version(project_root))

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
        f.write('\n')

    click.echo(click.style(f"✓ Config created at: {path}", fg='green'))
    return path


def parse_https_header(header: str) -> Dict[str, str]:
    """
    Turn the configured "Name: value" string into a headers dict

    Only the first ':' separates name from value, so values may contain
    colons ("X-Api-Key: abc:def" -> {"X-Api-Key": "abc:def"}).

    Raises:
        RemoteFeedError: if a non-empty header has no ':' or no name
    """
    if not header or not header.strip():
        return {}

    name, sep, value = header.partition(':')
    name = name.strip()
    if not sep or not name:
        raise RemoteFeedError(
            f'Invalid httpsHeader "{header}". Expected format: "Header-Name: value"')

    return {name: value.strip()}


def fetch_packages(config: ScanConfiguration) -> List[str]:
    """
    Fetch the package list from the configured URL

    Returns:
        Raw identifier strings, not yet validated

    Raises:
        RemoteFeedError: on missing url, bad header, transport error,
            non-2xx status or a payload that is not a JSON array of strings
    """
    if not config.url:
        raise RemoteFeedError("No url configured in .nymc/config.json")

    headers = parse_https_header(config.https_header)

    try:
        response = requests.get(config.url, headers=headers, timeout=FETCH_TIMEOUT)
    except requests.RequestException as e:
        raise RemoteFeedError(f"Failed to fetch packages from {config.url}: {e}") from e

    if not 200 <= response.status_code < 300:
        raise RemoteFeedError(
            f"Failed to fetch packages from {config.url}: "
            f"{response.status_code} {response.reason or ''}".rstrip())

    try:
        payload = response.json()
    except ValueError as e:
        raise RemoteFeedError(f"Invalid JSON from {config.url}: {e}") from e

    if not isinstance(payload, list) or not all(isinstance(p, str) for p in payload):
        raise RemoteFeedError(f"Expected a JSON array of strings from {config.url}")

    return payload


def load_packages(config: ScanConfiguration, use_network: bool = False) -> List[str]:
    """Raw package list for this scan: the remote feed when requested, else the local list"""
    if use_network:
        return fetch_packages(config)
    return config.packages
