"""
Loading of the SQL scripts that bootstrap a relational database.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from databootstrap import config
from databootstrap.services.custom_resources.exceptions import ExternalServiceError, ValidationError
from databootstrap.services.custom_resources.models import Properties

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class BootstrapScripts:
    schema: str
    data: str


class ScriptLoader:
    """Downloads SQL scripts over HTTP(S)."""

    def __init__(self, session: requests.Session = None, timeout: float = None):
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.SCRIPT_DOWNLOAD_TIMEOUT

    def load(self, url: str) -> str:
        LOG.info("Downloading SQL script from %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ExternalServiceError(f"Failed to download SQL script from {url}: {e}") from e
        return response.text


@dataclass(frozen=True)
class ScriptSource:
    text: Optional[str] = None
    url: Optional[str] = None

    def read(self, loader: ScriptLoader) -> str:
        if self.text is not None:
            return self.text
        return loader.load(self.url)


def script_source(properties: Properties, name: str, default_url: str) -> ScriptSource:
    """
    Determine where a script comes from: given inline (e.g. ``schemaScript``), or downloaded from a URL (e.g.
    ``schemaScriptUrl``), defaulting to ``default_url``.

    :raises ValidationError: if both an inline script and a URL are given
    """
    inline = properties.get(name)
    url = properties.get(f"{name}Url")
    if inline and url:
        raise ValidationError(f"Resource properties must provide either '{name}' or '{name}Url'. Got both")
    if inline:
        if not isinstance(inline, str):
            raise ValidationError(f"Resource property '{name}' must be a string")
        return ScriptSource(text=inline)
    return ScriptSource(url=url or default_url)


def resolve_script_sources(properties: Properties) -> tuple[ScriptSource, ScriptSource]:
    """Sources of the schema and data scripts, defaulting to the configured sample database scripts."""
    return (
        script_source(properties, "schemaScript", config.RDS_SCHEMA_SCRIPT_URL),
        script_source(properties, "dataScript", config.RDS_DATA_SCRIPT_URL),
    )


def load_scripts(sources: tuple[ScriptSource, ScriptSource], loader: ScriptLoader) -> BootstrapScripts:
    schema_source, data_source = sources
    return BootstrapScripts(schema=schema_source.read(loader), data=data_source.read(loader))
