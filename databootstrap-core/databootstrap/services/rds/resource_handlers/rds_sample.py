"""
Custom::RDSSample - loads a sample database (schema and data scripts) into PostgreSQL on Amazon RDS.

Updating or deleting the resource does not touch the database.
"""

import logging
from contextlib import closing
from typing import Optional, TypedDict

from databootstrap import config
from databootstrap.services.custom_resources import identity
from databootstrap.services.custom_resources.exceptions import (
    ExternalServiceError,
    ValidationError,
)
from databootstrap.services.custom_resources.models import (
    CreateRequest,
    DeleteRequest,
    HandlerResult,
    UpdateRequest,
)
from databootstrap.services.custom_resources.resource_handler import (
    ResourceHandler,
    optional_integer,
    require_property,
)
from databootstrap.services.rds.client import RelationalEngine
from databootstrap.services.rds.scripts import ScriptLoader, load_scripts, resolve_script_sources
from databootstrap.services.secretsmanager.client import SecretStore

LOG = logging.getLogger(__name__)


class RDSSampleProperties(TypedDict, total=False):
    dbName: str
    # host name of the RDS cluster / writer node, defaults to the host stored in the credential
    host: Optional[str]
    port: Optional[int]
    # ARN or name of the Secrets Manager secret holding username and password
    credSecret: str
    schemaScript: Optional[str]
    schemaScriptUrl: Optional[str]
    dataScript: Optional[str]
    dataScriptUrl: Optional[str]


class RDSSampleHandler(ResourceHandler):
    TARGET = "RDS data"

    def __init__(self, engine: RelationalEngine, secrets: SecretStore, script_loader: ScriptLoader = None):
        self.engine = engine
        self.secrets = secrets
        self.script_loader = script_loader or ScriptLoader()

    def on_create(self, request: CreateRequest) -> HandlerResult:
        properties: RDSSampleProperties = request.resource_properties
        db_name = require_property(properties, "dbName")
        cred_secret = require_property(properties, "credSecret")
        declared_port = optional_integer(properties, "port")
        if declared_port is not None and not 0 < declared_port < 65536:
            raise ValidationError(f"Resource property 'port' must be a valid port number, got: {declared_port}")
        declared_host = properties.get("host") or None
        script_sources = resolve_script_sources(properties)

        scripts = load_scripts(script_sources, self.script_loader)

        creds = self.secrets.get_secret(cred_secret)
        user = creds.get("username")
        password = creds.get("password")
        if not user or not isinstance(password, str):
            raise ExternalServiceError(f"Secret {cred_secret} must contain a 'username' and a 'password'")

        host = declared_host or creds.get("host")
        if not host:
            raise ValidationError("Resource properties must provide 'host' if the credential defines none")
        port = int(declared_port or creds.get("port") or config.RDS_DEFAULT_PORT)
        self._warn_on_mismatch(creds, host=host, port=port, db_name=db_name)

        LOG.debug(
            "Connection parameters: host=%s port=%s user=%s database=%s password=%s of length %s",
            host,
            port,
            user,
            db_name,
            type(password).__name__,
            len(password),
        )
        with closing(self.engine.connect(host, port, user, password, db_name)) as connection:
            LOG.info("Running schema generation statements...")
            connection.execute(scripts.schema)
            LOG.info("Running data loading statements...")
            connection.execute(scripts.data)

        physical_resource_id = identity.relational_bootstrap_id(db_name, scripts.schema, scripts.data)
        LOG.info("Loaded data to Amazon RDS - %s", physical_resource_id)
        return HandlerResult(physical_resource_id=physical_resource_id, data={})

    def on_update(self, request: UpdateRequest) -> HandlerResult:
        return self.skip_update(request)

    def on_delete(self, request: DeleteRequest) -> HandlerResult:
        return self.skip_delete(request)

    @staticmethod
    def _warn_on_mismatch(creds: dict, host: str, port: int, db_name: str):
        if "port" in creds and str(creds["port"]) != str(port):
            LOG.warning("Credential port %s does not match provided port %s", creds["port"], port)
        if "dbname" in creds and creds["dbname"] != db_name:
            LOG.warning("Credential dbname %s does not match provided database %s", creds["dbname"], db_name)
        if "host" in creds and creds["host"] != host:
            LOG.warning("Credential host %s does not match provided host %s", creds["host"], host)
