"""
Registry of the resource handlers known to the bootstrap controller, keyed by CloudFormation resource type.
"""

from databootstrap.aws.connect import ClientFactory
from databootstrap.constants import (
    RESOURCE_TYPE_ATHENA_SAMPLE,
    RESOURCE_TYPE_DDB_ITEM,
    RESOURCE_TYPE_RDS_SAMPLE,
)
from databootstrap.services.athena.client import AthenaCatalogEngine, CatalogEngine
from databootstrap.services.athena.resource_handlers.athena_sample import AthenaSampleHandler
from databootstrap.services.custom_resources.dispatcher import EventDispatcher
from databootstrap.services.custom_resources.resource_handler import ResourceHandler
from databootstrap.services.dynamodb.client import DynamoDbKeyValueStore, KeyValueStore
from databootstrap.services.dynamodb.resource_handlers.ddb_item import DDBItemHandler
from databootstrap.services.rds.client import PostgresEngine, RelationalEngine
from databootstrap.services.rds.resource_handlers.rds_sample import RDSSampleHandler
from databootstrap.services.rds.scripts import ScriptLoader
from databootstrap.services.secretsmanager.client import SecretsManagerSecretStore, SecretStore


def create_handlers(
    catalog_engine: CatalogEngine,
    kv_store: KeyValueStore,
    relational_engine: RelationalEngine,
    secret_store: SecretStore,
    script_loader: ScriptLoader = None,
    **poller_options,
) -> dict[str, ResourceHandler]:
    """
    Create the default handlers on top of the given adapters.

    :param poller_options: ``clock`` and ``sleep`` overrides for the Athena statement poller
    """
    return {
        RESOURCE_TYPE_ATHENA_SAMPLE: AthenaSampleHandler(catalog_engine, **poller_options),
        RESOURCE_TYPE_DDB_ITEM: DDBItemHandler(kv_store),
        RESOURCE_TYPE_RDS_SAMPLE: RDSSampleHandler(relational_engine, secret_store, script_loader),
    }


def create_dispatcher(client_factory: ClientFactory = None) -> EventDispatcher:
    """Create a dispatcher with the default handlers, backed by AWS clients and a PostgreSQL engine."""
    client_factory = client_factory or ClientFactory()
    handlers = create_handlers(
        catalog_engine=AthenaCatalogEngine(client_factory.athena),
        kv_store=DynamoDbKeyValueStore(client_factory.dynamodb),
        relational_engine=PostgresEngine(),
        secret_store=SecretsManagerSecretStore(client_factory.secretsmanager),
    )
    return EventDispatcher(handlers)
