# default encoding used for hashing and script downloads
DEFAULT_ENCODING = "utf-8"

# strings to indicate truthy values
TRUE_STRINGS = ("1", "true", "True")
# strings with valid log levels for BOOTSTRAP_LOG
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
BOOTSTRAP_LOG_TRACE = "trace"
TRACE_LOG_LEVELS = [BOOTSTRAP_LOG_TRACE]

# CloudFormation custom resource type tags handled by the bootstrap controller
RESOURCE_TYPE_ATHENA_SAMPLE = "Custom::AthenaSample"
RESOURCE_TYPE_DDB_ITEM = "Custom::DDBItem"
RESOURCE_TYPE_RDS_SAMPLE = "Custom::RDSSample"

# maximum length (in hex characters) of content hashes embedded in physical resource IDs
PHYSICAL_ID_HASH_LENGTH = 80

# prefix of physical resource IDs derived from inline statement lists
INLINE_QUERY_ID_PREFIX = "inline-"

# default PostgreSQL port
DEFAULT_POSTGRES_PORT = 5432

# sample database scripts loaded by the RDS bootstrap handler
PAGILA_SCHEMA_URL = "https://raw.githubusercontent.com/devrimgunduz/pagila/master/pagila-schema.sql"
PAGILA_DATA_URL = "https://raw.githubusercontent.com/devrimgunduz/pagila/master/pagila-insert-data.sql"
