import logging

import boto3
import pytest
from botocore.stub import Stubber
from moto import mock_aws

from databootstrap.services.athena.client import AthenaCatalogEngine, QueryContext, StoredQuery
from databootstrap.services.athena.resource_handlers.athena_sample import (
    AthenaSampleHandler,
    split_statements,
)
from databootstrap.services.custom_resources.exceptions import (
    ExternalOperationFailed,
    ExternalServiceError,
    PollTimeout,
    ValidationError,
)
from databootstrap.services.custom_resources.identity import inline_statements_id
from databootstrap.services.custom_resources.models import (
    CreateRequest,
    DeleteRequest,
    UpdateRequest,
)
from databootstrap.testing.config import TEST_AWS_REGION_NAME
from databootstrap.testing.fakes import FakeCatalogEngine

STATEMENTS = [
    "create database tpch",
    "create external table nation (n_nationkey bigint, n_name string)",
    "create external table region (r_regionkey bigint, r_name string)",
]


def _create_request(**properties):
    return CreateRequest(
        resource_type="Custom::AthenaSample",
        resource_properties={
            "athenaCatalog": "SampleCatalog",
            "athenaWorkgroup": "SampleWorkgroup",
            **properties,
        },
    )


def _handler(engine, fake_clock):
    return AthenaSampleHandler(engine, clock=fake_clock.time, sleep=fake_clock.sleep)


class TestAthenaSampleHandler:
    def test_runs_inline_statements_in_order(self, fake_clock):
        engine = FakeCatalogEngine(state_sequences=[["RUNNING", "SUCCEEDED"], ["QUEUED", "SUCCEEDED"]])

        result = _handler(engine, fake_clock).on_create(
            _create_request(queryStatements=STATEMENTS, queryDatabase="tpch")
        )

        assert result.physical_resource_id == inline_statements_id(STATEMENTS)
        assert result.physical_resource_id.startswith("inline-")
        assert result.data == {}
        assert [statement for statement, _ in engine.submitted] == STATEMENTS
        assert engine.submitted[0][1] == QueryContext(
            catalog="SampleCatalog", database="tpch", workgroup="SampleWorkgroup"
        )
        # each statement is polled until completion before the next one is submitted
        assert engine.status_calls == ["exec-0", "exec-0", "exec-1", "exec-1", "exec-2"]

    def test_stops_at_first_failed_statement(self, fake_clock):
        engine = FakeCatalogEngine(state_sequences=[["SUCCEEDED"], ["FAILED"], ["SUCCEEDED"]])

        with pytest.raises(ExternalOperationFailed) as e:
            _handler(engine, fake_clock).on_create(_create_request(queryStatements=STATEMENTS))

        assert len(engine.submitted) == 2
        assert e.value.terminal_state == "FAILED"
        assert e.value.operation_id == "exec-1"

    def test_times_out(self, fake_clock):
        engine = FakeCatalogEngine(state_sequences=[["RUNNING"]])

        with pytest.raises(PollTimeout):
            _handler(engine, fake_clock).on_create(
                _create_request(queryStatements=STATEMENTS, maxWaitSeconds="5", pollIntervalSeconds="2")
            )

        assert len(engine.submitted) == 1
        assert len(engine.status_calls) == 3
        assert fake_clock.now == 6

    def test_uses_configured_poll_defaults(self, fake_clock, monkeypatch):
        from databootstrap import config

        monkeypatch.setattr(config, "ATHENA_POLL_INTERVAL_SECONDS", 3)
        engine = FakeCatalogEngine(state_sequences=[["RUNNING", "SUCCEEDED"]])

        _handler(engine, fake_clock).on_create(_create_request(queryStatements=STATEMENTS[:1]))

        assert fake_clock.sleeps == [3, 3]

    def test_runs_stored_query(self, fake_clock):
        engine = FakeCatalogEngine(
            stored_queries={
                "query-1": StoredQuery(
                    text="create database tpch; create external table nation (n bigint);\n",
                    default_context=QueryContext(database="tpch", workgroup="primary"),
                )
            }
        )

        result = _handler(engine, fake_clock).on_create(_create_request(storedQueryId="query-1"))

        assert result.physical_resource_id == "query-1"
        assert [statement for statement, _ in engine.submitted] == [
            "create database tpch",
            "create external table nation (n bigint)",
        ]
        # database defaults to the stored query's database, the workgroup is always the declared one
        assert engine.submitted[0][1] == QueryContext(
            catalog="SampleCatalog", database="tpch", workgroup="SampleWorkgroup"
        )

    def test_stored_query_database_can_be_overridden(self, fake_clock):
        engine = FakeCatalogEngine(
            stored_queries={
                "query-1": StoredQuery(text="select 1", default_context=QueryContext(database="tpch"))
            }
        )

        _handler(engine, fake_clock).on_create(
            _create_request(storedQueryId="query-1", queryDatabase="other")
        )

        assert engine.submitted == [
            ("select 1", QueryContext(catalog="SampleCatalog", database="other", workgroup="SampleWorkgroup"))
        ]

    @pytest.mark.parametrize(
        "properties,message",
        [
            ({}, "Got neither"),
            ({"queryStatements": []}, "Got neither"),
            ({"queryStatements": STATEMENTS, "storedQueryId": "query-1"}, "Got both"),
            ({"queryStatements": "create database tpch"}, "list of non-empty SQL strings"),
            ({"queryStatements": ["select 1", ""]}, "list of non-empty SQL strings"),
            ({"queryStatements": ["select 1", "  "]}, "list of non-empty SQL strings"),
            ({"queryStatements": STATEMENTS, "pollIntervalSeconds": "0"}, "pollIntervalSeconds"),
            ({"queryStatements": STATEMENTS, "maxWaitSeconds": "soon"}, "maxWaitSeconds"),
        ],
    )
    def test_validation(self, fake_clock, properties, message):
        engine = FakeCatalogEngine()

        with pytest.raises(ValidationError, match=message):
            _handler(engine, fake_clock).on_create(_create_request(**properties))

        assert engine.submitted == []

    def test_stored_query_without_statements(self, fake_clock):
        engine = FakeCatalogEngine(stored_queries={"query-1": StoredQuery(text=" ; ;\n")})

        with pytest.raises(ExternalServiceError, match="contains no SQL statements"):
            _handler(engine, fake_clock).on_create(_create_request(storedQueryId="query-1"))

        assert engine.submitted == []

    @pytest.mark.parametrize(
        "properties",
        [
            {"maxWaitSeconds": "nan"},
            {"maxWaitSeconds": "inf"},
            {"pollIntervalSeconds": "inf"},
            {"pollIntervalSeconds": "-inf"},
        ],
    )
    def test_non_finite_poll_settings(self, fake_clock, properties):
        engine = FakeCatalogEngine()

        with pytest.raises(ValidationError, match="must be a finite number"):
            _handler(engine, fake_clock).on_create(_create_request(queryStatements=STATEMENTS, **properties))

        assert engine.submitted == []
        assert fake_clock.sleeps == []

    def test_invalid_configured_poll_settings(self, fake_clock, monkeypatch):
        from databootstrap import config

        monkeypatch.setattr(config, "ATHENA_MAX_WAIT_SECONDS", float("nan"))
        engine = FakeCatalogEngine()

        with pytest.raises(ValidationError, match="Invalid polling configuration"):
            _handler(engine, fake_clock).on_create(_create_request(queryStatements=STATEMENTS))

        assert engine.submitted == []

    @pytest.mark.parametrize("missing", ["athenaCatalog", "athenaWorkgroup"])
    def test_requires_catalog_and_workgroup(self, fake_clock, missing):
        engine = FakeCatalogEngine()
        request = _create_request(queryStatements=STATEMENTS)
        del request.resource_properties[missing]

        with pytest.raises(ValidationError, match=missing):
            _handler(engine, fake_clock).on_create(request)

        assert engine.submitted == []

    def test_update_and_delete_are_noops(self, fake_clock, caplog):
        engine = FakeCatalogEngine()
        handler = _handler(engine, fake_clock)

        with caplog.at_level(logging.WARNING):
            update = handler.on_update(
                UpdateRequest(
                    resource_type="Custom::AthenaSample",
                    physical_resource_id="inline-abc",
                    resource_properties={"queryStatements": ["select 2"]},
                    old_resource_properties={"queryStatements": ["select 1"]},
                )
            )
            delete = handler.on_delete(
                DeleteRequest(resource_type="Custom::AthenaSample", physical_resource_id="inline-abc")
            )

        assert update.physical_resource_id == "inline-abc"
        assert delete.physical_resource_id == "inline-abc"
        assert engine.submitted == []
        assert "Updating this Athena data custom resource is a no-op!" in caplog.text
        assert "Deleting this Athena data custom resource is a no-op!" in caplog.text


def test_split_statements():
    assert split_statements("select 1") == ["select 1"]
    assert split_statements("select 1; select 2;") == ["select 1", "select 2"]
    assert split_statements(" select 1 ;\n\n; select 2 ") == ["select 1", "select 2"]


class TestAthenaCatalogEngine:
    @mock_aws
    def test_submit_and_get_status(self):
        client = boto3.client("athena", region_name=TEST_AWS_REGION_NAME)
        engine = AthenaCatalogEngine(client)

        execution_id = engine.submit(
            "select 1", QueryContext(catalog="AwsDataCatalog", database="default", workgroup="primary")
        )

        assert execution_id
        assert engine.get_status(execution_id) == "SUCCEEDED"

    @mock_aws
    def test_get_stored_query(self):
        client = boto3.client("athena", region_name=TEST_AWS_REGION_NAME)
        query_id = client.create_named_query(
            Name="sample", Database="tpch", QueryString="select 1; select 2"
        )["NamedQueryId"]

        stored_query = AthenaCatalogEngine(client).get_stored_query(query_id)

        assert stored_query.text == "select 1; select 2"
        assert stored_query.default_context.database == "tpch"

    def test_client_errors_are_translated(self):
        client = boto3.client("athena", region_name=TEST_AWS_REGION_NAME)

        with Stubber(client) as stubber:
            stubber.add_client_error(
                "get_query_execution",
                service_error_code="InvalidRequestException",
                service_message="unknown execution",
            )
            with pytest.raises(ExternalServiceError, match="InvalidRequestException"):
                AthenaCatalogEngine(client).get_status("exec-1")

    def test_missing_state_is_an_error(self):
        client = boto3.client("athena", region_name=TEST_AWS_REGION_NAME)

        with Stubber(client) as stubber:
            stubber.add_response("get_query_execution", {"QueryExecution": {"Status": {}}})
            with pytest.raises(ExternalServiceError, match="no state"):
                AthenaCatalogEngine(client).get_status("exec-1")

