"""Tests for the MongoDB schema backend, using a mocked client."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from swagger_odm.backends.mongo.client import MongoSchemaBackend, index_keys
from swagger_odm.backends.mongo.validation import to_json_schema
from swagger_odm.core.config import MongoBackendConfig
from swagger_odm.core.exceptions import ConnectionError, SchemaRegistrationError
from swagger_odm.core.models import IndexSpec


@pytest.fixture
def client() -> MagicMock:
    """Mocked MongoClient."""
    return MagicMock()


@pytest.fixture
def database(client: MagicMock) -> MagicMock:
    """Database returned by the mocked client."""
    db = MagicMock()
    db.list_collection_names.return_value = []
    client.__getitem__.return_value = db
    return db


@pytest.fixture
def mongo(client: MagicMock, database: MagicMock) -> MongoSchemaBackend:
    """Connected backend bound to the mocked client."""
    backend = MongoSchemaBackend(MongoBackendConfig(database="houses"), client=client)
    backend.connect()
    return backend


class TestMongoSchemaBackend:
    """Test MongoSchemaBackend."""

    def test_connect(self, mongo: MongoSchemaBackend, client: MagicMock) -> None:
        """Test connecting pings the server and selects the database."""
        client.admin.command.assert_called_once_with("ping")
        client.__getitem__.assert_called_with("houses")
        assert mongo.is_connected()

    def test_connect_failure(self, client: MagicMock) -> None:
        """Test unreachable servers raise ConnectionError."""
        client.admin.command.side_effect = ServerSelectionTimeoutError("timeout")
        backend = MongoSchemaBackend(MongoBackendConfig(), client=client)
        with pytest.raises(ConnectionError) as exc_info:
            backend.connect()
        assert exc_info.value.backend == "mongo"

    def test_disconnect_keeps_borrowed_client(
        self, mongo: MongoSchemaBackend, client: MagicMock
    ) -> None:
        """Test a client passed in is not closed."""
        mongo.disconnect()
        client.close.assert_not_called()
        assert not mongo.is_connected()

    def test_model_requires_connection(self, client: MagicMock) -> None:
        """Test registration needs a connection."""
        backend = MongoSchemaBackend(MongoBackendConfig(), client=client)
        schema = backend.schema("House", {})
        with pytest.raises(ConnectionError):
            backend.model("House", schema)

    def test_model_creates_indexes(
        self, mongo: MongoSchemaBackend, database: MagicMock
    ) -> None:
        """Test declared indexes are created on the collection."""
        collection = database.__getitem__.return_value
        schema = mongo.schema("House", {"lng": {"type": float}})
        mongo.index(schema, IndexSpec(fields={"lng": 1, "lat": -1}, unique=True))

        model = mongo.model("House", schema)

        database.__getitem__.assert_called_with("House")
        collection.create_index.assert_called_once_with(
            [("lng", 1), ("lat", -1)], unique=True
        )
        assert model.collection is collection
        assert mongo.get_model("House") is model
        database.create_collection.assert_not_called()

    def test_collection_option(
        self, mongo: MongoSchemaBackend, database: MagicMock
    ) -> None:
        """Test the collection schema option names the collection."""
        schema = mongo.schema("Company", {}, {"collection": "companies"})
        mongo.model("Company", schema)
        database.__getitem__.assert_called_with("companies")

    def test_apply_validation(self, client: MagicMock, database: MagicMock) -> None:
        """Test compiled schemas become collection validators."""
        backend = MongoSchemaBackend(
            MongoBackendConfig(apply_validation=True), client=client
        )
        backend.connect()
        schema = backend.schema("House", {"lng": {"type": float, "required": True}})
        backend.model("House", schema)

        database.create_collection.assert_called_once()
        args, kwargs = database.create_collection.call_args
        assert args == ("House",)
        assert kwargs["validator"]["$jsonSchema"]["required"] == ["lng"]

    def test_apply_validation_existing_collection(
        self, client: MagicMock, database: MagicMock
    ) -> None:
        """Test existing collections are modified in place."""
        database.list_collection_names.return_value = ["House"]
        backend = MongoSchemaBackend(
            MongoBackendConfig(apply_validation=True), client=client
        )
        backend.connect()
        backend.model("House", backend.schema("House", {}))

        database.command.assert_called_once()
        assert database.command.call_args.args[:2] == ("collMod", "House")

    def test_registration_failure(
        self, mongo: MongoSchemaBackend, database: MagicMock
    ) -> None:
        """Test driver errors raise SchemaRegistrationError."""
        collection = database.__getitem__.return_value
        collection.create_index.side_effect = OperationFailure("duplicate key")
        schema = mongo.schema("House", {})
        mongo.index(schema, IndexSpec(fields={"lng": 1}, unique=True))

        with pytest.raises(SchemaRegistrationError) as exc_info:
            mongo.model("House", schema)
        assert exc_info.value.schema_name == "House"


def test_index_keys() -> None:
    """Test direction names map to pymongo constants."""
    index = IndexSpec(fields={"a": "asc", "b": "DESC", "c": 1, "d": "text"})
    assert index_keys(index) == [
        ("a", ASCENDING),
        ("b", DESCENDING),
        ("c", 1),
        ("d", "text"),
    ]


class TestToJsonSchema:
    """Test $jsonSchema translation."""

    def test_scalars(self) -> None:
        """Test storage types map to BSON types."""
        schema = to_json_schema(
            {
                "lng": {"type": float, "required": True},
                "name": {"type": str, "enum": ["a", "b"]},
                "active": {"type": bool},
                "seen": {"type": datetime},
                "owner": {"type": ObjectId, "ref": "Person"},
            }
        )
        properties = schema["properties"]
        assert schema["bsonType"] == "object"
        assert schema["required"] == ["lng"]
        assert properties["lng"]["bsonType"] == ["double", "int", "long", "decimal"]
        assert properties["name"] == {"bsonType": "string", "enum": ["a", "b"]}
        assert properties["active"] == {"bsonType": "bool"}
        assert properties["seen"] == {"bsonType": "date"}
        assert properties["owner"] == {"bsonType": "objectId"}

    def test_arrays_and_embedded(self) -> None:
        """Test lists and nested maps become array and object schemas."""
        schema = to_json_schema(
            {
                "tags": {"type": [str]},
                "houses": [{"lng": {"type": float}}],
                "address": {"city": {"type": str, "required": True}},
                "friends": [{"type": ObjectId, "ref": "Person"}],
            }
        )
        properties = schema["properties"]
        assert properties["tags"] == {"bsonType": "array", "items": {"bsonType": "string"}}
        assert properties["houses"]["items"]["bsonType"] == "object"
        assert properties["address"]["required"] == ["city"]
        assert properties["friends"]["items"] == {"bsonType": "objectId"}
        assert "required" not in schema

    def test_wrapped_embedded(self) -> None:
        """Test embedded maps carrying facets keep their required flag."""
        schema = to_json_schema(
            {"home": {"type": {"city": {"type": str}}, "required": True}}
        )
        assert schema["required"] == ["home"]
        assert schema["properties"]["home"]["bsonType"] == "object"

    def test_unknown_types_accept_anything(self) -> None:
        """Test unmapped types produce an open schema."""
        schema = to_json_schema({"payload": {"type": "Mixed"}})
        assert schema["properties"]["payload"] == {}
