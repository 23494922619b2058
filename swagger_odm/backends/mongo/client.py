"""MongoDB schema backend implementation."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from swagger_odm.backends.mongo.validation import to_json_schema
from swagger_odm.core.config import MongoBackendConfig
from swagger_odm.core.exceptions import ConnectionError, SchemaRegistrationError
from swagger_odm.core.interfaces import SchemaBackend
from swagger_odm.core.models import DocumentModel, DocumentSchema, IndexSpec

logger = logging.getLogger(__name__)

_DIRECTIONS = {
    "asc": ASCENDING,
    "ascending": ASCENDING,
    "desc": DESCENDING,
    "descending": DESCENDING,
}


def index_keys(index: IndexSpec) -> List[Tuple[str, Any]]:
    """Convert an index spec into pymongo ``(field, direction)`` pairs."""
    keys = []
    for field_name, direction in index.fields.items():
        if isinstance(direction, str):
            direction = _DIRECTIONS.get(direction.lower(), direction)
        keys.append((field_name, direction))
    return keys


class MongoSchemaBackend(SchemaBackend):
    """
    MongoDB implementation of the schema backend.

    Each registered model is bound to a collection. Declared indexes are
    created on that collection and, when enabled, the compiled property map
    is installed as the collection's ``$jsonSchema`` validator.
    """

    def __init__(
        self,
        config: MongoBackendConfig,
        client: Optional[MongoClient] = None,
    ) -> None:
        """
        Initialize MongoDB backend.

        Args:
            config: MongoDB configuration
            client: Existing client to use instead of creating one
        """
        self._config = config
        self._client = client
        self._owns_client = client is None
        self._db: Optional[Database] = None
        self._models: Dict[str, DocumentModel] = {}
        self._connected = False

    def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            if self._client is None:
                self._client = MongoClient(
                    self._config.uri,
                    serverSelectionTimeoutMS=self._config.server_selection_timeout_ms,
                )
            # Verify connectivity
            self._client.admin.command("ping")
            self._db = self._client[self._config.database]
            self._connected = True
            logger.info(f"Connected to MongoDB at {self._config.uri}")
        except PyMongoError as e:
            raise ConnectionError(
                f"Failed to connect to MongoDB: {e}",
                backend="mongo",
                details={"uri": self._config.uri},
            )

    def disconnect(self) -> None:
        """Close connection to MongoDB."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
        self._db = None
        self._connected = False
        logger.info("Disconnected from MongoDB")

    def is_connected(self) -> bool:
        """Check if connected to MongoDB."""
        return self._connected and self._db is not None

    def _get_database(self) -> Database:
        if not self.is_connected():
            raise ConnectionError("Not connected to MongoDB", backend="mongo")
        return self._db

    def schema(
        self,
        name: str,
        definition: Dict[str, Any],
        options: Optional[Dict[str, Any]] = None,
    ) -> DocumentSchema:
        """Wrap a compiled property map in a schema handle."""
        return DocumentSchema(name=name, definition=definition, options=options or {})

    def index(self, schema: DocumentSchema, index: IndexSpec) -> None:
        """Record an index; it is created when the model is registered."""
        schema.indexes.append(index)

    def model(self, name: str, schema: DocumentSchema) -> DocumentModel:
        """Bind a schema to its collection, creating indexes and validators."""
        db = self._get_database()
        collection_name = schema.options.get("collection") or name

        try:
            if self._config.apply_validation:
                self._apply_validator(db, collection_name, schema)

            collection = db[collection_name]
            if self._config.create_indexes:
                for index in schema.indexes:
                    index_name = collection.create_index(
                        index_keys(index), unique=index.unique
                    )
                    logger.debug(f"Created index {index_name} on {collection_name}")
        except PyMongoError as e:
            raise SchemaRegistrationError(
                f"Failed to register model {name}: {e}",
                schema_name=name,
                details={"collection": collection_name},
            )

        model = DocumentModel(name=name, schema=schema, collection=collection)
        self._models[name] = model
        logger.info(f"Registered model {name} on collection {collection_name}")
        return model

    def _apply_validator(
        self, db: Database, collection_name: str, schema: DocumentSchema
    ) -> None:
        validator = {"$jsonSchema": to_json_schema(schema.definition)}
        if collection_name in db.list_collection_names():
            db.command("collMod", collection_name, validator=validator)
        else:
            db.create_collection(collection_name, validator=validator)

    def get_model(self, name: str) -> Optional[DocumentModel]:
        """Retrieve a registered model by name."""
        return self._models.get(name)

    def list_models(self) -> List[str]:
        """Names of all registered models."""
        return list(self._models.keys())
