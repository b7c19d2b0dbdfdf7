import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ValidationError

from jobtrack_backend.config.global_constants import (
    Collection, EXPORT_FIELDS, EXPORT_VERSION, STORAGE_KEYS, SUPPORTED_EXPORT_VERSIONS
)
from jobtrack_backend.modules.errors import ValidationFailure
from jobtrack_backend.modules.models.entities import ENTITY_TYPES, records_from_list
from jobtrack_backend.modules.models.transfer import ExportData, ExportDocument, ImportResult
from jobtrack_backend.modules.persistence.local_backend import parse_daily_goal
from jobtrack_backend.modules.storage.key_value_storage import KeyValueStorage

logger = logging.getLogger(__name__)

COLLECTION_BY_KEY = {collection.storage_key: collection for collection in Collection}


class TransferCodec:
    """Moves the whole local data set in and out of a single JSON document"""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    async def export_document(self, overrides: Optional[Dict[str, Optional[str]]] = None) -> ExportDocument:
        """Snapshot every storage key verbatim.

        Args:
            overrides: Serialized text to use instead of local storage, keyed by
                storage key. Used for collections that live on the remote backend.
        """
        overrides = overrides or {}
        data = {}
        for key, export_field in EXPORT_FIELDS.items():
            if key in overrides:
                data[export_field] = overrides[key]
            else:
                data[export_field] = await self.storage.get_item(key)

        return ExportDocument(
            version=EXPORT_VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
            data=ExportData(**data)
        )

    async def export_json(self, overrides: Optional[Dict[str, Optional[str]]] = None) -> str:
        document = await self.export_document(overrides)
        return document.model_dump_json(indent=2)

    @staticmethod
    def export_filename(day: Optional[datetime] = None) -> str:
        day = day or datetime.now(timezone.utc)
        return f"jobtrack-data-{day.strftime('%Y-%m-%d')}.json"

    async def import_json(self, text: str) -> ImportResult:
        try:
            content = json.loads(text)
        except (TypeError, json.JSONDecodeError) as e:
            raise ValidationFailure(f"Invalid data format: {e}")
        return await self.import_document(content)

    async def import_document(self, content: Any) -> ImportResult:
        """Validate the whole document, then overwrite the keys it carries.

        Nothing is written unless every present value is valid.
        """
        document = self.validate_document(content)

        values = {}
        for key, export_field in EXPORT_FIELDS.items():
            raw = getattr(document.data, export_field)
            if not raw:
                continue
            self._validate_value(key, raw)
            values[key] = raw

        if values:
            await self.storage.set_items(values)
        logger.info(f"Imported {len(values)} keys: {sorted(values)}")
        return ImportResult(keys_written=sorted(values))

    @staticmethod
    def validate_document(content: Any) -> ExportDocument:
        if not isinstance(content, dict) or not content.get('version') or content.get('data') is None:
            raise ValidationFailure("Invalid data format: 'version' and 'data' are required")
        try:
            document = ExportDocument.model_validate(content)
        except ValidationError as e:
            raise ValidationFailure(f"Invalid data format: {e}")
        if document.version not in SUPPORTED_EXPORT_VERSIONS:
            raise ValidationFailure(f"Unsupported export version: {document.version}")
        return document

    @staticmethod
    def _validate_value(key: str, raw: str) -> None:
        if key == STORAGE_KEYS['daily_goal']:
            parse_daily_goal(raw)
            return

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationFailure(f"'{EXPORT_FIELDS[key]}' is not valid JSON: {e}")
        try:
            records = records_from_list(ENTITY_TYPES[COLLECTION_BY_KEY[key]], data)
        except ValidationFailure as e:
            raise ValidationFailure(f"'{EXPORT_FIELDS[key]}' is invalid: {e}")

        ids = [record.id for record in records]
        if len(ids) != len(set(ids)):
            raise ValidationFailure(f"'{EXPORT_FIELDS[key]}' contains duplicate ids")
