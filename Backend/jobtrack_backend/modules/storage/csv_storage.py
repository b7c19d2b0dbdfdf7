import asyncio
import logging
import os
import shutil
from dataclasses import fields
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Type, TypeVar

import pandas as pd

from jobtrack_backend.modules.storage.base import StorageService

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CSVStorageService(StorageService):
    """Base class for CSV-based storage models"""

    def __init__(self, file_path: str, key_column: str, data_class: Type[T], backup_enabled: bool = False):
        """Initialize CSV storage

        Args:
            file_path: Path to CSV file
            key_column: Name of the column to use as primary key
            data_class: Dataclass type representing one row
            backup_enabled: Whether to enable periodic backups
        """
        self.file_path = Path(file_path)
        self.key_column = key_column
        self.columns = [f.name for f in fields(data_class)]
        self._backup_task = None
        self._backup_enabled = backup_enabled
        self._ensure_file_exists()

    def _ensure_file_exists(self):
        """Create file if it doesn't exist"""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.file_path.exists() or self.file_path.stat().st_size == 0:
            pd.DataFrame(columns=self.columns).to_csv(self.file_path, index=False)
            logger.info(f"Created new CSV file: {self.file_path}")

    def _read_df(self) -> pd.DataFrame:
        """Read CSV file into DataFrame. All columns are read as strings."""
        try:
            df = pd.read_csv(
                self.file_path,
                dtype={col: str for col in self.columns},
                na_values=[''],
                keep_default_na=False
            )
            return df.fillna('')
        except FileNotFoundError:
            return pd.DataFrame(columns=self.columns)
        except Exception as e:
            logger.error(f"Error reading CSV file {self.file_path}: {e}")
            return pd.DataFrame(columns=self.columns)

    def _write_df(self, df: pd.DataFrame):
        """Write DataFrame to CSV file.

        The frame goes to a sibling temp file first and replaces the original,
        so readers in other processes never see a half-written file.
        """
        tmp_path = self.file_path.with_name(f".{self.file_path.name}.tmp")
        df.to_csv(tmp_path, index=False)
        os.replace(tmp_path, self.file_path)

    def _upsert(self, df: pd.DataFrame, key: str, value: Dict, now: str) -> pd.DataFrame:
        value = {col: val for col, val in value.items() if col in self.columns}
        value[self.key_column] = key
        value['date_updated'] = now

        mask = (df[self.key_column] == key)
        if mask.any():
            row_idx = df.index[mask][0]
            for col, val in value.items():
                if col != 'date_created':
                    df.at[row_idx, col] = val
            return df

        value['date_created'] = value.get('date_created') or now
        new_row = pd.DataFrame([value], columns=self.columns).fillna('')
        if df.empty:
            return new_row
        return pd.concat([df, new_row], ignore_index=True)

    async def start_backup_scheduler(self, interval: int = 3600):
        """Start the backup scheduler

        Args:
            interval: Backup interval in seconds (default: 1 hour)
        """
        if not self._backup_enabled:
            logger.info(f"Backup not enabled for {self.file_path}")
            return

        if self._backup_task is None:
            self._backup_task = asyncio.create_task(self._backup_periodically(interval))
            logger.info(f"Started backup scheduler for {self.file_path}")

    def stop_backup_scheduler(self):
        if self._backup_task is not None:
            self._backup_task.cancel()
            self._backup_task = None
            logger.info(f"Stopped backup scheduler for {self.file_path}")

    async def _backup_periodically(self, interval: int):
        while True:
            try:
                self._create_backup()
            except OSError as e:
                logger.error(f"Failed to create backup of {self.file_path}: {e}")
            await asyncio.sleep(interval)

    def _create_backup(self) -> Optional[Path]:
        """Copy the file aside and keep only the 2 most recent backups"""
        if not self.file_path.exists():
            return None

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        backup_path = self.file_path.with_name(f"{self.file_path.name}.{timestamp}.bak")
        shutil.copy2(self.file_path, backup_path)
        logger.info(f"Created backup: {backup_path}")

        backups = sorted(self.file_path.parent.glob(f"{self.file_path.name}.*.bak"))
        for old_backup in backups[:-2]:
            old_backup.unlink()
            logger.info(f"Removed old backup: {old_backup}")
        return backup_path

    async def get(self, key: str) -> Optional[Dict]:
        """Get a single row by key"""
        df = self._read_df()
        row = df[df[self.key_column] == key]
        if len(row) == 0:
            return None
        return row.iloc[0].to_dict()

    async def set(self, key: str, value: Dict) -> None:
        """Insert or update a single row"""
        df = self._upsert(self._read_df(), key, dict(value), datetime.now().isoformat())
        self._write_df(df)

    async def set_many(self, values: Dict[str, Dict]) -> None:
        """Insert or update several rows with a single file write"""
        now = datetime.now().isoformat()
        df = self._read_df()
        for key, value in values.items():
            df = self._upsert(df, key, dict(value), now)
        self._write_df(df)

    async def delete(self, key: str) -> bool:
        df = self._read_df()
        mask = (df[self.key_column] == key)
        if not mask.any():
            return False
        self._write_df(df[~mask])
        return True

    async def query(self, filter_params: Dict = None) -> List[Dict]:
        """Query rows with optional equality filters"""
        df = self._read_df()

        if filter_params:
            for col, value in filter_params.items():
                if col in df.columns:
                    df = df[df[col] == value]

        return df.to_dict('records')

    async def get_all(self) -> List[Dict]:
        return self._read_df().to_dict('records')
