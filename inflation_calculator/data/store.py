"""JSON artifact store for the static data directory served to pages."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from inflation_calculator.models import CurrencySeriesRecord


logger = logging.getLogger(__name__)


class JsonFileStore:
    """Reads and writes JSON artifacts under one directory.

    Every write replaces the whole file. Files are written to a temporary
    sibling first and moved into place, so readers never see a partial file.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.output_dir / filename

    def write_json(self, filename: str, payload: Any) -> Path:
        """Atomically write a JSON document and return its path."""
        target = self.path_for(filename)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.output_dir, prefix=f".{target.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Wrote {target}")
        return target

    def read_json(self, filename: str) -> Any | None:
        target = self.path_for(filename)
        if not target.exists():
            return None
        with open(target, encoding="utf-8") as f:
            return json.load(f)

    def write_record(self, filename: str, record: CurrencySeriesRecord) -> Path:
        return self.write_json(filename, record.to_dict())

    def read_record(self, filename: str) -> CurrencySeriesRecord | None:
        payload = self.read_json(filename)
        if payload is None:
            return None
        return CurrencySeriesRecord.from_dict(payload)

    def list_records(self) -> dict[str, dict]:
        """Summaries of every currency record file in the directory."""
        status = {}
        for path in sorted(self.output_dir.glob("*-inflation*.json")):
            try:
                record = self.read_record(path.name)
            except (ValueError, KeyError) as e:
                logger.warning(f"Unreadable record {path.name}: {e}")
                continue
            if record is None:
                continue
            status[path.name] = {
                "currency": record.currency,
                "earliest": record.earliest,
                "latest": record.latest,
                "years": len(record.data),
                "last_updated": record.last_updated,
                "source": record.source,
            }
        return status
