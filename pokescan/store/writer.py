"""CSV scan history with a fixed header."""

import csv
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.constants import SCAN_HISTORY_HEADER
from ..core.types import ScanResult
from ..pricing.normalizer import summarize_prices
from ..utils.helpers import generate_card_id
from ..utils.log import get_logger


def _cell(value: Any) -> Any:
    return "" if value is None else value


class ScanHistoryWriter:
    """Appends one row per completed scan to a daily CSV file."""

    FIXED_HEADER = list(SCAN_HISTORY_HEADER)

    def __init__(self, output_dir: Union[str, Path]):
        self.logger = get_logger(__name__)
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def get_daily_csv_path(self, day: Optional[datetime] = None) -> Path:
        """cards_YYYYMMDD.csv inside the output directory."""
        filename = f"cards_{(day or datetime.now()).strftime('%Y%m%d')}.csv"
        return self.output_dir / filename

    def build_row(self, result: ScanResult, source_image_uri: str = "") -> Dict[str, Any]:
        """Build a row dictionary with columns in header order."""
        info = result.card_info
        validated = result.validated_card
        summary = summarize_prices(result.prices)
        sources = result.prices.sources if result.prices else []

        return {
            "timestamp_iso": result.scan_time.isoformat(),
            "card_id": validated.card_id if validated else generate_card_id(info.name, info.set_number),
            "name": validated.name if validated else info.name,
            "set_number": info.set_number,
            "set_name": validated.set_name if validated else (info.set_name or ""),
            "hp": info.hp,
            "type": info.type,
            "rarity": (validated.rarity if validated and validated.rarity else info.rarity),
            "validated": validated is not None,
            "is_authentic": result.authenticity.is_authentic,
            "confidence": round(result.authenticity.confidence, 4),
            "market_usd": _cell(summary.market),
            "low_usd": _cell(summary.low),
            "high_usd": _cell(summary.high),
            "tcgplayer_market_usd": _cell(summary.tcgplayer),
            "alternate_usd": _cell(summary.alternate),
            "alternate_source": _cell(summary.alternate_source),
            "price_sources": json.dumps([s.source for s in sources]),
            "source_image_uri": source_image_uri,
        }

    def write_row(self, row: Dict[str, Any]) -> Path:
        """Append a row, writing the header first when the file is new."""
        csv_path = self.get_daily_csv_path()
        file_exists = csv_path.exists()

        with open(csv_path, 'a', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=self.FIXED_HEADER)
            if not file_exists:
                writer.writeheader()
                self.logger.info("Created new CSV file with header", file=str(csv_path))
            writer.writerow(row)
            f.flush()
            os.fsync(f.fileno())

        self.logger.debug("Row written to CSV", card_id=row.get("card_id"))
        return csv_path

    def record(self, result: ScanResult, source_image_uri: str = "") -> Path:
        return self.write_row(self.build_row(result, source_image_uri))
