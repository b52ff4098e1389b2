"""CSV log of sample records."""

import csv
import logging

from pymon.models import SampleRecord

logger = logging.getLogger(__name__)

CSV_HEADER = ["Timestamp", "CPU Usage (%)", "Memory Usage (%)", "Disk Usage (%)"]


class CsvRecorder:
    """
    Append-only CSV log of sample records.

    The file is truncated and given a header row on construction. Each
    append reopens the file, so a log rotated or truncated by someone else
    between cycles is picked up on the next write.
    """

    def __init__(self, path: str) -> None:
        """
        Create (or truncate) the log and write the header row.

        Raises:
            OSError: If the log destination cannot be created.
        """
        self._path = path
        with open(path, "w", newline="", encoding="utf-8") as f:
            csv.writer(f, lineterminator="\n").writerow(CSV_HEADER)
        logger.debug("Logging samples to %s", path)

    @property
    def path(self) -> str:
        return self._path

    def append(self, record: SampleRecord) -> None:
        with open(self._path, "a", newline="", encoding="utf-8") as f:
            csv.writer(f, lineterminator="\n").writerow(record.csv_row())
