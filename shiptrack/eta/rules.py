"""
Rule Store - Load and cache the ETA rule table

The rule table is tabular data (header row + data rows):

    carrier,priority,match_type,match_value,eta_min_business_days,eta_max_business_days,eta_label,note
    postnord,10,contains,utdelning,0,1,Today or tomorrow,
    postnord,20,regex,^sorter(ad|ing),1,2,,Sorted at terminal

Rows are grouped by carrier and sorted by ascending priority; rows sharing a
priority keep their configuration order. Lower priority numbers are
evaluated first and the first matching rule wins.
"""

import csv
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Union

from ..models import DEFAULT_RULE_PRIORITY, MatchType, Rule

logger = logging.getLogger(__name__)


REQUIRED_COLUMNS = ("carrier", "match_value")

# Column names used by older rule files
COLUMN_ALIASES = {
    "eta_label_sv": "eta_label",
    "note_sv": "note",
}


class ConfigLoadError(Exception):
    """Raised when the rule source cannot be read or is malformed"""
    pass


class MalformedRuleRow(Exception):
    """Raised for a single rule row that cannot be used"""
    pass


class RuleSource(Protocol):
    """Anything that can produce the raw rule table"""

    def read_rows(self) -> List[List[str]]:
        """Return the header row followed by data rows"""
        ...


class CsvRuleSource:
    """Rule table stored as a CSV file"""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    def read_rows(self) -> List[List[str]]:
        try:
            text = self.path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(f"Cannot read rule file {self.path}: {e}")
        return parse_csv(text)

    def __repr__(self) -> str:
        return f"CsvRuleSource({str(self.path)!r})"


class InlineRuleSource:
    """Rule table already held in memory (header row first)"""

    def __init__(self, rows: Iterable[Sequence[str]]):
        self._rows = [list(r) for r in rows]

    def read_rows(self) -> List[List[str]]:
        return [list(r) for r in self._rows]

    def __repr__(self) -> str:
        return f"InlineRuleSource({len(self._rows)} rows)"


def parse_csv(text: str) -> List[List[str]]:
    """
    Split CSV text into trimmed rows.

    Strips a UTF-8 BOM, normalizes line endings and skips blank lines.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [line for line in text.split("\n") if line.strip()]

    try:
        return [[cell.strip() for cell in row] for row in csv.reader(lines)]
    except csv.Error as e:
        raise ConfigLoadError(f"Invalid CSV in rule table: {e}")


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer cell, None when empty or non-numeric"""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        try:
            number = float(value)
        except ValueError:
            return None
        return int(number) if number.is_integer() else None


class RuleStore:
    """
    Owns the ETA rule table for the lifetime of the instance.

    The table is read from the source on the first call to load_rules()
    and served from memory afterwards. A failed load is not cached, so a
    later call retries the source.

    Example:
        store = RuleStore(CsvRuleSource("eta_rules.csv"))
        rules = store.load_rules()
        postnord_rules = store.rules_for("postnord")
    """

    def __init__(self, source: RuleSource, default_priority: int = DEFAULT_RULE_PRIORITY):
        self.source = source
        self.default_priority = default_priority
        self._rules: Optional[List[Rule]] = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._rules is not None

    def load_rules(self) -> List[Rule]:
        """
        Return the ordered rule table, loading it on first use.

        Raises:
            ConfigLoadError: If the source is unreadable or has no data rows
        """
        if self._rules is not None:
            return list(self._rules)

        with self._lock:
            if self._rules is None:
                self._rules = self._load()
        return list(self._rules)

    def rules_for(self, carrier: str) -> List[Rule]:
        """Rules for one carrier in evaluation order"""
        wanted = (carrier or "").strip().lower()
        return [r for r in self.load_rules() if r.carrier == wanted]

    def _load(self) -> List[Rule]:
        rows = self.source.read_rows()
        if len(rows) < 2:
            raise ConfigLoadError(
                f"Rule table from {self.source!r} needs a header and at least one data row"
            )

        header = [COLUMN_ALIASES.get(h.strip().lower(), h.strip().lower()) for h in rows[0]]
        missing = [c for c in REQUIRED_COLUMNS if c not in header]
        if missing:
            raise ConfigLoadError(
                f"Rule table from {self.source!r} is missing columns: {', '.join(missing)}"
            )

        rules: List[Rule] = []
        for line_no, cells in enumerate(rows[1:], start=2):
            record = {name: (cells[i] if i < len(cells) else "") for i, name in enumerate(header)}
            try:
                rules.append(self._parse_row(record))
            except MalformedRuleRow as e:
                logger.warning(f"Skipping rule row {line_no}: {e}")

        # Stable sort keeps configuration order for equal priorities
        rules.sort(key=lambda r: (r.carrier.casefold(), r.priority))

        carriers = sorted({r.carrier for r in rules})
        logger.info(f"Loaded {len(rules)} ETA rules for carriers {carriers} from {self.source!r}")
        return rules

    def _parse_row(self, record: Dict[str, str]) -> Rule:
        carrier = record.get("carrier", "").strip().lower()
        match_value = record.get("match_value", "").strip()
        if not carrier:
            raise MalformedRuleRow("carrier is empty")
        if not match_value:
            raise MalformedRuleRow("match_value is empty")

        priority = _parse_int(record.get("priority"))
        if priority is None:
            priority = self.default_priority

        match_type = record.get("match_type", "").strip().lower() or MatchType.CONTAINS.value

        days = {}
        for column in ("eta_min_business_days", "eta_max_business_days"):
            raw = record.get(column, "").strip()
            value = _parse_int(raw)
            if value is None and raw:
                raise MalformedRuleRow(f"{column} is not a number: {raw!r}")
            days[column] = value or 0

        return Rule(
            carrier=carrier,
            priority=priority,
            match_type=match_type,
            match_value=match_value,
            eta_min_business_days=days["eta_min_business_days"],
            eta_max_business_days=days["eta_max_business_days"],
            eta_label=record.get("eta_label", "").strip() or None,
            note=record.get("note", "").strip() or None,
        )
