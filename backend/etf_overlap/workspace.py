"""The set of comparison tabs, their persistence and import/export."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from . import config
from .comparison import copy_fund, find_fund
from .errors import InvalidImportError, LastTabError, TabNotFoundError
from .models import ComparisonSet, Fund
from .schemas import (
    ExportDocument,
    FundRecord,
    TabRecord,
    dump_record,
    tab_from_record,
    tab_to_record,
)
from .storage import Storage

logger = logging.getLogger(__name__)


def default_tab() -> ComparisonSet:
    return ComparisonSet(id=config.DEFAULT_TAB_ID, name=config.TAB_NAME_TEMPLATE.format(number=1))


class Workspace:
    """Ordered comparison tabs. There is always at least one tab."""

    def __init__(self, tabs: Optional[list[ComparisonSet]] = None) -> None:
        self.tabs: list[ComparisonSet] = tabs if tabs else [default_tab()]

    def get_tab(self, tab_id: str) -> ComparisonSet:
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        raise TabNotFoundError(tab_id)

    def _next_tab_id(self) -> str:
        used = {tab.id for tab in self.tabs}
        number = len(self.tabs) + 1
        while f"tab{number}" in used:
            number += 1
        return f"tab{number}"

    def add_tab(self) -> ComparisonSet:
        tab = ComparisonSet(
            id=self._next_tab_id(),
            name=config.TAB_NAME_TEMPLATE.format(number=len(self.tabs) + 1),
        )
        self.tabs.append(tab)
        return tab

    def close_tab(self, tab_id: str) -> ComparisonSet:
        """Remove a tab and its funds.

        Raises:
            LastTabError: If it is the only tab left.
            TabNotFoundError: If no tab has `tab_id`.
        """
        tab = self.get_tab(tab_id)
        if len(self.tabs) <= 1:
            raise LastTabError()
        self.tabs.remove(tab)
        logger.info(f"Closed comparison '{tab.name}' with {len(tab.funds)} ETFs")
        return tab

    def rename_tab(self, tab_id: str, name: str) -> ComparisonSet:
        """Rename a tab. Blank names are ignored."""
        tab = self.get_tab(tab_id)
        name = (name or "").strip()
        if name:
            tab.name = name
        return tab

    def copy_fund_to_tab(self, source_tab_id: str, fund_name: str, destination_tab_id: str) -> Fund:
        """Copy a fund into another tab, replacing a same-named fund there."""
        fund = find_fund(self.get_tab(source_tab_id), fund_name)
        destination = self.get_tab(destination_tab_id)
        logger.info(f"Copying {fund_name} from {source_tab_id} to {destination_tab_id}")
        return copy_fund(fund, destination)

    def reset(self) -> None:
        self.tabs = [default_tab()]

    def to_record(self) -> list[dict]:
        return [dump_record(tab_to_record(tab)) for tab in self.tabs]

    @classmethod
    def from_record(cls, record: list[Any]) -> "Workspace":
        tabs = [tab_from_record(TabRecord.model_validate(tab)) for tab in record]
        return cls(tabs)

    def export_document(self, now: Optional[datetime] = None) -> dict:
        """Build the export document with every tab and fund."""
        document = ExportDocument(
            version=config.EXPORT_VERSION,
            export_date=now or datetime.now(timezone.utc),
            tabs=[tab_to_record(tab) for tab in self.tabs],
        )
        return dump_record(document)

    def import_document(self, document: Any) -> int:
        """Replace every tab with those of an exported document.

        Returns:
            Number of tabs imported.

        Raises:
            InvalidImportError: If the document is not a valid export. The
                workspace is unchanged in that case.
        """
        tabs = document.get("tabs") if isinstance(document, dict) else None
        if not isinstance(tabs, list):
            raise InvalidImportError("missing tabs array")

        if not all(
            isinstance(tab, dict) and tab.get("id") and tab.get("name") and isinstance(tab.get("etfs"), list)
            for tab in tabs
        ):
            raise InvalidImportError("invalid tab structure")

        try:
            imported = [tab_from_record(TabRecord.model_validate(tab)) for tab in tabs]
        except ValidationError as e:
            raise InvalidImportError(f"invalid ETF data ({e.error_count()} errors)") from e

        self.tabs = imported or [default_tab()]
        logger.info(f"Imported {len(imported)} tabs")
        return len(imported)


class WorkspaceStore:
    """Loads and saves a workspace through a storage collaborator."""

    def __init__(self, storage: Storage, key: str = config.STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def _migrate_legacy(self) -> None:
        """Move funds saved before tabs existed into a default tab."""
        legacy = self.storage.load(config.LEGACY_STORAGE_KEY)
        if legacy is None or self.storage.load(self.key) is not None:
            return

        try:
            funds = [FundRecord.model_validate(fund) for fund in legacy]
        except (TypeError, ValidationError) as e:
            logger.warning(f"Could not migrate legacy ETF data: {e}")
            return

        tab = TabRecord(id=config.DEFAULT_TAB_ID, name=config.TAB_NAME_TEMPLATE.format(number=1), etfs=funds)
        self.storage.save(self.key, [dump_record(tab)])
        self.storage.remove(config.LEGACY_STORAGE_KEY)
        logger.info(f"Migrated {len(funds)} legacy ETFs into '{tab.name}'")

    def load(self) -> Workspace:
        self._migrate_legacy()
        record = self.storage.load(self.key)
        if record is None:
            return Workspace()

        try:
            return Workspace.from_record(record)
        except (TypeError, ValidationError) as e:
            logger.warning(f"Stored workspace '{self.key}' is unreadable, starting fresh: {e}")
            return Workspace()

    def save(self, workspace: Workspace) -> None:
        self.storage.save(self.key, workspace.to_record())

    def wipe(self, workspace: Workspace) -> None:
        """Delete all stored data and reset to a single empty tab."""
        self.storage.remove(self.key)
        self.storage.remove(config.LEGACY_STORAGE_KEY)
        workspace.reset()
        self.save(workspace)
        logger.info("Wiped all ETF data")
