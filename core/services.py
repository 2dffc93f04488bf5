# core/services.py

"""Wiring of the launcher services from a Config."""
import logging
from typing import Optional

from core.aggregator import ResultAggregator
from core.catalog import AppCatalog
from core.clipboard import ClipboardHistory
from core.config import Config
from core.file_index import FileIndex, StatusCallback
from core.usage import UsageTracker
from utils.i18n import translator as t

logger = logging.getLogger(__name__)

def build_aggregator(config: Config, on_status: Optional[StatusCallback] = None,
                     **collaborators) -> ResultAggregator:
    """Create the catalog, usage tracker, file index and clipboard history.

    Nothing is started; see start_background().
    """
    catalog = AppCatalog()
    usage = UsageTracker(config.data_path('usage.json'))
    file_index = FileIndex(on_status=on_status,
                           extra_roots=config.get('extra_index_roots', []))
    clipboard = ClipboardHistory(config.data_path('clipboard.json'),
                                 max_size=int(config.get('clipboard_max_entries', 50)))
    return ResultAggregator(catalog, usage, file_index, clipboard, **collaborators)

def start_background(aggregator: ResultAggregator, config: Config):
    """Start the initial file scan and clipboard capture."""
    aggregator.file_index.start()
    aggregator.clipboard.start_polling(float(config.get('clipboard_poll_interval', 1.0)))
    logger.info("Background services started")

def stop_background(aggregator: ResultAggregator):
    aggregator.clipboard.stop_polling()
    aggregator.usage.flush()

def onboarding_message(config: Config) -> str:
    """Welcome text for the first start; marks onboarding as done."""
    if not config.is_first_run():
        return ''
    if not config.complete_onboarding():
        logger.debug("Could not persist onboarding state to %s", config.config_file)
    return t.get('first_run_notice', config.get('hotkey'))
