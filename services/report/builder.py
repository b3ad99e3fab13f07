"""
ChangeReportBuilder: folds extraction outcomes into a change set and renders
the commit message and the notification message.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from core import constants
from core.logger import get_logger
from models.report import ChangeReport, ChangeSet, FailedDownload
from models.sourcemap import ExtractionOutcome
from services.report import formatters

logger = get_logger(__name__)

BLOCK_OPEN_LINE = f"\n{constants.BLOCK_OPEN}"
BLOCK_CLOSE_LINE = constants.BLOCK_CLOSE


class ChangeReportBuilder:
    """
    Builds the two report texts of a run.

    Both share one line sequence: the commit message drops the <pre> markers,
    the notification message drops the header line and keeps the markers for
    HTML rendering.
    """

    def collect(self, outcomes: Iterable[ExtractionOutcome]) -> ChangeSet:
        change_set = ChangeSet()
        sources = {}

        for outcome in outcomes:
            if not outcome.success:
                change_set.failed.append(
                    FailedDownload(url=outcome.url, error=outcome.error or "Unknown error")
                )
                continue

            for file in outcome.changed_files:
                if file.path in sources and sources[file.path] != outcome.url:
                    logger.warning(
                        f"[REPORT] {file.path} is written by several sourcemaps, keeping the last one",
                        context={"previous": sources[file.path], "current": outcome.url},
                    )
                sources[file.path] = outcome.url
                change_set.changed[file.path] = file.previous_modified

        return change_set

    def render_lines(self, change_set: ChangeSet, now: Optional[datetime] = None) -> List[str]:
        changed_count = len(change_set.changed)
        lines = [constants.COMMIT_HEADER_TEMPLATE.format(count=changed_count)]

        if changed_count > 0:
            lines.append(f"\nChanged files ({changed_count}):")
            lines.append(BLOCK_OPEN_LINE)
            for path in sorted(change_set.changed, key=formatters.path_sort_key):
                lines.append(
                    formatters.format_changed_line(path, change_set.changed[path], now)
                )
            lines.append(BLOCK_CLOSE_LINE)

        if change_set.failed:
            lines.append(f"\nFailed downloads ({len(change_set.failed)}):")
            lines.append(BLOCK_OPEN_LINE)
            for failure in change_set.failed:
                lines.append(formatters.format_failed_line(failure.url, failure.error))
            lines.append(BLOCK_CLOSE_LINE)

        return lines

    def build(self, outcomes: Iterable[ExtractionOutcome], now: Optional[datetime] = None) -> ChangeReport:
        change_set = self.collect(outcomes)
        lines = self.render_lines(change_set, now)

        commit_message = (
            "\n".join(lines)
            .replace(BLOCK_OPEN_LINE, "")
            .replace(f"\n{BLOCK_CLOSE_LINE}", "")
        )
        notification_message = "\n".join(lines[1:])

        return ChangeReport(
            commit_message=commit_message,
            notification_message=notification_message,
            changed_count=len(change_set.changed),
            failed_count=len(change_set.failed),
        )
