"""
cz2epg.progress - Progress reporting

The pipeline reports through a ProgressReporter; the default one is silent,
LoggingProgress writes percentage milestones to the log.
"""

import logging


class ProgressReporter:
    """Silent progress reporter; subclasses override the hooks they need"""

    def start(self, title: str, total: int):
        pass

    def advance(self, label: str = ""):
        pass

    def finish(self):
        pass


class LoggingProgress(ProgressReporter):
    """Logs progress every 5% (20 intervals)"""

    def __init__(self):
        self.title = ""
        self.total = 0
        self.current = 0
        self.last_logged = 0

    def start(self, title: str, total: int):
        self.title = title
        self.total = total
        self.current = 0
        self.last_logged = 0
        logging.info("%s: %d items", title, total)

    def advance(self, label: str = ""):
        self.current += 1
        interval = max(1, self.total // 20)

        if self.current - self.last_logged >= interval or self.current == self.total:
            percent = round(self.current / self.total * 100) if self.total > 0 else 100
            if label:
                logging.info(
                    "%s progress: %d/%d (%d%%) - %s",
                    self.title, self.current, self.total, percent, label,
                )
            else:
                logging.info(
                    "%s progress: %d/%d (%d%%)", self.title, self.current, self.total, percent
                )
            self.last_logged = self.current

    def finish(self):
        logging.info("%s completed: %d/%d", self.title, self.current, self.total)
