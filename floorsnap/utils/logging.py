import logging

from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class FileLoggingContext:
    """Context manager that mirrors all logging of a run into a log file.

    The file handler is attached to the root logger, so every module's
    `console_logger` is captured without extra setup.
    """

    def __init__(self, log_file_path: Path, suppress_stdout: bool = False):
        """
        Args:
            log_file_path: Path of the run log file. Parent dirs are created.
            suppress_stdout: If True, console handlers are detached while the
                context is active.
        """
        self.log_file_path = Path(log_file_path)
        self.suppress_stdout = suppress_stdout
        self.file_handler = None
        self.original_handlers = []

    def __enter__(self):
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        self.file_handler = logging.FileHandler(self.log_file_path)
        self.file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

        root_logger = logging.getLogger()
        if self.suppress_stdout:
            self.original_handlers = root_logger.handlers[:]
            for handler in self.original_handlers:
                root_logger.removeHandler(handler)
        root_logger.addHandler(self.file_handler)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        root_logger = logging.getLogger()
        if self.file_handler in root_logger.handlers:
            root_logger.removeHandler(self.file_handler)

        # Restore console handlers detached on entry.
        for handler in self.original_handlers:
            if handler not in root_logger.handlers:
                root_logger.addHandler(handler)
        self.original_handlers = []

        if self.file_handler:
            self.file_handler.close()
            self.file_handler = None
