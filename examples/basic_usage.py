#!/usr/bin/env python3
"""Basic usage example"""

import tempfile

from treelog import (
    ConsoleAppender,
    FileAppender,
    LoggingConfigBuilder,
    configure_logging,
    get_context,
    use_logger,
)

def main():
    log_dir = tempfile.mkdtemp()

    # Configure appenders and loggers with the builder pattern
    configure_logging(LoggingConfigBuilder()
        .with_appender("CONSOLE", ConsoleAppender, colored=True)
        .with_appender("FILE", FileAppender, level="WARN", file_path=log_dir, base_name="example")
        .with_root("INFO", "CONSOLE")
        .with_logger("example.db", "DEBUG", "CONSOLE", "FILE")
        .build())

    log = use_logger("example")
    db_log = use_logger("example.db")

    # Log messages
    log.trace("This is trace")
    log.debug("This is debug")
    log.info("Application started", {"pid": 42, "args": ["--verbose"]})
    db_log.debug("Connecting to", "localhost", 5432)
    db_log.warn(lambda: "Slow query: " + "SELECT 1")
    db_log.error("Query failed", ValueError("timeout"))

    # Structures referring to themselves are labelled
    node = {"name": "loop"}
    node["self"] = node
    log.info(node)

    # Write pending file output and shut down the worker
    get_context().appenders["FILE"].close()
    print(f"File output in {log_dir}")

if __name__ == "__main__":
    main()
