#!/usr/bin/env python3
"""
ReAct Calendar Agent
Main Entry Point

Runs scheduling requests through the pipeline from the command line,
lists stored events and reasoning logs, consumes the calendar event
stream, or starts the HTTP API.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import get_settings, configure_logging, Settings
from src.core.pipeline import RequestValidationError, build_pipeline
from src.data.database import init_db, get_statistics, EventStore, AuditLogStore
from src.data.stream import EventStreamConsumer

logger = logging.getLogger("ReActCalendarAgent")


def print_banner():
    """Print startup banner."""
    print("\n" + "=" * 70)
    print("📅 REACT CALENDAR AGENT")
    print("    Think / Act / Observe scheduling pipeline")
    print("=" * 70 + "\n")


def print_records(title: str, records: List[Dict[str, Any]]):
    """Print stored rows as indented JSON."""
    print(f"\n{title} ({len(records)})")
    for record in records:
        print(json.dumps(record, indent=2))


def process(settings: Settings, email: str, query: str) -> int:
    """Process a single request and print the transport record."""
    pipeline = build_pipeline(settings)
    try:
        result = pipeline.handle(email, query)
    except RequestValidationError as e:
        logger.error(f"❌ {e}")
        return 2
    finally:
        if pipeline.publisher is not None:
            pipeline.publisher.close()

    print(json.dumps(result.to_dict(), indent=2))
    for status in result.effects:
        if not status.ok:
            logger.warning(f"  ⚠️  {status.name} skipped: {status.error}")
    return 0


def consume(settings: Settings, max_messages=None) -> int:
    """Log calendar events received from the stream until interrupted."""
    consumer = EventStreamConsumer(
        bootstrap_servers=settings.kafka_bootstrap_servers,
        group_id=settings.kafka_group_id,
        topic=settings.kafka_topic
    )
    logger.info(f"Consuming {settings.kafka_topic} from {settings.kafka_bootstrap_servers}")
    try:
        handled = consumer.run(max_messages=max_messages)
    except KeyboardInterrupt:
        logger.info("Consumer stopped")
        return 0
    logger.info(f"Consumed {handled} events")
    return 0


def serve(settings: Settings) -> int:
    """Start the HTTP API."""
    from api import create_app

    app = create_app(settings=settings)
    logger.info(f"ReAct Calendar Server running on http://localhost:{settings.port}")
    app.run(host="0.0.0.0", port=settings.port, debug=False)
    return 0


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="ReAct Calendar Agent"
    )
    parser.add_argument("--email", "-e", type=str)
    parser.add_argument("--query", "-q", type=str)
    parser.add_argument("--events", type=str, metavar="EMAIL")
    parser.add_argument("--logs", type=str, metavar="EMAIL")
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--stats", action="store_true")
    parser.add_argument("--init-db", action="store_true")
    parser.add_argument("--reset-db", action="store_true")
    parser.add_argument("--consume", action="store_true")
    parser.add_argument("--max-messages", type=int, default=None)
    parser.add_argument("--serve", action="store_true")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    if args.consume:
        return consume(settings, max_messages=args.max_messages)

    init_db(settings.db_path, reset=args.reset_db)

    if args.serve:
        return serve(settings)

    if args.events:
        store = EventStore(settings.db_path, timeout=settings.db_timeout)
        print_records(f"Events for {args.events}", store.query_by_identity(args.events, limit=args.limit))
        return 0
    if args.logs:
        store = AuditLogStore(settings.db_path, timeout=settings.db_timeout)
        limit = args.limit or settings.logs_limit
        print_records(f"Logs for {args.logs}", store.query_by_identity(args.logs, limit=limit))
        return 0
    if args.stats:
        print(json.dumps(get_statistics(settings.db_path), indent=2))
        return 0

    if args.email is not None or args.query is not None:
        print_banner()
        return process(settings, args.email or "", args.query or "")

    if not (args.init_db or args.reset_db):
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
