import pytest
import structlog

from logbridge.logging import EventSink, LoggingContext, LogRecord


@pytest.fixture
def context():
    """
    Function-scoped logging context.
    Shut down after each test so sinks, watchers and stdlib hooks never leak.
    """
    ctx = LoggingContext()
    yield ctx
    ctx.shutdown()
    structlog.reset_defaults()


@pytest.fixture
def captured(context):
    """
    Records delivered to a probe EventSink registered on the context.
    """
    records: list[LogRecord] = []
    probe = EventSink("probe")
    probe.subscribe(lambda sink, record: records.append(record))
    context.add_sink(probe)
    return records
