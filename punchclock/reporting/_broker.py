"""Broker configuration helpers for Dramatiq actor setup.

Actors bind to the global broker when they are declared, so
:func:`ensure_broker_configured` runs when :mod:`punchclock.reporting.actor`
is imported. ``PUNCHCLOCK_BROKER_URL`` selects a Redis broker; otherwise a
StubBroker is installed for tests and local runs that allow it.
"""

from __future__ import annotations

import os
import sys
import threading

import dramatiq
import dramatiq.broker
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker

from punchclock.logging import get_logger, log_info

logger = get_logger(__name__)

_BROKER_LOCK = threading.Lock()
_broker_configured = False


def _is_running_tests() -> bool:
    """Check if the current process is running under pytest."""
    return "pytest" in sys.modules or any(
        key in os.environ
        for key in ["PYTEST_CURRENT_TEST", "PYTEST_XDIST_WORKER", "PYTEST_ADDOPTS"]
    )


def _should_use_stub_broker() -> bool:
    """Return True when ``PUNCHCLOCK_ALLOW_STUB_BROKER`` is truthy or under tests."""
    allow_stub = os.environ.get("PUNCHCLOCK_ALLOW_STUB_BROKER", "")
    return allow_stub.lower() in {"1", "true", "yes"} or _is_running_tests()


def _current_broker() -> dramatiq.Broker | None:
    # get_broker() would install a default localhost broker when none is set
    return dramatiq.broker.global_broker


def ensure_broker_configured() -> None:
    """Ensure a Dramatiq broker is configured before actors are declared.

    Thread-safe and idempotent. A Redis broker is installed when
    ``PUNCHCLOCK_BROKER_URL`` is set; otherwise an existing broker is kept,
    or a StubBroker is installed where stubs are allowed.

    Raises
    ------
    RuntimeError
        If no broker can be configured outside a test/stub-allowed context.

    """
    global _broker_configured

    if _broker_configured:
        return

    with _BROKER_LOCK:
        if _broker_configured:
            return

        broker_url = os.environ.get("PUNCHCLOCK_BROKER_URL", "").strip()
        if broker_url:
            dramatiq.set_broker(RedisBroker(url=broker_url))
            log_info(logger, "Configured Redis broker for report jobs")
        elif _current_broker() is None:
            if _should_use_stub_broker():
                dramatiq.set_broker(StubBroker())
            else:
                message = (
                    "No Dramatiq broker configured. "
                    "Set PUNCHCLOCK_BROKER_URL to a Redis URL, or "
                    "PUNCHCLOCK_ALLOW_STUB_BROKER=1 for local/test runs."
                )
                raise RuntimeError(message)

        _broker_configured = True
