"""Punchclock: employee time registers and asynchronous time-sheet reports.

Subpackages
-----------
staff
    User records referenced by time registers and reports.
registers
    Clock-in/clock-out intervals and the single-open-register rule.
reporting
    Report records, the CSV time-sheet generator, and the dramatiq-driven
    job executor.
api
    Falcon ASGI surface for the above.
"""
