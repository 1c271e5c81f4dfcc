"""Compare two libtest micro-benchmark reports.

This package keeps each concern in a separate file:
- models: benchmark/comparison records and overlap result
- formatting: digit grouping and percent/speedup rendering
- errors: fatal error types
- config: run configuration and option validation
- parser: text line -> benchmark record
- normalize: name prefix/pattern stripping
- overlap: sorted three-way merge
- compare: pair arithmetic, row formatting and filtering
- io_utils: report reading and column naming
- report: table rendering
- cli: argument parsing + orchestration
"""

__version__ = "0.1.0"
