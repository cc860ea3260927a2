"""School Admin reporting package.

Organized by feature modules (roster, attendance, subscriptions, evaluations,
reporting) with a thin Flask controller layer over service/repository layers.
The reporting aggregator is pure and does no I/O.
"""
