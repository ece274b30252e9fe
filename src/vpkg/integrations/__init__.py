"""Integrations with the outside world (network, processes, clock).

Each integration follows the ABC / Real / Fake layout: the ABC in ``abc.py``,
the production implementation in ``real.py`` and an in-memory implementation
for tests in ``fake.py``.
"""
