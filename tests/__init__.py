"""Test suite for formata.

Test Structure:
- unit/: Unit tests mirroring packages/formata/core and packages/formata/cli
- conftest.py: Shared fixtures (two-frame scenario, fake clock, snapshot dict)
"""
