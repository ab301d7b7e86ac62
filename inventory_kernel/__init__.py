"""
Inventory Kernel

The shared data-access core of the inventory back end:
- Parameterized statement builder shared by every entity repository
- Generic per-table repositories with entity query modules
- Polymorphic audit trail (recorder + history selector)
"""

__version__ = "0.1.0"
