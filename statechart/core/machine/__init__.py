"""
Machine package: the declared statechart tree and its construction.

- machine_type: level classification flags
- state_machine: tree node and transition algorithm
- machine_builder: declarative construction surface
"""
