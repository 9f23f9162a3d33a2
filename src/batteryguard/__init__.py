"""BatteryGuard - rechargeable battery inventory and health tracking.

The package is split into:
- engine: health estimation, self-discharge simulation, charge events and views
- storage: the key-value blob store holding batteries and their logs
- advice: optional AI maintenance advice
- controller: BatteryInventory, which ties the pieces together
"""

__version__ = "0.1.0"
