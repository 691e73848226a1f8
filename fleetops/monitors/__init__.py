from fleetops.monitors.base_monitor import BaseMonitor
from fleetops.monitors.compliance_monitor import ComplianceMonitor
from fleetops.monitors.driver_monitor import DriverComplianceMonitor
from fleetops.monitors.inventory_monitor import SpillKitInventoryMonitor
from fleetops.monitors.maintenance_monitor import MaintenanceHistoryMonitor

__all__ = [
    "BaseMonitor",
    "ComplianceMonitor",
    "DriverComplianceMonitor",
    "MaintenanceHistoryMonitor",
    "SpillKitInventoryMonitor",
]
