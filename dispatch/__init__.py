#Expose the high-level pipeline pieces:
#Lifecycle state machines (ride / driver)
#Dispatcher orchestrator (the "one call" assignment entry point)
#Role dashboards (admin / passenger / driver coordinators)

from .notices import DashboardNotice
from .dispatcher import Dispatcher
from .admin_dashboard import AdminDashboard
from .passenger_dashboard import PassengerDashboard, PICKUP, DROPOFF
from .driver_dashboard import DriverDashboard

__all__ = [
    "DashboardNotice",
    "Dispatcher",
    "AdminDashboard",
    "PassengerDashboard",
    "DriverDashboard",
    "PICKUP",
    "DROPOFF",
]
