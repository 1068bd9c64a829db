import csv
import os
import random
import time

from dispatch.admin_dashboard import AdminDashboard
from dispatch.driver_dashboard import DriverDashboard
from dispatch.notices import DashboardNotice
from pricing.tariff import default_tariff
from rides.models import RideStatus
from rides.seed import load_drivers, load_rides, resolve_data_path
from rides.store import RideStore


def run_simulation(drivers_file="mock_drivers_20.csv", rides_file="mock_rides_generated.csv", limit=20):
    print("=== STARTING END-TO-END RIDE SIMULATION ===")

    # 1. Load Data
    drivers = load_drivers(resolve_data_path(drivers_file))
    rides = load_rides(resolve_data_path(rides_file), limit=limit)
    print(f"Loaded {len(rides)} Rides and {len(drivers)} Drivers.\n")

    # 2. Configure System
    store = RideStore(rides=rides, drivers=drivers, tariff=default_tariff())
    admin = AdminDashboard(store)

    # 3. Step 1: Price every pending ride
    start_time = time.time()
    priced = admin.calculate_missing_details()
    print(f"Priced {len(priced)} rides in {time.time() - start_time:.2f}s.\n")

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    output_path = os.path.join(base_dir, "ride_results.csv")

    completed = 0
    with open(output_path, "w", newline='') as file:
        writer = csv.writer(file)
        writer.writerow(["ride_id", "driver_id", "distance_km", "fare", "outcome"])

        # oldest request first
        for ride in sorted(store.snapshot.rides, key=lambda r: r.requested_at):
            if ride.status != RideStatus.PENDING:
                continue

            # 4. Step 2: Assign to the closest online driver
            try:
                assigned = admin.assign_ride(ride.id)
            except DashboardNotice as notice:
                writer.writerow([ride.id, "", ride.distance_km, ride.fare, notice.message])
                print(f"[FAILED] Ride {ride.id} -> {notice.message}")
                continue

            # 5. Step 3: The driver works the ride; some reject it
            with DriverDashboard(store, assigned.driver_id) as driver_view:
                if random.random() < 0.1:
                    driver_view.reject()
                    writer.writerow([ride.id, assigned.driver_id, ride.distance_km, ride.fare, "REJECTED"])
                    print(f"[REJECTED] Ride {ride.id} by {assigned.driver_id}")
                    continue

                driver_view.accept()
                driver_view.arrive()
                driver_view.start()
                driver_view.complete()

            completed += 1
            writer.writerow([ride.id, assigned.driver_id, ride.distance_km, ride.fare, "COMPLETED"])
            print(f"[SUCCESS] Ride {ride.id} ({ride.distance_km} km, {ride.fare:.2f}) -> {assigned.driver_id}")

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Rides completed: {completed} / {len(priced)}")
    for driver in store.snapshot.drivers:
        if driver.earnings:
            print(f"  {driver.id}: earnings {driver.earnings:.2f}")
    print(f"Results written to '{output_path}'.")

if __name__ == "__main__":
    run_simulation()
