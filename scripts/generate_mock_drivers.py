import csv
import random

VEHICLES = ["Toyota Corolla", "Hyundai Elantra", "Kia Cerato", "Nissan Sunny", "Chevrolet Optra"]


def generate_mock_drivers(filename="mock_drivers_20.csv", count=20):
    # Base coordinate roughly at Tahrir Square, Cairo.
    base_lat = 30.0444
    base_lng = 31.2357

    with open(filename, mode='w', newline='') as file:
        writer = csv.writer(file)
        writer.writerow(["driver_id", "name", "lat", "lng", "vehicle", "status", "earnings", "is_blocked"])

        for i in range(count):
            driver_id = f"DRV-{str(i+1).zfill(3)}"

            # Scatter drivers randomly around the city center (roughly +/- 8km)
            lat = base_lat + (random.random() - 0.5) * 0.15
            lng = base_lng + (random.random() - 0.5) * 0.15

            # 5% blocked; the rest 80% online, 20% offline
            is_blocked = random.random() < 0.05
            status = "OFFLINE" if is_blocked or random.random() >= 0.8 else "ONLINE"

            writer.writerow([
                driver_id,
                f"Captain {i+1}",
                round(lat, 6),
                round(lng, 6),
                random.choice(VEHICLES),
                status,
                0.0,
                is_blocked,
            ])

    print(f"Successfully generated {count} mock drivers into '{filename}'.")

if __name__ == "__main__":
    generate_mock_drivers()
