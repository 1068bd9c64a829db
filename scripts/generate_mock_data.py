import pandas as pd
import numpy as np
from datetime import datetime, timedelta

PASSENGER_NAMES = ["Karim", "Layla", "Hossam", "Fatima", "Ali", "Nour", "Omar", "Mona"]


def generate_mock_rides(num_rides=50, num_landmarks=25, output_file="mock_rides_generated.csv"):
    """
    Generates a dataset of ride requests around Cairo.
    Pickups come from a fixed set of landmarks so several requests start from
    the same or nearby places, like real demand around malls and squares.
    """
    CENTER_LAT = 30.0444
    CENTER_LNG = 31.2357

    # 1. Generate fixed landmarks (pickups) within roughly 6km
    landmarks = []
    for landmark_index in range(num_landmarks):
        landmarks.append({
            "name": f"Landmark {landmark_index+1}",
            "lat": CENTER_LAT + np.random.uniform(-0.06, 0.06),
            "lng": CENTER_LNG + np.random.uniform(-0.06, 0.06),
        })

    data = []
    now = datetime.now()

    # 2. Generate ride requests
    for ride_index in range(num_rides):
        landmark = landmarks[np.random.randint(0, num_landmarks)]

        # Dropoff placed within ~2-15km of the pickup
        dropoff_lat = landmark["lat"] + np.random.uniform(-0.12, 0.12)
        dropoff_lng = landmark["lng"] + np.random.uniform(-0.12, 0.12)

        data.append({
            "ride_id": f"r_{str(ride_index+1).zfill(6)}",
            "passenger_name": np.random.choice(PASSENGER_NAMES),
            "pickup_label": landmark["name"],
            "dropoff_label": f"Dropoff {ride_index+1}",
            "pickup_lat": np.round(landmark["lat"], 6),
            "pickup_lng": np.round(landmark["lng"], 6),
            "dropoff_lat": np.round(dropoff_lat, 6),
            "dropoff_lng": np.round(dropoff_lng, 6),
            "requested_at": (now - timedelta(minutes=int(np.random.randint(0, 60)))).isoformat(),
            "status": "PENDING",
        })

    # 3. Save to CSV
    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_rides} ride requests and saved to '{output_file}'")

    print("\nTop 5 pickup landmarks:")
    counts = df['pickup_label'].value_counts().head(5)
    for name, count in counts.items():
        print(f"  {name}: {count} rides")

if __name__ == "__main__":
    generate_mock_rides(num_rides=50, num_landmarks=25)
