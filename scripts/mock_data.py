import pandas as pd
import numpy as np
import uuid
from datetime import date, datetime, timedelta

ZONE_PROFILES = {
    # zone_id: (active workers, jobs per day, rotation rate)
    'centro': (85, 28.0, 0.06),
    'bajio': (65, 14.0, 0.04),
    'occidente': (72, 16.0, 0.05),
    'norte': (58, 11.0, 0.05),
    'pacifico': (42, 9.0, 0.05),
    'golfo': (38, 6.0, 0.06),
    'sureste': (35, 5.0, 0.07),
    'centro_occidente': (1, 4.0, 0.05),
}


def generate_completed_jobs(as_of='2025-07-18', days=120, seed=42):
    rng = np.random.default_rng(seed)
    end = datetime.strptime(as_of, '%Y-%m-%d')
    start = end - timedelta(days=days - 1)

    records = []
    for zone_id, (_, jobs_per_day, _) in ZONE_PROFILES.items():
        current = start
        while current <= end:
            # Weekend dampener
            weight = 0.7 if current.weekday() >= 5 else 1.0
            for _ in range(rng.poisson(jobs_per_day * weight)):
                records.append({
                    'job_id': str(uuid.UUID(int=int(rng.integers(0, 2**63)))),
                    'zone_id': zone_id,
                    'category': rng.choice(['local', 'long_haul', 'express'], p=[0.6, 0.3, 0.1]),
                    'completed_at': current + timedelta(hours=float(rng.uniform(6, 22))),
                })
            current += timedelta(days=1)

    return pd.DataFrame(records, columns=['job_id', 'zone_id', 'category', 'completed_at'])


def generate_zone_metrics(seed=42):
    rng = np.random.default_rng(seed)
    rows = []
    for zone_id, (workers, _, rotation) in ZONE_PROFILES.items():
        rows.append({
            'zone_id': zone_id,
            'active_workers': workers,
            'rejection_rate': round(float(rng.uniform(0.15, 0.35)), 2),
            # Some zones report no hours or efficiency: the loader fills defaults
            'available_hours': np.nan if zone_id == 'golfo' else 16.0,
            'operational_efficiency': np.nan if zone_id == 'sureste' else round(float(rng.uniform(0.75, 0.92)), 2),
            'rotation_rate': rotation,
        })
    return pd.DataFrame(rows)


def generate_channels():
    return pd.DataFrame([
        {'channel_id': 'referrals', 'spend': 42000.0, 'acquired': 28, 'conversion_rate': 0.70, 'capacity': 25},
        {'channel_id': 'job_boards', 'spend': 96000.0, 'acquired': 48, 'conversion_rate': 0.45, 'capacity': 120},
        {'channel_id': 'social_ads', 'spend': 75000.0, 'acquired': 30, 'conversion_rate': 0.35, 'capacity': 200},
        {'channel_id': 'radio', 'spend': 30000.0, 'acquired': 0, 'conversion_rate': 0.20, 'capacity': 50},
    ])


if __name__ == "__main__":
    df_jobs = generate_completed_jobs()
    df_metrics = generate_zone_metrics()

    df_jobs.to_csv('mock_completed_jobs.csv', index=False)
    df_metrics.to_csv('mock_zone_metrics.csv', index=False)
    print(f"Generated {len(df_jobs)} completed jobs across {df_jobs['zone_id'].nunique()} zones")
    print(f"As of {date(2025, 7, 18)}; zone metrics written to mock_zone_metrics.csv")
