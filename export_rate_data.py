"""Export the normalized Bank Rate history as JSON."""
import json
from bank_rate_dashboard.config import Settings
from bank_rate_dashboard.data import BoeFetcher

settings = Settings()

with BoeFetcher(settings) as fetcher:
    series = fetcher.fetch_series()

with open('rate_data.json', 'w') as f:
    json.dump(series.to_dict(), f)

print(f"Saved {len(series.points)} observations ({len(series.changes_only)} changes) to rate_data.json")
