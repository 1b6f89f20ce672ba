"""Demo script for project-health-engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from project_health.adapters.json_adapter import parse
from project_health.engine import recompute
from project_health.schema import FilterSpec


def main() -> None:
    records = parse("examples/sample_projects.json")
    result = recompute(records, FilterSpec(search="north"), "qualityScore-asc", now="2025-03-10T12:00:00Z")
    for view in result.views:
        print(f"{view.name}: {view.effective_status}, score {view.quality_score:.1f} ({view.effective_risk_level})")
    print("Stats:", result.stats)
    print("Quality:", result.quality_summary)


if __name__ == "__main__":
    main()
