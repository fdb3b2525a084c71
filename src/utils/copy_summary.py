"""
Run summary for the dashboard copy tool.

Collects the outcome of each pipeline stage and displays it as a table,
optionally saving the same data as JSON.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Any, Optional
from tabulate import tabulate


class CopySummaryCollector:
    """Collects per-stage results of one dashboard copy."""

    def __init__(self, output_dir: Optional[str] = None):
        """
        Initialize the summary collector.

        Args:
            output_dir: Directory to save summary files, or None to only display
        """
        self.output_dir = Path(output_dir) if output_dir else None
        self.stages: List[Dict[str, Any]] = []
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.mode: str = "COPY"  # or "DRY RUN"
        self.outcome: Dict[str, Any] = {}

    def start_collection(self, mode: str = "COPY"):
        self.start_time = datetime.now()
        self.end_time = None
        self.mode = mode
        self.stages = []
        self.outcome = {}

    def add_stage(self, stage: str, status: str, detail: str = "",
                  duration_seconds: Optional[float] = None):
        """
        Record one stage.

        Args:
            stage: Pipeline state reached (or attempted)
            status: 'OK', 'SKIPPED' or 'FAILED'
            detail: Short human readable detail
            duration_seconds: Time spent in the stage
        """
        self.stages.append({
            'stage': stage,
            'status': status,
            'detail': detail,
            'duration_seconds': round(duration_seconds, 3) if duration_seconds is not None else None,
        })

    def end_collection(self, **outcome):
        """End collection and remember the final outcome (state, IDs, URL, error)."""
        self.end_time = datetime.now()
        self.outcome = outcome

    def get_summary(self) -> Dict[str, Any]:
        duration = None
        if self.start_time and self.end_time:
            duration = (self.end_time - self.start_time).total_seconds()

        return {
            'mode': self.mode,
            'timestamp': self.end_time.isoformat() if self.end_time else datetime.now().isoformat(),
            'duration_seconds': duration,
            'outcome': self.outcome,
            'stages': self.stages,
        }

    def display_table(self):
        """Display stage results in tabular format."""
        if not self.stages:
            print("\n⚠️  No stages recorded")
            return

        print("\n" + "=" * 80)
        print(f"📊 DASHBOARD {self.mode} SUMMARY")
        print("=" * 80)

        table_data = [
            [s['stage'], s['status'], s['detail'],
             f"{s['duration_seconds']:.2f}s" if s['duration_seconds'] is not None else "-"]
            for s in self.stages
        ]
        print(tabulate(table_data, headers=['Stage', 'Status', 'Detail', 'Duration'], tablefmt='grid'))

        summary = self.get_summary()
        outcome = summary['outcome']
        print("\n" + "─" * 80)
        print(f"{'Final state:':<20} {outcome.get('state', '-')}")
        if outcome.get('new_dashboard_id'):
            print(f"{'New dashboard ID:':<20} {outcome['new_dashboard_id']}")
        if outcome.get('viewer_url'):
            print(f"{'Dashboard URL:':<20} {outcome['viewer_url']}")
        if outcome.get('error'):
            print(f"\n❌ {outcome['error']}")
        if summary['duration_seconds']:
            print(f"{'Total duration:':<20} {summary['duration_seconds']:.1f}s")
        print("=" * 80 + "\n")

    def save_json(self, filename: Optional[str] = None) -> Optional[str]:
        """
        Save the summary to a JSON file.

        Returns:
            Path to the saved JSON file, or None when no output directory is set
        """
        if not self.output_dir:
            return None

        if not filename:
            timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
            mode_suffix = "dry-run" if "DRY" in self.mode else "copy"
            filename = f"copy-summary-{mode_suffix}-{timestamp}.json"

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / filename

        with open(filepath, 'w') as f:
            json.dump(self.get_summary(), f, indent=2, default=str)

        return str(filepath)

    def display_and_save(self):
        """Display table and save JSON file."""
        self.display_table()

        saved = self.save_json()
        if saved:
            print(f"📄 Summary saved to: {saved}")
