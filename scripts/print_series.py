"""Utility script to print the three chart series for a budgeting state."""

from __future__ import annotations

import argparse
import json

from budget_visuals import aggregations, insight, synth


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--state", help="Path to an exported state JSON; defaults to the sample state")
    parser.add_argument("--seed", type=int, default=synth.DEFAULT_SEED)
    parser.add_argument("--include-archived", action="store_true")
    parser.add_argument("--prompts", action="store_true", help="Also print the insight prompt per chart")
    args = parser.parse_args()

    state = synth.load_state(args.state) if args.state else synth.generate_sample_state(seed=args.seed)
    payload = aggregations.build_chart_payload(state, include_archived=args.include_archived)
    print(json.dumps(payload, indent=2, ensure_ascii=False))

    if args.prompts:
        for mode in aggregations.ChartMode:
            print()
            print(insight.build_prompt(mode, payload[mode.value]))


if __name__ == "__main__":
    main()
