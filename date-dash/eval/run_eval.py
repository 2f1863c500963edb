"""Offline check that weighted picks follow their score distribution.

Every query in the JSONL file is sent to ``/suggestion`` ``--draws`` times. The
observed pick frequency of each place is compared with its expected share
(score / total score of the passing places, taken from the debug trace).

Usage:
  python run_eval.py --base http://localhost:8010 --draws 200 --out eval/report_v1
"""

from __future__ import annotations

import argparse
import csv
import json
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests


def load_jsonl(path: Path) -> list[dict[str, Any]]:
    with path.open("r", encoding="utf-8") as fh:
        return [json.loads(line) for line in fh if line.strip()]


def expected_shares(debug: dict[str, Any]) -> dict[str, float]:
    passing = [e for e in debug.get("entries") or [] if all((e.get("matches") or {}).values())]
    total = sum(e.get("score") or 0.0 for e in passing)
    if total <= 0:
        return {e["id"]: 1.0 / len(passing) for e in passing} if passing else {}
    return {e["id"]: (e.get("score") or 0.0) / total for e in passing}


@dataclass
class EvalResult:
    qid: str
    mode: str
    draws: int
    passing: int
    no_match: int
    max_share_error: float
    fallbacks: int
    latency_ms: float
    observed: dict[str, float]
    expected: dict[str, float]


def evaluate_query(base_url: str, query: dict[str, Any], draws: int, timeout: float) -> EvalResult:
    payload = {"filters": query.get("filters") or {}, "mode": query.get("mode", "weighted")}
    url = f"{base_url.rstrip('/')}/suggestion"

    picks: Counter[str] = Counter()
    paths: Counter[str] = Counter()
    expected: dict[str, float] = {}
    passing = 0
    started = time.perf_counter()
    for _ in range(draws):
        resp = requests.post(url, json=payload, timeout=timeout)
        resp.raise_for_status()
        body = resp.json()
        debug = body.get("debug") or {}
        paths[debug.get("path", "unknown")] += 1
        passing = debug.get("filtered_count", 0)
        if not expected:
            expected = expected_shares(debug) if payload["mode"] == "weighted" else {}
        place = body.get("place")
        if place:
            picks[place["id"]] += 1
    latency_ms = (time.perf_counter() - started) * 1000 / max(draws, 1)

    observed = {pid: count / draws for pid, count in picks.items()}
    if payload["mode"] == "random" and passing:
        ids = set(observed) | set(expected)
        expected = {pid: 1.0 / passing for pid in ids}
    errors = [abs(observed.get(pid, 0.0) - share) for pid, share in expected.items()]

    return EvalResult(
        qid=str(query.get("id", "")),
        mode=payload["mode"],
        draws=draws,
        passing=passing,
        no_match=paths.get("no_match", 0),
        max_share_error=max(errors) if errors else 0.0,
        fallbacks=sum(v for k, v in paths.items() if k.endswith("fallback")),
        latency_ms=latency_ms,
        observed=observed,
        expected=expected,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Pick-distribution check for the suggestion API")
    parser.add_argument("--base", default="http://localhost:8010", help="FastAPI base URL")
    parser.add_argument("--queries", default="eval/queries_v1.jsonl", help="Queries JSONL path")
    parser.add_argument("--draws", type=int, default=200, help="Suggestions requested per query")
    parser.add_argument("--concurrency", type=int, default=2, help="Number of worker threads")
    parser.add_argument("--out", default="eval/report_v1", help="Output directory for reports")
    parser.add_argument("--tolerance", type=float, default=0.08, help="Allowed share error before flagging")
    parser.add_argument("--timeout", type=float, default=10.0, help="Request timeout in seconds")
    args = parser.parse_args()

    queries = load_jsonl(Path(args.queries))
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    results: list[EvalResult] = []
    with ThreadPoolExecutor(max_workers=max(1, args.concurrency)) as pool:
        futures = {pool.submit(evaluate_query, args.base, q, args.draws, args.timeout): q for q in queries}
        for future in as_completed(futures):
            query = futures[future]
            try:
                results.append(future.result())
            except requests.RequestException as exc:
                print(f"[{query.get('id')}] request failed: {exc}")

    results.sort(key=lambda r: r.qid)
    metrics_path = out_dir / "metrics.csv"
    with metrics_path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(["qid", "mode", "draws", "passing", "no_match", "fallbacks", "max_share_error", "latency_ms"])
        for r in results:
            writer.writerow(
                [r.qid, r.mode, r.draws, r.passing, r.no_match, r.fallbacks, f"{r.max_share_error:.4f}", f"{r.latency_ms:.1f}"]
            )

    summary = {
        r.qid: {"observed": r.observed, "expected": r.expected, "max_share_error": r.max_share_error}
        for r in results
    }
    (out_dir / "summary.json").write_text(json.dumps(summary, indent=2), encoding="utf-8")

    flagged = [r.qid for r in results if r.max_share_error > args.tolerance]
    print(f"wrote {metrics_path} ({len(results)} queries)")
    if flagged:
        print(f"share error above {args.tolerance:.2f}: {', '.join(flagged)}")


if __name__ == "__main__":
    main()
