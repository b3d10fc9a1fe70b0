#!/usr/bin/env python3
# =============================================================================
# Load Testing Script
# =============================================================================
"""
Load test for the DevOps Web App.

Drives a running server from a single client address so the per-client
rate limiter can be observed:
- Mixed GET probes and POST /api/data submissions
- Roughly one in five submissions is deliberately invalid
- Reports the status-code mix, including 429 rejections

Usage:
    python scripts/load_test.py --url http://localhost:3000 --requests 150

Requirements:
    pip install httpx
"""

import argparse
import asyncio
import random
import string
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx


# =============================================================================
# Configuration
# =============================================================================

PROBE_PATHS = ["/", "/health", "/ready", "/metrics", "/api/status"]

SAMPLE_MESSAGES = [
    "Deployment {build} finished on node {node} without errors.",
    "Please review the rollout plan for release {build} before Friday.",
    "Disk usage on node {node} crossed the warning threshold again.",
    "Pipeline {build} is waiting for a manual approval step.",
]


@dataclass
class TestResult:
    """Result of a single test request."""
    status_code: int
    latency_ms: float
    method: str
    path: str
    error: Optional[str] = None


# =============================================================================
# Test Data Generation
# =============================================================================

def _word(k: int) -> str:
    return "".join(random.choices(string.ascii_lowercase, k=k))


def generate_submission(valid: bool = True) -> dict:
    """Generate a POST /api/data payload."""
    message = random.choice(SAMPLE_MESSAGES).format(
        build="".join(random.choices(string.ascii_uppercase + string.digits, k=8)),
        node=random.randint(1, 64),
    )
    payload = {
        "name": f"{_word(5).title()} {_word(7).title()}",
        "email": f"{_word(8)}@example.com",
        "message": message,
    }
    if not valid:
        field = random.choice(["name", "email", "message"])
        payload[field] = {"name": "Jo", "email": "invalid-email", "message": "Short"}[field]
    return payload


# =============================================================================
# Load Test Runner
# =============================================================================

async def send_request(client: httpx.AsyncClient, url: str, submit: bool) -> TestResult:
    """Send a single request to the API."""
    method, path = ("POST", "/api/data") if submit else ("GET", random.choice(PROBE_PATHS))

    try:
        start = time.perf_counter()
        if submit:
            response = await client.post(
                f"{url}{path}",
                json=generate_submission(valid=random.random() > 0.2),
            )
        else:
            response = await client.get(f"{url}{path}")
        latency = (time.perf_counter() - start) * 1000

        return TestResult(
            status_code=response.status_code,
            latency_ms=latency,
            method=method,
            path=path,
        )

    except httpx.HTTPError as e:
        return TestResult(status_code=0, latency_ms=0, method=method, path=path, error=str(e))


async def run_load_test(url: str, total_requests: int, concurrency: int) -> List[TestResult]:
    """Run the load test."""
    print(f"\n{'='*60}")
    print("DevOps Web App Load Test")
    print(f"{'='*60}")
    print(f"Target URL:   {url}")
    print(f"Requests:     {total_requests}")
    print(f"Concurrency:  {concurrency}")
    print(f"{'='*60}\n")

    semaphore = asyncio.Semaphore(concurrency)

    async with httpx.AsyncClient(timeout=30.0) as client:

        async def bounded(index: int) -> TestResult:
            async with semaphore:
                return await send_request(client, url, submit=index % 3 == 0)

        return await asyncio.gather(*(bounded(i) for i in range(total_requests)))


def print_results(results: List[TestResult]) -> None:
    """Print test results summary."""
    total = len(results)
    by_status: Dict[int, int] = {}
    for r in results:
        by_status[r.status_code] = by_status.get(r.status_code, 0) + 1

    latencies = sorted(r.latency_ms for r in results if r.status_code)
    p50 = latencies[int(len(latencies) * 0.50)] if latencies else 0
    p95 = latencies[int(len(latencies) * 0.95)] if latencies else 0

    print(f"\n{'='*60}")
    print("RESULTS SUMMARY")
    print(f"{'='*60}")
    print(f"\nTotal Requests:     {total}")
    print("\nStatus Codes:")
    for code, count in sorted(by_status.items()):
        label = "transport error" if code == 0 else str(code)
        print(f"  {label}: {count} ({count/total*100:.1f}%)")
    print("\nLatency (ms):")
    print(f"  p50:              {p50:.1f}")
    print(f"  p95:              {p95:.1f}")

    errors = [r for r in results if r.error]
    if errors:
        print(f"\nErrors ({len(errors)}):")
        for message in sorted({r.error for r in errors}):
            print(f"  {message}")

    print(f"\n{'='*60}")
    if by_status.get(429):
        print(f"Rate limiter engaged after {total - by_status[429]} accepted requests")
    else:
        print("Rate limiter not engaged")
    print(f"{'='*60}\n")


# =============================================================================
# Main
# =============================================================================

def main():
    parser = argparse.ArgumentParser(description="Load test for the DevOps Web App")
    parser.add_argument("--url", default="http://localhost:3000", help="Base URL of the service")
    parser.add_argument("--requests", type=int, default=150, help="Total requests to send")
    parser.add_argument("--concurrency", type=int, default=10, help="Requests in flight at once")

    args = parser.parse_args()

    url = args.url.rstrip("/")

    results = asyncio.run(run_load_test(url, args.requests, args.concurrency))

    print_results(results)


if __name__ == "__main__":
    main()
