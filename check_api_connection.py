#!/usr/bin/env python3
"""Quick smoke check of a running Fleet Metrics API instance.

Usage:
    python check_api_connection.py [BASE_URL] [MONTH]
"""

import sys

import requests

API_URL = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else "http://localhost:8000"
MONTH = sys.argv[2] if len(sys.argv) > 2 else "2024-12"


def check(step, title, path, params=None):
    print(f"{step}. {title}...")
    try:
        resp = requests.get(f"{API_URL}{path}", params=params, timeout=10)
        print(f"   ✓ Status: {resp.status_code}")
        return resp
    except requests.RequestException as e:
        print(f"   ✗ Failed: {e}")
        sys.exit(1)


def main():
    print("=" * 60)
    print(f"Checking Fleet Metrics API at {API_URL} ({MONTH})")
    print("=" * 60)
    print()

    health = check(1, "Health check", "/api", {"action": "health"}).json()
    print(f"   ✓ Version: {health.get('version')}")
    print()

    dashboard = check(2, "Dashboard", "/api", {"action": "dashboard", "month": MONTH}).json()
    if not dashboard.get("ok"):
        print(f"   ✗ Error: {dashboard.get('error')} ({dashboard.get('hint')})")
        sys.exit(1)
    kpi = dashboard["kpi"]
    print(f"   ✓ Revenue: {kpi['revenue']:,}  Costs: {kpi['costs']:,}  Margin: {kpi['marginPct']}%")
    print()

    again = check(3, "Determinism (same month twice)", "/api", {"action": "dashboard", "month": MONTH}).json()
    if again["kpi"] != kpi:
        print("   ✗ KPI differs between two identical requests")
        sys.exit(1)
    print("   ✓ Identical KPI")
    print()

    drivers = check(4, "Drivers", "/api", {"action": "drivers", "month": MONTH}).json()
    print(f"   ✓ Top performers: {[d['name'] for d in drivers['topPerformers']]}")
    print()

    export = check(5, "CSV export", "/export", {"type": "kpi", "month": MONTH})
    print(f"   ✓ {export.headers.get('content-disposition')}")
    print()

    print("=" * 60)
    print("✓ All checks passed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
