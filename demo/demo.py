"""
keygate demo: ask a running keygate instance to extract an API key.

Usage:
    python demo.py --api-key <key> [--base-url http://localhost:8081]

Exit codes:
    0  key accepted (200)
    1  header rejected (401) or other error
"""

import argparse
import sys

import httpx

KEYGATE_BASE_URL = "http://localhost:8081"
FORWARD_HEADER = "X-API-Key"


def main() -> None:
    parser = argparse.ArgumentParser(description="keygate demo")
    parser.add_argument("--api-key", required=True, help="API key to present")
    parser.add_argument("--scheme", default="ApiKey", help="Authorization scheme to send")
    parser.add_argument("--base-url", default=KEYGATE_BASE_URL)
    args = parser.parse_args()

    try:
        resp = httpx.get(
            f"{args.base_url}/auth",
            headers={"Authorization": f"{args.scheme} {args.api_key}"},
            timeout=10,
        )
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        reason = exc.response.headers.get("X-Keygate-Error", "unknown")
        print(f"Rejected ({exc.response.status_code}): {reason}", file=sys.stderr)
        sys.exit(1)
    except httpx.HTTPError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Accepted, forwarded as {FORWARD_HEADER}: {resp.headers[FORWARD_HEADER]}")


if __name__ == "__main__":
    main()
