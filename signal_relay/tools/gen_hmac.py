"""Print the HMAC-SHA256 signature of a webhook payload.

    gen_hmac <secret> [payload.json]
    echo -n '{"ticker":"ETHUSDT","action":"buy"}' | gen_hmac <secret>

Send the output as ``X-TV-Signature: sha256=<hex>`` when testing /webhook by hand.
"""

from __future__ import annotations

import argparse
import sys

from signal_relay.modules.signature import compute_signature

EXIT_FAILURE = 1


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gen_hmac",
        description="Compute the HMAC-SHA256 hex digest of a payload (file or stdin).",
    )
    parser.add_argument("secret", help="Shared webhook secret")
    parser.add_argument("payload", nargs="?", default=None, help="Payload file (default: read stdin)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        if args.payload:
            with open(args.payload, "rb") as fh:
                body = fh.read()
        else:
            body = sys.stdin.buffer.read()
    except OSError as e:
        print(f"gen_hmac: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(compute_signature(args.secret, body))
    return 0


if __name__ == "__main__":
    sys.exit(main())
