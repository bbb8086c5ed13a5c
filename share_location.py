#!/usr/bin/env python3
"""
Share one location with the Locshare backend
"""
import argparse
import logging
import sys

from config import settings
from locshare.client import ConsentPromptProvider, FixedPositionProvider, LocationSharePipeline
from locshare.errors import AcquisitionTimeout, PermissionDenied, SubmissionFailure
from locshare.utils import configure_logging

logger = logging.getLogger("share_location")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Share your location with a Locshare server")
    parser.add_argument("--lat", type=float, required=True, help="Latitude in decimal degrees")
    parser.add_argument("--lon", type=float, required=True, help="Longitude in decimal degrees")
    parser.add_argument("--accuracy", type=float, default=None, help="Accuracy in meters")
    parser.add_argument("--endpoint", default=None, help=f"Location endpoint (default: {settings.api_url})")
    parser.add_argument("--yes", action="store_true", help="Share without asking for confirmation")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings)

    provider = FixedPositionProvider(args.lat, args.lon, accuracy=args.accuracy)
    if not args.yes:
        provider = ConsentPromptProvider(provider)

    pipeline = LocationSharePipeline.from_settings(settings, provider, endpoint_url=args.endpoint)
    try:
        result = pipeline.run()
    except PermissionDenied as e:
        print(f"Location access denied: {e}", file=sys.stderr)
        return 1
    except AcquisitionTimeout as e:
        print(f"Location unavailable: {e}", file=sys.stderr)
        return 1
    except SubmissionFailure as e:
        print(str(e), file=sys.stderr)
        return 2

    data = result.get("data") or {}
    print(f"Location shared: {data.get('id', '?')} ({data.get('address', '')})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
