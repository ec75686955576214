#!/usr/bin/env python3
"""
Start the Coffee Finder search API under uvicorn.
"""

import sys
import argparse

from coffee_finder.config.loader import ConfigLoader, load_config_for_environment


def main():
    parser = argparse.ArgumentParser(
        description="Serve ranked nearby coffee searches over HTTP (one worker; search state is in-process)"
    )
    parser.add_argument(
        "--env",
        choices=["development", "staging", "production", "testing"],
        default=None,
        help="Which .env.<env> file to read (default: $ENVIRONMENT, else development)"
    )
    parser.add_argument("--host", default=None, help="Bind address (default: HOST from config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT from config)")
    parser.add_argument("--reload", action="store_true", help="Restart the API when source files change")
    parser.add_argument(
        "--list-envs",
        action="store_true",
        help="Show which .env.<env> files exist in the working directory"
    )
    parser.add_argument(
        "--create-sample",
        metavar="ENV",
        help="Write .env.<ENV>.sample with the current search, geocoder and places defaults"
    )

    args = parser.parse_args()

    if args.list_envs:
        envs = ConfigLoader.get_available_environments()
        if not envs:
            print("No .env.<env> files found; defaults and process environment apply")
            return
        print("Environment files:")
        for env in envs:
            print(f"  .env.{env}")
        return

    if args.create_sample:
        try:
            sample_file = ConfigLoader.create_sample_env_file(args.create_sample)
            print(f"Wrote {sample_file}; copy it to .env.{args.create_sample.lower()} to use it")
        except ValueError as e:
            print(f"Unknown environment '{args.create_sample}': {e}")
            sys.exit(1)
        return

    try:
        settings = load_config_for_environment(args.env)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    host = args.host or settings.host
    port = args.port or settings.port
    reload = args.reload or settings.reload

    print(f"{settings.app_name} {settings.app_version} ({settings.environment.value})")
    print(f"  listening on http://{host}:{port}")
    print(f"  searching '{settings.search.category}' within {settings.search.radius_miles:g} miles")
    print(f"  geocoder: {settings.geocoder.base_url}")
    print(f"  places:   {settings.places.base_url}")

    import uvicorn

    uvicorn.run(
        "coffee_finder.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=1,
        log_level=settings.log_level.value.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
