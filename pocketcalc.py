"""
PocketCalc
Main application entry point
"""
import argparse
import logging

import config
from api import build_calculator, create_app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=f"{config.APP_NAME} web calculator")
    parser.add_argument("--host", default=config.WEB_HOST)
    parser.add_argument("--port", type=int, default=config.WEB_PORT)
    parser.add_argument("--db", default=config.DB_PATH, help="SQLite file holding the history")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=config.LOG_FORMAT)

    app = create_app(build_calculator(args.db))

    print("\n" + "=" * 60)
    print(f"{config.APP_NAME} {config.VERSION} API Server")
    print("=" * 60)
    print(f"Server starting on http://{args.host}:{args.port}/api")
    print("=" * 60 + "\n")

    app.run(host=args.host, port=args.port, debug=False)


if __name__ == "__main__":
    main()
