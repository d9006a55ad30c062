"""CLI entry point: interpret a saved provider response."""

import json
import logging
import sys


def main(argv=None):
    import argparse

    from .app import ShipTrack
    from .config import ShipTrackConfig, load_config
    from .eta import ConfigLoadError, CsvRuleSource, RuleStore

    parser = argparse.ArgumentParser(description="Normalize a tracking provider response")
    parser.add_argument("response", help="Path to a JSON provider response ('-' for stdin)")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--rules", help="ETA rules CSV (overrides config)")
    parser.add_argument("--value", default="", help="Tracking number that was requested")
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else ShipTrackConfig()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(levelname)s: %(name)s - %(message)s",
    )

    logger = logging.getLogger(__name__)

    try:
        if args.response == "-":
            payload = json.load(sys.stdin)
        else:
            with open(args.response, "r", encoding="utf-8") as f:
                payload = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read provider response {args.response}: {e}")
        return 1

    rule_store = None
    if args.rules:
        rule_store = RuleStore(CsvRuleSource(args.rules), default_priority=config.eta.default_priority)

    app = ShipTrack(config, rule_store=rule_store)
    try:
        result = app.interpret(payload, requested_value=args.value)
    except ConfigLoadError as e:
        logger.error(f"ETA rules unavailable: {e}")
        return 2

    if result is None:
        print(json.dumps({"ok": False, "error": "No tracking found in response"}))
        return 1

    print(json.dumps({"ok": True, **result.to_dict()}, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
