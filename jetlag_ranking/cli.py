"""
Rank flights from a JSON request file.

Usage: jetlag-rank <request_file.json>
       python -m jetlag_ranking <request_file.json>

The request is either a ranking request (flights, airports, filters,
sort_by) or a tool call of the form {"tool": ..., "arguments": {...}}.
The result is written as JSON to stdout; logs go to stderr.
"""

import json
import sys

from .api import invoke_tool, rank_flights_tool
from .config import settings
from .errors import InvalidFilterSpec
from .logging_config import setup_logging


def run(data: dict) -> dict:
    if "tool" in data:
        return invoke_tool(data["tool"], data.get("arguments", {}))
    return rank_flights_tool(data)


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print(json.dumps({"error": "Usage: jetlag-rank <request_file.json>"}))
        sys.exit(1)

    setup_logging(settings.log_level)
    request_file = argv[0]

    try:
        with open(request_file) as f:
            data = json.load(f)

        print(json.dumps(run(data)))

    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {request_file}"}))
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
        sys.exit(1)
    except KeyError as e:
        print(json.dumps({"error": f"Missing required field: {e}"}))
        sys.exit(1)
    except InvalidFilterSpec as e:
        print(json.dumps({"error": str(e), "field": e.field_name}))
        sys.exit(1)
    except ValueError as e:
        print(json.dumps({"error": f"Ranking failed: {e}"}))
        sys.exit(1)


if __name__ == "__main__":
    main()
