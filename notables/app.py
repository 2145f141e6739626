import logging

from flask import Flask, Response, jsonify, request

from notables.aggregator import Aggregator
from notables.categorizer import Categorizer
from notables.config import Config
from notables.errors import InvalidLogEntry, InvalidQueryParameter, StorageUnavailable
from notables.metrics import CONTENT_TYPE, Metrics
from notables.models import parse_timestamp
from notables.simulator import generate_batch
from notables.sparkline import SyntheticSeriesGenerator
from notables.store import create_store
from notables.validator import LogValidator

logger = logging.getLogger(__name__)


def _limit_arg(name, default, maximum):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidQueryParameter(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise InvalidQueryParameter(f"{name} must be positive, got {value}")
    return min(value, maximum)


def _time_arg(name):
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return parse_timestamp(raw)
    except ValueError:
        raise InvalidQueryParameter(f"{name} must be an ISO 8601 timestamp, got {raw!r}")


def create_app(config=None, store=None, rng=None, clock=None):
    """Flask application factory."""
    app = Flask(__name__)

    if config is None:
        config = Config.from_env()
    if store is None:
        store = create_store(config)

    validator = LogValidator()
    categorizer = Categorizer(config["categorizer"].get("urgency_rules"))
    aggregator = Aggregator.from_config(
        store,
        config,
        categorizer=categorizer,
        series=SyntheticSeriesGenerator(rng),
        clock=clock,
    )
    metrics = Metrics(store)
    search_config = config["search"]

    # Store components on app for access in tests
    app.config["components"] = {
        "config": config,
        "validator": validator,
        "store": store,
        "categorizer": categorizer,
        "aggregator": aggregator,
        "metrics": metrics,
    }

    # --- Error mapping ---

    @app.errorhandler(InvalidLogEntry)
    def invalid_log_entry(exc):
        return jsonify({"status": "invalid", "errors": exc.errors}), 400

    @app.errorhandler(InvalidQueryParameter)
    def invalid_query_parameter(exc):
        return jsonify({"error": "invalid_query_parameter", "message": str(exc)}), 400

    @app.errorhandler(StorageUnavailable)
    def storage_unavailable(exc):
        return jsonify({"error": "storage_unavailable", "message": str(exc)}), 503

    # --- Routes ---

    @app.route("/health")
    def health():
        return jsonify({
            "status": "healthy",
            "backend": store.name,
            "current_stored": store.count(),
        })

    @app.route("/api/logs", methods=["POST"])
    def ingest_log():
        payload = request.get_json(silent=True)
        if payload is None:
            raise InvalidLogEntry(["request body must be valid JSON"])

        entry = validator.parse(payload)
        store.append(entry)
        return jsonify({"status": "accepted", "entry": entry.to_dict()}), 201

    @app.route("/api/logs", methods=["GET"])
    def search_logs():
        limit = _limit_arg("limit", search_config["default_limit"], search_config["max_limit"])
        entries = store.filter(
            source_ip=request.args.get("ip") or request.args.get("sourceIP"),
            rule=request.args.get("event") or request.args.get("rule"),
            start=_time_arg("from"),
            end=_time_arg("to"),
            limit=limit,
        )
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/logs/stream")
    def stream_logs():
        return jsonify([e.to_dict() for e in store.all()])

    @app.route("/api/events/<rule>/logs")
    def drilldown(rule):
        limit = _limit_arg("limit", search_config["default_limit"], search_config["max_limit"])
        entries = store.filter(rule=rule, exact_rule=True, limit=limit)
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/stats/summary")
    @app.route("/api/summary")
    def summary():
        return jsonify(aggregator.summary().to_dict())

    @app.route("/api/events/urgency")
    @app.route("/api/urgency")
    def urgency():
        return jsonify(aggregator.urgency_histogram().to_dict())

    @app.route("/api/events/timeline")
    @app.route("/api/timeline")
    def timeline():
        return jsonify(aggregator.timeline().to_dict())

    @app.route("/api/events/top")
    @app.route("/api/top-events")
    def top_events():
        limit = _limit_arg("limit", None, search_config["max_limit"])
        return jsonify([e.to_dict() for e in aggregator.top_events(limit)])

    @app.route("/api/events/sources")
    @app.route("/api/top-sources")
    def top_sources():
        limit = _limit_arg("limit", None, search_config["max_limit"])
        return jsonify([s.to_dict() for s in aggregator.top_sources(limit)])

    @app.route("/api/stats")
    def activity():
        return jsonify(aggregator.activity())

    @app.route("/api/validation-stats")
    def validation_stats():
        return jsonify(validator.get_stats())

    @app.route("/api/simulate-logs", methods=["POST"])
    def simulate_logs():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        try:
            requested = int(data.get("count", 10))
        except (TypeError, ValueError):
            raise InvalidQueryParameter(f"count must be an integer, got {data.get('count')!r}")
        count = max(0, min(requested, config["simulator"]["max_count"]))

        accepted = 0
        for payload in generate_batch(count=count, hours_ago=24):
            try:
                entry = validator.parse(payload)
            except InvalidLogEntry:
                continue
            store.append(entry)
            accepted += 1

        logger.info("Simulated %d notable events", accepted)
        return jsonify({"status": "simulated", "requested": count, "accepted": accepted})

    @app.route("/metrics")
    def metrics_endpoint():
        return Response(metrics.render(), content_type=CONTENT_TYPE)

    return app
