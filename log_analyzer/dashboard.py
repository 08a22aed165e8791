"""Flask dashboard serving a live report of the backup logs."""

from flask import Flask, jsonify, render_template, request

from log_analyzer.analyzer import LogAnalyzer
from log_analyzer.formatter import human_size
from log_analyzer.reader import ALL_SOURCES, NoLogDataError
from log_analyzer.report import REPORT_TEMPLATE, TEMPLATE_DIR, report_context
from log_analyzer.stats import stats_to_dict


def create_dashboard_app(analyzer: LogAnalyzer) -> Flask:
    app = Flask(__name__, template_folder=TEMPLATE_DIR)
    app.add_template_filter(human_size, "human_size")

    def _analyze():
        source = request.args.get("source", ALL_SOURCES)
        hours = request.args.get("hours", type=int)
        if hours is not None and hours <= 0:
            raise ValueError("hours must be positive")
        return analyzer.analyze(source, hours)

    @app.errorhandler(NoLogDataError)
    def no_log_data(e):
        return jsonify(error=str(e)), 503

    @app.errorhandler(ValueError)
    def bad_request(e):
        return jsonify(error=str(e)), 400

    @app.route("/")
    def index():
        result = _analyze()
        return render_template(REPORT_TEMPLATE, **report_context(result, analyzer.config.report_limit))

    @app.route("/stats")
    def stats():
        result = _analyze()
        data = stats_to_dict(result.stats, result.health)
        data["files"] = [f.name for f in result.files]
        data["missing"] = result.missing
        return jsonify(data)

    @app.route("/health")
    def health():
        return jsonify(status="ok")

    return app


def run_dashboard(app: Flask, host: str, port: int):
    app.run(host=host, port=port, use_reloader=False)
