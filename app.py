import sys

import click
from flask import Flask, abort, jsonify, render_template, request

from bahr import analyze
from settings import Settings, configure_logging, get_logger

logger = get_logger("app")

SAMPLE = "\n".join([
    "मुझे पता है कि तुम कभी नहीं आओगे",
    "फिर भी दिल को तेरा इंतज़ार रहता है",
])


def create_app(settings=None):
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["BAHR_SETTINGS"] = settings

    def read_text(text):
        if len(text) > settings.max_input_chars:
            abort(413, description=f"input longer than {settings.max_input_chars} characters")
        return text

    @app.route("/", methods=["GET", "POST"])
    def index():
        result = None
        text = ""
        if request.method == "POST":
            text = read_text(request.form.get("poetry", "").strip())
            if text:
                result = analyze(text)
                logger.info("form analysis: %d line(s), errors=%s", len(result.lines), result.has_errors)
        return render_template("index.html", result=result, text=text, sample=SAMPLE)

    @app.route("/api/analyze", methods=["POST"])
    def api_analyze():
        payload = request.get_json(silent=True)
        if payload is not None:
            text = payload.get("text") if isinstance(payload, dict) else None
        else:
            text = request.form.get("text")
        if not isinstance(text, str):
            return jsonify({"error": "expected a 'text' field"}), 400

        result = analyze(read_text(text))
        logger.info("api analysis: %d line(s), errors=%s", len(result.lines), result.has_errors)
        return jsonify(result.to_dict())

    @app.errorhandler(413)
    def too_large(err):
        return jsonify({"error": err.description}), 413

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.cli.command("check")
    @click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
    def check(source):
        """Check the bahr of the verse in SOURCE (stdin by default)."""
        result = analyze(source.read())
        for number, line in enumerate(result.lines, start=1):
            if line.is_invalid:
                click.echo(f"{number}: {line.raw_line}  [invalid characters]")
                continue
            cells = " ".join("".join(f.cells) for f in line.feet)
            names = " ".join(f.name for f in line.feet)
            status = f"  [{line.error_kind.value}]" if line.has_meter_error else ""
            click.echo(f"{number}: {' '.join(s.text for s in line.syllables)}")
            click.echo(f"   {cells}  {names}{status}")
        if result.message:
            click.echo(result.message)
        if result.meter and result.meter.bahr_name:
            click.echo(result.meter.bahr_name)
        if result.has_errors:
            sys.exit(1)

    return app


app = create_app()

if __name__ == "__main__":
    settings = app.config["BAHR_SETTINGS"]
    app.run(host=settings.host, port=settings.port, debug=settings.debug)
